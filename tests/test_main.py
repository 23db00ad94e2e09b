"""Tests for main.py"""

import inspect
import os
from typing import Optional

import pytest

import console
import main


@pytest.mark.parametrize("decks", ['5', '0', '9'])
def test_invalid_decks_exit_code(capsys, decks):
    assert main.main(['--decks', decks]) == 2
    assert '牌副數' in capsys.readouterr().err


def test_simulation_rejects_invalid_decks(tmp_path, capsys):
    out = tmp_path / 'sim'
    assert main.main(['--sim', '--sims', '1', '--rounds', '5',
                      '--decks', '3', '--output', str(out)]) == 2
    assert '牌副數' in capsys.readouterr().err
    assert not out.exists()


def test_interactive_table_started(monkeypatch):
    seen = {}

    def fake_interactive(table):
        seen['decks'] = table.shoe.decks

    monkeypatch.setattr(console, 'interactive_mode', fake_interactive)
    assert main.main(['--decks', '6', '--seed', '1']) == 0
    assert seen == {'decks': 6}


def test_parser_defaults():
    args = main.build_parser().parse_args([])
    assert not args.sim
    assert args.seed is None


def test_small_simulation(tmp_path, capsys):
    out = str(tmp_path / 'sim')
    assert main.main(['--sim', '--sims', '2', '--rounds', '30',
                      '--decks', '6', '--seed', '5', '--output', out]) == 0
    for name in ('report.txt', 'summary.csv', 'rounds.csv', 'edge_comparison.png',
                 'score_heatmap.png'):
        assert os.path.exists(os.path.join(out, name))
    assert '百家樂莊家優勢模擬報告' in capsys.readouterr().out


def test_setup_logging_accepts_missing_level():
    hint = inspect.signature(main.setup_logging).parameters['level'].annotation
    assert hint == Optional[str]
    main.setup_logging(None)
