"""Tests for console.py"""

import pytest

from errors import InvalidBet
from payouts import BetType
from roads import compute_roadmaps
from storage import InMemoryBalanceStore, InMemoryHistoryStore
from table import BaccaratTable
from console import parse_bets, render_cells, render_markers, interactive_mode


class TestParseBets:
    def test_short_aliases(self):
        assert parse_bets('p100 b50 t10 pp5 bp5') == {
            BetType.PLAYER: 100, BetType.BANKER: 50, BetType.TIE: 10,
            BetType.PLAYER_PAIR: 5, BetType.BANKER_PAIR: 5,
        }

    def test_chinese_names(self):
        assert parse_bets('閒100 莊對 20') == {BetType.PLAYER: 100, BetType.BANKER_PAIR: 20}

    def test_equals_sign_and_case(self):
        assert parse_bets('Banker=30 TIE = 5') == {BetType.BANKER: 30, BetType.TIE: 5}

    def test_repeated_bets_summed(self):
        assert parse_bets('p10 p5') == {BetType.PLAYER: 15}

    @pytest.mark.parametrize("text", ['x10', 'p', 'p10 hello', '100'])
    def test_bad_input(self, text):
        with pytest.raises(InvalidBet):
            parse_bets(text)


class TestRender:
    def test_empty_grid(self):
        assert render_cells(compute_roadmaps([]).big_road) == '  (空)'

    def test_cells(self, history):
        text = render_cells(compute_roadmaps(history('BBP')).big_road)
        lines = text.splitlines()
        assert len(lines) == 6
        assert lines[0] == '  莊閒'
        assert lines[1] == '  莊．'

    def test_markers(self, history):
        text = render_markers(compute_roadmaps(history('BBPBPPB')).big_eye_boy)
        lines = text.splitlines()
        assert lines[0] == '  藍紅藍'
        assert lines[1] == '  ．．藍'

    def test_max_cols_keeps_latest(self, history):
        text = render_cells(compute_roadmaps(history('BPBP')).big_road, max_cols=2)
        assert text.splitlines()[0] == '  莊閒'


def test_interactive_session(capsys):
    table = BaccaratTable(decks=8, history=InMemoryHistoryStore(),
                          balance=InMemoryBalanceStore(1000), seed=8)
    commands = iter(['p100', '', 'road', 'r 7', 'r 9', 'r 0', '$', 'xyz', 'p99999999', 'q'])
    interactive_mode(table, input_fn=lambda prompt: next(commands))

    out = capsys.readouterr().out
    assert '大路' in out
    assert '新靴開始' in out
    assert out.count('牌副數必須介於') == 2
    assert '無法解析的下注' in out
    assert '超過餘額' in out
    assert '再見' in out
    assert table.shoe.decks == 7
    assert table.history.all() == []
    assert table.balance.get() == table.config.starting_balance


def test_interactive_eof(capsys):
    def eof(prompt):
        raise EOFError
    table = BaccaratTable(decks=6, history=InMemoryHistoryStore(), seed=1)
    interactive_mode(table, input_fn=eof)
    assert '再見' in capsys.readouterr().out
