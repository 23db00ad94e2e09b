"""Tests for analyzer.py: charts, report and CSV output."""

import os

import pandas as pd
import pytest

from analyzer import (
    generate_report, plot_balance_curves, plot_base_probability,
    plot_edge_comparison, plot_edge_distribution, plot_score_heatmap,
    save_results_csv,
)
from simulator import aggregate_results, run_monte_carlo, run_single_simulation


@pytest.fixture(scope='module')
def sim():
    history, bet_results, base_stats = run_single_simulation(n_rounds=120, seed=3)
    all_results = run_monte_carlo(n_simulations=3, n_rounds=60, seed_base=3)
    return history, bet_results, base_stats, all_results, aggregate_results(all_results)


def test_charts_written(tmp_path, sim):
    history, bet_results, base_stats, all_results, df = sim
    out = str(tmp_path)
    paths = [
        plot_edge_comparison(df, out),
        plot_balance_curves(bet_results, out),
        plot_edge_distribution(all_results, out),
        plot_base_probability(base_stats, out),
        plot_score_heatmap(history, out),
    ]
    assert [os.path.basename(p) for p in paths] == [
        'edge_comparison.png', 'balance_curves.png', 'edge_distribution.png',
        'base_probability.png', 'score_heatmap.png']
    for p in paths:
        assert os.path.getsize(p) > 0


def test_report(tmp_path, sim):
    _, bet_results, base_stats, _, df = sim
    text = generate_report(base_stats, bet_results, df, n_simulations=3,
                           n_rounds=60, output_dir=str(tmp_path))
    assert '百家樂莊家優勢模擬報告' in text
    assert '總模擬局數：180' in text
    assert (tmp_path / 'report.txt').read_text(encoding='utf-8') == text


def test_csv(tmp_path, sim):
    history, _, _, _, df = sim
    save_results_csv(df, history, str(tmp_path))
    summary = pd.read_csv(tmp_path / 'summary.csv', encoding='utf-8-sig')
    rounds = pd.read_csv(tmp_path / 'rounds.csv', encoding='utf-8-sig')
    assert len(summary) == 5
    assert len(rounds) == len(history)
    assert list(rounds.columns)[:2] == ['局', '勝方']
