"""
分析報告與視覺化 — analyzer.py
================================
把模擬結果畫成圖、寫成文字報告與 CSV。
所有函式都把檔案寫進 output_dir，並回傳寫出的路徑或內容。
"""

import os
from typing import Dict, List

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')  # 不開視窗，只輸出檔案
import matplotlib.pyplot as plt
import matplotlib.font_manager as fm
import seaborn as sns

from baccarat_engine import THEORETICAL, RoundResult
from payouts import HOUSE_EDGE, ZH_NAMES, BetType
from simulator import BetTypeResult, history_frame

CJK_FONTS = [
    'Microsoft JhengHei',
    'PingFang TC',
    'Noto Sans CJK TC',
    'Heiti TC',
    'SimHei',
    'Arial Unicode MS',
]

SIDE_COLORS = {'模擬': '#3498db', '理論': '#e74c3c'}


def setup_chinese_font() -> str:
    """挑第一個系統裡有的中文字型；都沒有就交給 font.sans-serif 回退"""
    installed = {f.name for f in fm.fontManager.ttflist}
    plt.rcParams['axes.unicode_minus'] = False
    for name in CJK_FONTS:
        if name in installed:
            plt.rcParams['font.family'] = name
            return name
    plt.rcParams['font.sans-serif'] = CJK_FONTS + ['DejaVu Sans']
    return 'fallback'


def ensure_output_dir(output_dir: str = "output") -> str:
    os.makedirs(output_dir, exist_ok=True)
    return output_dir


def _save(fig, output_dir: str, filename: str) -> str:
    fig.tight_layout()
    path = os.path.join(ensure_output_dir(output_dir), filename)
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return path


def _side_by_side(frame: pd.DataFrame, label_col: str, simulated_col: str,
                  theoretical_col: str) -> pd.DataFrame:
    """寬表 → 長表，給 seaborn 畫「模擬 vs 理論」的並排長條"""
    long = frame[[label_col, simulated_col, theoretical_col]].rename(
        columns={simulated_col: '模擬', theoretical_col: '理論'})
    return long.melt(id_vars=label_col, var_name='來源', value_name='值')


# ============================================================
#  圖表
# ============================================================

def plot_edge_comparison(df: pd.DataFrame, output_dir: str = "output") -> str:
    """各下注實測莊家優勢 vs 理論值"""
    setup_chinese_font()
    long = _side_by_side(df, '下注', '實測優勢%', '理論優勢%')

    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(data=long, x='下注', y='值', hue='來源', palette=SIDE_COLORS, ax=ax)
    # 誤差線只畫在模擬那一半
    offsets = np.arange(len(df)) - 0.2
    ax.errorbar(offsets, df['實測優勢%'], yerr=df['優勢標準差'],
                fmt='none', ecolor='black', capsize=3, linewidth=1)
    for container in ax.containers:
        if hasattr(container, 'patches'):
            ax.bar_label(container, fmt='%.2f%%', fontsize=8)
    ax.axhline(0, color='black', linewidth=1)
    ax.set_xlabel('')
    ax.set_ylabel('莊家優勢 (%)')
    ax.set_title('莊家優勢：Monte Carlo vs 理論', fontsize=14, fontweight='bold')
    ax.legend(title='')
    return _save(fig, output_dir, 'edge_comparison.png')


def plot_balance_curves(bet_results: Dict[BetType, BetTypeResult],
                        output_dir: str = "output") -> str:
    """單次模擬中每種下注平注的累計損益"""
    setup_chinese_font()
    curves = pd.DataFrame({
        f'{ZH_NAMES[bt]} ({r.edge:+.2f}%)': r.balance_history
        for bt, r in bet_results.items() if r.balance_history
    })
    curves.index = np.arange(1, len(curves) + 1)

    fig, ax = plt.subplots(figsize=(14, 8))
    if not curves.empty:
        curves.plot(ax=ax, linewidth=1.2, alpha=0.85)
    ax.axhline(0, color='black', linewidth=1)
    ax.set_xlabel('局')
    ax.set_ylabel('累計損益')
    ax.set_title('資金曲線（單次模擬，每局每種下注各一注）', fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)
    return _save(fig, output_dir, 'balance_curves.png')


def plot_edge_distribution(all_results: Dict[BetType, List[BetTypeResult]],
                           output_dir: str = "output") -> str:
    """每次模擬的實測優勢分佈（箱形圖）"""
    setup_chinese_font()
    long = pd.DataFrame([
        {'下注': ZH_NAMES[bt], '優勢%': r.edge}
        for bt, results in all_results.items() for r in results
    ])

    fig, ax = plt.subplots(figsize=(12, 7))
    sns.boxplot(data=long, x='下注', y='優勢%', hue='下注', palette='husl',
                legend=False, ax=ax)
    ax.axhline(0, color='red', linestyle='--', linewidth=1.5, label='損益兩平')
    theory = [HOUSE_EDGE[bt] for bt in all_results]
    ax.scatter(range(len(theory)), theory, marker='D', color='black', zorder=3, label='理論')
    ax.set_xlabel('')
    ax.set_ylabel('莊家優勢 (%)')
    ax.set_title('實測優勢分佈', fontsize=14, fontweight='bold')
    ax.legend()
    ax.grid(True, alpha=0.3, axis='y')
    return _save(fig, output_dir, 'edge_distribution.png')


def plot_base_probability(base_stats: dict, output_dir: str = "output") -> str:
    """開牌結果頻率 vs 理論機率"""
    setup_chinese_font()
    frame = pd.DataFrame({
        '結果': list(THEORETICAL),
        '模擬%': [base_stats.get(f'{k}%', 0) for k in THEORETICAL],
        '理論%': list(THEORETICAL.values()),
    })
    long = _side_by_side(frame, '結果', '模擬%', '理論%')

    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(data=long, x='結果', y='值', hue='來源', palette=SIDE_COLORS, ax=ax)
    ax.set_xlabel('')
    ax.set_ylabel('機率 (%)')
    ax.set_title(f"開牌結果頻率（{base_stats.get('總局數', 0)} 局）",
                 fontsize=14, fontweight='bold')
    ax.legend(title='')
    return _save(fig, output_dir, 'base_probability.png')


def plot_score_heatmap(history: List[RoundResult], output_dir: str = "output") -> str:
    """閒 / 莊最終點數分佈熱力圖"""
    setup_chinese_font()
    df = history_frame(history)
    table = pd.crosstab(df['莊點'], df['閒點']).reindex(
        index=range(10), columns=range(10), fill_value=0)

    fig, ax = plt.subplots(figsize=(10, 8))
    sns.heatmap(table, annot=True, fmt='d', cmap='YlOrRd', square=True,
                linewidths=0.5, ax=ax)
    ax.invert_yaxis()
    ax.set_xlabel('閒家點數')
    ax.set_ylabel('莊家點數')
    ax.set_title('最終點數分佈', fontsize=14, fontweight='bold')
    return _save(fig, output_dir, 'score_heatmap.png')


# ============================================================
#  文字報告 / CSV
# ============================================================

def _section(title: str) -> List[str]:
    return ['', '─' * 50, f"▶ {title}", '─' * 50]


def _base_table(base_stats: dict) -> pd.DataFrame:
    keys = ['閒贏', '莊贏', '和局', '閒對', '莊對', '天牌']
    return pd.DataFrame({
        '局數': [base_stats.get(k, 0) for k in keys],
        '實測%': [round(base_stats.get(f'{k}%', 0), 2) for k in keys],
        '理論%': [THEORETICAL.get(k, np.nan) for k in keys],
    }, index=keys)


def _single_run_table(bet_results: Dict[BetType, BetTypeResult]) -> pd.DataFrame:
    return pd.DataFrame([{
        '下注': ZH_NAMES[bt],
        '贏': r.wins,
        '和': r.pushes,
        '輸': r.losses,
        '損益': r.profit,
        '實測優勢%': round(r.edge, 2),
        '最大連輸': r.max_consecutive_losses,
    } for bt, r in bet_results.items()]).set_index('下注')


def generate_report(
    base_stats: dict,
    bet_results: Dict[BetType, BetTypeResult],
    df_summary: pd.DataFrame,
    n_simulations: int,
    n_rounds: int,
    output_dir: str = "output",
) -> str:
    """組出文字報告，寫入 report.txt 並回傳內容"""
    summary_cols = ['下注', '實測優勢%', '優勢標準差', '理論優勢%', '平均命中率%', '獲利比例%']

    lines = ['=' * 70, '     百家樂莊家優勢模擬報告', '=' * 70, '']
    lines.append(f"模擬設定：{n_simulations} 次 × {n_rounds} 局")
    lines.append(f"總模擬局數：{n_simulations * n_rounds:,}")

    lines += _section('開牌結果（單次模擬）')
    lines.append(_base_table(base_stats).to_string(na_rep='-'))

    lines += _section('莊家優勢（Monte Carlo 平均）')
    if df_summary.empty:
        lines.append('（無資料）')
    else:
        lines.append(df_summary[summary_cols].round(2).to_string(index=False))

    lines += _section('單次模擬各下注')
    lines.append(_single_run_table(bet_results).to_string())

    lines.append('')
    lines.append('每一種下注都是負期望值，理論優勢：'
                 + '、'.join(f"{ZH_NAMES[bt]} {e:.2f}%" for bt, e in HOUSE_EDGE.items()))
    lines.append('=' * 70)
    report = '\n'.join(lines)

    path = os.path.join(ensure_output_dir(output_dir), 'report.txt')
    with open(path, 'w', encoding='utf-8') as f:
        f.write(report)
    return report


def save_results_csv(df_summary: pd.DataFrame, history: List[RoundResult],
                     output_dir: str = "output") -> List[str]:
    """summary.csv（Monte Carlo 彙整）與 rounds.csv（單次模擬逐局）"""
    output_dir = ensure_output_dir(output_dir)
    frames = {'summary.csv': df_summary, 'rounds.csv': history_frame(history)}
    paths = []
    for name, frame in frames.items():
        path = os.path.join(output_dir, name)
        frame.to_csv(path, index=False, encoding='utf-8-sig')
        paths.append(path)
    return paths
