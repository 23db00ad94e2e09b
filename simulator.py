"""
Monte Carlo 批量模擬器 — simulator.py
======================================
每局對五種下注各平注 1 單位，收集命中率、每單位報酬（實測莊家優勢）、資金曲線等數據，
驗證長期期望值與理論值一致。
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from baccarat_engine import RoundResult, Shoe, calculate_base_probabilities, resolve_round
from payouts import HOUSE_EDGE, ZH_NAMES, BetType, settle


@dataclass
class BetTypeResult:
    """單一下注種類在一次模擬中的結果"""
    bet_type: BetType
    total_rounds: int = 0
    wins: int = 0
    pushes: int = 0             # 和局退回本金
    losses: int = 0
    wagered: int = 0
    profit: int = 0
    edge: float = 0.0           # 實測莊家優勢 %（正 = 莊家賺）
    max_consecutive_losses: int = 0
    balance_history: List[int] = field(default_factory=list)


def simulate_bets(
    shoe: Shoe,
    n_rounds: int,
    base_unit: int = 100,
    bet_types: Optional[List[BetType]] = None,
) -> tuple:
    """
    在同一個牌靴上玩 n_rounds 局，每局每種下注各押 base_unit。
    回傳 (牌局歷史, {BetType: BetTypeResult})
    """
    bet_types = bet_types or list(BetType)
    results = {bt: BetTypeResult(bet_type=bt) for bt in bet_types}
    loss_streaks = {bt: 0 for bt in bet_types}
    balances = {bt: 0 for bt in bet_types}
    history: List[RoundResult] = []

    for _ in range(n_rounds):
        hand = resolve_round(shoe)
        history.append(hand)

        for bt in bet_types:
            delta = settle({bt: base_unit}, hand).balance_delta
            r = results[bt]
            r.total_rounds += 1
            r.wagered += base_unit
            balances[bt] += delta

            if delta > 0:
                r.wins += 1
                loss_streaks[bt] = 0
            elif delta == 0:
                r.pushes += 1
            else:
                r.losses += 1
                loss_streaks[bt] += 1
                r.max_consecutive_losses = max(r.max_consecutive_losses, loss_streaks[bt])
            r.balance_history.append(balances[bt])

    for bt, r in results.items():
        r.profit = balances[bt]
        r.edge = -r.profit / max(r.wagered, 1) * 100

    return history, results


def run_monte_carlo(
    n_simulations: int = 100,
    n_rounds: int = 1000,
    base_unit: int = 100,
    decks: int = 8,
    seed_base: int = 42,
    progress_callback=None,
) -> Dict[BetType, List[BetTypeResult]]:
    """
    執行 Monte Carlo 模擬
    - n_simulations: 模擬次數（每次一個新牌靴，種子 seed_base + i）
    - n_rounds: 每次模擬的局數
    回傳 {BetType: [BetTypeResult, ...]}
    """
    all_results: Dict[BetType, List[BetTypeResult]] = {bt: [] for bt in BetType}

    for sim_idx in range(n_simulations):
        shoe = Shoe(decks, seed=seed_base + sim_idx)
        _, results = simulate_bets(shoe, n_rounds, base_unit)
        for bt, r in results.items():
            all_results[bt].append(r)

        if progress_callback:
            progress_callback(sim_idx + 1, n_simulations)

    return all_results


def run_single_simulation(
    n_rounds: int = 1000,
    base_unit: int = 100,
    decks: int = 8,
    seed: int = 42,
) -> tuple:
    """
    執行單次模擬，回傳 (game_history, bet_results, base_stats)
    """
    shoe = Shoe(decks, seed=seed)
    history, bet_results = simulate_bets(shoe, n_rounds, base_unit)
    base_stats = calculate_base_probabilities(history)
    return history, bet_results, base_stats


def aggregate_results(all_results: Dict[BetType, List[BetTypeResult]]) -> pd.DataFrame:
    """彙整 Monte Carlo 結果為 DataFrame"""
    rows = []
    for bt, results in all_results.items():
        if not results:
            continue
        edges = np.array([r.edge for r in results])
        profits = np.array([r.profit for r in results])
        hit_rates = np.array([r.wins / max(r.total_rounds, 1) * 100 for r in results])
        max_losses = np.array([r.max_consecutive_losses for r in results])

        rows.append({
            '下注': ZH_NAMES[bt],
            '模擬次數': len(results),
            '平均命中率%': hit_rates.mean(),
            '實測優勢%': edges.mean(),
            '優勢標準差': edges.std(),
            '理論優勢%': HOUSE_EDGE[bt],
            '平均損益': profits.mean(),
            '損益標準差': profits.std(),
            '平均最大連輸': max_losses.mean(),
            '獲利比例%': (profits > 0).mean() * 100,
        })

    df = pd.DataFrame(rows)
    if not df.empty:
        df = df.sort_values('實測優勢%').reset_index(drop=True)
    return df


def history_frame(history: List[RoundResult]) -> pd.DataFrame:
    """把牌局歷史攤平成 DataFrame（一局一列）"""
    return pd.DataFrame([{
        '局': i + 1,
        '勝方': r.winner.zh,
        '閒點': r.player.score,
        '莊點': r.banker.score,
        '閒張數': len(r.player.cards),
        '莊張數': len(r.banker.cards),
        '閒對': r.player.is_pair,
        '莊對': r.banker.is_pair,
        '天牌': r.natural,
        '結果': r.outcome,
    } for i, r in enumerate(history)])
