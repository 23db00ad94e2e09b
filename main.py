"""
百家樂牌桌 — 主程式入口
========================
執行方式:
  python main.py              → 終端機牌桌（預設）
  python main.py --decks 6    → 6 副牌開桌
  python main.py --sim        → Monte Carlo 莊家優勢模擬
  python main.py --sim --quick → 10 次 × 500 局的快速模擬
"""

import argparse
import logging
import os
import sys
import time
from typing import Optional

from config import config
from errors import InvalidDeckCount
from table import BaccaratTable, check_deck_count


def setup_logging(level: Optional[str] = None):
    logging.basicConfig(
        level=getattr(logging, (level or config.log.level).upper(), logging.WARNING),
        format=config.log.format,
    )


def build_parser() -> argparse.ArgumentParser:
    sim = config.simulation
    parser = argparse.ArgumentParser(description='百家樂牌桌')
    parser.add_argument('--sim', action='store_true', help='Monte Carlo 模擬模式')
    parser.add_argument('--rounds', type=int, default=sim.n_rounds, help='每次模擬局數')
    parser.add_argument('--sims', type=int, default=sim.n_simulations, help='模擬次數')
    parser.add_argument('--seed', type=int, default=None, help='隨機種子')
    parser.add_argument('--unit', type=int, default=sim.base_unit, help='基本注碼')
    parser.add_argument('--output', type=str, default=sim.output_dir, help='輸出目錄')
    parser.add_argument('--quick', action='store_true', help='快速模式 (10次×500局)')
    parser.add_argument('--decks', type=int, default=config.table.default_decks,
                        help=f'牌副數 ({config.table.min_decks}~{config.table.max_decks})')
    parser.add_argument('--log-level', type=str, default=None, help='logging 等級')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        check_deck_count(args.decks)
    except InvalidDeckCount as e:
        print(f"  ❌ {e}", file=sys.stderr)
        return 2

    # 模擬模式不開牌桌
    if args.sim:
        _run_simulation(args)
        return 0

    # === 終端機牌桌 ===
    from console import interactive_mode

    table = BaccaratTable(decks=args.decks, seed=args.seed)
    interactive_mode(table)
    return 0


def _progress(current: int, total: int, width: int = 40):
    done = width * current // total
    print(f"\r  進度 [{'#' * done}{'.' * (width - done)}] {current}/{total}",
          end='', flush=True)
    if current == total:
        print()


def _step(index: int, title: str):
    print('─' * 50)
    print(f"▶ [{index}/4] {title}")
    return time.perf_counter()


def _run_simulation(args):
    """Monte Carlo 模擬；matplotlib / pandas 只在這裡才載入"""
    import simulator
    import analyzer

    if args.quick:
        args.sims, args.rounds = 10, 500
    seed = config.simulation.seed if args.seed is None else args.seed
    output_dir = analyzer.ensure_output_dir(args.output)

    params = [
        ('模式', '快速' if args.quick else '標準'),
        ('模擬次數 × 局數', f"{args.sims} × {args.rounds} = {args.sims * args.rounds:,} 局"),
        ('牌副數', args.decks),
        ('每注單位', args.unit),
        ('種子', seed),
        ('輸出', output_dir),
    ]
    print("\n  百家樂莊家優勢 Monte Carlo 模擬")
    print("  " + "=" * 40)
    for name, value in params:
        print(f"  {name:<10}{value}")
    print()

    started = _step(1, "單次模擬（資金曲線、點數分佈）")
    history, bet_results, base_stats = simulator.run_single_simulation(
        n_rounds=args.rounds, base_unit=args.unit, decks=args.decks, seed=seed)
    print(f"  完成，{time.perf_counter() - started:.2f}s")

    started = _step(2, f"Monte Carlo {args.sims} 次")
    all_results = simulator.run_monte_carlo(
        n_simulations=args.sims, n_rounds=args.rounds, base_unit=args.unit,
        decks=args.decks, seed_base=seed, progress_callback=_progress)
    df_summary = simulator.aggregate_results(all_results)
    print(f"  完成，{time.perf_counter() - started:.2f}s")

    started = _step(3, "繪製圖表")
    charts = [
        analyzer.plot_edge_comparison(df_summary, output_dir),
        analyzer.plot_balance_curves(bet_results, output_dir),
        analyzer.plot_edge_distribution(all_results, output_dir),
        analyzer.plot_base_probability(base_stats, output_dir),
        analyzer.plot_score_heatmap(history, output_dir),
    ]
    for path in charts:
        print(f"    {path}")
    print(f"  完成，{time.perf_counter() - started:.2f}s")

    _step(4, "報告與 CSV")
    report = analyzer.generate_report(
        base_stats=base_stats, bet_results=bet_results, df_summary=df_summary,
        n_simulations=args.sims, n_rounds=args.rounds, output_dir=output_dir)
    analyzer.save_results_csv(df_summary, history, output_dir)
    for name in ('report.txt', 'summary.csv', 'rounds.csv'):
        print(f"    {os.path.join(output_dir, name)}")
    print()
    print(report)


if __name__ == "__main__":
    sys.exit(main())
