"""
終端機牌桌 — console.py
========================
純顯示層：解析下注、印出開牌結果與五路。所有規則都在 table.py 以下處理。

下注格式（可混用，空白分隔）:
  p100 / 閒100      押閒 100
  b50  / 莊50       押莊 50
  t10  / 和10       押和 10
  pp5  / 閒對5      押閒對 5
  bp5  / 莊對5      押莊對 5
"""

import re
from typing import Callable, Dict, List, Optional

from errors import BaccaratError, InvalidBet
from payouts import ZH_NAMES, BetType
from roads import BLUE, RED, Roadmaps
from table import BaccaratTable, DealOutcome

BET_ALIASES = {
    'p': BetType.PLAYER, 'player': BetType.PLAYER, '閒': BetType.PLAYER,
    'b': BetType.BANKER, 'banker': BetType.BANKER, '莊': BetType.BANKER,
    't': BetType.TIE, 'tie': BetType.TIE, '和': BetType.TIE,
    'pp': BetType.PLAYER_PAIR, 'player_pair': BetType.PLAYER_PAIR, '閒對': BetType.PLAYER_PAIR,
    'bp': BetType.BANKER_PAIR, 'banker_pair': BetType.BANKER_PAIR, '莊對': BetType.BANKER_PAIR,
}

_BET_TOKEN = re.compile(r'([^\s\d=]+)\s*=?\s*(\d+)')

EMPTY = '．'
MARKS = {RED: '紅', BLUE: '藍'}


def parse_bets(text: str) -> Dict[BetType, int]:
    """解析 'p100 b50 pp5' 這類輸入；同一種下注出現多次會累加"""
    bets: Dict[BetType, int] = {}
    leftover = _BET_TOKEN.sub('', text).strip()
    if leftover:
        raise InvalidBet(f"無法解析的下注: {leftover!r}")
    for name, amount in _BET_TOKEN.findall(text):
        bet_type = BET_ALIASES.get(name.lower())
        if bet_type is None:
            raise InvalidBet(f"未知的下注種類: {name!r}")
        bets[bet_type] = bets.get(bet_type, 0) + int(amount)
    return bets


# ============================================================
#  路紙文字化
# ============================================================
def _render(grid: List[List], to_char: Callable, max_cols: int) -> str:
    # 去掉尾端的空列，只顯示最近 max_cols 列
    used = list(grid)
    while used and all(c is None for c in used[-1]):
        used.pop()
    if not used:
        return '  (空)'
    used = used[-max_cols:]
    rows = len(used[0])
    lines = []
    for r in range(rows):
        lines.append('  ' + ''.join(to_char(col[r]) if col[r] is not None else EMPTY
                                    for col in used))
    return '\n'.join(lines)


def render_cells(grid: List[List], max_cols: int = 30) -> str:
    return _render(grid, lambda cell: cell.winner.zh, max_cols)


def render_markers(grid: List[List], max_cols: int = 30) -> str:
    return _render(grid, lambda m: MARKS[m], max_cols)


def print_roadmaps(roadmaps: Roadmaps, max_cols: int = 30):
    print("\n  ─── 珠盤路 ───")
    print(render_cells(roadmaps.bead_plate, max_cols))
    print("\n  ─── 大路 ───")
    print(render_cells(roadmaps.big_road, max_cols))
    for title, grid in (("大眼仔", roadmaps.big_eye_boy),
                        ("小路", roadmaps.small_road),
                        ("曱甴路", roadmaps.cockroach_road)):
        print(f"\n  ─── {title} ───")
        print(render_markers(grid, max_cols))


def print_round(outcome: DealOutcome):
    result = outcome.result
    print()
    print(f"  閒家: {' '.join(map(repr, result.player.cards)):<12} {result.player.score} 點"
          f"{'  (閒對)' if result.player.is_pair else ''}")
    print(f"  莊家: {' '.join(map(repr, result.banker.cards)):<12} {result.banker.score} 點"
          f"{'  (莊對)' if result.banker.is_pair else ''}")
    print(f"\n  ▶ {result.outcome}")
    for bet_type, amount in outcome.settlement.per_bet.items():
        print(f"    {ZH_NAMES[bet_type]:<4} 退回 {amount:,}")
    print(f"  淨損益 {outcome.balance_delta:+,}   餘額 {outcome.balance:,}")


def print_status(table: BaccaratTable):
    print(f"\n  💰 餘額 {table.balance.get():,}   "
          f"🂠 牌靴 {table.shoe.decks} 副，剩 {table.shoe.remaining} 張   "
          f"📋 已開 {len(table.history.all())} 局")


# ============================================================
#  互動模式
# ============================================================
def interactive_mode(table: Optional[BaccaratTable] = None,
                     input_fn: Callable[[str], str] = input):
    """互動模式主迴圈"""
    table = table or BaccaratTable()

    print()
    print("╔══════════════════════════════════════════════════════════════╗")
    print("║                   百家樂 — 單人牌桌                         ║")
    print("╠══════════════════════════════════════════════════════════════╣")
    print("║  下注: p100 b50 t10 pp5 bp5  (閒/莊/和/閒對/莊對)           ║")
    print("║  指令:                                                      ║")
    print("║    road      — 顯示五路                                     ║")
    print("║    r [副數]  — 換新牌靴（6~8 副），歷史清空                 ║")
    print("║    $         — 餘額重設                                     ║")
    print("║    q/quit    — 離開                                         ║")
    print("╚══════════════════════════════════════════════════════════════╝")
    print_status(table)

    while True:
        try:
            user_input = input_fn("\n  ▶ 下注: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n  再見！")
            break

        if not user_input:
            continue

        cmd = user_input.lower()

        if cmd in ('q', 'quit', 'exit', '離開'):
            print("\n  再見！")
            break

        if cmd in ('road', '路'):
            print_roadmaps(table.roadmaps())
            continue

        if cmd == '$':
            table.reset_balance()
            print_status(table)
            continue

        if cmd == 'r' or cmd.startswith('r '):
            parts = cmd.split()
            try:
                decks = int(parts[1]) if len(parts) > 1 else None
                table.reset(decks)
            except ValueError as e:
                print(f"  ❌ {e}")
                continue
            print("\n  🔄 新靴開始")
            print_status(table)
            continue

        try:
            outcome = table.deal(parse_bets(user_input))
        except BaccaratError as e:
            print(f"  ❌ {e}")
            continue

        print_round(outcome)
        print_roadmaps(outcome.roadmaps)
        print_status(table)
