"""
百家樂五路路紙 — roads.py
==========================
五路完整實現：
  1. 珠盤路 (Bead Plate)     — 逐局記錄
  2. 大路   (Big Road)       — 主路，變色換列，和局畫在上一格
  3. 大眼仔 (Big Eye Boy)    — 衍生路 1
  4. 小路   (Small Road)     — 衍生路 2
  5. 曱甴路 (Cockroach Road) — 衍生路 3

每次都從完整歷史重新計算，不保留任何跨呼叫的狀態：
同一份歷史永遠得到同一組路紙。
格子一律是 grid[列][行]，也就是 columns × rows。
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from baccarat_engine import RoundResult, Winner
from config import RoadConfig, config

RED = 'red'     # 齊整（趨勢延續）
BLUE = 'blue'   # 不齊（趨勢改變）

# 衍生路名稱 → 往左比較的列距
DERIVED_OFFSETS = {
    'big_eye_boy': 1,
    'small_road': 2,
    'cockroach_road': 3,
}


@dataclass
class RoadmapCell:
    """路紙上的一格"""
    winner: Winner
    player_pair: bool = False
    banker_pair: bool = False
    is_natural: bool = False
    ties: int = 0           # 只有大路使用：畫在這格上的和局數

    @property
    def is_pair(self) -> bool:
        return self.player_pair or self.banker_pair

    @classmethod
    def from_result(cls, result: RoundResult) -> "RoadmapCell":
        return cls(
            winner=result.winner,
            player_pair=result.player.is_pair,
            banker_pair=result.banker.is_pair,
            is_natural=result.natural,
        )

    def to_dict(self) -> dict:
        return {
            'winner': self.winner.value,
            'is_pair': self.is_pair,
            'player_pair': self.player_pair,
            'banker_pair': self.banker_pair,
            'is_natural': self.is_natural,
            'ties': self.ties,
        }


# ============================================================
#  格子排列（大路與衍生路共用）
# ============================================================
def place_streaks(keys: Sequence, depth: int) -> List[Tuple[int, int]]:
    """
    依序排列每一格，回傳各格的 (列, 行)。
    - 與上一格相同 → 同一列往下
    - 到達 depth 或下方已被佔用 → 往右拐（龍尾），之後一路往右
    - 換邊 → 從上一條的起始列右邊開新列，略過第 0 行已被佔用的列
    """
    occupied = set()
    positions: List[Tuple[int, int]] = []
    head = -1
    col = row = 0
    turned = False
    last = None

    for i, key in enumerate(keys):
        if i == 0 or key != last:
            head += 1
            while (head, 0) in occupied:
                head += 1
            col, row, turned = head, 0, False
        elif not turned and row + 1 < depth and (col, row + 1) not in occupied:
            row += 1
        else:
            col += 1
            turned = True
        occupied.add((col, row))
        positions.append((col, row))
        last = key

    return positions


def _build_grid(positions: Sequence[Tuple[int, int]], items: Sequence,
                rows: int, min_cols: int) -> List[List]:
    n_cols = max([c + 1 for c, _ in positions] + [min_cols])
    grid = [[None] * rows for _ in range(n_cols)]
    for (c, r), item in zip(positions, items):
        grid[c][r] = item
    return grid


# ============================================================
#  1. 珠盤路 (Bead Plate / Bead Road)
# ============================================================
class BeadPlate:
    """
    最簡單的路紙：逐局按順序排列，每格一局，和局也佔一格。
    由上往下填滿 6 行後換下一列。
    """
    def __init__(self, rows: int = 6):
        self.rows = rows
        self.entries: List[RoadmapCell] = []

    def add(self, result: RoundResult):
        self.entries.append(RoadmapCell.from_result(result))

    def get_grid(self, min_cols: int = 0) -> List[List[Optional[RoadmapCell]]]:
        positions = [(i // self.rows, i % self.rows) for i in range(len(self.entries))]
        return _build_grid(positions, self.entries, self.rows, min_cols)


# ============================================================
#  2. 大路 (Big Road)
# ============================================================
class BigRoad:
    """
    百家樂最核心的路紙。
    規則：
    - 同一方連贏 → 同一列往下排
    - 換方 → 另起新列
    - 和局 → 加在上一格的和局數，不獨佔格子
      （第一個非和局之前的和局，記在第一格上）
    - 列滿 → 往右拐（龍尾）
    """
    def __init__(self, rows: int = 6, depth: int = 5):
        self.rows = rows
        self.depth = depth
        # 邏輯列：每列是一段連續同方的格子（不受龍尾影響）
        self.columns: List[List[RoadmapCell]] = []
        self.cells: List[RoadmapCell] = []
        self.pending_ties = 0

    def add(self, result: RoundResult):
        if result.winner == Winner.TIE:
            if self.cells:
                self.cells[-1].ties += 1
            else:
                self.pending_ties += 1
            return

        cell = RoadmapCell.from_result(result)
        cell.ties, self.pending_ties = self.pending_ties, 0

        if self.columns and self.columns[-1][0].winner == cell.winner:
            self.columns[-1].append(cell)
        else:
            self.columns.append([cell])
        self.cells.append(cell)

    def get_grid(self, min_cols: int = 0) -> List[List[Optional[RoadmapCell]]]:
        """轉換成 columns × rows 的格子（處理龍尾）"""
        positions = place_streaks([c.winner for c in self.cells], self.depth)
        return _build_grid(positions, self.cells, self.rows, min_cols)

    def get_column_lengths(self) -> List[int]:
        """取得每列的長度（用於衍生路計算）"""
        return [len(col) for col in self.columns]


# ============================================================
#  衍生路通用邏輯
# ============================================================
def _marker_at(lengths: Sequence[int], col: int, row: int, offset: int) -> Optional[str]:
    """
    大路第 col 列第 row 行這一格在衍生路上的顏色；尚未起算時回傳 None。

    case 1: row == 0（新列的第一格，看「齊整」）
      → 比較前一列與再往左 offset 列的長度，相同 → 紅，不同 → 藍

    case 2: row > 0（列中的後續格，看「有無」與「直落」）
      → 看往左 offset 列在 row 行和 row-1 行：
        兩格都有、或兩格都沒有（直落）→ 紅；一有一無 → 藍
    """
    if row == 0:
        if col < offset + 1:
            return None
        return RED if lengths[col - 1] == lengths[col - 1 - offset] else BLUE
    if col < offset:
        return None
    ref = lengths[col - offset]
    return RED if (row < ref) == (row - 1 < ref) else BLUE


def derive_markers(lengths: Sequence[int], offset: int) -> List[str]:
    """
    計算衍生路（大眼仔 offset=1, 小路 offset=2, 曱甴路 offset=3）
    大路每一個新格子在起算點之後都會產生一個紅/藍記號。
    起算點：大路第 offset+1 列第 2 行；若該列只有一格，則是第 offset+2 列第 1 行。
    """
    markers = []
    for col, length in enumerate(lengths):
        for row in range(length):
            marker = _marker_at(lengths, col, row, offset)
            if marker is not None:
                markers.append(marker)
    return markers


class DerivedRoad:
    """衍生路：大眼仔 / 小路 / 曱甴路"""

    def __init__(self, name: str, offset: int, rows: int = 6, depth: int = 5):
        self.name = name
        self.offset = offset
        self.rows = rows
        self.depth = depth
        self.entries: List[str] = []

    def calculate(self, big_road: BigRoad):
        self.entries = derive_markers(big_road.get_column_lengths(), self.offset)

    def get_grid(self, min_cols: int = 0) -> List[List[Optional[str]]]:
        """轉成衍生路的格子（同色往下，變色換列，一樣有龍尾）"""
        positions = place_streaks(self.entries, self.depth)
        return _build_grid(positions, self.entries, self.rows, min_cols)


# ============================================================
#  路紙輸出
# ============================================================
@dataclass
class Roadmaps:
    bead_plate: List[List[Optional[RoadmapCell]]]
    big_road: List[List[Optional[RoadmapCell]]]
    big_eye_boy: List[List[Optional[str]]]
    small_road: List[List[Optional[str]]]
    cockroach_road: List[List[Optional[str]]]
    markers: Dict[str, List[str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        def cells(grid):
            return [[c.to_dict() if c else None for c in col] for col in grid]
        return {
            'bead_plate': cells(self.bead_plate),
            'big_road': cells(self.big_road),
            'big_eye_boy': [list(col) for col in self.big_eye_boy],
            'small_road': [list(col) for col in self.small_road],
            'cockroach_road': [list(col) for col in self.cockroach_road],
            'markers': {k: list(v) for k, v in self.markers.items()},
        }


def build_big_road(history: Sequence[RoundResult],
                   road_config: Optional[RoadConfig] = None) -> BigRoad:
    cfg = road_config or config.roads
    big_road = BigRoad(cfg.rows, cfg.column_depth)
    for result in history:
        big_road.add(result)
    return big_road


def compute_roadmaps(history: Sequence[RoundResult],
                     road_config: Optional[RoadConfig] = None) -> Roadmaps:
    """從完整歷史計算五路"""
    cfg = road_config or config.roads

    bead = BeadPlate(cfg.rows)
    for result in history:
        bead.add(result)
    big_road = build_big_road(history, cfg)

    derived = {}
    for name, offset in DERIVED_OFFSETS.items():
        road = DerivedRoad(name, offset, cfg.rows, cfg.column_depth)
        road.calculate(big_road)
        derived[name] = road

    return Roadmaps(
        bead_plate=bead.get_grid(cfg.bead_min_cols),
        big_road=big_road.get_grid(cfg.big_road_min_cols),
        big_eye_boy=derived['big_eye_boy'].get_grid(cfg.derived_min_cols),
        small_road=derived['small_road'].get_grid(cfg.derived_min_cols),
        cockroach_road=derived['cockroach_road'].get_grid(cfg.derived_min_cols),
        markers={name: list(road.entries) for name, road in derived.items()},
    )


def ask_road(history: Sequence[RoundResult], winner: Winner) -> Dict[str, Optional[str]]:
    """
    問路：若下一局由 winner 勝，三條衍生路各會多出什麼顏色。
    尚未起算的路回傳 None。
    """
    if winner == Winner.TIE:
        raise ValueError("和局不影響大路，無法問路")
    big_road = build_big_road(history)
    lengths = big_road.get_column_lengths()
    if big_road.columns and big_road.columns[-1][0].winner == winner:
        lengths[-1] += 1
    else:
        lengths.append(1)
    col = len(lengths) - 1
    row = lengths[-1] - 1
    return {name: _marker_at(lengths, col, row, offset)
            for name, offset in DERIVED_OFFSETS.items()}
