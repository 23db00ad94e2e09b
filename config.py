"""
桌台設定 — config.py
=====================
所有可調參數集中於此，可用環境變數覆寫：
  BACCARAT_DECKS             預設牌副數（6~8）
  BACCARAT_STARTING_BALANCE  初始籌碼
  BACCARAT_HISTORY_FILE      歷史紀錄 JSON lines 檔（未設定則存在記憶體）
  BACCARAT_SEED              洗牌隨機種子（未設定則真隨機）
  BACCARAT_LOG_LEVEL         logging 等級
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


@dataclass(frozen=True)
class TableConfig:
    """牌桌設定"""
    default_decks: int = field(default_factory=lambda: _env_int("BACCARAT_DECKS", 8))
    min_decks: int = 6
    max_decks: int = 8
    starting_balance: int = field(
        default_factory=lambda: _env_int("BACCARAT_STARTING_BALANCE", 10000))
    seed: Optional[int] = field(default_factory=lambda: _env_int("BACCARAT_SEED", None))
    history_file: Optional[str] = field(
        default_factory=lambda: os.getenv("BACCARAT_HISTORY_FILE") or None)
    recent_rounds: int = 10    # state() 回傳最近幾局


@dataclass(frozen=True)
class RoadConfig:
    """路紙格子設定"""
    rows: int = 6              # 每列 6 格
    column_depth: int = 5      # 同列往下最多 5 格，之後拐彎（龍尾）
    bead_min_cols: int = 20
    big_road_min_cols: int = 40
    derived_min_cols: int = 20


@dataclass(frozen=True)
class SimulationConfig:
    """Monte Carlo 模擬預設值"""
    n_simulations: int = 100
    n_rounds: int = 1000
    base_unit: int = 100
    seed: int = 42
    output_dir: str = "output"


@dataclass(frozen=True)
class LogConfig:
    level: str = field(
        default_factory=lambda: os.getenv("BACCARAT_LOG_LEVEL", "WARNING").upper())
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class AppConfig:
    table: TableConfig = field(default_factory=TableConfig)
    roads: RoadConfig = field(default_factory=RoadConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    log: LogConfig = field(default_factory=LogConfig)


# 全域設定
config = AppConfig()
