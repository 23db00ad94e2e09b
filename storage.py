"""
牌局存檔 — storage.py
======================
牌桌只依賴兩個介面：
  HistoryStore  — 依時間順序追加 / 讀取每局結果
  BalanceStore  — 讀寫玩家餘額
提供記憶體版與 JSON lines 檔案版；每行一筆帶版本號的 RoundResult 紀錄。
"""

import json
import logging
import os
from typing import List, Protocol

from baccarat_engine import RoundResult

logger = logging.getLogger(__name__)


class HistoryStore(Protocol):
    def append(self, result: RoundResult) -> None: ...

    def all(self) -> List[RoundResult]: ...

    def clear(self) -> None: ...


class BalanceStore(Protocol):
    def get(self) -> int: ...

    def set(self, balance: int) -> None: ...


class InMemoryHistoryStore:
    def __init__(self):
        self._results: List[RoundResult] = []

    def append(self, result: RoundResult) -> None:
        self._results.append(result)

    def all(self) -> List[RoundResult]:
        return list(self._results)

    def clear(self) -> None:
        self._results.clear()

    def __len__(self) -> int:
        return len(self._results)


class JsonFileHistoryStore:
    """每局一行 JSON，只追加不改寫"""

    def __init__(self, path: str):
        self.path = path
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)

    def append(self, result: RoundResult) -> None:
        line = json.dumps(result.to_record(), ensure_ascii=False)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

    def all(self) -> List[RoundResult]:
        if not os.path.exists(self.path):
            return []
        results = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    results.append(RoundResult.from_record(json.loads(line)))
                except (ValueError, KeyError, TypeError) as e:
                    raise ValueError(f"{self.path} 第 {line_no} 行紀錄無效: {e}") from e
        return results

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
            logger.info("已清除歷史檔 %s", self.path)

    def __len__(self) -> int:
        return len(self.all())


class InMemoryBalanceStore:
    def __init__(self, balance: int = 0):
        self.set(balance)

    def get(self) -> int:
        return self._balance

    def set(self, balance: int) -> None:
        if balance < 0:
            raise ValueError(f"餘額不可為負數: {balance}")
        self._balance = balance
