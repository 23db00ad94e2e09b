"""
錯誤類型 — errors.py
=====================
牌桌拒絕一局時拋出的例外。被拒絕的請求不會抽牌、不會寫入歷史、不會改動餘額。
"""

from typing import Optional


class BaccaratError(Exception):
    """所有牌桌錯誤的基底類別"""


class InsufficientBalance(BaccaratError):
    """下注總額超過目前餘額"""

    def __init__(self, stake: int, balance: int):
        self.stake = stake
        self.balance = balance
        super().__init__(f"下注總額 {stake} 超過餘額 {balance}")


class InvalidDeckCount(BaccaratError, ValueError):
    """牌副數不在允許範圍"""

    def __init__(self, decks, min_decks: int = 6, max_decks: int = 8):
        self.decks = decks
        super().__init__(f"牌副數必須介於 {min_decks}~{max_decks}，收到 {decks!r}")


class EmptyBetSet(BaccaratError, ValueError):
    """沒有任何下注"""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "未下注，不能發牌")


class InvalidBet(BaccaratError, ValueError):
    """未知的下注種類，或注碼不是非負整數"""
