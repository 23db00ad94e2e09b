"""
牌桌流程 — table.py
====================
一局的完整流程：驗證下注 → 發牌 → 結算 → 寫入歷史 → 重算五路。
任何一步之前被拒絕，都不抽牌、不寫歷史、不動餘額。

牌靴不是全域狀態：由呼叫端（BaccaratTable）持有並傳入。
同一個牌靴一次只能有一局在進行，並行請求需由呼叫端排隊。
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from baccarat_engine import RoundResult, Shoe, resolve_round
from config import TableConfig, config
from errors import EmptyBetSet, InsufficientBalance, InvalidDeckCount
from payouts import Settlement, normalize_bets, settle
from roads import Roadmaps, compute_roadmaps
from storage import (
    BalanceStore, HistoryStore,
    InMemoryBalanceStore, InMemoryHistoryStore, JsonFileHistoryStore,
)

logger = logging.getLogger(__name__)

__all__ = [
    'DealOutcome', 'BaccaratTable',
    'deal_round', 'check_deck_count', 'reset_shoe', 'compute_roadmaps',
]


@dataclass(frozen=True)
class DealOutcome:
    result: RoundResult
    settlement: Settlement
    balance: int               # 結算後餘額
    roadmaps: Roadmaps

    @property
    def balance_delta(self) -> int:
        return self.settlement.balance_delta


def deal_round(bets: Mapping, shoe: Shoe, history: HistoryStore,
               balance: BalanceStore) -> DealOutcome:
    """
    發一局。
    - 沒下注 → EmptyBetSet
    - 下注總額 > 餘額 → InsufficientBalance
    """
    normalized = normalize_bets(bets)
    stake = sum(normalized.values())
    if stake == 0:
        logger.warning("拒絕發牌：未下注")
        raise EmptyBetSet()

    current = balance.get()
    if stake > current:
        logger.warning("拒絕發牌：下注 %d > 餘額 %d", stake, current)
        raise InsufficientBalance(stake, current)

    result = resolve_round(shoe)
    settlement = settle(normalized, result)

    history.append(result)
    new_balance = current + settlement.balance_delta
    balance.set(new_balance)
    logger.debug("%s，下注 %d，淨 %+d，餘額 %d",
                 result.outcome, stake, settlement.balance_delta, new_balance)

    return DealOutcome(
        result=result,
        settlement=settlement,
        balance=new_balance,
        roadmaps=compute_roadmaps(history.all()),
    )


def check_deck_count(decks, table_config: Optional[TableConfig] = None) -> int:
    """牌副數必須是 min_decks~max_decks 之間的整數，否則拋 InvalidDeckCount"""
    cfg = table_config or config.table
    if isinstance(decks, bool) or not isinstance(decks, int) \
            or not cfg.min_decks <= decks <= cfg.max_decks:
        raise InvalidDeckCount(decks, cfg.min_decks, cfg.max_decks)
    return decks


def reset_shoe(decks: int, seed: Optional[int] = None,
               table_config: Optional[TableConfig] = None) -> Shoe:
    """換新牌靴，牌副數限 6~8"""
    check_deck_count(decks, table_config)
    logger.info("換新牌靴：%d 副", decks)
    return Shoe(decks, seed=seed)


class BaccaratTable:
    """單一牌桌的 session：持有牌靴、歷史與餘額"""

    def __init__(self, decks: Optional[int] = None,
                 history: Optional[HistoryStore] = None,
                 balance: Optional[BalanceStore] = None,
                 seed: Optional[int] = None,
                 table_config: Optional[TableConfig] = None):
        self.config = table_config or config.table
        self.seed = seed if seed is not None else self.config.seed
        self.shoes_opened = 0
        self.shoe = self._new_shoe(self.config.default_decks if decks is None else decks)
        if history is None:
            if self.config.history_file:
                history = JsonFileHistoryStore(self.config.history_file)
            else:
                history = InMemoryHistoryStore()
        self.history = history
        self.balance = balance or InMemoryBalanceStore(self.config.starting_balance)

    def _new_shoe(self, decks: int) -> Shoe:
        # 有固定種子時，每換一靴種子遞增：可重現，但新靴不會重複上一靴的牌序
        seed = None if self.seed is None else self.seed + self.shoes_opened
        shoe = reset_shoe(decks, seed, self.config)
        self.shoes_opened += 1
        return shoe

    def deal(self, bets: Mapping) -> DealOutcome:
        return deal_round(bets, self.shoe, self.history, self.balance)

    def reset(self, decks: Optional[int] = None) -> Shoe:
        """換新牌靴並開始新的歷史；牌副數無效時什麼都不換"""
        shoe = self._new_shoe(self.shoe.decks if decks is None else decks)
        self.shoe = shoe
        self.history.clear()
        return shoe

    def reset_balance(self, amount: Optional[int] = None) -> int:
        amount = self.config.starting_balance if amount is None else amount
        self.balance.set(amount)
        logger.info("餘額重設為 %d", amount)
        return amount

    def roadmaps(self) -> Roadmaps:
        return compute_roadmaps(self.history.all())

    def state(self) -> dict:
        """給顯示層的完整狀態"""
        history = self.history.all()
        return {
            'balance': self.balance.get(),
            'shoe': {
                'decks': self.shoe.decks,
                'remaining_cards': self.shoe.remaining,
            },
            'rounds': len(history),
            'roadmaps': compute_roadmaps(history).to_dict(),
            'history': [r.to_record() for r in history[-self.config.recent_rounds:]],
        }
