"""
派彩計算 — payouts.py
======================
  閒    1:1      （退回本金 ×2）
  莊    1:0.95   （抽 5% 佣金，退回本金 ×1.95）
  和    8:1      （退回本金 ×9）
  閒對  11:1     （退回本金 ×12，與輸贏無關）
  莊對  11:1     （退回本金 ×12，與輸贏無關）
和局時，閒 / 莊 主注退回本金（push）。
佣金的零頭一律捨去，餘額保持整數。
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_FLOOR
from enum import Enum
from typing import Dict, Mapping

from baccarat_engine import RoundResult, Winner
from errors import InvalidBet

logger = logging.getLogger(__name__)


class BetType(Enum):
    PLAYER = "player"
    BANKER = "banker"
    TIE = "tie"
    PLAYER_PAIR = "player_pair"
    BANKER_PAIR = "banker_pair"


# 贏時退回金額 = 注碼 × 倍數（含本金）
RETURN_MULTIPLIERS = {
    BetType.PLAYER: Decimal("2"),
    BetType.BANKER: Decimal("1.95"),
    BetType.TIE: Decimal("9"),
    BetType.PLAYER_PAIR: Decimal("12"),
    BetType.BANKER_PAIR: Decimal("12"),
}

# 每注 1 單位的理論莊家優勢 %（8 副牌）
HOUSE_EDGE = {
    BetType.PLAYER: 1.24,
    BetType.BANKER: 1.06,
    BetType.TIE: 14.36,
    BetType.PLAYER_PAIR: 10.36,
    BetType.BANKER_PAIR: 10.36,
}

ZH_NAMES = {
    BetType.PLAYER: '閒',
    BetType.BANKER: '莊',
    BetType.TIE: '和',
    BetType.PLAYER_PAIR: '閒對',
    BetType.BANKER_PAIR: '莊對',
}


@dataclass(frozen=True)
class Settlement:
    """單局結算"""
    winnings: int                  # 退回總額（含本金、含 push）
    total_stake: int
    balance_delta: int             # winnings - total_stake
    per_bet: Dict[BetType, int] = field(default_factory=dict)


def normalize_bets(bets: Mapping) -> Dict[BetType, int]:
    """
    把下注表正規化成 {BetType: int}。
    key 可以是 BetType 或其字串值；注碼必須是非負整數；0 注碼的項目會被移除。
    """
    normalized: Dict[BetType, int] = {}
    for key, stake in bets.items():
        try:
            bet_type = key if isinstance(key, BetType) else BetType(key)
        except ValueError:
            raise InvalidBet(f"未知的下注種類: {key!r}") from None
        if isinstance(stake, bool) or not isinstance(stake, int):
            raise InvalidBet(f"{bet_type.value} 注碼必須是整數，收到 {stake!r}")
        if stake < 0:
            raise InvalidBet(f"{bet_type.value} 注碼不可為負數: {stake}")
        if stake:
            normalized[bet_type] = normalized.get(bet_type, 0) + stake
    return normalized


def total_stake(bets: Mapping) -> int:
    return sum(normalize_bets(bets).values())


def bet_wins(bet_type: BetType, result: RoundResult) -> bool:
    if bet_type == BetType.PLAYER:
        return result.winner == Winner.PLAYER
    if bet_type == BetType.BANKER:
        return result.winner == Winner.BANKER
    if bet_type == BetType.TIE:
        return result.winner == Winner.TIE
    if bet_type == BetType.PLAYER_PAIR:
        return result.player.is_pair
    return result.banker.is_pair


def bet_return(bet_type: BetType, stake: int, result: RoundResult) -> Decimal:
    """單注退回金額（未捨去零頭）"""
    if bet_wins(bet_type, result):
        return stake * RETURN_MULTIPLIERS[bet_type]
    # 和局：閒 / 莊主注退回本金
    if result.winner == Winner.TIE and bet_type in (BetType.PLAYER, BetType.BANKER):
        return Decimal(stake)
    return Decimal(0)


def settle(bets: Mapping, result: RoundResult) -> Settlement:
    """依結果結算所有下注"""
    normalized = normalize_bets(bets)
    per_bet = {}
    for bet_type, stake in normalized.items():
        amount = bet_return(bet_type, stake, result)
        per_bet[bet_type] = int(amount.to_integral_value(rounding=ROUND_FLOOR))

    winnings = sum(per_bet.values())
    stake = sum(normalized.values())
    settlement = Settlement(
        winnings=winnings,
        total_stake=stake,
        balance_delta=winnings - stake,
        per_bet=per_bet,
    )
    logger.debug("結算 %s → 退回 %d，淨 %+d",
                 {b.value: s for b, s in normalized.items()}, winnings, settlement.balance_delta)
    return settlement
