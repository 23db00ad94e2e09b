"""
百家樂核心引擎 — baccarat_engine.py
====================================
完整實現真實百家樂規則：
- 6~8 副牌洗牌（Fisher–Yates），抽完自動重洗
- 閒家 / 莊家 第三張補牌規則（莊家補牌表）
- 點數計算（A=1, 2-9面值, 10/J/Q/K=0）
- 結果判定：閒贏、莊贏、和局、莊對、閒對、天牌
- 每局結果可轉成帶版本號的紀錄（dict），方便存檔與重播
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

RECORD_VERSION = 1


class Winner(Enum):
    PLAYER = "player"
    BANKER = "banker"
    TIE = "tie"

    @property
    def zh(self) -> str:
        return {'player': '閒', 'banker': '莊', 'tie': '和'}[self.value]


SUITS = ('hearts', 'diamonds', 'clubs', 'spades')
RANKS = ('A', '2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K')
SUIT_SYMBOLS = {'hearts': '♥', 'diamonds': '♦', 'clubs': '♣', 'spades': '♠'}

CARD_VALUES = {
    'A': 1, '2': 2, '3': 3, '4': 4, '5': 5,
    '6': 6, '7': 7, '8': 8, '9': 9,
    '10': 0, 'J': 0, 'Q': 0, 'K': 0,
}


@dataclass(frozen=True)
class Card:
    suit: str   # 'hearts','diamonds','clubs','spades'
    rank: str   # 'A','2',...,'10','J','Q','K'

    def __post_init__(self):
        if self.suit not in SUITS:
            raise ValueError(f"無效的花色: {self.suit!r}")
        if self.rank not in RANKS:
            raise ValueError(f"無效的牌面: {self.rank!r}")

    @property
    def value(self) -> int:
        return CARD_VALUES[self.rank]

    def __repr__(self):
        return f"{SUIT_SYMBOLS[self.suit]}{self.rank}"


def hand_score(cards: Sequence[Card]) -> int:
    """計算一手牌的點數（取個位數）"""
    return sum(c.value for c in cards) % 10


@dataclass(frozen=True)
class HandResult:
    """單手牌（閒或莊）的最終狀態"""
    cards: Tuple[Card, ...]
    score: int
    is_pair: bool      # 前兩張同點數牌面
    is_natural: bool   # 前兩張 8 或 9

    @classmethod
    def from_cards(cls, cards: Sequence[Card]) -> "HandResult":
        cards = tuple(cards)
        if not 2 <= len(cards) <= 3:
            raise ValueError(f"一手牌必須是 2~3 張，收到 {len(cards)} 張")
        return cls(
            cards=cards,
            score=hand_score(cards),
            is_pair=cards[0].rank == cards[1].rank,
            is_natural=hand_score(cards[:2]) >= 8,
        )

    @property
    def drew_third(self) -> bool:
        return len(self.cards) == 3


def outcome_label(winner: Winner, natural: bool) -> str:
    """結果描述：天牌 / 補牌 × 閒 / 莊 / 和，共 6 種"""
    name = {Winner.PLAYER: '閒家勝', Winner.BANKER: '莊家勝', Winner.TIE: '和局'}[winner]
    if natural:
        return f"天生贏家 - {name}"
    return name


@dataclass(frozen=True)
class RoundResult:
    """單局結果（建立後不可變）"""
    player: HandResult
    banker: HandResult
    winner: Winner
    outcome: str

    @property
    def natural(self) -> bool:
        return self.player.is_natural or self.banker.is_natural

    @property
    def is_pair(self) -> bool:
        return self.player.is_pair or self.banker.is_pair

    @classmethod
    def from_hands(cls, player_cards: Sequence[Card],
                   banker_cards: Sequence[Card]) -> "RoundResult":
        player = HandResult.from_cards(player_cards)
        banker = HandResult.from_cards(banker_cards)
        if player.score > banker.score:
            winner = Winner.PLAYER
        elif banker.score > player.score:
            winner = Winner.BANKER
        else:
            winner = Winner.TIE
        natural = player.is_natural or banker.is_natural
        return cls(player=player, banker=banker, winner=winner,
                   outcome=outcome_label(winner, natural))

    # ------------------------------------------------------------
    #  存檔格式
    # ------------------------------------------------------------
    def to_record(self) -> Dict:
        """轉成帶版本號的純資料 dict（可直接 json.dumps）"""
        def hand(h: HandResult) -> Dict:
            return {
                'cards': [{'suit': c.suit, 'rank': c.rank} for c in h.cards],
                'score': h.score,
                'is_pair': h.is_pair,
                'is_natural': h.is_natural,
            }
        return {
            'version': RECORD_VERSION,
            'player': hand(self.player),
            'banker': hand(self.banker),
            'winner': self.winner.value,
            'outcome': self.outcome,
        }

    @classmethod
    def from_record(cls, record: Dict) -> "RoundResult":
        """
        從紀錄還原。分數、對子、天牌一律由牌面重新計算，
        紀錄中的冗餘欄位只用來比對，不一致時拋 ValueError。
        """
        version = record.get('version')
        if version != RECORD_VERSION:
            raise ValueError(f"不支援的紀錄版本: {version!r}")
        player_cards = [Card(c['suit'], c['rank']) for c in record['player']['cards']]
        banker_cards = [Card(c['suit'], c['rank']) for c in record['banker']['cards']]
        result = cls.from_hands(player_cards, banker_cards)
        if result.winner.value != record['winner']:
            raise ValueError(
                f"紀錄勝方 {record['winner']!r} 與牌面不符 ({result.winner.value})")
        return result


class Shoe:
    """牌靴：N 副牌洗牌，抽完自動整靴重洗"""

    def __init__(self, decks: int = 8, seed: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        if decks < 1:
            raise ValueError("牌靴至少要 1 副牌")
        self.decks = decks
        self.rng = rng or random.Random(seed)
        self.cards: List[Card] = []
        self.dealt = 0          # 本次洗牌後已發出的張數
        self.shuffles = 0
        self.shuffle()

    @property
    def total_cards(self) -> int:
        return self.decks * 52

    def shuffle(self):
        """建立 N 副牌並整靴洗牌"""
        self.cards = [
            Card(suit, rank)
            for _ in range(self.decks)
            for suit in SUITS
            for rank in RANKS
        ]
        # random.shuffle 即 Fisher–Yates：i 由尾到 1，與 [0, i] 隨機一張交換
        self.rng.shuffle(self.cards)
        self.dealt = 0
        self.shuffles += 1
        logger.info("牌靴洗牌 #%d：%d 副 %d 張", self.shuffles, self.decks, len(self.cards))

    def draw(self) -> Card:
        """抽最上面一張；牌靴空了先整靴重洗"""
        if not self.cards:
            logger.info("牌靴已空，自動重洗")
            self.shuffle()
        self.dealt += 1
        return self.cards.pop()

    @property
    def remaining(self) -> int:
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)


# ============================================================
#  補牌規則
# ============================================================

def should_player_draw(player_score: int) -> bool:
    """閒家補牌規則：0-5 補牌，6-7 不補"""
    return player_score <= 5


def should_banker_draw(banker_score: int, player_third: Optional[int]) -> bool:
    """
    莊家補牌規則（完整真實規則）：
    - 閒家沒補牌（player_third 為 None）→ 莊家 0-5 補，6-7 不補
    - 閒家有補牌 → 根據莊家點數與閒家第三張牌面值決定
    """
    if player_third is None:
        return banker_score <= 5

    if banker_score <= 2:
        return True
    elif banker_score == 3:
        return player_third != 8
    elif banker_score == 4:
        return player_third in (2, 3, 4, 5, 6, 7)
    elif banker_score == 5:
        return player_third in (4, 5, 6, 7)
    elif banker_score == 6:
        return player_third in (6, 7)
    else:  # 7
        return False


def resolve_round(shoe: Shoe) -> RoundResult:
    """從牌靴發一局，回傳結果"""
    # 初始發牌：閒、閒、莊、莊
    player_cards = [shoe.draw(), shoe.draw()]
    banker_cards = [shoe.draw(), shoe.draw()]

    p_score = hand_score(player_cards)
    b_score = hand_score(banker_cards)

    # 天牌判定：任一方 8 或 9 → 雙方都不補牌
    if p_score < 8 and b_score < 8:
        player_third = None
        if should_player_draw(p_score):
            card = shoe.draw()
            player_cards.append(card)
            player_third = card.value

        if should_banker_draw(b_score, player_third):
            banker_cards.append(shoe.draw())

    result = RoundResult.from_hands(player_cards, banker_cards)
    logger.debug("開牌 閒%s(%d) 莊%s(%d) → %s",
                 list(result.player.cards), result.player.score,
                 list(result.banker.cards), result.banker.score, result.outcome)
    return result


# ====== 統計工具函數 ======

def calculate_base_probabilities(results: Sequence[RoundResult]) -> dict:
    """計算基礎機率分佈"""
    total = len(results)
    if total == 0:
        return {}
    p_count = sum(1 for r in results if r.winner == Winner.PLAYER)
    b_count = sum(1 for r in results if r.winner == Winner.BANKER)
    t_count = sum(1 for r in results if r.winner == Winner.TIE)
    pp_count = sum(1 for r in results if r.player.is_pair)
    bp_count = sum(1 for r in results if r.banker.is_pair)
    nat_count = sum(1 for r in results if r.natural)

    return {
        "總局數": total,
        "閒贏": p_count, "閒贏%": p_count / total * 100,
        "莊贏": b_count, "莊贏%": b_count / total * 100,
        "和局": t_count, "和局%": t_count / total * 100,
        "閒對": pp_count, "閒對%": pp_count / total * 100,
        "莊對": bp_count, "莊對%": bp_count / total * 100,
        "天牌": nat_count, "天牌%": nat_count / total * 100,
    }


# 理論機率（8 副牌）
THEORETICAL = {
    "閒贏": 44.6247,
    "莊贏": 45.8597,
    "和局":  9.5156,
    "閒對":  7.47,
    "莊對":  7.47,
}
