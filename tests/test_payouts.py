"""Tests for payouts.py"""

import pytest

from errors import BaccaratError, InvalidBet
from payouts import (
    HOUSE_EDGE, RETURN_MULTIPLIERS, BetType, bet_wins,
    normalize_bets, settle, total_stake,
)


@pytest.fixture
def player_six_five(hand_round):
    # 閒 6 對 莊 5，無天牌、無對子
    return hand_round(('2', '4'), ('2', '3'))


@pytest.fixture
def banker_seven_six(hand_round):
    return hand_round(('2', '4'), ('3', '4'))


@pytest.fixture
def tie_six(hand_round):
    return hand_round(('2', '4'), ('2', '4'))


class TestSettle:
    def test_player_win_pays_even_money(self, player_six_five):
        s = settle({'player': 100}, player_six_five)
        assert s.winnings == 200
        assert s.balance_delta == 100
        assert s.total_stake == 100

    def test_banker_win_pays_less_commission(self, banker_seven_six):
        s = settle({'banker': 100}, banker_seven_six)
        assert s.winnings == 195
        assert s.balance_delta == 95

    def test_tie_pays_eight_to_one(self, tie_six):
        s = settle({'tie': 100}, tie_six)
        assert s.winnings == 900
        assert s.balance_delta == 800

    def test_main_bets_push_on_tie(self, tie_six):
        s = settle({'player': 100, 'banker': 100}, tie_six)
        assert s.winnings == 200
        assert s.balance_delta == 0
        assert s.per_bet == {BetType.PLAYER: 100, BetType.BANKER: 100}

    def test_player_pair_independent_of_winner(self, hand_round):
        result = hand_round(('2', '2', 'K'), ('3', '4'))
        assert result.player.is_pair
        s = settle({'player_pair': 50}, result)
        assert s.winnings == 600
        assert s.balance_delta == 550

    def test_banker_pair(self, hand_round):
        result = hand_round(('2', '4'), ('9', '9'))
        s = settle({BetType.BANKER_PAIR: 10, BetType.PLAYER_PAIR: 10}, result)
        assert s.per_bet == {BetType.BANKER_PAIR: 120, BetType.PLAYER_PAIR: 0}
        assert s.balance_delta == 100

    def test_commission_fraction_is_floored(self, banker_seven_six):
        s = settle({'banker': 15}, banker_seven_six)
        assert s.winnings == 29
        assert s.balance_delta == 14

    def test_fractions_floored_per_bet(self, banker_seven_six):
        s = settle({'banker': 15, 'tie': 0}, banker_seven_six)
        assert s.winnings == sum(s.per_bet.values())

    def test_losing_bets_return_nothing(self, player_six_five):
        s = settle({'banker': 100, 'tie': 20, 'banker_pair': 5}, player_six_five)
        assert s.winnings == 0
        assert s.balance_delta == -125

    def test_mixed_bets(self, player_six_five):
        s = settle({'player': 100, 'tie': 10}, player_six_five)
        assert s.winnings == 200
        assert s.balance_delta == 90

    def test_settlement_is_integer(self, banker_seven_six):
        s = settle({'banker': 33}, banker_seven_six)
        assert isinstance(s.winnings, int)
        assert isinstance(s.balance_delta, int)


class TestNormalizeBets:
    def test_accepts_string_and_enum_keys(self):
        bets = normalize_bets({'player': 10, BetType.TIE: 5})
        assert bets == {BetType.PLAYER: 10, BetType.TIE: 5}

    def test_zero_stakes_dropped(self):
        assert normalize_bets({'player': 0, 'banker': 5}) == {BetType.BANKER: 5}

    def test_same_bet_type_summed(self):
        assert normalize_bets({'player': 5, BetType.PLAYER: 7}) == {BetType.PLAYER: 12}

    def test_total_stake(self):
        assert total_stake({'player': 5, 'banker_pair': 3}) == 8
        assert total_stake({}) == 0

    @pytest.mark.parametrize("bets", [
        {'dragon': 10},
        {'player': -1},
        {'player': 1.5},
        {'player': '10'},
        {'player': True},
    ])
    def test_invalid_bets_rejected(self, bets):
        with pytest.raises(InvalidBet):
            normalize_bets(bets)

    def test_invalid_bet_is_value_error(self):
        with pytest.raises(ValueError):
            normalize_bets({'banker': -5})
        assert issubclass(InvalidBet, BaccaratError)


def test_bet_wins(hand_round, tie_six):
    result = hand_round(('5', '5'), ('K', '9'))
    assert bet_wins(BetType.BANKER, result)
    assert bet_wins(BetType.PLAYER_PAIR, result)
    assert not bet_wins(BetType.BANKER_PAIR, result)
    assert bet_wins(BetType.TIE, tie_six)
    assert not bet_wins(BetType.PLAYER, tie_six)


def test_tables_cover_every_bet_type():
    assert set(RETURN_MULTIPLIERS) == set(BetType)
    assert set(HOUSE_EDGE) == set(BetType)
