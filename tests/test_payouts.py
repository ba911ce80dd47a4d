# tests/test_payouts.py
import pytest

from crapssim_odds.config import StakingPolicy
from crapssim_odds.errors import ConfigError, InvalidPointError, UnknownOddsPolicyError
from crapssim_odds.payouts import (
    ODDS_POLICIES,
    POINT_NUMBERS,
    adaptive_odds_name,
    odds_multiplier,
    odds_payout,
    table_multiplier,
)


@pytest.mark.parametrize(
    "stake, point, expected",
    [
        (10, 4, 20),
        (10, 10, 20),
        (10, 5, 15),
        (5, 9, 7),    # 15 // 2 rounds down
        (10, 6, 12),
        (7, 8, 8),    # 42 // 5 rounds down
        (15, 6, 18),
        (0, 6, 0),
    ],
)
def test_odds_payout_true_odds_truncated(stake, point, expected):
    assert odds_payout(stake, point) == expected


def test_odds_payout_never_raises_for_points():
    for n in POINT_NUMBERS:
        assert odds_payout(100, n) >= 100


@pytest.mark.parametrize("bad", [2, 3, 7, 11, 12, 0])
def test_odds_payout_rejects_non_points(bad):
    with pytest.raises(InvalidPointError):
        odds_payout(10, bad)


def test_table_multipliers():
    assert [table_multiplier(n, "123") for n in (4, 5, 6, 8, 9, 10)] == [1, 2, 3, 3, 2, 1]
    assert [table_multiplier(n, "345") for n in (4, 5, 6, 8, 9, 10)] == [3, 4, 5, 5, 4, 3]
    assert {table_multiplier(n, "10") for n in POINT_NUMBERS} == {10}


def test_unknown_policy_is_config_error():
    with pytest.raises(UnknownOddsPolicyError):
        table_multiplier(6, "2x")
    # configuration errors share a base
    with pytest.raises(ConfigError):
        StakingPolicy(odds="100")
    assert set(ODDS_POLICIES) == {"123", "345", "10"}


@pytest.mark.parametrize(
    "ratio, expected",
    [(0.0, "123"), (0.79, "123"), (0.8, "345"), (1.0, "345"), (1.39, "345"), (1.4, "10"), (5.0, "10")],
)
def test_adaptive_thresholds(ratio, expected):
    assert adaptive_odds_name(ratio) == expected


def test_odds_multiplier_uses_policy_table_unless_adaptive():
    fixed = StakingPolicy(odds="345")
    assert odds_multiplier(6, fixed, bankroll_ratio=0.1) == 5
    assert odds_multiplier(4, fixed, bankroll_ratio=3.0) == 3

    adaptive = StakingPolicy(odds="123", adaptive_odds=True)
    assert odds_multiplier(6, adaptive, bankroll_ratio=0.5) == 3
    assert odds_multiplier(6, adaptive, bankroll_ratio=1.0) == 5
    assert odds_multiplier(6, adaptive, bankroll_ratio=1.5) == 10


def test_odds_multiplier_rejects_non_points(policy):
    with pytest.raises(InvalidPointError):
        odds_multiplier(7, policy)
