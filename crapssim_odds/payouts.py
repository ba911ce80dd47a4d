"""
payouts.py
Odds payout ratios and odds-stake multipliers by point number.

Public API:
    odds_payout(odds_stake: int, point: int) -> int
    odds_multiplier(point: int, policy, bankroll_ratio: float = 1.0) -> int
    table_multiplier(point: int, odds: str) -> int
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Tuple

from .errors import InvalidPointError, UnknownOddsPolicyError

if TYPE_CHECKING:  # pragma: no cover
    from .config import StakingPolicy

POINT_NUMBERS = (4, 5, 6, 8, 9, 10)

# True odds (numerator, denominator), house edge free.
_TRUE_ODDS: Dict[int, Tuple[int, int]] = {
    4: (2, 1),
    10: (2, 1),
    5: (3, 2),
    9: (3, 2),
    6: (6, 5),
    8: (6, 5),
}

_ODDS_TABLES: Dict[str, Dict[int, int]] = {
    "123": {4: 1, 10: 1, 5: 2, 9: 2, 6: 3, 8: 3},
    "345": {4: 3, 10: 3, 5: 4, 9: 4, 6: 5, 8: 5},
    "10": {n: 10 for n in POINT_NUMBERS},
}

ODDS_POLICIES = tuple(_ODDS_TABLES)

# Adaptive odds: bankroll ratio thresholds, lowest first.
ADAPTIVE_LOW_RATIO = 0.8
ADAPTIVE_HIGH_RATIO = 1.4


def _check_point(point: int) -> None:
    if point not in _TRUE_ODDS:
        raise InvalidPointError(f"no odds bet on {point!r}; points are {POINT_NUMBERS}")


def check_odds_policy(odds: str) -> str:
    """Return ``odds`` unchanged, or raise UnknownOddsPolicyError."""
    if odds not in _ODDS_TABLES:
        raise UnknownOddsPolicyError(
            f"unknown odds policy {odds!r} (expected one of: {', '.join(ODDS_POLICIES)})"
        )
    return odds


def odds_payout(odds_stake: int, point: int) -> int:
    """
    Winnings on an odds stake at true odds, excluding the returned stake.

    Integer multiply then truncating divide, so 6/8 and 5/9 round down:
      odds_payout(7, 6) -> 8   (7 * 6 // 5)
      odds_payout(5, 9) -> 7   (5 * 3 // 2)
    """
    _check_point(point)
    numerator, denominator = _TRUE_ODDS[point]
    return (odds_stake * numerator) // denominator


def table_multiplier(point: int, odds: str) -> int:
    _check_point(point)
    return _ODDS_TABLES[check_odds_policy(odds)][point]


def adaptive_odds_name(bankroll_ratio: float) -> str:
    """Pick the odds table for the bankroll relative to where it started."""
    if bankroll_ratio < ADAPTIVE_LOW_RATIO:
        return "123"
    if bankroll_ratio < ADAPTIVE_HIGH_RATIO:
        return "345"
    return "10"


def odds_multiplier(point: int, policy: "StakingPolicy", bankroll_ratio: float = 1.0) -> int:
    """
    Multiple of the flat stake allowed as an odds stake on ``point``.

    With ``policy.adaptive_odds`` the table is chosen from ``bankroll_ratio``
    (current / initial bankroll) instead of ``policy.odds``.
    """
    if policy.adaptive_odds:
        return table_multiplier(point, adaptive_odds_name(bankroll_ratio))
    return table_multiplier(point, policy.odds)
