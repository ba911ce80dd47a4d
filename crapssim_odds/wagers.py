"""
wagers.py
The two live wager kinds the engine holds.

LineWager is the pass-line bet: one at a time, its number is the shared
point. PointWager is a come-style bet that travels to its own number
(``target``); several may be live, at most one still without a target.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Union


@dataclass(frozen=True)
class LineWager:
    stake: int
    odds: Optional[int] = None

    @property
    def at_risk(self) -> int:
        return self.stake + (self.odds or 0)

    def with_odds(self, odds: Optional[int]) -> "LineWager":
        return replace(self, odds=odds)

    def __str__(self) -> str:
        return f"line(a{self.stake}o{self.odds or ''})"


@dataclass(frozen=True)
class PointWager:
    stake: int
    target: Optional[int] = None
    odds: Optional[int] = None

    @property
    def at_risk(self) -> int:
        return self.stake + (self.odds or 0)

    @property
    def undecided(self) -> bool:
        return self.target is None

    def moved_to(self, target: int, odds: Optional[int]) -> "PointWager":
        return replace(self, target=target, odds=odds)

    def __str__(self) -> str:
        return f"come(a{self.stake}t{self.target or ''}o{self.odds or ''})"


Wager = Union[LineWager, PointWager]


def total_at_risk(wagers) -> int:
    return sum(w.at_risk for w in wagers)
