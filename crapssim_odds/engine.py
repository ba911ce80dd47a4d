"""
engine.py
Per-roll wager resolution for a pass-line + come + odds gambler.

The engine is a pure function of (state, roll, policy):

    result = step(state, roll, policy)
    state = result.state

Nothing here rolls dice, logs, or keeps history; the trial driver does.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import StakingPolicy
from .payouts import odds_multiplier, odds_payout
from .wagers import LineWager, PointWager, Wager, total_at_risk

Roll = Tuple[int, int]

SEVEN = 7
YO = 11
CRAPS_NUMS = {2, 3, 12}

# Wager event kinds
WIN = "win"
NATURAL = "natural"
CRAPS = "craps"
SEVEN_OUT = "seven_out"
REFUND = "odds_refund"
POINT_ESTABLISHED = "point_established"
TRAVEL = "travel"
PLACE = "place"


@dataclass(frozen=True)
class WagerEvent:
    kind: str
    wager: Wager
    amount: int = 0

    def __str__(self) -> str:
        return f"{self.kind}:{self.wager}:{self.amount}"


@dataclass(frozen=True)
class EngineState:
    point: Optional[int]
    bankroll: int
    wagers: Tuple[Wager, ...] = ()
    peak: int = 0

    @property
    def on_comeout(self) -> bool:
        return self.point is None

    @property
    def money(self) -> int:
        """Bankroll plus everything currently on the table."""
        return self.bankroll + total_at_risk(self.wagers)

    def describe(self) -> str:
        bets = ",".join(str(w) for w in self.wagers)
        return f"point:{self.point} bankroll:{self.bankroll} peak:{self.peak} bets:[{bets}]"


@dataclass(frozen=True)
class StepResult:
    state: EngineState
    credited: int
    staked: int
    refunded: int
    events: Tuple[WagerEvent, ...]


class _Ledger:
    """Bankroll bookkeeping for one roll."""

    def __init__(self, bankroll: int, peak: int) -> None:
        self.bankroll = bankroll
        self.peak = max(peak, bankroll)
        self.credited = 0
        self.staked = 0
        self.refunded = 0
        self.events: List[WagerEvent] = []

    def credit(self, kind: str, wager: Wager, amount: int) -> None:
        self.bankroll += amount
        self.credited += amount
        if kind == REFUND:
            self.refunded += amount
        self.peak = max(self.peak, self.bankroll)
        self.events.append(WagerEvent(kind, wager, amount))

    def take(self, amount: int) -> bool:
        """Move ``amount`` onto the table if the bankroll covers it."""
        if amount <= 0 or self.bankroll < amount:
            return False
        self.bankroll -= amount
        self.staked += amount
        return True

    def note(self, kind: str, wager: Wager, amount: int = 0) -> None:
        self.events.append(WagerEvent(kind, wager, amount))


def opening_state(policy: StakingPolicy) -> EngineState:
    """Bankroll at the start of a trial, with the first line wager already down."""
    bankroll = policy.initial_bankroll - policy.min_bet
    return EngineState(
        point=None,
        bankroll=bankroll,
        wagers=(LineWager(policy.min_bet),),
        peak=bankroll,
    )


def base_stake(bankroll: int, policy: StakingPolicy) -> int:
    """
    Flat stake for a new wager: the minimum, doubled once for every doubling
    of the initial bankroll when ``grow_bets`` is on.
    """
    stake = policy.min_bet
    if not policy.grow_bets:
        return stake
    k = 1
    while bankroll >= policy.initial_bankroll * 2**k:
        stake *= 2
        k += 1
    return stake


def winnings(wager: Wager, number: int) -> int:
    """Total returned when ``wager`` hits its number: flat stake doubled, odds back plus true odds."""
    amount = 2 * wager.stake
    if wager.odds:
        amount += wager.odds + odds_payout(wager.odds, number)
    return amount


def _yo_payout(stake: int, policy: StakingPolicy) -> int:
    return 2 * stake if policy.yo_pays_double else stake


def _buy_odds(stake: int, number: int, ledger: _Ledger, policy: StakingPolicy) -> Optional[int]:
    ratio = ledger.bankroll / policy.initial_bankroll
    amount = stake * odds_multiplier(number, policy, ratio)
    if ledger.take(amount):
        return amount
    return None


def _resolve_seven(state: EngineState, ledger: _Ledger, policy: StakingPolicy) -> List[Wager]:
    for w in state.wagers:
        if isinstance(w, LineWager):
            if state.point is None:
                ledger.credit(NATURAL, w, 2 * w.stake)
            else:
                ledger.note(SEVEN_OUT, w, w.at_risk)
        elif w.undecided:
            ledger.credit(NATURAL, w, 2 * w.stake)
        elif policy.odds_off_without_point and state.point is None and w.odds:
            # come odds are off on the come-out roll
            ledger.credit(REFUND, w, w.odds)
            ledger.note(SEVEN_OUT, w, w.stake)
        else:
            ledger.note(SEVEN_OUT, w, w.at_risk)
    return []


def _resolve_number(
    state: EngineState, total: int, ledger: _Ledger, policy: StakingPolicy
) -> Tuple[List[Wager], Optional[int]]:
    """Settle a non-seven roll. Making the point clears it, so the next re-stake is a new line wager."""
    kept: List[Wager] = []
    point = state.point
    for w in state.wagers:
        is_line = isinstance(w, LineWager)
        number = state.point if is_line else w.target

        if number is not None:
            if total == number:
                ledger.credit(WIN, w, winnings(w, number))
                if is_line:
                    point = None
            else:
                kept.append(w)
            continue

        if total in CRAPS_NUMS:
            ledger.note(CRAPS, w, w.stake)
        elif total == YO:
            ledger.credit(NATURAL, w, _yo_payout(w.stake, policy))
        elif is_line:
            odds = _buy_odds(w.stake, total, ledger, policy)
            moved: Wager = w.with_odds(odds)
            point = total
            ledger.note(POINT_ESTABLISHED, moved, total)
            kept.append(moved)
        else:
            odds = _buy_odds(w.stake, total, ledger, policy)
            moved = w.moved_to(total, odds)
            ledger.note(TRAVEL, moved, total)
            kept.append(moved)
    return kept, point


def _restake(
    point: Optional[int], wagers: Sequence[Wager], ledger: _Ledger, policy: StakingPolicy
) -> Optional[Wager]:
    stake = base_stake(ledger.bankroll, policy)
    if ledger.bankroll < stake:
        return None
    new: Wager
    if point is None and not any(isinstance(w, LineWager) for w in wagers):
        new = LineWager(stake)
    elif not any(isinstance(w, PointWager) and w.undecided for w in wagers):
        new = PointWager(stake)
    else:
        return None
    ledger.take(stake)
    ledger.note(PLACE, new, stake)
    return new


def step(state: EngineState, roll: Roll, policy: StakingPolicy) -> StepResult:
    """Resolve one roll against every live wager, then place at most one new wager."""
    total = roll[0] + roll[1]
    ledger = _Ledger(state.bankroll, state.peak)

    if total == SEVEN:
        kept = _resolve_seven(state, ledger, policy)
        point: Optional[int] = None
    else:
        kept, point = _resolve_number(state, total, ledger, policy)

    placed = _restake(point, kept, ledger, policy)
    if placed is not None:
        kept.append(placed)

    new_state = EngineState(
        point=point,
        bankroll=ledger.bankroll,
        wagers=tuple(kept),
        peak=ledger.peak,
    )
    return StepResult(
        state=new_state,
        credited=ledger.credited,
        staked=ledger.staked,
        refunded=ledger.refunded,
        events=tuple(ledger.events),
    )


def is_busted(state: EngineState, policy: StakingPolicy) -> bool:
    """Nothing on the table and not enough left to make the minimum bet."""
    return state.bankroll < policy.min_bet and not state.wagers
