"""Run the wager engine roll by roll until the gambler busts (or a roll cap)."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from typing import List, Optional

from .config import StakingPolicy, TrialConfig
from .dice import DiceSource, LoggedDice, RollLog, make_dice
from .engine import is_busted, opening_state, step

log = logging.getLogger("CSO.Trial")


@dataclass(frozen=True)
class TrialResult:
    rolls: int
    peak_bankroll: int
    final_bankroll: int
    busted: bool


def run_trial(dice: DiceSource, policy: StakingPolicy, max_rolls: Optional[int] = None) -> TrialResult:
    state = opening_state(policy)
    peak = state.peak
    rolls = 0
    debug = log.isEnabledFor(logging.DEBUG)

    while True:
        if max_rolls is not None and rolls >= max_rolls:
            break
        roll = dice.roll()
        rolls += 1
        result = step(state, roll, policy)
        state = result.state
        peak = max(peak, state.peak)
        if debug:
            log.debug(
                "i:%d roll:%s sum:%d events:[%s] %s",
                rolls,
                roll,
                roll[0] + roll[1],
                ", ".join(str(e) for e in result.events),
                state.describe(),
            )
        if is_busted(state, policy):
            break

    busted = is_busted(state, policy)
    log.info(
        "trial done: rolls=%d peak=%d final=%d busted=%s",
        rolls,
        peak,
        state.bankroll,
        busted,
    )
    return TrialResult(rolls=rolls, peak_bankroll=peak, final_bankroll=state.bankroll, busted=busted)


def run_trials(config: TrialConfig, dice: Optional[DiceSource] = None) -> List[TrialResult]:
    """
    Run ``config.trials`` independent trials on one shared dice source.

    When ``dice`` is not given it is built from the config. The roll log (if
    any) is truncated here and receives every roll of every trial, whether the
    dice came from the config or from the caller.
    """
    with ExitStack() as stack:
        roll_log = None
        if config.roll_log is not None:
            roll_log = stack.enter_context(RollLog(config.roll_log))
        if dice is None:
            dice = make_dice(config.rolls_file, config.seed, roll_log)
        elif roll_log is not None:
            dice = LoggedDice(dice, roll_log)

        log.info(
            "Starting batch: trials=%d bankroll=%d min_bet=%d odds=%s dice=%r",
            config.trials,
            config.policy.initial_bankroll,
            config.policy.min_bet,
            "adaptive" if config.policy.adaptive_odds else config.policy.odds,
            dice,
        )
        results = [run_trial(dice, config.policy, config.max_rolls) for _ in range(config.trials)]

    log.info("Finished batch: trials=%d", len(results))
    return results
