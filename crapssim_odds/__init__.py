# crapssim_odds/__init__.py
"""
crapssim-odds: Monte Carlo trials of a pass-line/come-with-odds gambler,
measuring how many rolls a bankroll lasts and how high it peaks.
"""

from .config import StakingPolicy, TrialConfig, build_config, load_config_file
from .dice import RandomDice, ScriptedDice, RollLog, load_roll_script
from .engine import EngineState, StepResult, opening_state, step, is_busted
from .errors import (
    CrapsSimOddsError,
    ConfigError,
    RollScriptError,
    UnknownOddsPolicyError,
    InvalidPointError,
)
from .payouts import ODDS_POLICIES, odds_multiplier, odds_payout
from .report import append_results_csv, quantile, quantiles
from .trial import TrialResult, run_trial, run_trials
from .wagers import LineWager, PointWager

__version__ = "0.3.0"

__all__ = [
    # Configuration
    "StakingPolicy",
    "TrialConfig",
    "build_config",
    "load_config_file",
    # Dice
    "RandomDice",
    "ScriptedDice",
    "RollLog",
    "load_roll_script",
    # Engine
    "EngineState",
    "StepResult",
    "LineWager",
    "PointWager",
    "opening_state",
    "step",
    "is_busted",
    # Payouts
    "ODDS_POLICIES",
    "odds_multiplier",
    "odds_payout",
    # Trials and reporting
    "TrialResult",
    "run_trial",
    "run_trials",
    "append_results_csv",
    "quantile",
    "quantiles",
    # Errors
    "CrapsSimOddsError",
    "ConfigError",
    "RollScriptError",
    "UnknownOddsPolicyError",
    "InvalidPointError",
    # Package version
    "__version__",
]
