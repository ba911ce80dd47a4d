"""Run configuration: staking policy, batch options, and config-file loading."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .errors import ConfigError
from .payouts import check_odds_policy

log = logging.getLogger("CSO.Config")

DEFAULT_BANKROLL = 300
DEFAULT_MIN_BET = 5
DEFAULT_ODDS = "123"
DEFAULT_TRIALS = 1

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}
_DEFAULT_STRINGS = {"default", "auto", "inherit"}

# Older config files spelled some keys differently.
DEPRECATED_KEY_MAP: Dict[str, str] = {
    "odds_multiplier": "odds",
    "n_trials": "trials",
    "bet_min": "min_bet",
    "initial_bankroll": "bankroll",
}

_BOOL_KEYS = ("adaptive_odds", "grow_bets", "odds_off_without_point", "yo_pays_double")
_INT_KEYS = ("bankroll", "min_bet", "trials", "max_rolls", "seed")
_PATH_KEYS = ("rolls_file", "log_rolls", "csv")
KNOWN_KEYS = frozenset(_BOOL_KEYS + _INT_KEYS + _PATH_KEYS + ("odds", "label"))


def coerce_flag(value: Any, *, default: Optional[bool] = None) -> Tuple[Optional[bool], bool]:
    """Coerce a loosely-typed flag value into ``True``/``False``/``None``.

    ``default`` is returned when ``value`` is ``None`` or explicitly requests
    inheritance (``"default"``/``"auto"``). The boolean in the return tuple
    indicates whether the coercion succeeded.
    """

    if isinstance(value, bool):
        return value, True
    if value is None:
        return default, True
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True, True
        if text in _FALSE_STRINGS:
            return False, True
        if default is not None and text in _DEFAULT_STRINGS:
            return default, True
        return None, False
    if isinstance(value, (int, float)):
        if value == 1:
            return True, True
        if value == 0:
            return False, True
        return None, False
    return None, False


def coerce_int(value: Any) -> Tuple[Optional[int], bool]:
    """Coerce an integer option; numeric strings such as ``"10"`` are accepted.

    Booleans and fractional values are rejected. ``None`` passes through.
    """

    if value is None:
        return None, True
    if isinstance(value, bool):
        return None, False
    if isinstance(value, int):
        return value, True
    if isinstance(value, str):
        try:
            return int(value.strip()), True
        except ValueError:
            return None, False
    return None, False


@dataclass(frozen=True)
class StakingPolicy:
    """
    How the gambler stakes: the odds table, the rule toggles, and the
    money the batch starts from. Immutable for the whole batch.
    """

    initial_bankroll: int = DEFAULT_BANKROLL
    min_bet: int = DEFAULT_MIN_BET
    odds: str = DEFAULT_ODDS
    adaptive_odds: bool = False
    grow_bets: bool = False
    odds_off_without_point: bool = False
    yo_pays_double: bool = False

    def __post_init__(self):
        if self.min_bet < 1:
            raise ConfigError("min_bet must be at least 1")
        if self.initial_bankroll < self.min_bet:
            raise ConfigError("bankroll must be >= min_bet")
        check_odds_policy(self.odds)


@dataclass(frozen=True)
class TrialConfig:
    policy: StakingPolicy = field(default_factory=StakingPolicy)
    trials: int = DEFAULT_TRIALS
    max_rolls: Optional[int] = None
    rolls_file: Optional[Path] = None
    roll_log: Optional[Path] = None
    csv_path: Optional[Path] = None
    label: Optional[str] = None
    seed: Optional[int] = None

    def __post_init__(self):
        if self.trials < 1:
            raise ConfigError("trials must be at least 1")
        if self.max_rolls is not None and self.max_rolls < 1:
            raise ConfigError("max_rolls must be at least 1 when set")


def normalize_deprecated_keys(values: Dict[str, Any]) -> Tuple[Dict[str, Any], List[Dict[str, str]]]:
    """Migrate legacy keys in place; the new key wins when both are present."""

    deprecations: List[Dict[str, str]] = []
    for old_key, new_key in DEPRECATED_KEY_MAP.items():
        if old_key not in values:
            continue
        if new_key in values:
            values.pop(old_key)
            deprecations.append({"old": old_key, "new": new_key, "action": "kept_new_dropped_old"})
        else:
            values[new_key] = values.pop(old_key)
            deprecations.append({"old": old_key, "new": new_key, "action": "migrated"})
    return values, deprecations


def load_config_file(path: str | Path) -> Dict[str, Any]:
    """Load run options from JSON, or YAML for .yaml/.yml files."""

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config file {p}: {e}") from e

    data: Any
    if p.suffix.lower() in {".yaml", ".yml"}:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {p}: {e}") from e
    else:
        try:
            data = json.loads(text or "{}")
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON in {p}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config root must be a JSON/YAML object (mapping).")

    values, deprecations = normalize_deprecated_keys(dict(data))
    for record in deprecations:
        log.warning("config key %r is deprecated; use %r", record["old"], record["new"])
    return values


def validate_config_values(values: Dict[str, Any]) -> Tuple[List[str], List[str]]:
    """Return (errors, warnings) for a mapping of run options."""

    errors: List[str] = []
    warnings: List[str] = []

    for key in sorted(values):
        if key not in KNOWN_KEYS:
            warnings.append(f"unknown key {key!r} (ignored)")

    for key in _BOOL_KEYS:
        if key in values:
            _, ok = coerce_flag(values[key])
            if not ok:
                errors.append(f"{key} must be a boolean")

    for key in _INT_KEYS:
        _, ok = coerce_int(values.get(key))
        if not ok:
            errors.append(f"{key} must be an integer")

    odds = values.get("odds")
    if odds is not None:
        try:
            check_odds_policy(str(odds))
        except ConfigError as e:
            errors.append(str(e))

    if values.get("csv") and not values.get("label"):
        warnings.append("csv is set without a label; CSV output will be skipped")

    if not errors:
        try:
            build_config(values)
        except ConfigError as e:
            errors.append(str(e))

    return errors, warnings


def _flag(values: Dict[str, Any], key: str) -> bool:
    normalized, ok = coerce_flag(values.get(key), default=False)
    if not ok:
        raise ConfigError(f"{key} must be a boolean, got {values.get(key)!r}")
    return bool(normalized)


def _int(values: Dict[str, Any], key: str, default: Optional[int]) -> Optional[int]:
    v = values.get(key)
    normalized, ok = coerce_int(v)
    if not ok:
        raise ConfigError(f"{key} must be an integer, got {v!r}")
    return default if normalized is None else normalized


def _path(values: Dict[str, Any], key: str) -> Optional[Path]:
    v = values.get(key)
    return Path(v) if v else None


def build_config(
    file_values: Optional[Dict[str, Any]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> TrialConfig:
    """
    Merge config-file values with overrides (CLI wins; ``None`` means unset)
    and build the immutable TrialConfig.
    """

    values: Dict[str, Any] = dict(file_values or {})
    for key, v in (overrides or {}).items():
        if v is not None:
            values[key] = v

    policy = StakingPolicy(
        initial_bankroll=_int(values, "bankroll", DEFAULT_BANKROLL),
        min_bet=_int(values, "min_bet", DEFAULT_MIN_BET),
        odds=str(values.get("odds") or DEFAULT_ODDS),
        adaptive_odds=_flag(values, "adaptive_odds"),
        grow_bets=_flag(values, "grow_bets"),
        odds_off_without_point=_flag(values, "odds_off_without_point"),
        yo_pays_double=_flag(values, "yo_pays_double"),
    )
    label = values.get("label")
    return TrialConfig(
        policy=policy,
        trials=_int(values, "trials", DEFAULT_TRIALS),
        max_rolls=_int(values, "max_rolls", None),
        rolls_file=_path(values, "rolls_file"),
        roll_log=_path(values, "log_rolls"),
        csv_path=_path(values, "csv"),
        label=str(label) if label else None,
        seed=_int(values, "seed", None),
    )
