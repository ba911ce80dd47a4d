from __future__ import annotations

import argparse
import logging
import os
import sys
import traceback
from typing import Any, Dict, List, Optional

from . import __version__ as CSO_VERSION
from .config import build_config, load_config_file, validate_config_values
from .errors import ConfigError
from .logging_utils import setup_logging
from .payouts import ODDS_POLICIES
from .report import (
    append_results_csv,
    format_quantile_rows,
    format_quantile_table,
    summarize_results_csv,
)
from .trial import run_trials

log = logging.getLogger("crapssim-odds")


# ------------------------------- Helpers ------------------------------------ #


def _fail(msg: str | Exception) -> int:
    log.error("%s", msg)
    print(f"failed: {msg}", file=sys.stderr)
    return 2


def _true_or_none(value: bool) -> Optional[bool]:
    """store_true flags only override the config file when given."""
    return True if value else None


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "trials": args.n_trials,
        "bankroll": args.bankroll,
        "min_bet": args.min_bet,
        "odds": args.odds,
        "adaptive_odds": _true_or_none(args.adaptive_odds),
        "grow_bets": _true_or_none(args.grow_bets),
        "odds_off_without_point": _true_or_none(args.odds_off_without_point),
        "yo_pays_double": _true_or_none(args.yo_pays_double),
        "max_rolls": args.max_rolls,
        "rolls_file": args.rolls_file,
        "log_rolls": args.log_rolls,
        "csv": args.csv,
        "label": args.label,
        "seed": args.seed,
    }


# --------------------------------- Run -------------------------------------- #


def run(args: argparse.Namespace) -> int:
    try:
        file_values = load_config_file(args.config) if args.config else {}
        config = build_config(file_values, _cli_overrides(args))
        results = run_trials(config)
    except ConfigError as e:
        return _fail(e)

    if len(results) > 1:
        print(format_quantile_table("roll-count stats", [r.rolls for r in results]))
        print(format_quantile_table("peak-bankroll stats", [r.peak_bankroll for r in results]))
    else:
        r = results[0]
        print(f"RESULT: rolls={r.rolls} max_bankroll={r.peak_bankroll}")

    if config.csv_path is not None:
        try:
            append_results_csv(config.csv_path, results, config.label)
        except ConfigError as e:
            return _fail(e)
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    try:
        return run(args)
    except Exception:
        if os.environ.get("CRAPSSIM_ODDS_DEBUG", "0").lower() in ("1", "true", "yes"):
            print("\n--- CSO DEBUG TRACEBACK ---", flush=True)
            traceback.print_exc()
            print("--- END CSO DEBUG ---\n", flush=True)
        raise


def _cmd_report(args: argparse.Namespace) -> int:
    try:
        summaries = summarize_results_csv(args.csv)
    except ConfigError as e:
        return _fail(e)

    if not summaries:
        print(f"{args.csv}: no rows")
        return 0
    for s in summaries:
        print(f"== {s['label']} ({s['trials']} trials)")
        print(format_quantile_rows("roll-count stats", s["rolls"]))
        print(format_quantile_rows("peak-bankroll stats", s["max_bankroll"]))
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    try:
        values = load_config_file(args.config)
    except ConfigError as e:
        return _fail(e)

    errors, warnings = validate_config_values(values)
    for w in warnings:
        print(f"warning: {w}")
    if errors:
        print("failed validation:", file=sys.stderr)
        for e in errors:
            print(f"- {e}", file=sys.stderr)
        return 2
    print("OK: config is valid")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crapssim-odds",
        description="Simulate pass-line/come betting with odds over many trials",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase verbosity (use -vv for every roll)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {CSO_VERSION}")

    sub = parser.add_subparsers(dest="subcommand", required=False)

    # run
    p_run = sub.add_parser("run", help="Run a batch of trials")
    p_run.add_argument("--config", help="JSON or YAML file with run options (flags override it)")
    p_run.add_argument("--n-trials", dest="n_trials", type=int, help="Number of trials (default 1)")
    p_run.add_argument("--bankroll", type=int, help="Initial bankroll (default 300)")
    p_run.add_argument("--min-bet", dest="min_bet", type=int, help="Minimum wager unit (default 5)")
    p_run.add_argument(
        "--odds",
        choices=list(ODDS_POLICIES),
        help="Odds multiplier table: 123 (1-2-3x), 345 (3-4-5x), 10 (flat 10x)",
    )
    p_run.add_argument(
        "--adaptive-odds",
        dest="adaptive_odds",
        action="store_true",
        help="Pick the odds table from bankroll / initial bankroll",
    )
    p_run.add_argument(
        "--grow-bets",
        dest="grow_bets",
        action="store_true",
        help="Double the flat stake for each doubling of the initial bankroll",
    )
    p_run.add_argument(
        "--odds-off-without-point",
        dest="odds_off_without_point",
        action="store_true",
        help="Come odds are off on the come-out roll (refunded on a seven)",
    )
    p_run.add_argument(
        "--yo-pays-double",
        dest="yo_pays_double",
        action="store_true",
        help="An 11 on an undecided wager returns twice the stake instead of the stake",
    )
    p_run.add_argument("--max-rolls", dest="max_rolls", type=int, help="Stop each trial after N rolls")
    p_run.add_argument("--rolls-file", dest="rolls_file", help="Replay rolls from this file, cyclically")
    p_run.add_argument("--log-rolls", dest="log_rolls", help="Write every roll to this file")
    p_run.add_argument("--csv", help="Append rolls,max_bankroll,label rows to this CSV")
    p_run.add_argument("--label", help="Label for CSV rows (required for --csv)")
    p_run.add_argument("--seed", type=int, help="Seed the random dice for reproducibility")
    p_run.set_defaults(func=_cmd_run)

    # report
    p_rep = sub.add_parser("report", help="Per-label quantiles from a results CSV")
    p_rep.add_argument("csv", help="Path to a CSV written by `run --csv`")
    p_rep.set_defaults(func=_cmd_report)

    # validate
    p_val = sub.add_parser("validate", help="Validate a run config file (JSON or YAML)")
    p_val.add_argument("config", help="Path to config file")
    p_val.set_defaults(func=_cmd_validate)

    return parser


def main(argv: List[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not hasattr(args, "func") or args.func is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
