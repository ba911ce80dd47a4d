"""
report.py
Order-statistic quantiles over trial results, console tables, and the
results CSV (append rows, summarize by label).
"""

from __future__ import annotations

import csv
import logging
import math
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import ConfigError

log = logging.getLogger("CSO.Report")

DEFAULT_QUANTILES: Tuple[float, ...] = (0.0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0)
CSV_FIELDS = ["rolls", "max_bankroll", "label"]


def quantile_index(n: int, q: float) -> int:
    """Nearest-rank index into a sorted array of ``n`` values: floor(q * (n - 1))."""
    if n < 1:
        raise ValueError("quantile of an empty sample")
    if not 0.0 <= q <= 1.0:
        raise ValueError(f"quantile must be within [0, 1], got {q}")
    return int(math.floor(q * (n - 1)))


def quantiles(values: Iterable[int], qs: Sequence[float] = DEFAULT_QUANTILES) -> "OrderedDict[float, int]":
    """Sort once and pick the order statistic for every requested quantile."""
    ordered = np.sort(np.asarray(list(values), dtype=np.int64))
    out: "OrderedDict[float, int]" = OrderedDict()
    for q in qs:
        out[q] = int(ordered[quantile_index(len(ordered), q)])
    return out


def quantile(values: Iterable[int], q: float) -> int:
    return quantiles(values, (q,))[q]


def format_quantile_rows(title: str, table: Dict[float, int]) -> str:
    lines = [f"{title}:"]
    for q, v in table.items():
        lines.append(f"{'q' + format(q, 'g'):>10}: {v:>10}")
    return "\n".join(lines)


def format_quantile_table(title: str, values: Iterable[int], qs: Sequence[float] = DEFAULT_QUANTILES) -> str:
    return format_quantile_rows(title, quantiles(values, qs))


def append_results_csv(path: Optional[str | Path], results: Sequence[Any], label: Optional[str]) -> int:
    """
    Append one ``rolls,max_bankroll,label`` row per trial result.
    The header goes in only when the file is missing or empty.
    Returns the number of rows written (0 when skipped for lack of a label).
    """
    if path is None:
        return 0
    if not label:
        log.warning("CSV output %s requested without a label; skipping", path)
        return 0

    path = Path(path)
    try:
        write_header = not path.exists() or path.stat().st_size == 0
        with path.open("a", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            if write_header:
                writer.writeheader()
            for r in results:
                writer.writerow({"rolls": r.rolls, "max_bankroll": r.peak_bankroll, "label": label})
    except OSError as e:
        raise ConfigError(f"cannot write CSV {path}: {e}") from e

    log.info("Appended %d rows to %s (label=%s)", len(results), path, label)
    return len(results)


def summarize_results_csv(path: str | Path, qs: Sequence[float] = DEFAULT_QUANTILES) -> List[Dict[str, Any]]:
    """
    Group a results CSV by label (first-seen order) and compute quantiles of
    rolls and max_bankroll for each group.
    """
    path = Path(path)
    groups: "OrderedDict[str, Tuple[List[int], List[int]]]" = OrderedDict()
    try:
        with path.open("r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            missing = [c for c in CSV_FIELDS if c not in (reader.fieldnames or [])]
            if missing:
                raise ConfigError(f"{path}: missing columns {', '.join(missing)}")
            for lineno, row in enumerate(reader, start=2):
                try:
                    rolls = int(row["rolls"])
                    peak = int(row["max_bankroll"])
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"{path}:{lineno}: bad row {row!r}") from e
                bucket = groups.setdefault(row["label"], ([], []))
                bucket[0].append(rolls)
                bucket[1].append(peak)
    except OSError as e:
        raise ConfigError(f"cannot read CSV {path}: {e}") from e

    summaries: List[Dict[str, Any]] = []
    for label, (rolls, peaks) in groups.items():
        summaries.append(
            {
                "label": label,
                "trials": len(rolls),
                "rolls": quantiles(rolls, qs),
                "max_bankroll": quantiles(peaks, qs),
            }
        )
    return summaries
