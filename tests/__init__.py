from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple


def write_roll_script(path: Path, rolls: Iterable[Tuple[int, int]]) -> Path:
    """Write rolls one per line as ``d1 d2`` and return the path."""

    path.write_text("".join(f"{a} {b}\n" for a, b in rolls), encoding="utf-8")
    return path
