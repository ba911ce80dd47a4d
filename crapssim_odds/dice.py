"""
Dice sources: fresh random rolls, or cyclic replay of a recorded script,
optionally echoed to a roll log.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple

from .errors import ConfigError, RollScriptError

log = logging.getLogger("CSO.Dice")

Roll = Tuple[int, int]

FACES = range(1, 7)


class DiceSource(ABC):
    """Anything that can hand the engine its next roll."""

    @abstractmethod
    def roll(self) -> Roll:
        """Return (die1, die2), each 1-6."""


class RandomDice(DiceSource):
    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def roll(self) -> Roll:
        return (self._random.randint(1, 6), self._random.randint(1, 6))

    def __repr__(self) -> str:
        return f"RandomDice(seed={self.seed})"


class ScriptedDice(DiceSource):
    """
    Replays a fixed sequence of rolls, wrapping to the start when it runs out.

    The sequence is copied into a tuple and never changes; only the index moves.
    """

    def __init__(self, rolls: Sequence[Roll]) -> None:
        if not rolls:
            raise RollScriptError("roll script is empty")
        self.rolls: Tuple[Roll, ...] = tuple((int(a), int(b)) for a, b in rolls)
        self.index = 0

    def roll(self) -> Roll:
        r = self.rolls[self.index]
        self.index = (self.index + 1) % len(self.rolls)
        return r

    def reset(self) -> None:
        self.index = 0

    def __len__(self) -> int:
        return len(self.rolls)

    def __repr__(self) -> str:
        return f"ScriptedDice(rolls={len(self.rolls)}, index={self.index})"


def parse_roll_line(line: str) -> Roll:
    parts = line.split()
    if len(parts) != 2:
        raise ValueError(f"expected two dice, got {len(parts)} fields")
    d1, d2 = int(parts[0]), int(parts[1])
    if d1 not in FACES or d2 not in FACES:
        raise ValueError(f"die faces must be 1-6, got {d1} {d2}")
    return d1, d2


def load_roll_script(path: str | Path) -> List[Roll]:
    """
    Read a roll script: one roll per line as two whitespace-separated faces.
    Blank lines and lines starting with '#' are skipped.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise RollScriptError(f"cannot read roll script {p}: {e}") from e

    rolls: List[Roll] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            rolls.append(parse_roll_line(line))
        except ValueError as e:
            raise RollScriptError(f"{p}:{lineno}: bad roll {line!r}: {e}") from e

    if not rolls:
        raise RollScriptError(f"roll script {p} contains no rolls")
    log.info("Loaded %d scripted rolls from %s", len(rolls), p)
    return rolls


class RollLog:
    """Append-only roll log; the file is truncated when opened."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._fh: Optional[TextIO] = None
        self.rolls_written = 0

    def _handle(self) -> TextIO:
        if self._fh is None:
            try:
                self._fh = self.path.open("w", encoding="utf-8")
            except OSError as e:
                raise ConfigError(f"cannot open roll log {self.path}: {e}") from e
        return self._fh

    def open(self) -> "RollLog":
        self._handle()
        return self

    def write(self, roll: Roll) -> None:
        fh = self._handle()
        try:
            fh.write(f"{roll[0]} {roll[1]}\n")
        except OSError as e:
            raise ConfigError(f"cannot write roll log {self.path}: {e}") from e
        self.rolls_written += 1

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "RollLog":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()


class LoggedDice(DiceSource):
    """Wraps a source so every roll it produces lands in a RollLog first."""

    def __init__(self, source: DiceSource, roll_log: RollLog) -> None:
        self.source = source
        self.roll_log = roll_log

    def roll(self) -> Roll:
        r = self.source.roll()
        self.roll_log.write(r)
        return r

    def __repr__(self) -> str:
        return f"LoggedDice({self.source!r} -> {self.roll_log.path})"


def make_dice(
    rolls_file: Optional[Path] = None,
    seed: Optional[int] = None,
    roll_log: Optional[RollLog] = None,
) -> DiceSource:
    source: DiceSource
    if rolls_file is not None:
        source = ScriptedDice(load_roll_script(rolls_file))
    else:
        source = RandomDice(seed)
    if roll_log is not None:
        source = LoggedDice(source, roll_log)
    return source
