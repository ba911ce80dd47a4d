"""
Module entrypoint so tests can run:

  python -m crapssim_odds run --n-trials 100
"""
from __future__ import annotations

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
