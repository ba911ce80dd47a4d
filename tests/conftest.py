"""Pytest configuration for crapssim-odds."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_repo_on_path() -> None:
    """Make the repository importable without an editable install."""
    repo_root = Path(__file__).resolve().parent.parent
    if repo_root.exists():
        path_str = str(repo_root)
        if path_str not in sys.path:
            sys.path.insert(0, path_str)


_ensure_repo_on_path()

from crapssim_odds.config import StakingPolicy  # noqa: E402
from crapssim_odds.logging_utils import reset_logging  # noqa: E402


@pytest.fixture
def policy() -> StakingPolicy:
    return StakingPolicy(initial_bankroll=300, min_bet=5, odds="123")


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers():
    """CLI tests call setup_logging(); don't leak handlers bound to captured streams."""
    yield
    reset_logging()
