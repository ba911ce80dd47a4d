# tests/test_logging.py
import logging

import pytest

from crapssim_odds.logging_utils import PACKAGE_LOGGERS, level_for_verbosity, setup_logging


@pytest.mark.parametrize(
    "count, level",
    [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
)
def test_level_for_verbosity(count, level):
    assert level_for_verbosity(count) == level


def test_setup_logging_scopes_to_package_loggers():
    root = logging.getLogger()
    root_handlers = list(root.handlers)
    root_level = root.level

    loggers = setup_logging(1)

    assert [lg.name for lg in loggers] == list(PACKAGE_LOGGERS)
    assert root.handlers == root_handlers
    assert root.level == root_level
    assert logging.getLogger("CSO.Trial").getEffectiveLevel() == logging.INFO
    assert logging.getLogger("crapssim-odds").getEffectiveLevel() == logging.INFO


def test_setup_logging_is_idempotent():
    setup_logging(0)
    setup_logging(2)
    cso = logging.getLogger("CSO")
    marked = [h for h in cso.handlers if getattr(h, "_crapssim_odds_handler", False)]
    assert len(marked) == 1
    assert logging.getLogger("CSO.Dice").isEnabledFor(logging.DEBUG)


def test_roll_lines_only_at_debug(capsys):
    setup_logging(1)
    trial_log = logging.getLogger("CSO.Trial")
    trial_log.debug("i:1 roll:(1, 1)")
    trial_log.info("trial done")
    err = capsys.readouterr().err
    assert "trial done" in err
    assert "roll:(1, 1)" not in err
