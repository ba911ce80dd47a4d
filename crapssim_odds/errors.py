class CrapsSimOddsError(Exception):
    """Base class for crapssim-odds errors."""


class ConfigError(CrapsSimOddsError, ValueError):
    """Raised when a run is misconfigured; fatal, never retried."""


class RollScriptError(ConfigError):
    """Raised when a scripted-roll file is missing, unreadable, or malformed."""


class UnknownOddsPolicyError(ConfigError):
    """Raised for an odds policy name outside ODDS_POLICIES."""


class InvalidPointError(CrapsSimOddsError, LookupError):
    """Raised when a payout lookup is asked about a number that is not a point."""
