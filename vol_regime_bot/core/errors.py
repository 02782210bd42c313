"""Exceptions raised by the signal engine and config layer."""


class VolBotError(Exception):
    """Base class for bot errors."""


class EmptyInputError(VolBotError, ValueError):
    """No candles were supplied; no signal can be produced."""


class InvalidConfigError(VolBotError, ValueError):
    """Strategy or runtime configuration is outside its valid domain."""
