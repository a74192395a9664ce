"""
Custom exception hierarchy for the Landlord engine.

Programming errors and broken setup raise these; expected rule outcomes
(can't afford, already owned, already built) are returned as booleans
with a reason string instead.
"""


class LandlordError(Exception):
    """Base exception for all engine errors."""


class ConfigurationError(LandlordError):
    """Board, deck, players or rule constants are malformed."""


class SaveFormatError(ConfigurationError):
    """A saved game file could not be parsed."""


class GameStateError(LandlordError):
    """Operation is not legal in the current engine state."""


class InvalidArgumentError(LandlordError, ValueError):
    """An index or argument is outside its valid range."""


class InsufficientFundsError(LandlordError):
    """A debit was attempted against a balance that cannot cover it."""
