"""
Game rule configuration.
"""

from dataclasses import dataclass
from typing import Optional

from landlord.exceptions import ConfigurationError


@dataclass
class GameConfig:
    """Rule constants for a Landlord game.

    Percentages are whole numbers so that every derived amount stays an
    integer; see ``percent_round`` and ``percent_floor``.
    """

    pass_start_bonus: int = 200
    buyback_percent: int = 90

    max_houses: int = 4
    house_cost_percent: int = 50
    hotel_cost_percent: int = 100

    base_rent_percent: int = 10
    house_rent_percent: int = 15
    hotel_rent_percent: int = 30

    min_players: int = 2
    max_players: int = 6

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.pass_start_bonus < 0:
            raise ConfigurationError("pass_start_bonus must be >= 0")
        if not 0 <= self.buyback_percent <= 100:
            raise ConfigurationError("buyback_percent must be between 0 and 100")
        if self.max_houses < 1:
            raise ConfigurationError("max_houses must be >= 1")
        for name in (
            "house_cost_percent",
            "hotel_cost_percent",
            "base_rent_percent",
            "house_rent_percent",
            "hotel_rent_percent",
        ):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be >= 0")
        if self.min_players < 1 or self.max_players < self.min_players:
            raise ConfigurationError(
                f"Invalid player bounds: {self.min_players}..{self.max_players}"
            )


def percent_round(amount: int, percent: int) -> int:
    """Percentage of a non-negative amount, rounded half up."""
    return (amount * percent + 50) // 100


def percent_floor(amount: int, percent: int) -> int:
    """Percentage of a non-negative amount, rounded down."""
    return (amount * percent) // 100


DEFAULT_CONFIG = GameConfig()
