"""
Board square definitions and types.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from landlord.config import DEFAULT_CONFIG, GameConfig, percent_round
from landlord.exceptions import GameStateError, InvalidArgumentError

if TYPE_CHECKING:
    from landlord.dice import DiceRoll
    from landlord.player import PlayerState


class SquareKind(Enum):
    """Types of squares on the board. Fixed for the lifetime of a game."""

    PLAIN = "plain"
    CHANCE = "chance"
    GO_TO_JAIL = "go_to_jail"
    CASH_DELTA = "cash_delta"
    STREET = "street"
    COMPANY = "company"


class Square:
    """Base class for a board square."""

    def __init__(self, index: int, name: str, kind: SquareKind):
        if index < 0:
            raise InvalidArgumentError(f"Square index must be >= 0, got {index}")
        self.index = index
        self.name = name
        self.kind = kind

    @property
    def is_ownable(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', index={self.index})"


class PlainSquare(Square):
    """Start, jail (just visiting), parking: landing has no effect."""

    def __init__(self, index: int, name: str):
        super().__init__(index, name, SquareKind.PLAIN)


class ChanceSquare(Square):
    """Landing draws a card from the deck."""

    def __init__(self, index: int, name: str = "Chance"):
        super().__init__(index, name, SquareKind.CHANCE)


class GoToJailSquare(Square):
    """Landing sends the player straight to jail."""

    def __init__(self, index: int, name: str = "Go To Jail"):
        super().__init__(index, name, SquareKind.GO_TO_JAIL)


class MoneySquare(Square):
    """Positive amount pays the player, negative amount is a tax to the bank."""

    def __init__(self, index: int, name: str, amount: int):
        super().__init__(index, name, SquareKind.CASH_DELTA)
        self.amount = amount


class OwnableSquare(Square):
    """A square that can be bought and charges rent to visitors."""

    def __init__(self, index: int, name: str, kind: SquareKind, price: int):
        super().__init__(index, name, kind)
        if price < 0:
            raise InvalidArgumentError(f"price must be >= 0, got {price}")
        self.price = price
        self.owner: Optional[PlayerState] = None

    @property
    def is_ownable(self) -> bool:
        return True

    def has_owner(self) -> bool:
        return self.owner is not None

    def is_owned_by(self, player: PlayerState) -> bool:
        return self.owner is player

    def set_owner(self, player: Optional[PlayerState]) -> None:
        self.owner = player

    def remove_owner(self, player: PlayerState) -> None:
        """Return the square to the bank if ``player`` is its current owner."""
        if self.owner is player:
            self.owner = None

    def total_investment(self) -> int:
        """Everything the current owner has spent on this square."""
        raise NotImplementedError


class StreetSquare(OwnableSquare):
    """A street that takes up to four houses plus a hotel."""

    def __init__(self, index: int, name: str, price: int, config: GameConfig = DEFAULT_CONFIG):
        super().__init__(index, name, SquareKind.STREET, price)
        self.houses = 0
        self.has_hotel = False
        self._config = config

    @property
    def house_cost(self) -> int:
        return percent_round(self.price, self._config.house_cost_percent)

    @property
    def hotel_cost(self) -> int:
        return percent_round(self.price, self._config.hotel_cost_percent)

    def can_build_house(self) -> bool:
        return self.houses < self._config.max_houses

    def can_build_hotel(self) -> bool:
        # A hotel needs at least one house underneath it.
        return self.houses >= 1 and not self.has_hotel

    def build_house(self) -> None:
        if not self.can_build_house():
            raise GameStateError(f"Cannot build more houses on {self.name}")
        self.houses += 1

    def build_hotel(self) -> None:
        if not self.can_build_hotel():
            raise GameStateError(f"Cannot build a hotel on {self.name}")
        self.has_hotel = True

    def remove_owner(self, player: PlayerState) -> None:
        if self.owner is player:
            self.houses = 0
            self.has_hotel = False
            self.owner = None

    def total_investment(self) -> int:
        if self.owner is None:
            return 0
        hotel = self.hotel_cost if self.has_hotel else 0
        return self.price + self.houses * self.house_cost + hotel

    def rent(self) -> int:
        """
        Rent owed by a visitor.

        base (10% of price) + houses * per-house (15%) + hotel (30%),
        each term rounded half up on its own.
        """
        config = self._config
        base = percent_round(self.price, config.base_rent_percent)
        per_house = percent_round(self.price, config.house_rent_percent)
        hotel = percent_round(self.price, config.hotel_rent_percent) if self.has_hotel else 0
        return base + per_house * self.houses + hotel


class CompanySquare(OwnableSquare):
    """A company: no construction, rent scales with the last dice roll."""

    def __init__(self, index: int, name: str, price: int, multiplier: int):
        super().__init__(index, name, SquareKind.COMPANY, price)
        if multiplier <= 0:
            raise InvalidArgumentError(f"multiplier must be positive, got {multiplier}")
        self.multiplier = multiplier

    def total_investment(self) -> int:
        return self.price if self.owner is not None else 0

    def rent(self, last_roll: Optional[DiceRoll]) -> int:
        """multiplier * dice total, or 0 when nobody has rolled this turn."""
        return self.multiplier * last_roll.total if last_roll is not None else 0
