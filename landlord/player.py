"""
Player state and management.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, List

from landlord.exceptions import InsufficientFundsError, InvalidArgumentError

if TYPE_CHECKING:
    from landlord.spaces import OwnableSquare


class PlayerColor(Enum):
    """Token colors available to players."""

    RED = "RED"
    BLUE = "BLUE"
    ORANGE = "ORANGE"
    YELLOW = "YELLOW"
    PURPLE = "PURPLE"
    GRAY = "GRAY"


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise InvalidArgumentError(f"amount must be >= 0, got {amount}")


class PlayerState:
    """Represents the complete state of a player in the game.

    Cash is only moved by ``Bank.transfer``; ownership only by
    ``EconomyService``. The engine moves the token and the jail flag.
    """

    def __init__(self, player_id: str, name: str, color: PlayerColor, starting_cash: int):
        if not player_id:
            raise InvalidArgumentError("player_id is required")
        if not name:
            raise InvalidArgumentError("name is required")
        _check_amount(starting_cash)
        self._player_id = player_id
        self._name = name
        self._color = PlayerColor(color)
        self.cash = starting_cash
        self.position = 0
        self.in_jail = False
        self.release_cards = 0
        self.properties: List[OwnableSquare] = []
        self.alive = True

    @property
    def player_id(self) -> str:
        return self._player_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def color(self) -> PlayerColor:
        return self._color

    @property
    def is_bankrupt(self) -> bool:
        return not self.alive

    # Money

    def credit(self, amount: int) -> None:
        _check_amount(amount)
        self.cash += amount

    def debit(self, amount: int) -> None:
        """Remove cash; never lets the balance go negative."""
        _check_amount(amount)
        if amount > self.cash:
            raise InsufficientFundsError(
                f"{self.name} cannot be debited {amount} with balance {self.cash}"
            )
        self.cash -= amount

    def can_afford(self, amount: int) -> bool:
        _check_amount(amount)
        return self.cash >= amount

    def shortfall(self, amount: int) -> int:
        """How much cash is missing to pay ``amount`` (0 if affordable)."""
        _check_amount(amount)
        return max(0, amount - self.cash)

    # Position and jail

    def move_to(self, index: int) -> None:
        if index < 0:
            raise InvalidArgumentError(f"index must be >= 0, got {index}")
        self.position = index

    def grant_release_card(self) -> None:
        self.release_cards += 1

    def consume_release_card(self) -> bool:
        """Spend one release card if the player holds any."""
        if self.release_cards > 0:
            self.release_cards -= 1
            return True
        return False

    # Holdings

    def add_property(self, prop: OwnableSquare) -> None:
        if prop not in self.properties:
            self.properties.append(prop)

    def remove_property(self, prop: OwnableSquare) -> None:
        if prop in self.properties:
            self.properties.remove(prop)

    def property_indices(self) -> List[int]:
        return [prop.index for prop in self.properties]

    def mark_bankrupt(self) -> None:
        """Take the player out of the game."""
        self.alive = False
        self.cash = 0

    def __repr__(self) -> str:
        return (
            f"PlayerState(id='{self.player_id}', name='{self.name}', "
            f"cash={self.cash}, position={self.position}, alive={self.alive})"
        )
