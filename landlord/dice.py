"""
Two six-sided dice with a seedable source and a single-use override.
"""

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from landlord.exceptions import InvalidArgumentError


def _check_face(value: int) -> None:
    if not 1 <= value <= 6:
        raise InvalidArgumentError("Dice values must be between 1 and 6")


@dataclass(frozen=True)
class DiceRoll:
    """Result of rolling two dice."""

    d1: int
    d2: int

    def __post_init__(self) -> None:
        _check_face(self.d1)
        _check_face(self.d2)

    @property
    def total(self) -> int:
        return self.d1 + self.d2

    @property
    def is_double(self) -> bool:
        return self.d1 == self.d2

    def __repr__(self) -> str:
        return f"DiceRoll(d1={self.d1}, d2={self.d2}, total={self.total}, double={self.is_double})"


class Dice:
    """
    Dice source used by the engine.

    Rolls come from ``rng`` unless values were injected with ``set_next``;
    injected values are consumed by the next roll and then cleared.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self._next: Optional[Tuple[int, int]] = None

    def set_next(self, d1: int, d2: int) -> None:
        """Force the values of the next roll only."""
        _check_face(d1)
        _check_face(d2)
        self._next = (d1, d2)

    def clear_next(self) -> None:
        """Drop any forced values and go back to the generator."""
        self._next = None

    @property
    def has_forced_roll(self) -> bool:
        return self._next is not None

    def roll(self) -> DiceRoll:
        if self._next is not None:
            d1, d2 = self._next
            self._next = None
            return DiceRoll(d1, d2)
        return DiceRoll(self.rng.randint(1, 6), self.rng.randint(1, 6))
