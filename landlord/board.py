"""
The game board: a closed loop of indexed squares.
"""

from typing import Iterator, List, Sequence, Tuple

from landlord.exceptions import ConfigurationError, InvalidArgumentError
from landlord.spaces import CompanySquare, OwnableSquare, Square, StreetSquare


class Board:
    """Immutable ordered sequence of squares plus the jail location."""

    def __init__(self, squares: Sequence[Square], jail_index: int):
        if not squares:
            raise ConfigurationError("Board must have at least one square")
        self._squares: Tuple[Square, ...] = tuple(squares)
        for position, square in enumerate(self._squares):
            if square.index != position:
                raise ConfigurationError(
                    f"Square '{square.name}' has index {square.index} but sits at position {position}"
                )
        if not 0 <= jail_index < len(self._squares):
            raise ConfigurationError(f"Jail index {jail_index} is outside the board")
        self._jail_index = jail_index

    @property
    def size(self) -> int:
        return len(self._squares)

    @property
    def jail_index(self) -> int:
        return self._jail_index

    @property
    def squares(self) -> Tuple[Square, ...]:
        return self._squares

    def advance(self, from_index: int, steps: int) -> int:
        """Position reached moving ``steps`` squares forward, wrapping at the end."""
        if not 0 <= from_index < self.size:
            raise InvalidArgumentError(f"Invalid from position: {from_index}")
        if steps < 0:
            raise InvalidArgumentError("steps must be non-negative")
        return (from_index + steps) % self.size

    def square_at(self, index: int) -> Square:
        if not 0 <= index < self.size:
            raise InvalidArgumentError(f"Index outside the board: {index}")
        return self._squares[index]

    def ownables(self) -> Iterator[OwnableSquare]:
        """All ownable squares in index order."""
        return (s for s in self._squares if isinstance(s, OwnableSquare))

    def streets(self) -> List[StreetSquare]:
        return [s for s in self._squares if isinstance(s, StreetSquare)]

    def companies(self) -> List[CompanySquare]:
        return [s for s in self._squares if isinstance(s, CompanySquare)]

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"Board(size={self.size}, jail_index={self.jail_index})"
