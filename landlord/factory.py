"""
Board and deck definitions read from CSV files.
"""

import csv
import logging
import random
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TypeVar, Union

from landlord.board import Board
from landlord.cards import Card, CardType, Deck
from landlord.config import DEFAULT_CONFIG, GameConfig
from landlord.exceptions import ConfigurationError, InvalidArgumentError
from landlord.spaces import (
    ChanceSquare,
    CompanySquare,
    GoToJailSquare,
    MoneySquare,
    PlainSquare,
    Square,
    StreetSquare,
)

logger = logging.getLogger(__name__)

BOARD_HEADER = ("index", "type", "name", "price", "multiplier", "value")
DECK_HEADER = ("index", "type", "value")

PLAIN_TYPES = {"START", "JAIL", "PARKING"}

T = TypeVar("T")
PathLike = Union[str, Path]


def parse_int(text: str) -> int:
    """Blank numeric fields count as 0."""
    text = text.strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        raise ConfigurationError(f"Not an integer: {text!r}") from None


def read_rows(path: PathLike, header: Sequence[str], parse_row: Callable[[List[str]], T]) -> List[T]:
    """
    Read a CSV file with a fixed header and turn every row into an item.

    Blank lines are skipped. Every other row must have exactly as many
    fields as the header.
    """
    path = Path(path)
    try:
        with path.open(newline="", encoding="utf-8") as f:
            reader = csv.reader(f)
            first = next(reader, None)
            if first is None:
                raise ConfigurationError(f"Empty CSV file: {path}")
            if [c.strip().lower() for c in first] != list(header):
                raise ConfigurationError(
                    f"Invalid header in {path}: expected {','.join(header)}, got {','.join(first)}"
                )

            items = []
            for row in reader:
                if not row or all(not c.strip() for c in row):
                    continue
                if len(row) != len(header):
                    raise ConfigurationError(f"Invalid row in {path} (line {reader.line_num}): {row}")
                items.append(parse_row(row))
            return items
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e


class _BoardBuilder:
    def __init__(self, config: GameConfig):
        self.config = config
        self.jail_index: Optional[int] = None

    def parse(self, row: List[str]) -> Square:
        index = parse_int(row[0])
        kind = row[1].strip().upper()
        name = row[2].strip()
        price = parse_int(row[3])
        multiplier = parse_int(row[4])
        value = parse_int(row[5])

        try:
            if kind in PLAIN_TYPES:
                if kind == "JAIL":
                    if self.jail_index is not None:
                        raise ConfigurationError(f"Second JAIL row at index {index}")
                    self.jail_index = index
                return PlainSquare(index, name)
            if kind == "STREET":
                return StreetSquare(index, name, price, config=self.config)
            if kind == "COMPANY":
                return CompanySquare(index, name, price, multiplier)
            if kind == "MONEY":
                return MoneySquare(index, name, value)
            if kind == "GOTOJAIL":
                return GoToJailSquare(index, name)
            if kind == "CHANCE":
                return ChanceSquare(index, name)
        except InvalidArgumentError as e:
            raise ConfigurationError(f"Invalid square at index {index}: {e}") from e

        raise ConfigurationError(f"Unknown square type: {row[1]!r}")


def load_board(path: PathLike, config: GameConfig = DEFAULT_CONFIG) -> Board:
    """Build a board from ``index,type,name,price,multiplier,value`` rows."""
    builder = _BoardBuilder(config)
    squares = read_rows(path, BOARD_HEADER, builder.parse)

    if builder.jail_index is None:
        raise ConfigurationError(f"No JAIL square in board definition {path}")

    board = Board(squares, builder.jail_index)
    logger.debug(f"Loaded board with {board.size} squares from {path}")
    return board


def _parse_card(row: List[str]) -> Card:
    card_id = parse_int(row[0])
    name = row[1].strip().upper()
    try:
        card_type = CardType[name]
    except KeyError:
        raise ConfigurationError(f"Unknown card type: {row[1]!r}") from None
    return Card(card_id, card_type, parse_int(row[2]))


def load_cards(path: PathLike) -> List[Card]:
    """Cards from ``index,type,value`` rows, in file order."""
    cards = read_rows(path, DECK_HEADER, _parse_card)
    if not cards:
        raise ConfigurationError(f"Empty deck definition: {path}")
    return cards


def load_deck(path: PathLike, rng: Optional[random.Random] = None) -> Deck:
    """Build and shuffle a deck from its CSV definition."""
    deck = Deck(load_cards(path))
    deck.shuffle(rng)
    logger.debug(f"Loaded deck with {len(deck)} cards from {path}")
    return deck
