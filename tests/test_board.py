"""
Tests for board navigation and construction.
"""

import pytest

from landlord.board import Board
from landlord.exceptions import ConfigurationError, InvalidArgumentError
from landlord.spaces import PlainSquare, SquareKind, StreetSquare


def test_advance_wraps_around(board):
    """Position after advance is (from + steps) mod size."""
    for start in range(board.size):
        for steps in range(0, 20):
            assert board.advance(start, steps) == (start + steps) % board.size


def test_advance_rejects_bad_arguments(board):
    with pytest.raises(InvalidArgumentError):
        board.advance(-1, 2)
    with pytest.raises(InvalidArgumentError):
        board.advance(board.size, 2)
    with pytest.raises(InvalidArgumentError):
        board.advance(0, -1)


def test_square_at(board):
    assert board.square_at(0).name == "Rua Zero"
    assert board.square_at(3).kind == SquareKind.PLAIN
    with pytest.raises(InvalidArgumentError):
        board.square_at(8)
    with pytest.raises(InvalidArgumentError):
        board.square_at(-1)


def test_read_only_properties(board):
    assert board.size == 8
    assert len(board) == 8
    assert board.jail_index == 3
    with pytest.raises(AttributeError):
        board.size = 10


def test_ownables_in_index_order(board):
    assert [s.index for s in board.ownables()] == [0, 4, 5]
    assert [s.index for s in board.streets()] == [0, 5]
    assert [s.index for s in board.companies()] == [4]


def test_square_repr_and_identity(board, config):
    assert repr(board.square_at(0)) == "StreetSquare(name='Rua Zero', index=0)"
    assert repr(board.square_at(4)) == "CompanySquare(name='Bus Company', index=4)"
    assert StreetSquare(0, "Rua Zero", 200, config=config) != board.square_at(0)


class TestBoardValidation:
    """Malformed boards fail at construction."""

    def test_empty_board(self):
        with pytest.raises(ConfigurationError):
            Board([], 0)

    def test_jail_outside_board(self):
        with pytest.raises(ConfigurationError):
            Board([PlainSquare(0, "Start"), PlainSquare(1, "Jail")], 2)

    def test_index_must_match_position(self):
        squares = [PlainSquare(0, "Start"), StreetSquare(2, "Rua", 100)]
        with pytest.raises(ConfigurationError):
            Board(squares, 0)

    def test_negative_square_index(self):
        with pytest.raises(InvalidArgumentError):
            PlainSquare(-1, "Nowhere")
