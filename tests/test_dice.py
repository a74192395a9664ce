"""
Tests for dice rolls and the injectable dice source.
"""

import random

import pytest

from landlord.dice import Dice, DiceRoll
from landlord.exceptions import InvalidArgumentError


def test_every_valid_pair():
    """Sum is in [2, 12] and doubles are exactly the equal pairs."""
    for d1 in range(1, 7):
        for d2 in range(1, 7):
            roll = DiceRoll(d1, d2)
            assert 2 <= roll.total <= 12
            assert roll.total == d1 + d2
            assert roll.is_double == (d1 == d2)


@pytest.mark.parametrize("d1,d2", [(0, 3), (7, 1), (3, -2), (1, 7)])
def test_invalid_faces_rejected(d1, d2):
    with pytest.raises(InvalidArgumentError):
        DiceRoll(d1, d2)


def test_forced_roll_used_once():
    dice = Dice(random.Random(1))
    dice.set_next(6, 6)
    assert dice.has_forced_roll

    assert dice.roll() == DiceRoll(6, 6)
    assert not dice.has_forced_roll


def test_clear_forced_roll():
    dice = Dice(random.Random(1))
    expected = Dice(random.Random(1)).roll()

    dice.set_next(1, 1)
    dice.clear_next()
    assert dice.roll() == expected


def test_forced_roll_validates_values():
    dice = Dice()
    with pytest.raises(InvalidArgumentError):
        dice.set_next(0, 6)
    assert not dice.has_forced_roll


def test_seeded_source_reproducible():
    a = Dice(random.Random(99))
    b = Dice(random.Random(99))
    assert [a.roll() for _ in range(20)] == [b.roll() for _ in range(20)]
