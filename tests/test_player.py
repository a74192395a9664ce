"""
Tests for per-player state.
"""

import pytest

from landlord.exceptions import InsufficientFundsError, InvalidArgumentError
from landlord.player import PlayerColor, PlayerState


def test_new_player(alice):
    assert alice.player_id == "P1"
    assert alice.name == "Alice"
    assert alice.color == PlayerColor.RED
    assert alice.cash == 500
    assert alice.position == 0
    assert not alice.in_jail
    assert alice.release_cards == 0
    assert alice.properties == []
    assert alice.alive
    assert not alice.is_bankrupt


def test_identity_is_read_only(alice):
    with pytest.raises(AttributeError):
        alice.name = "Eve"
    with pytest.raises(AttributeError):
        alice.player_id = "P9"


def test_credit_and_debit(alice):
    alice.credit(50)
    assert alice.cash == 550
    alice.debit(550)
    assert alice.cash == 0


def test_debit_never_goes_negative(alice):
    with pytest.raises(InsufficientFundsError):
        alice.debit(501)
    assert alice.cash == 500


def test_negative_amounts_rejected(alice):
    with pytest.raises(InvalidArgumentError):
        alice.credit(-1)
    with pytest.raises(InvalidArgumentError):
        alice.debit(-1)
    with pytest.raises(InvalidArgumentError):
        alice.can_afford(-5)


def test_shortfall(alice):
    assert alice.can_afford(500)
    assert not alice.can_afford(501)
    assert alice.shortfall(300) == 0
    assert alice.shortfall(650) == 150


def test_invalid_construction():
    with pytest.raises(InvalidArgumentError):
        PlayerState("", "Nobody", PlayerColor.GRAY, 100)
    with pytest.raises(InvalidArgumentError):
        PlayerState("P1", "Alice", PlayerColor.GRAY, -100)


def test_move_to(alice):
    alice.move_to(5)
    assert alice.position == 5
    with pytest.raises(InvalidArgumentError):
        alice.move_to(-1)


def test_release_cards(alice):
    assert not alice.consume_release_card()

    alice.grant_release_card()
    alice.grant_release_card()
    assert alice.release_cards == 2

    assert alice.consume_release_card()
    assert alice.release_cards == 1


def test_properties_keep_order_without_duplicates(alice, board):
    street, company = board.square_at(5), board.square_at(4)
    alice.add_property(street)
    alice.add_property(company)
    alice.add_property(street)

    assert alice.property_indices() == [5, 4]

    alice.remove_property(street)
    assert alice.property_indices() == [4]


def test_mark_bankrupt(alice):
    alice.mark_bankrupt()
    assert not alice.alive
    assert alice.is_bankrupt
    assert alice.cash == 0
