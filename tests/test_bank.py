"""
Tests for the bank and its transaction log.
"""

import pytest

from landlord.exceptions import InsufficientFundsError, InvalidArgumentError
from landlord.money import BANK, Bank
from landlord.player import PlayerColor


def test_player_pays_bank(bank, alice):
    bank.transfer(alice, None, 120)

    assert alice.cash == 380
    assert bank.cash == 200120

    [tx] = bank.drain_transactions()
    assert tx.source == "Alice"
    assert tx.source_color == PlayerColor.RED
    assert tx.target == BANK
    assert tx.target_color is None
    assert tx.amount == 120
    assert tx.source_balance_after == 380
    assert tx.target_balance_after == 200120


def test_bank_pays_player(bank, alice):
    bank.transfer(None, alice, 200)

    assert alice.cash == 700
    assert bank.cash == 199800

    [tx] = bank.drain_transactions()
    assert tx.source == BANK
    assert tx.target == "Alice"
    assert tx.source_balance_after == 199800
    assert tx.target_balance_after == 700


def test_player_pays_player(bank, alice, bob):
    bank.transfer(alice, bob, 75)

    assert alice.cash == 425
    assert bob.cash == 575
    assert bank.cash == 200000

    [tx] = bank.drain_transactions()
    assert (tx.source, tx.target, tx.amount) == ("Alice", "Bob", 75)
    assert (tx.source_balance_after, tx.target_balance_after) == (425, 575)


def test_zero_amount_is_noop(bank, alice):
    bank.transfer(alice, None, 0)
    assert alice.cash == 500
    assert bank.drain_transactions() == []


def test_invalid_transfers(bank, alice):
    with pytest.raises(InvalidArgumentError):
        bank.transfer(alice, None, -1)
    with pytest.raises(InvalidArgumentError):
        bank.transfer(None, None, 10)


def test_bank_cannot_overpay(alice):
    bank = Bank(100)
    with pytest.raises(InsufficientFundsError):
        bank.transfer(None, alice, 101)
    assert alice.cash == 500
    assert bank.cash == 100


def test_negative_initial_cash():
    with pytest.raises(InvalidArgumentError):
        Bank(-1)


def test_drain_clears_log(bank, alice, bob):
    bank.transfer(alice, bob, 10)
    bank.transfer(bob, None, 5)

    assert [t.amount for t in bank.drain_transactions()] == [10, 5]
    assert bank.drain_transactions() == []
