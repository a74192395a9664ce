"""Shared test fixtures for Landlord engine tests."""

import random

import pytest

from landlord.board import Board
from landlord.cards import Card, CardType, Deck
from landlord.config import GameConfig
from landlord.economy import EconomyService
from landlord.game import GameEngine
from landlord.money import Bank, EventLog
from landlord.player import PlayerColor, PlayerState
from landlord.schemas import PlayerRef
from landlord.spaces import (
    ChanceSquare,
    CompanySquare,
    GoToJailSquare,
    MoneySquare,
    PlainSquare,
    StreetSquare,
)

JAIL = 3

BOARD_CSV = """index,type,name,price,multiplier,value
0,STREET,Rua Zero,200,,
1,MONEY,Profit,,,100
2,CHANCE,Chance,,,
3,JAIL,Jail,,,
4,COMPANY,Bus Company,150,40,
5,STREET,Rua Cinco,100,,
6,GOTOJAIL,Go To Jail,,,
7,MONEY,Tax,,,-50
"""

DECK_CSV = """index,type,value
1,RECEIVE_BANK,100
2,PAY_BANK,50
3,GET_OUT_OF_JAIL,0
4,GO_TO_JAIL,0
5,PAY_ALL,20
6,RECEIVE_ALL,10
"""


@pytest.fixture
def config():
    """Default rules with a fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def board(config):
    """
    Eight squares, jail at index 3:
    0 street(200), 1 profit(+100), 2 chance, 3 jail,
    4 company(150, x40), 5 street(100), 6 go to jail, 7 tax(-50).
    """
    squares = [
        StreetSquare(0, "Rua Zero", 200, config=config),
        MoneySquare(1, "Profit", 100),
        ChanceSquare(2),
        PlainSquare(3, "Jail"),
        CompanySquare(4, "Bus Company", 150, 40),
        StreetSquare(5, "Rua Cinco", 100, config=config),
        GoToJailSquare(6),
        MoneySquare(7, "Tax", -50),
    ]
    return Board(squares, JAIL)


@pytest.fixture
def deck():
    """Unshuffled deck, top card first."""
    return Deck(
        [
            Card(1, CardType.RECEIVE_BANK, 100),
            Card(2, CardType.PAY_BANK, 50),
            Card(3, CardType.GET_OUT_OF_JAIL, 0),
            Card(4, CardType.GO_TO_JAIL, 0),
        ]
    )


@pytest.fixture
def bank():
    return Bank(200000)


@pytest.fixture
def event_log():
    return EventLog()


@pytest.fixture
def economy(bank, config, event_log):
    return EconomyService(bank, config, event_log)


@pytest.fixture
def alice():
    return PlayerState("P1", "Alice", PlayerColor.RED, 500)


@pytest.fixture
def bob():
    return PlayerState("P2", "Bob", PlayerColor.BLUE, 500)


@pytest.fixture
def carol():
    return PlayerState("P3", "Carol", PlayerColor.ORANGE, 500)


@pytest.fixture
def players(alice, bob, carol):
    return [alice, bob, carol]


@pytest.fixture
def engine(board, players, deck, economy, config, event_log):
    """Three-player engine on the small board, turn begun for Alice."""
    game = GameEngine(
        board,
        players,
        deck,
        economy,
        config=config,
        rng=random.Random(7),
        event_log=event_log,
    )
    game.begin_turn()
    return game


@pytest.fixture
def board_csv(tmp_path):
    path = tmp_path / "board.csv"
    path.write_text(BOARD_CSV)
    return path


@pytest.fixture
def deck_csv(tmp_path):
    path = tmp_path / "deck.csv"
    path.write_text(DECK_CSV)
    return path


@pytest.fixture
def player_specs():
    return [
        PlayerRef.of(1, PlayerColor.RED, "Alice"),
        PlayerRef.of(2, PlayerColor.BLUE, "Bob"),
    ]
