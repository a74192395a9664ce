"""
Landlord Rules Engine

A deterministic, turn-based engine for a property-trading board game.
"""

from .api import GameAPI
from .board import Board
from .config import GameConfig
from .game import GameEngine
from .player import PlayerColor, PlayerState
from .schemas import PlayerRef

__all__ = [
    "GameAPI",
    "GameEngine",
    "Board",
    "GameConfig",
    "PlayerColor",
    "PlayerState",
    "PlayerRef",
]
