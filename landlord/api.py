"""
Public facade used by controllers and front ends.

A ``GameAPI`` wraps exactly one engine. Actions return ``(ok, reason)``;
queries are read-only and can be polled after every action.
"""

import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from landlord.cards import Deck
from landlord.config import GameConfig
from landlord.economy import EconomyService
from landlord.exceptions import ConfigurationError, GameStateError, InvalidArgumentError
from landlord.factory import load_board, load_cards, load_deck
from landlord.game import GameEngine, OwnableInfo
from landlord.money import Bank, EventLog, EventType, GameEvent, Transaction
from landlord.player import PlayerColor, PlayerState
from landlord.savegame import load_game, restore_ownership, save_game
from landlord.schemas import CompanyInfo, DiceData, PlayerRef, StreetInfo
from landlord.snapshot import serialize_snapshot

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
ActionResult = Tuple[bool, Optional[str]]


class GameAPI:
    """Start or load a game, then drive it one action at a time."""

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self._engine: Optional[GameEngine] = None

    # === Lifecycle ===

    @property
    def started(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> GameEngine:
        if self._engine is None:
            raise GameStateError("Game has not been started")
        return self._engine

    def _ensure_not_started(self) -> None:
        if self._engine is not None:
            raise GameStateError("Game already started")

    def start(
        self,
        player_specs: Sequence[PlayerRef],
        board_source: PathLike,
        deck_source: PathLike,
        initial_player_cash: int,
        initial_bank_cash: int,
        seed: Optional[int] = None,
    ) -> None:
        """Create a new game with every player on the start square."""
        self._ensure_not_started()
        self._check_players(player_specs)
        if initial_player_cash < 0:
            raise ConfigurationError(f"Invalid initial player cash: {initial_player_cash}")

        if seed is None:
            seed = self.config.seed
        rng = random.Random(seed)

        board = load_board(board_source, self.config)
        deck = load_deck(deck_source, rng)
        players = [PlayerState(p.id, p.name, p.color, initial_player_cash) for p in player_specs]

        self._engine = self._build_engine(board, players, deck, Bank(initial_bank_cash), 0, rng)
        self._engine.event_log.log(EventType.GAME_START, players=[p.player_id for p in players], seed=seed)
        self._engine.begin_turn()

        logger.info(
            f"Started game with {len(players)} players: {', '.join(p.name for p in players)} "
            f"(seed={seed})"
        )

    def load(
        self,
        path: PathLike,
        board_source: PathLike,
        deck_source: PathLike,
        initial_bank_cash: int,
    ) -> None:
        """
        Resume a saved game.

        The bank keeps the saved balance; ``initial_bank_cash`` is used only
        when the file does not record one. A turn saved after its roll or
        build stays spent. If the saved current player is bankrupt the turn
        passes to the next player still in the game.
        """
        self._ensure_not_started()
        saved = load_game(path)
        rng = random.Random(self.config.seed)

        board = load_board(board_source, self.config)
        if saved.has_deck_state:
            deck = Deck.from_ordered(
                [c.to_card() for c in saved.deck],
                held_release_cards=saved.release_cards_out,
            )
        else:
            logger.warning("Save has no deck order; rebuilding the deck from its definition")
            deck = Deck(load_cards(deck_source))
            deck.shuffle(rng)
            deck.remove_release_cards(saved.release_cards_out)

        players = [data.to_player() for data in saved.players]
        bank_cash = saved.bank_cash if saved.bank_cash is not None else initial_bank_cash

        engine = self._build_engine(board, players, deck, Bank(bank_cash), saved.current_player_index, rng)
        restore_ownership(saved, engine)

        self._engine = engine
        engine.event_log.log(EventType.GAME_LOADED, path=str(path), current_index=engine.current_player_index)
        if engine.current_player().alive:
            engine.begin_turn()
            engine.restore_turn_state(saved.last_roller_index, saved.has_built_this_turn)
        else:
            logger.info(f"Saved current player {engine.current_player().name} is bankrupt; passing the turn")
            engine.end_turn()
            engine.begin_turn()
        logger.info(f"Loaded game from {path}: {len(players)} players, current index {engine.current_player_index}")

    def save(self, path: PathLike) -> None:
        save_game(path, self.engine)

    def _check_players(self, player_specs: Sequence[PlayerRef]) -> None:
        count = len(player_specs)
        if not self.config.min_players <= count <= self.config.max_players:
            raise ConfigurationError(
                f"A game needs {self.config.min_players} to {self.config.max_players} players, got {count}"
            )
        ids = [p.id for p in player_specs]
        if len(set(ids)) != len(ids):
            raise ConfigurationError("Player ids must be unique")

    def _build_engine(self, board, players, deck, bank, start_index, rng) -> GameEngine:
        event_log = EventLog()
        economy = EconomyService(bank, self.config, event_log)
        return GameEngine(
            board,
            players,
            deck,
            economy,
            start_index=start_index,
            config=self.config,
            rng=rng,
            event_log=event_log,
        )

    # === Actions ===

    def roll_and_resolve(self) -> ActionResult:
        reason = self.engine.roll_not_allowed_reason()
        if reason is not None:
            return False, reason
        return self.engine.roll_and_resolve(), None

    def choose_buy(self) -> ActionResult:
        reason = self.engine.buy_not_allowed_reason()
        if reason is not None:
            return False, reason
        return self.engine.choose_buy(), None

    def choose_build_house(self) -> ActionResult:
        reason = self.engine.build_house_not_allowed_reason()
        if reason is not None:
            return False, reason
        return self.engine.choose_build_house(), None

    def choose_build_hotel(self) -> ActionResult:
        reason = self.engine.build_hotel_not_allowed_reason()
        if reason is not None:
            return False, reason
        return self.engine.choose_build_hotel(), None

    def sell_at_index(self, index: int) -> ActionResult:
        reason = self.engine.sell_not_allowed_reason(index)
        if reason is not None:
            return False, reason
        return self.engine.sell_at_index(index), None

    def end_turn(self) -> int:
        """End the current turn and begin the next player's. Returns the new index."""
        index = self.engine.end_turn()
        self.engine.begin_turn()
        return index

    def set_mocked_dice_values(self, d1: int, d2: int) -> None:
        self.engine.set_mocked_dice(d1, d2)

    def clear_mocked_dice_values(self) -> None:
        self.engine.clear_mocked_dice()

    # === Queries ===

    def _player(self, index: int) -> PlayerState:
        players = self.engine.players
        if not 0 <= index < len(players):
            raise InvalidArgumentError(f"No player at index {index}")
        return players[index]

    def get_player_position(self, index: int) -> int:
        return self._player(index).position

    def get_player_cash(self, index: int) -> int:
        return self._player(index).cash

    def get_player_name(self, index: int) -> str:
        return self._player(index).name

    def get_player_color(self, index: int) -> PlayerColor:
        return self._player(index).color

    def is_player_in_jail(self, index: int) -> bool:
        return self._player(index).in_jail

    def is_player_alive(self, index: int) -> bool:
        return self._player(index).alive

    def get_player_release_cards(self, index: int) -> int:
        return self._player(index).release_cards

    def get_current_player_index(self) -> int:
        return self.engine.current_player_index

    def get_number_of_players(self) -> int:
        return len(self.engine.players)

    def get_last_dice(self) -> Optional[DiceData]:
        roll = self.engine.last_roll_values()
        if roll is None:
            return None
        return DiceData(d1=roll.d1, d2=roll.d2, is_double=roll.is_double)

    def can_roll(self) -> bool:
        return self.engine.is_roll_allowed()

    def buy_not_allowed_reason(self) -> Optional[str]:
        return self.engine.buy_not_allowed_reason()

    def build_house_not_allowed_reason(self) -> Optional[str]:
        return self.engine.build_house_not_allowed_reason()

    def build_hotel_not_allowed_reason(self) -> Optional[str]:
        return self.engine.build_hotel_not_allowed_reason()

    def sell_not_allowed_reason(self, index: int) -> Optional[str]:
        return self.engine.sell_not_allowed_reason(index)

    def get_board_size(self) -> int:
        return self.engine.board.size

    def get_square_name(self, index: int) -> str:
        return self.engine.square_name(index)

    def get_square_type(self, index: int) -> str:
        return self.engine.square_type(index)

    def get_last_drawn_card_id(self) -> int:
        return self.engine.last_drawn_card_id

    def get_last_landed_ownable_name(self) -> Optional[str]:
        return self.engine.last_landed_ownable_name

    def get_street_info(self, index: int) -> Optional[StreetInfo]:
        return self.engine.street_info(index)

    def get_company_info(self, index: int) -> Optional[CompanyInfo]:
        return self.engine.company_info(index)

    def get_current_player_properties(self) -> List[OwnableInfo]:
        return self.engine.current_player_property_data()

    def get_winners(self) -> List[PlayerRef]:
        return self.engine.winners()

    def get_alive_player_count(self) -> int:
        return self.engine.alive_player_count()

    def is_game_over(self) -> bool:
        return self.engine.alive_player_count() <= 1

    def fetch_and_clear_transactions(self) -> List[Transaction]:
        return self.engine.collect_transactions()

    def fetch_and_clear_events(self) -> List[GameEvent]:
        return self.engine.drain_events()

    def snapshot(self) -> Dict[str, Any]:
        return serialize_snapshot(self.engine)
