"""
Main game engine and turn state management.
"""

import logging
import random
from typing import List, Optional, Union

from landlord.board import Board
from landlord.cards import Deck
from landlord.config import GameConfig
from landlord.dice import Dice, DiceRoll
from landlord.economy import EconomyService
from landlord.exceptions import ConfigurationError, GameStateError
from landlord.money import EventLog, EventType, GameEvent, Transaction
from landlord.player import PlayerState
from landlord.rules import apply_card, resolve_landing
from landlord.schemas import CompanyInfo, OwnableCore, PlayerRef, StreetInfo
from landlord.spaces import CompanySquare, OwnableSquare, Square, StreetSquare

logger = logging.getLogger(__name__)

OwnableInfo = Union[StreetInfo, CompanyInfo]

BANKRUPT_REASON = "Player is bankrupt"


def player_ref(player: Optional[PlayerState]) -> Optional[PlayerRef]:
    """Public identity of a player (None for no player)."""
    if player is None:
        return None
    return PlayerRef(id=player.player_id, name=player.name, color=player.color)


class GameEngine:
    """
    Turn state machine.

    A turn goes begin_turn -> roll_and_resolve -> (buy/build/sell) -> end_turn.
    Every money movement is delegated to the EconomyService.
    """

    def __init__(
        self,
        board: Board,
        players: List[PlayerState],
        deck: Deck,
        economy: EconomyService,
        start_index: int = 0,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        event_log: Optional[EventLog] = None,
    ):
        if not players:
            raise ConfigurationError("Game requires at least one player")
        if not 0 <= start_index < len(players):
            raise ConfigurationError(f"Start index {start_index} is outside the player list")

        self.board = board
        self.players = list(players)
        self.deck = deck
        self.economy = economy
        self.config = config or economy.config
        self.event_log = event_log or economy.event_log

        if rng is None:
            rng = random.Random(self.config.seed)
        self.dice = Dice(rng)

        self.current_player_index = start_index
        self.last_roll: Optional[DiceRoll] = None
        self.last_roller_index: Optional[int] = None
        self.last_drawn_card_id = -1
        self.last_landed_ownable_name: Optional[str] = None
        self.has_built_this_turn = False

    # === Turn flow ===

    def begin_turn(self) -> None:
        """Start of a turn: forget the dice and the build flag."""
        self.last_roll = None
        self.has_built_this_turn = False
        self.event_log.log(
            EventType.TURN_START,
            player_id=self.current_player().player_id,
            index=self.current_player_index,
        )

    def restore_turn_state(self, last_roller_index: Optional[int], has_built: bool) -> None:
        """Reapply the roll guard and build flag of a turn saved mid-way."""
        if last_roller_index == self.current_player_index:
            self.last_roller_index = last_roller_index
        self.has_built_this_turn = has_built

    def roll_and_resolve(self) -> bool:
        """
        Roll, apply jail rules, move and resolve the landed square.

        Returns False without doing anything if the current player has
        already rolled this turn or is bankrupt.
        """
        if not self.is_roll_allowed():
            return False

        player = self.current_player()
        self.last_roller_index = self.current_player_index

        roll = self._roll()
        self.apply_jail_rules(roll)

        if player.in_jail:
            self.event_log.log(EventType.JAIL_STAY, player_id=player.player_id)
            return True

        self.move_by(roll.total)
        self.on_land()
        return True

    def apply_jail_rules(self, roll: DiceRoll) -> None:
        """Doubles or a held release card get the current player out of jail."""
        player = self.current_player()
        if not player.in_jail:
            return

        if roll.is_double:
            player.in_jail = False
            self.event_log.log(EventType.JAIL_RELEASE, player_id=player.player_id, method="double")
            return

        if player.consume_release_card():
            player.in_jail = False
            self.deck.return_release_card()
            self.event_log.log(EventType.JAIL_RELEASE, player_id=player.player_id, method="card")

    def move_by(self, steps: int) -> None:
        """Move the current player; crossing the start square pays the bonus once."""
        player = self.current_player()
        if player.in_jail:
            return

        start = player.position
        target = self.board.advance(start, steps)

        if start + steps >= self.board.size:
            self.economy.credit_pass_start(player)

        player.move_to(target)
        self.event_log.log(
            EventType.MOVE,
            player_id=player.player_id,
            **{"from": start, "to": target, "steps": steps},
        )

    def on_land(self) -> None:
        """Resolve the square under the current player."""
        player = self.current_player()
        square = self.board.square_at(player.position)
        self.last_landed_ownable_name = square.name if square.is_ownable else None

        self.event_log.log(
            EventType.LAND,
            player_id=player.player_id,
            index=square.index,
            square=square.name,
            kind=square.kind.value,
        )
        resolve_landing(square, player, self, self.economy)

    def draw_and_apply_card(self, player: PlayerState) -> None:
        card = self.deck.draw()
        if card is None:
            logger.warning("Deck has no cards in circulation; nothing drawn")
            return

        self.last_drawn_card_id = card.card_id
        self.event_log.log(
            EventType.CARD_DRAW,
            player_id=player.player_id,
            card_id=card.card_id,
            card_type=card.card_type.value,
            value=card.value,
        )
        apply_card(card, player, self, self.economy)

    def send_to_jail(self, player: PlayerState) -> None:
        player.in_jail = True
        player.move_to(self.board.jail_index)
        self.event_log.log(EventType.GO_TO_JAIL, player_id=player.player_id)

    def choose_buy(self) -> bool:
        """Buy the square the current player stands on."""
        player = self.current_player()
        if self.has_built_this_turn or not player.alive:
            return False

        square = self.board.square_at(player.position)
        if not isinstance(square, OwnableSquare):
            return False

        bought = self.economy.attempt_buy(player, square)
        if bought:
            self.has_built_this_turn = True
        return bought

    def choose_build_house(self) -> bool:
        """Build a house on the street the current player stands on."""
        street = self._current_street()
        if self.has_built_this_turn or street is None:
            return False

        built = self.economy.attempt_build_house(self.current_player(), street)
        if built:
            self.has_built_this_turn = True
        return built

    def choose_build_hotel(self) -> bool:
        """Build the hotel on the street the current player stands on."""
        street = self._current_street()
        if self.has_built_this_turn or street is None:
            return False

        built = self.economy.attempt_build_hotel(self.current_player(), street)
        if built:
            self.has_built_this_turn = True
        return built

    def sell_at_index(self, index: int) -> bool:
        """Sell the current player's property at ``index`` back to the bank."""
        square = self.board.square_at(index)
        if not isinstance(square, OwnableSquare):
            return False
        return self.economy.attempt_sell(self.current_player(), square)

    def end_turn(self) -> int:
        """Pass the turn to the next player still in the game."""
        if self.alive_player_count() == 0:
            raise GameStateError("No players left in the game")

        self.last_roll = None
        self.last_roller_index = None
        self.has_built_this_turn = False

        count = len(self.players)
        while True:
            self.current_player_index = (self.current_player_index + 1) % count
            if self.players[self.current_player_index].alive:
                break

        logger.debug(f"Turn passes to {self.current_player().name}")
        return self.current_player_index

    # === Dice ===

    def _roll(self) -> DiceRoll:
        roll = self.dice.roll()
        self.last_roll = roll
        self.event_log.log(
            EventType.DICE_ROLL,
            player_id=self.current_player().player_id,
            d1=roll.d1,
            d2=roll.d2,
            total=roll.total,
            double=roll.is_double,
        )
        return roll

    def set_mocked_dice(self, d1: int, d2: int) -> None:
        """Force the next roll (consumed once)."""
        self.dice.set_next(d1, d2)

    def clear_mocked_dice(self) -> None:
        self.dice.clear_next()

    # === Queries ===

    def current_player(self) -> PlayerState:
        return self.players[self.current_player_index]

    def all_players(self) -> List[PlayerState]:
        return list(self.players)

    def alive_player_count(self) -> int:
        return sum(1 for p in self.players if p.alive)

    def is_roll_allowed(self) -> bool:
        return self.roll_not_allowed_reason() is None

    def last_roll_values(self) -> Optional[DiceRoll]:
        return self.last_roll

    def winners(self) -> List[PlayerRef]:
        """Players tied for the most cash."""
        top = max(p.cash for p in self.players)
        return [player_ref(p) for p in self.players if p.cash == top]

    def square_name(self, index: int) -> str:
        return self.board.square_at(index).name

    def square_type(self, index: int) -> str:
        return self.board.square_at(index).kind.value

    def roll_not_allowed_reason(self) -> Optional[str]:
        if not self.current_player().alive:
            return BANKRUPT_REASON
        if self.last_roller_index == self.current_player_index:
            return "Already rolled this turn"
        return None

    def buy_not_allowed_reason(self) -> Optional[str]:
        """Why buying the current square is refused, or None if allowed."""
        player = self.current_player()
        if not player.alive:
            return BANKRUPT_REASON
        square = self.board.square_at(player.position)
        if not isinstance(square, OwnableSquare):
            return "Not a buyable property"
        if square.has_owner():
            return "Property already owned"
        if self.has_built_this_turn:
            return "Already built once this turn"
        if not player.can_afford(square.price):
            return f"Insufficient funds: missing {player.shortfall(square.price)}"
        return None

    def build_house_not_allowed_reason(self) -> Optional[str]:
        return self._build_not_allowed_reason(hotel=False)

    def build_hotel_not_allowed_reason(self) -> Optional[str]:
        return self._build_not_allowed_reason(hotel=True)

    def _build_not_allowed_reason(self, hotel: bool) -> Optional[str]:
        player = self.current_player()
        if not player.alive:
            return BANKRUPT_REASON
        street = self._current_street()
        if street is None:
            return "Not a street (cannot build)"
        if not street.is_owned_by(player):
            return "You don't own this property"
        if self.has_built_this_turn:
            return "Already built once this turn"

        if hotel:
            if not street.can_build_hotel():
                return "Cannot build hotel (need at least 1 house)"
            cost = street.hotel_cost
        else:
            if not street.can_build_house():
                return f"Cannot build more houses (max {self.config.max_houses} houses)"
            cost = street.house_cost

        if not player.can_afford(cost):
            return f"Insufficient funds: missing {player.shortfall(cost)}"
        return None

    def sell_not_allowed_reason(self, index: int) -> Optional[str]:
        square = self.board.square_at(index)
        if not isinstance(square, OwnableSquare):
            return "Not a sellable property"
        if not square.is_owned_by(self.current_player()):
            return "You don't own this property"
        return None

    def street_info(self, index: int) -> Optional[StreetInfo]:
        square = self.board.square_at(index)
        if not isinstance(square, StreetSquare):
            return None
        return StreetInfo(
            core=self._ownable_core(square),
            rent=square.rent(),
            houses=square.houses,
            has_hotel=square.has_hotel,
        )

    def company_info(self, index: int) -> Optional[CompanyInfo]:
        square = self.board.square_at(index)
        if not isinstance(square, CompanySquare):
            return None
        return CompanyInfo(core=self._ownable_core(square), multiplier=square.multiplier)

    def current_player_property_data(self) -> List[OwnableInfo]:
        """DTOs for every property of the current player, in ownership order."""
        out: List[OwnableInfo] = []
        for index in self.current_player().property_indices():
            info = self.street_info(index) or self.company_info(index)
            if info is not None:
                out.append(info)
        return out

    def collect_transactions(self) -> List[Transaction]:
        return self.economy.drain_transaction_log()

    def drain_events(self) -> List[GameEvent]:
        return self.event_log.drain()

    # === Helpers ===

    def _current_street(self) -> Optional[StreetSquare]:
        """The street under the current player, if that player is still in the game."""
        player = self.current_player()
        if not player.alive:
            return None
        square: Square = self.board.square_at(player.position)
        return square if isinstance(square, StreetSquare) else None

    def _ownable_core(self, square: OwnableSquare) -> OwnableCore:
        return OwnableCore(
            owner=player_ref(square.owner),
            name=square.name,
            board_index=square.index,
            price=square.price,
            sell_value=self.economy.evaluate_sell_value(square),
        )
