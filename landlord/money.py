"""
Money management and event logging.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from landlord.exceptions import InsufficientFundsError, InvalidArgumentError
from landlord.player import PlayerColor, PlayerState

BANK = "BANK"


class EventType(Enum):
    """Types of game events."""

    GAME_START = "game_start"
    GAME_LOADED = "game_loaded"
    TURN_START = "turn_start"
    DICE_ROLL = "dice_roll"
    MOVE = "move"
    PASS_START = "pass_start"
    LAND = "land"

    PURCHASE = "purchase"
    BUILD_HOUSE = "build_house"
    BUILD_HOTEL = "build_hotel"
    SALE = "sale"

    RENT_PAYMENT = "rent_payment"
    LIQUIDATION = "liquidation"
    BANKRUPTCY = "bankruptcy"

    CARD_DRAW = "card_draw"

    GO_TO_JAIL = "go_to_jail"
    JAIL_RELEASE = "jail_release"
    JAIL_STAY = "jail_stay"


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    player_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        player_str = self.player_id if self.player_id is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.details}"


class EventLog:
    """Event channel the engine writes to and callers drain."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def log(self, event_type: EventType, player_id: Optional[str] = None, **details: Any) -> None:
        """Log a game event."""
        self.events.append(GameEvent(event_type, player_id, details))

    def drain(self) -> List[GameEvent]:
        """Return all events logged since the last drain and forget them."""
        out = self.events.copy()
        self.events.clear()
        return out


@dataclass(frozen=True)
class Transaction:
    """
    One money movement.

    ``source``/``target`` are player names or ``BANK``; the balances are
    taken right after the movement (bank cash when the bank is a side).
    """

    source: str
    source_color: Optional[PlayerColor]
    target: str
    target_color: Optional[PlayerColor]
    amount: int
    source_balance_after: int
    target_balance_after: int

    def __repr__(self) -> str:
        return f"Transaction(from={self.source}, to={self.target}, amount={self.amount})"


class Bank:
    """
    Sole holder of system cash.

    Every money movement goes through ``transfer`` so the transaction log
    is totally ordered and matches the balances. ``None`` stands for the
    bank side of a transfer.
    """

    def __init__(self, initial_cash: int):
        if initial_cash < 0:
            raise InvalidArgumentError(f"Invalid initial bank cash: {initial_cash}")
        self._cash = initial_cash
        self._transactions: List[Transaction] = []

    @property
    def cash(self) -> int:
        return self._cash

    def transfer(
        self,
        source: Optional[PlayerState],
        target: Optional[PlayerState],
        amount: int,
    ) -> None:
        """
        Move ``amount`` from ``source`` to ``target``.

        Raises:
            InvalidArgumentError: negative amount, or neither side is a player.
            InsufficientFundsError: the paying side cannot cover the amount.
        """
        if amount < 0:
            raise InvalidArgumentError("amount must be >= 0")
        if source is None and target is None:
            raise InvalidArgumentError("At least one side of a transfer must be a player")
        if amount == 0:
            return

        if source is None:
            if self._cash < amount:
                raise InsufficientFundsError(
                    f"Bank has {self._cash} and cannot pay {amount}"
                )
            target.credit(amount)
            self._cash -= amount
            self._record(BANK, None, target.name, target.color, amount, self._cash, target.cash)
            return

        if target is None:
            source.debit(amount)
            self._cash += amount
            self._record(source.name, source.color, BANK, None, amount, source.cash, self._cash)
            return

        source.debit(amount)
        target.credit(amount)
        self._record(source.name, source.color, target.name, target.color, amount, source.cash, target.cash)

    def _record(self, *fields: Any) -> None:
        self._transactions.append(Transaction(*fields))

    def drain_transactions(self) -> List[Transaction]:
        """Return and clear the transactions recorded since the last call."""
        out = self._transactions.copy()
        self._transactions.clear()
        return out
