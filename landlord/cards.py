"""
Chance card system.
"""

import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, List, Optional

from landlord.exceptions import ConfigurationError


class CardType(Enum):
    """Types of card effects. Values match the deck CSV vocabulary."""

    PAY_BANK = "PAY_BANK"
    RECEIVE_BANK = "RECEIVE_BANK"
    PAY_ALL = "PAY_ALL"
    RECEIVE_ALL = "RECEIVE_ALL"
    GO_TO_JAIL = "GO_TO_JAIL"
    GET_OUT_OF_JAIL = "GET_OUT_OF_JAIL"


@dataclass(frozen=True)
class Card:
    """A chance card: an effect and the amount it moves (if any)."""

    card_id: int
    card_type: CardType
    value: int = 0

    @property
    def is_release_card(self) -> bool:
        return self.card_type == CardType.GET_OUT_OF_JAIL

    def __repr__(self) -> str:
        return f"Card(id={self.card_id}, {self.card_type.value}, value={self.value})"


class Deck:
    """
    Cyclic queue of cards.

    Drawn cards go back to the bottom, except release cards: those leave
    circulation while a player holds them and come back through
    ``return_release_card``.
    """

    def __init__(self, cards: Iterable[Card]):
        self._cards: Deque[Card] = deque(cards)
        if not self._cards:
            raise ConfigurationError("Deck cannot be empty")
        self._held: List[Card] = []
        self.held_release_cards = 0

    @classmethod
    def from_ordered(cls, cards: Iterable[Card], held_release_cards: int = 0) -> "Deck":
        """Rebuild a deck in an exact order (no shuffling)."""
        deck = cls(cards)
        deck.held_release_cards = held_release_cards
        return deck

    def __len__(self) -> int:
        return len(self._cards)

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        cards = list(self._cards)
        (rng or random.Random()).shuffle(cards)
        self._cards = deque(cards)

    def draw(self) -> Optional[Card]:
        """
        Take the top card.

        Returns None only when every card is out of circulation (all of
        them are release cards held by players).
        """
        if not self._cards:
            return None
        card = self._cards.popleft()
        if card.is_release_card:
            self._held.append(card)
            self.held_release_cards += 1
            return card
        self._cards.append(card)
        return card

    def return_release_card(self) -> None:
        """Put a spent release card back at the bottom of the deck."""
        card = self._held.pop(0) if self._held else Card(0, CardType.GET_OUT_OF_JAIL, 0)
        self.held_release_cards = max(0, self.held_release_cards - 1)
        self._cards.append(card)

    def remove_release_cards(self, count: int) -> int:
        """
        Take up to ``count`` release cards out of circulation, top first.

        Used when restoring a game whose deck order was not saved.
        Returns how many were removed.
        """
        removed = 0
        kept: Deque[Card] = deque()
        for card in self._cards:
            if removed < count and card.is_release_card:
                self._held.append(card)
                removed += 1
            else:
                kept.append(card)
        self._cards = kept
        self.held_release_cards += removed
        return removed

    def cards_in_order(self) -> List[Card]:
        """Cards from top to bottom."""
        return list(self._cards)
