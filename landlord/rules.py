"""
Landing and card effects.

Both are dispatched through tables keyed by the square kind / card type,
so every variant has exactly one handler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

from landlord.cards import Card, CardType
from landlord.exceptions import GameStateError
from landlord.spaces import CompanySquare, MoneySquare, Square, SquareKind, StreetSquare

if TYPE_CHECKING:
    from landlord.economy import EconomyService
    from landlord.game import GameEngine
    from landlord.player import PlayerState

LandingHandler = Callable[[Square, "PlayerState", "GameEngine", "EconomyService"], None]
CardHandler = Callable[[Card, "PlayerState", "GameEngine", "EconomyService"], None]


# === Landing ===


def _land_plain(square: Square, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    pass


def _land_chance(square: Square, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    engine.draw_and_apply_card(player)


def _land_go_to_jail(square: Square, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    engine.send_to_jail(player)


def _land_cash_delta(square: MoneySquare, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    if square.amount > 0:
        economy.apply_income(player, square.amount)
    elif square.amount < 0:
        economy.apply_payment(player, -square.amount)


def _land_street(square: StreetSquare, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    if not square.has_owner() or square.is_owned_by(player):
        return
    economy.charge_rent(player, square.owner, square.rent())


def _land_company(square: CompanySquare, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    if not square.has_owner() or square.is_owned_by(player):
        return
    economy.charge_rent(player, square.owner, square.rent(engine.last_roll))


LANDING_HANDLERS: Dict[SquareKind, LandingHandler] = {
    SquareKind.PLAIN: _land_plain,
    SquareKind.CHANCE: _land_chance,
    SquareKind.GO_TO_JAIL: _land_go_to_jail,
    SquareKind.CASH_DELTA: _land_cash_delta,
    SquareKind.STREET: _land_street,
    SquareKind.COMPANY: _land_company,
}


def resolve_landing(square: Square, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    """Apply the effect of ``player`` landing on ``square``."""
    handler = LANDING_HANDLERS.get(square.kind)
    if handler is None:
        raise GameStateError(f"No landing rule for square kind {square.kind}")
    handler(square, player, engine, economy)


# === Cards ===


def _card_pay_bank(card: Card, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    economy.apply_payment(player, card.value)


def _card_receive_bank(card: Card, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    economy.apply_income(player, card.value)


def _card_pay_all(card: Card, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    for other in engine.all_players():
        if other is not player and other.alive:
            economy.transfer(player, other, card.value)


def _card_receive_all(card: Card, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    for other in engine.all_players():
        if other is not player and other.alive:
            economy.transfer(other, player, card.value)


def _card_go_to_jail(card: Card, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    engine.send_to_jail(player)


def _card_release(card: Card, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    player.grant_release_card()


CARD_HANDLERS: Dict[CardType, CardHandler] = {
    CardType.PAY_BANK: _card_pay_bank,
    CardType.RECEIVE_BANK: _card_receive_bank,
    CardType.PAY_ALL: _card_pay_all,
    CardType.RECEIVE_ALL: _card_receive_all,
    CardType.GO_TO_JAIL: _card_go_to_jail,
    CardType.GET_OUT_OF_JAIL: _card_release,
}


def apply_card(card: Card, player: PlayerState, engine: GameEngine, economy: EconomyService) -> None:
    """Apply the effect of ``card`` drawn by ``player``."""
    handler = CARD_HANDLERS.get(card.card_type)
    if handler is None:
        raise GameStateError(f"No effect defined for card type {card.card_type}")
    handler(card, player, engine, economy)
