"""
Public snapshot serialization of a running game.

Produces a sanitized, JSON-friendly view of the current game without
exposing hidden information (the deck order).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from landlord.spaces import CompanySquare, OwnableSquare, StreetSquare

if TYPE_CHECKING:
    from landlord.game import GameEngine


def _ownable_entry(engine: GameEngine, square: OwnableSquare) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "index": square.index,
        "name": square.name,
        "kind": square.kind.value,
        "price": square.price,
        "owner_id": square.owner.player_id if square.owner is not None else None,
        "sell_value": engine.economy.evaluate_sell_value(square),
    }
    if isinstance(square, StreetSquare):
        entry["houses"] = square.houses
        entry["has_hotel"] = square.has_hotel
        entry["rent"] = square.rent()
    elif isinstance(square, CompanySquare):
        entry["multiplier"] = square.multiplier
    return entry


def serialize_snapshot(engine: GameEngine) -> Dict[str, Any]:
    """Serialize a GameEngine into a public, stable JSON dict.

    The snapshot includes:
    - current player index and id, plus the last dice roll
    - bank cash
    - players with public info (cash, position, jail, properties)
    - every ownable square with owner and construction
    - deck counts (remaining / held) only
    """
    players: List[Dict[str, Any]] = []
    for index, player in enumerate(engine.players):
        players.append(
            {
                "index": index,
                "player_id": player.player_id,
                "name": player.name,
                "color": player.color.value,
                "cash": player.cash,
                "position": player.position,
                "in_jail": player.in_jail,
                "jail_cards": player.release_cards,
                "alive": player.alive,
                "properties": player.property_indices(),
            }
        )

    roll = engine.last_roll
    last_roll = None
    if roll is not None:
        last_roll = {"d1": roll.d1, "d2": roll.d2, "total": roll.total, "is_double": roll.is_double}

    return {
        "current_player_index": engine.current_player_index,
        "current_player_id": engine.current_player().player_id,
        "last_roll": last_roll,
        "bank_cash": engine.economy.bank.cash,
        "players": players,
        "ownables": [_ownable_entry(engine, square) for square in engine.board.ownables()],
        "deck": {
            "cards_remaining": len(engine.deck),
            "held_count": engine.deck.held_release_cards,
        },
    }
