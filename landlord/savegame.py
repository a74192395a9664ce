"""
Save and restore games as sectioned ASCII text.

Layout::

    # GAME_INFO
    currentPlayerIndex,1
    numberOfPlayers,2
    bankCash,199800

    # PLAYERS
    # id,name,color,money,position,inJail,getOutOfJailCards,alive
    P1,Ana,RED,3800,5,false,0,true
    ...

followed by PROPERTIES_STREETS, PROPERTIES_COMPANIES, DECK_STATE and
JAIL_CARDS_OUT. Any other line starting with ``#`` is a comment.

GAME_INFO also carries ``lastRollerIndex`` and ``hasBuiltThisTurn`` when the
game was saved after the current player rolled or built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Union

from landlord.cards import Card, CardType
from landlord.exceptions import SaveFormatError
from landlord.player import PlayerColor, PlayerState
from landlord.spaces import CompanySquare, StreetSquare

if TYPE_CHECKING:
    from landlord.game import GameEngine

logger = logging.getLogger(__name__)

GAME_INFO = "GAME_INFO"
PLAYERS = "PLAYERS"
PROPERTIES_STREETS = "PROPERTIES_STREETS"
PROPERTIES_COMPANIES = "PROPERTIES_COMPANIES"
DECK_STATE = "DECK_STATE"
JAIL_CARDS_OUT = "JAIL_CARDS_OUT"

SECTIONS = (GAME_INFO, PLAYERS, PROPERTIES_STREETS, PROPERTIES_COMPANIES, DECK_STATE, JAIL_CARDS_OUT)


@dataclass
class PlayerData:
    player_id: str
    name: str
    color: PlayerColor
    money: int
    position: int
    in_jail: bool
    release_cards: int
    alive: bool

    def to_player(self) -> PlayerState:
        """Rebuild the live player (without properties)."""
        player = PlayerState(self.player_id, self.name, self.color, self.money)
        player.move_to(self.position)
        player.in_jail = self.in_jail
        player.release_cards = self.release_cards
        if not self.alive:
            player.mark_bankrupt()
        return player


@dataclass
class StreetData:
    square_index: int
    owner_id: str
    houses: int
    has_hotel: bool


@dataclass
class CompanyData:
    square_index: int
    owner_id: str


@dataclass
class CardData:
    card_id: int
    card_type: CardType
    value: int

    def to_card(self) -> Card:
        return Card(self.card_id, self.card_type, self.value)


@dataclass
class SavedGame:
    """Everything read from a save file."""

    current_player_index: int = 0
    number_of_players: Optional[int] = None
    bank_cash: Optional[int] = None
    last_roller_index: Optional[int] = None
    has_built_this_turn: bool = False
    players: List[PlayerData] = field(default_factory=list)
    streets: List[StreetData] = field(default_factory=list)
    companies: List[CompanyData] = field(default_factory=list)
    deck: List[CardData] = field(default_factory=list)
    release_cards_out: int = 0

    @property
    def has_deck_state(self) -> bool:
        return bool(self.deck)


def _bool(value: bool) -> str:
    return "true" if value else "false"


def save_game(path: Union[str, Path], engine: GameEngine) -> None:
    """Write the full game state of ``engine`` to ``path``."""
    lines: List[str] = []

    lines.append(f"# {GAME_INFO}")
    lines.append(f"currentPlayerIndex,{engine.current_player_index}")
    lines.append(f"numberOfPlayers,{len(engine.players)}")
    lines.append(f"bankCash,{engine.economy.bank.cash}")
    if engine.last_roller_index == engine.current_player_index:
        lines.append(f"lastRollerIndex,{engine.last_roller_index}")
    if engine.has_built_this_turn:
        lines.append("hasBuiltThisTurn,true")
    lines.append("")

    lines.append(f"# {PLAYERS}")
    lines.append("# id,name,color,money,position,inJail,getOutOfJailCards,alive")
    for p in engine.players:
        lines.append(
            f"{p.player_id},{p.name},{p.color.value},{p.cash},{p.position},"
            f"{_bool(p.in_jail)},{p.release_cards},{_bool(p.alive)}"
        )
    lines.append("")

    lines.append(f"# {PROPERTIES_STREETS}")
    lines.append("# squareIndex,ownerId,houses,hasHotel")
    for street in engine.board.streets():
        if street.has_owner():
            lines.append(f"{street.index},{street.owner.player_id},{street.houses},{_bool(street.has_hotel)}")
    lines.append("")

    lines.append(f"# {PROPERTIES_COMPANIES}")
    lines.append("# squareIndex,ownerId")
    for company in engine.board.companies():
        if company.has_owner():
            lines.append(f"{company.index},{company.owner.player_id}")
    lines.append("")

    lines.append(f"# {DECK_STATE}")
    lines.append("# Cards in draw order, top first")
    lines.append("# cardId,cardType,cardValue")
    for card in engine.deck.cards_in_order():
        lines.append(f"{card.card_id},{card.card_type.value},{card.value}")
    lines.append("")

    lines.append(f"# {JAIL_CARDS_OUT}")
    lines.append(f"getOutOfJailCardsOut,{sum(p.release_cards for p in engine.players)}")

    path = Path(path)
    try:
        path.write_text("\n".join(lines) + "\n", encoding="ascii")
    except UnicodeEncodeError as e:
        raise SaveFormatError(f"Game state is not ASCII-safe: {e}") from e
    logger.info(f"Saved game to {path}")


# === Loading ===


def _int(text: str, line_no: int) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise SaveFormatError(f"Line {line_no}: expected an integer, got {text!r}") from None


def _parse_bool(text: str, line_no: int) -> bool:
    value = text.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise SaveFormatError(f"Line {line_no}: expected true/false, got {text!r}")


def _fields(parts: List[str], count: int, section: str, line_no: int) -> List[str]:
    if len(parts) != count:
        raise SaveFormatError(f"Line {line_no}: {section} rows have {count} fields, got {len(parts)}")
    return [p.strip() for p in parts]


def _read_game_info(saved: SavedGame, parts: List[str], line_no: int) -> None:
    key, value = _fields(parts, 2, GAME_INFO, line_no)
    if key == "currentPlayerIndex":
        saved.current_player_index = _int(value, line_no)
    elif key == "numberOfPlayers":
        saved.number_of_players = _int(value, line_no)
    elif key == "bankCash":
        saved.bank_cash = _int(value, line_no)
    elif key == "lastRollerIndex":
        saved.last_roller_index = _int(value, line_no)
    elif key == "hasBuiltThisTurn":
        saved.has_built_this_turn = _parse_bool(value, line_no)
    else:
        raise SaveFormatError(f"Line {line_no}: unknown {GAME_INFO} key {key!r}")


def _read_player(saved: SavedGame, parts: List[str], line_no: int) -> None:
    pid, name, color, money, position, in_jail, cards, alive = _fields(parts, 8, PLAYERS, line_no)
    try:
        player_color = PlayerColor[color.upper()]
    except KeyError:
        raise SaveFormatError(f"Line {line_no}: unknown color {color!r}") from None
    for label, text in (("money", money), ("position", position), ("getOutOfJailCards", cards)):
        if _int(text, line_no) < 0:
            raise SaveFormatError(f"Line {line_no}: {label} must be >= 0, got {text}")
    saved.players.append(
        PlayerData(
            player_id=pid,
            name=name,
            color=player_color,
            money=_int(money, line_no),
            position=_int(position, line_no),
            in_jail=_parse_bool(in_jail, line_no),
            release_cards=_int(cards, line_no),
            alive=_parse_bool(alive, line_no),
        )
    )


def _read_street(saved: SavedGame, parts: List[str], line_no: int) -> None:
    index, owner, houses, hotel = _fields(parts, 4, PROPERTIES_STREETS, line_no)
    saved.streets.append(
        StreetData(_int(index, line_no), owner, _int(houses, line_no), _parse_bool(hotel, line_no))
    )


def _read_company(saved: SavedGame, parts: List[str], line_no: int) -> None:
    index, owner = _fields(parts, 2, PROPERTIES_COMPANIES, line_no)
    saved.companies.append(CompanyData(_int(index, line_no), owner))


def _read_card(saved: SavedGame, parts: List[str], line_no: int) -> None:
    card_id, card_type, value = _fields(parts, 3, DECK_STATE, line_no)
    try:
        kind = CardType[card_type.upper()]
    except KeyError:
        raise SaveFormatError(f"Line {line_no}: unknown card type {card_type!r}") from None
    saved.deck.append(CardData(_int(card_id, line_no), kind, _int(value, line_no)))


def _read_jail_cards(saved: SavedGame, parts: List[str], line_no: int) -> None:
    key, value = _fields(parts, 2, JAIL_CARDS_OUT, line_no)
    if key != "getOutOfJailCardsOut":
        raise SaveFormatError(f"Line {line_no}: unknown {JAIL_CARDS_OUT} key {key!r}")
    saved.release_cards_out = _int(value, line_no)


SECTION_READERS: Dict[str, Callable[[SavedGame, List[str], int], None]] = {
    GAME_INFO: _read_game_info,
    PLAYERS: _read_player,
    PROPERTIES_STREETS: _read_street,
    PROPERTIES_COMPANIES: _read_company,
    DECK_STATE: _read_card,
    JAIL_CARDS_OUT: _read_jail_cards,
}


def load_game(path: Union[str, Path]) -> SavedGame:
    """
    Parse a save file.

    Raises:
        SaveFormatError: unreadable file, data outside a section, or a
            malformed row.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="ascii")
    except (OSError, UnicodeDecodeError) as e:
        raise SaveFormatError(f"Cannot read save file {path}: {e}") from e

    saved = SavedGame()
    section: Optional[str] = None

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if line.startswith("#"):
            header = line[1:].strip()
            if header in SECTIONS:
                section = header
            continue
        if section is None:
            raise SaveFormatError(f"Line {line_no}: data before any section header")
        SECTION_READERS[section](saved, line.split(","), line_no)

    _validate(saved)
    logger.debug(
        f"Read save {path}: {len(saved.players)} players, "
        f"{len(saved.streets)} streets, {len(saved.companies)} companies, {len(saved.deck)} cards"
    )
    return saved


def _validate(saved: SavedGame) -> None:
    if not saved.players:
        raise SaveFormatError("Save file has no players")
    if saved.number_of_players is not None and saved.number_of_players != len(saved.players):
        raise SaveFormatError(
            f"numberOfPlayers is {saved.number_of_players} but {len(saved.players)} players are listed"
        )
    if not 0 <= saved.current_player_index < len(saved.players):
        raise SaveFormatError(f"currentPlayerIndex {saved.current_player_index} is out of range")

    ids = [p.player_id for p in saved.players]
    if len(set(ids)) != len(ids):
        raise SaveFormatError("Duplicate player ids in save file")

    if not any(p.alive for p in saved.players):
        raise SaveFormatError("Save file has no player still in the game")
    for p in saved.players:
        if not p.alive and p.money != 0:
            raise SaveFormatError(f"Bankrupt player {p.player_id} still holds {p.money}")
    if saved.last_roller_index is not None and not 0 <= saved.last_roller_index < len(saved.players):
        raise SaveFormatError(f"lastRollerIndex {saved.last_roller_index} is out of range")

    alive = {p.player_id: p.alive for p in saved.players}
    seen = set()
    for row in [*saved.streets, *saved.companies]:
        if row.square_index in seen:
            raise SaveFormatError(f"Square {row.square_index} is listed more than once")
        seen.add(row.square_index)
        if row.owner_id not in alive:
            raise SaveFormatError(f"Square {row.square_index} is owned by unknown player {row.owner_id!r}")
        if not alive[row.owner_id]:
            raise SaveFormatError(f"Square {row.square_index} is owned by bankrupt player {row.owner_id!r}")


def restore_ownership(saved: SavedGame, engine: GameEngine) -> None:
    """
    Apply saved ownership and construction to a freshly built engine.

    Rows are applied in board order, so each player's holdings come back
    sorted by square index.
    """
    by_id = {p.player_id: p for p in engine.players}
    for player in engine.players:
        if player.position >= engine.board.size:
            raise SaveFormatError(f"Player {player.player_id} is at {player.position}, outside the board")

    rows: List[Union[StreetData, CompanyData]] = sorted(
        [*saved.streets, *saved.companies], key=lambda r: r.square_index
    )

    for row in rows:
        if not 0 <= row.square_index < engine.board.size:
            raise SaveFormatError(f"Square {row.square_index} is outside the board")
        square = engine.board.square_at(row.square_index)
        owner = by_id[row.owner_id]

        if isinstance(row, StreetData):
            if not isinstance(square, StreetSquare):
                raise SaveFormatError(f"Square {row.square_index} is not a street")
            if row.has_hotel and row.houses < 1:
                raise SaveFormatError(f"Street {row.square_index} has a hotel without houses")
            if not 0 <= row.houses <= engine.config.max_houses:
                raise SaveFormatError(f"Street {row.square_index} has {row.houses} houses")
            engine.economy.restore_street(owner, square, row.houses, row.has_hotel)
        else:
            if not isinstance(square, CompanySquare):
                raise SaveFormatError(f"Square {row.square_index} is not a company")
            engine.economy.restore_company(owner, square)
