"""
Command-line driver for Landlord games.

    landlord new game.txt --player P1:Ana:RED --player P2:Bruno:BLUE
    landlord play game.txt roll buy end
    landlord show game.txt
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from landlord.api import ActionResult, GameAPI
from landlord.exceptions import LandlordError
from landlord.player import PlayerColor
from landlord.settings import LandlordSettings, get_settings
from landlord.schemas import PlayerRef

logger = logging.getLogger(__name__)

ACTIONS = "roll, roll:D1,D2, buy, house, hotel, sell:INDEX, end"


def parse_player(text: str) -> PlayerRef:
    """Parse ``ID:NAME:COLOR``."""
    parts = text.split(":")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"Expected ID:NAME:COLOR, got {text!r}")
    pid, name, color = parts
    try:
        return PlayerRef(id=pid, name=name, color=PlayerColor[color.strip().upper()])
    except KeyError:
        choices = ", ".join(c.value for c in PlayerColor)
        raise argparse.ArgumentTypeError(f"Unknown color {color!r} (choose from {choices})") from None
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="landlord", description="Play a Landlord game from the command line")
    parser.add_argument("--board", type=str, default=None, help="Board definition CSV (default: from settings)")
    parser.add_argument("--deck", type=str, default=None, help="Deck definition CSV (default: from settings)")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: from settings)")

    sub = parser.add_subparsers(dest="command", required=True)

    new = sub.add_parser("new", help="Start a new game and write its save file")
    new.add_argument("save", type=str, help="Path of the save file to create")
    new.add_argument(
        "--player",
        dest="players",
        type=parse_player,
        action="append",
        required=True,
        help="Player as ID:NAME:COLOR (repeat 2-6 times)",
    )
    new.add_argument("--cash", type=int, default=None, help="Starting cash per player")
    new.add_argument("--bank-cash", type=int, default=None, help="Starting bank cash")
    new.add_argument("--seed", type=int, default=None, help="Random seed")

    play = sub.add_parser("play", help="Apply actions to a saved game and save it back")
    play.add_argument("save", type=str, help="Path of the save file")
    play.add_argument("actions", nargs="+", help=f"Actions to apply in order ({ACTIONS})")

    show = sub.add_parser("show", help="Print the public snapshot of a saved game as JSON")
    show.add_argument("save", type=str, help="Path of the save file")

    return parser


def _load(api: GameAPI, args: argparse.Namespace, settings: LandlordSettings) -> None:
    api.load(
        args.save,
        args.board or settings.board_csv,
        args.deck or settings.deck_csv,
        settings.initial_bank_cash,
    )


def apply_action(api: GameAPI, action: str) -> ActionResult:
    """Run one textual action against the API."""
    name, _, arg = action.partition(":")
    name = name.strip().lower()

    if name == "roll":
        if arg:
            d1, d2 = (int(v) for v in arg.split(","))
            api.set_mocked_dice_values(d1, d2)
        return api.roll_and_resolve()
    if name == "buy":
        return api.choose_buy()
    if name == "house":
        return api.choose_build_house()
    if name == "hotel":
        return api.choose_build_hotel()
    if name == "sell":
        return api.sell_at_index(int(arg))
    if name == "end":
        api.end_turn()
        return True, None

    raise ValueError(f"Unknown action {action!r} (expected one of: {ACTIONS})")


def _describe_turn(api: GameAPI) -> str:
    index = api.get_current_player_index()
    return (
        f"{api.get_player_name(index)} at {api.get_square_name(api.get_player_position(index))}"
        f" (${api.get_player_cash(index)})"
    )


def cmd_new(args: argparse.Namespace, settings: LandlordSettings) -> int:
    api = GameAPI()
    api.start(
        args.players,
        args.board or settings.board_csv,
        args.deck or settings.deck_csv,
        settings.initial_player_cash if args.cash is None else args.cash,
        settings.initial_bank_cash if args.bank_cash is None else args.bank_cash,
        seed=settings.seed if args.seed is None else args.seed,
    )
    api.save(args.save)
    print(f"New game saved to {args.save}")
    print(f"Turn: {_describe_turn(api)}")
    return 0


def cmd_play(args: argparse.Namespace, settings: LandlordSettings) -> int:
    api = GameAPI()
    _load(api, args, settings)

    for action in args.actions:
        player = api.get_player_name(api.get_current_player_index())
        try:
            ok, reason = apply_action(api, action)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2

        status = "ok" if ok else f"rejected: {reason}"
        print(f"{player}: {action} -> {status}")

        dice = api.get_last_dice()
        if action.startswith("roll") and ok and dice is not None:
            print(f"  rolled {dice.d1}+{dice.d2}, now {_describe_turn(api)}")
        for tx in api.fetch_and_clear_transactions():
            print(f"  {tx.source} -> {tx.target}: {tx.amount}")

        if api.is_game_over():
            names = ", ".join(w.name for w in api.get_winners())
            print(f"Game over. Winner: {names}")
            break

    api.save(args.save)
    print(f"Turn: {_describe_turn(api)}")
    return 0


def cmd_show(args: argparse.Namespace, settings: LandlordSettings) -> int:
    api = GameAPI()
    _load(api, args, settings)
    print(json.dumps(api.snapshot(), indent=2))
    return 0


COMMANDS = {"new": cmd_new, "play": cmd_play, "show": cmd_show}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return COMMANDS[args.command](args, settings)
    except LandlordError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
