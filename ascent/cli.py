"""
Ascent CLI - Command-line interface for the engine.

Usage:
    ascent modes                                   List game modes
    ascent new --mode chaos --seed 7 -o game.txt   Write a fresh save file
    ascent show game.txt                           Render a saved game

Log verbosity follows ASCENT_LOG_LEVEL (default WARNING).
"""

import argparse
import logging
import os
import sys

from .engine_core.state import GameState, Position
from .games import GameMode, setup_game
from .persistence import SaveFormatError, load_from_bytes, save_to_bytes

FOG_MARKER = "?"
EMPTY_MARKER = "."


def main(argv=None):
    """Main CLI entry point."""
    logging.basicConfig(
        level=os.getenv("ASCENT_LOG_LEVEL", "WARNING").upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="Ascent - Tower-building strategy game engine",
        prog="ascent",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Modes command
    subparsers.add_parser("modes", help="List game modes")

    # New command
    new_parser = subparsers.add_parser("new", help="Create a new game and save it")
    new_parser.add_argument(
        "--mode", default="standard", choices=[m.name.lower() for m in GameMode],
        help="Game mode",
    )
    new_parser.add_argument("--seed", type=int, help="Seed for a reproducible setup")
    new_parser.add_argument("--names", nargs="+", help="Player names in seat order")
    new_parser.add_argument("--output", "-o", help="Save file to write (default: stdout)")

    # Show command
    show_parser = subparsers.add_parser("show", help="Render a saved game")
    show_parser.add_argument("save_file", help="Path to save file")

    args = parser.parse_args(argv)

    if args.command == "modes":
        cmd_modes(args)
    elif args.command == "new":
        cmd_new(args)
    elif args.command == "show":
        cmd_show(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_modes(args):
    """List game modes."""
    for mode in GameMode:
        config = mode.config
        print(
            f"{mode.name.lower():<10} {config.board_width}x{config.board_height}, "
            f"{config.num_players} players x {config.num_workers} workers - {config.description}"
        )


def cmd_new(args):
    """Create a new game and write its save file."""
    try:
        setup = setup_game(GameMode.from_name(args.mode), player_names=args.names, random_seed=args.seed)
        data = save_to_bytes(setup.state, setup.modifier)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.output:
        with open(args.output, "wb") as f:
            f.write(data)
        print(f"Saved new {args.mode} game to {args.output}")
        print(render_game(setup.state))
    else:
        sys.stdout.write(data.decode("utf-8"))


def cmd_show(args):
    """Load a save file and render it."""
    try:
        with open(args.save_file, "rb") as f:
            data = f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {args.save_file}")
        sys.exit(1)

    try:
        saved = load_from_bytes(data)
    except SaveFormatError as e:
        print(f"Error: Invalid save file: {e}")
        sys.exit(1)

    modifier = saved.modifier.name if saved.modifier else "none"
    print(f"Modifier: {modifier}")
    print(render_game(saved.state))

    recent = saved.game_log.tail(5)
    if recent:
        print("\nRecent log:")
        for line in recent:
            print(f"  {line}")


def render_board(state: GameState) -> str:
    """
    Render the board as text, one row per line.

    Each cell is the tower height followed by the seat letter of the
    worker on it (or '.'). Fogged cells without a worker show '?'.
    """
    board = state.board
    rows = []
    for y in range(board.height):
        cells = []
        for x in range(board.width):
            position = Position(x, y)
            tower = board.tower_at(position)
            worker = board.worker_at(position)
            if worker is None:
                height = FOG_MARKER if tower.fogged else str(tower.height)
                cells.append(f"{height}{EMPTY_MARKER}")
            else:
                seat = state.index_of(state.owner_of(worker))
                cells.append(f"{tower.height}{chr(ord('A') + seat)}")
        rows.append(" ".join(cells))
    return "\n".join(rows)


def render_game(state: GameState) -> str:
    lines = [f"Turn {state.turn_number}, {state.current_player}'s move"]
    for i, player in enumerate(state.players):
        power = player.power_name or "no power"
        lines.append(f"  {chr(ord('A') + i)}: {player.name} ({power})")
    if state.winner is not None:
        lines.append(f"Winner: {state.winner}")
    lines.append(render_board(state))
    return "\n".join(lines)


if __name__ == "__main__":
    main()
