"""
Stakeboard CLI - Command-line interface for the engine.

Usage:
    stakeboard new <player> [--mode automated] [--wager N]   Start a match
    stakeboard move <match_id> <player> FX FY TX TY          Move a piece
    stakeboard show <match_id>                               Print a match
    stakeboard demo                                          Play a short scripted match
    stakeboard serve [--host H] [--port P]                   Run the REST API

Matches are kept as JSON files under --store-dir, and the escrow ledger
in escrow/ledger.json beside them, so a wager placed by `new` is paid
out by the `move` that wins the match.
"""

import argparse
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Stakeboard - Checkers Match Engine with Wagers",
        prog="stakeboard",
    )
    parser.add_argument("--store-dir", default=None, help="Directory for match files")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # New command
    new_parser = subparsers.add_parser("new", help="Start a match")
    new_parser.add_argument("player", help="Player one's id")
    new_parser.add_argument(
        "--mode",
        choices=["head_to_head", "automated"],
        default="head_to_head",
        help="Match mode",
    )
    new_parser.add_argument("--wager", type=int, default=0, help="Amount to escrow")
    new_parser.add_argument("--balance", type=int, default=1000, help="Starting balance for a player new to the ledger")

    # Move command
    move_parser = subparsers.add_parser("move", help="Move a piece")
    move_parser.add_argument("match_id", help="Match id")
    move_parser.add_argument("player", help="Mover's id")
    for coord in ("from_x", "from_y", "to_x", "to_y"):
        move_parser.add_argument(coord, type=int)

    # Show command
    show_parser = subparsers.add_parser("show", help="Print a match")
    show_parser.add_argument("match_id", help="Match id")

    # Demo command
    subparsers.add_parser("demo", help="Play a short scripted match in memory")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "new":
        return cmd_new(args)
    elif args.command == "move":
        return cmd_move(args)
    elif args.command == "show":
        return cmd_show(args)
    elif args.command == "demo":
        return cmd_demo(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _manager(args):
    from .escrow import FileLedger
    from .session import MatchSessionManager, FileMatchStore

    store = FileMatchStore(args.store_dir)
    return MatchSessionManager(
        store=store,
        ledger=FileLedger(store.directory / "escrow" / "ledger.json"),
    )


def print_match(state):
    """Print a match summary and board."""
    from .engine_core import render_board

    print(f"Match: {state.match_id}")
    print(f"Mode: {state.mode.value}  Wager: {state.wager_amount}")
    if state.is_active:
        print(f"Turn: {state.turn}")
    else:
        print(f"Winner: {state.winner}")
    print(render_board(state.board))


def cmd_new(args):
    """Start a match."""
    from .engine_core import GameMode, NO_PARTICIPANT
    from .escrow import EscrowError

    if args.player == NO_PARTICIPANT:
        print(f"Error: {NO_PARTICIPANT!r} is reserved")
        sys.exit(1)

    manager = _manager(args)
    if not manager.ledger.has_account(args.player):
        manager.ledger.credit(args.player, args.balance)
    try:
        state = manager.create_match(args.player, GameMode(args.mode), wager_amount=args.wager)
    except (EscrowError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print_match(state)
    return 0


def cmd_move(args):
    """Move a piece."""
    from .session import MatchNotFoundError

    manager = _manager(args)
    try:
        result, state = manager.submit_move(
            args.match_id, args.player, args.from_x, args.from_y, args.to_x, args.to_y,
        )
    except MatchNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not result.success:
        print(f"Error: {result.error.value}: {result.message}")
        sys.exit(1)

    print(f"Moved {result.move}")
    if result.automated_move:
        print(f"Opponent moved {result.automated_move}")
    print_match(state)
    return 0


def cmd_show(args):
    """Print a match."""
    from .session import MatchNotFoundError

    manager = _manager(args)
    try:
        state = manager.get_match(args.match_id)
    except MatchNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print_match(state)
    return 0


def cmd_demo(args):
    """Play a short scripted head-to-head match in memory."""
    from .engine_core import GameMode, initialize, apply_move

    state = initialize("alice", GameMode.HEAD_TO_HEAD)
    result = apply_move(state, "alice", 1, 2, 1, 3)
    if not result.success:
        print(f"Error: {result.message}")
        sys.exit(1)

    print(f"Moved {result.move}")
    print_match(state)
    return 0


def cmd_serve(args):
    """Run the REST API."""
    import uvicorn

    uvicorn.run("stakeboard.api.app:create_app", factory=True, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    main()
