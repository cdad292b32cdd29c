"""
SHYTL CLI - Command-line interface for the game server.

Usage:
    shytl serve [--host H] [--port P]   Run the HTTP server
    shytl new-game <name>               Create a game, print its id and host key
    shytl show <game_id> <key>          Print a game as JSON

Settings come from the environment (see shytl.config).
"""

import argparse
import json
import logging
import sys

from .config import get_settings
from .errors import ShytlError


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="SHYTL - Party card game session server",
        prog="shytl",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", help="Bind address (default: SHYTL_HOST)")
    serve_parser.add_argument("--port", type=int, help="Port (default: SHYTL_PORT)")

    # New game command
    new_parser = subparsers.add_parser("new-game", help="Create a game")
    new_parser.add_argument("name", help="Host display name")

    # Show command
    show_parser = subparsers.add_parser("show", help="Print a game as JSON")
    show_parser.add_argument("game_id", help="Game ID")
    show_parser.add_argument("key", help="Session key of a player in the game")

    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "new-game":
        cmd_new_game(args)
    elif args.command == "show":
        cmd_show(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API under uvicorn."""
    import uvicorn
    from .api import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )


def _open_orchestrator():
    from .session import SessionOrchestrator

    store = get_settings().create_store()
    store.open()
    return SessionOrchestrator(store)


def cmd_new_game(args):
    """Create a game from the command line."""
    orchestrator = _open_orchestrator()
    try:
        result = orchestrator.create_game(args.name)
    except ShytlError as e:
        print(f"Error: {e.message}")
        sys.exit(1)
    finally:
        orchestrator.store.close()

    print(f"Game: {result.game.id}")
    print(f"Host key: {result.key}")


def cmd_show(args):
    """Print a game."""
    orchestrator = _open_orchestrator()
    try:
        game = orchestrator.get_game(args.game_id, args.key)
    except ShytlError as e:
        print(f"Error: {e.message}")
        sys.exit(1)
    finally:
        orchestrator.store.close()

    print(json.dumps(game.to_dict(), indent=2))


if __name__ == "__main__":
    main()
