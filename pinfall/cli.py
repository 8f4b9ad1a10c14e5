"""
Pinfall CLI - Command-line interface for the engine.

Usage:
    pinfall score <pins> [<pins> ...]   Replay throws and print the scoreboard
    pinfall play                        Enter pin counts interactively
    pinfall serve [--host] [--port]     Run the HTTP API
"""

import argparse
import logging
import sys

from .config import Settings


def main(argv=None):
    """Main CLI entry point."""
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(
        description="Pinfall - Ten-Pin Bowling Score Engine",
        prog="pinfall",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.add_argument(
        "--strict", action="store_true", default=settings.strict_pin_count,
        help="Reject throws above the standing pin count",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Score command
    score_parser = subparsers.add_parser("score", help="Replay throws and print the scoreboard")
    score_parser.add_argument("throws", nargs="*", type=int, help="Pins knocked down per throw")

    # Play command
    subparsers.add_parser("play", help="Enter pin counts interactively")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.host, help="Bind host")
    serve_parser.add_argument("--port", type=int, default=settings.port, help="Bind port")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "score":
        cmd_score(args)
    elif args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _print_status(engine):
    status = engine.check_status()
    position = engine.locate()
    if status.is_game_over:
        print(f"Game over. Final score: {engine.total_score()}")
    else:
        print(
            f"Frame {position.frame_index}, throw {position.throws_in_current_frame + 1}"
            f" - next: {status.next_pin_action.value}"
        )


def cmd_score(args):
    """Replay throws and print the scoreboard."""
    from .engine_core import ScoreEngine, EngineError
    from .scoreboard import render

    engine = ScoreEngine(strict_pin_count=args.strict)
    try:
        engine.replay(args.throws)
    except EngineError as e:
        print(render(engine.history))
        print(f"Error: {e.message}")
        sys.exit(1)

    print(render(engine.history))
    _print_status(engine)


def cmd_play(args):
    """Enter pin counts interactively until the game ends."""
    from .engine_core import ScoreEngine, EngineError
    from .scoreboard import render
    from .session import CountingRack, LaneDirector, SessionTally

    tally = SessionTally()
    director = LaneDirector(ScoreEngine(strict_pin_count=args.strict), CountingRack())

    print("Enter pins knocked down per throw. 'r' restarts, 'q' quits.")
    while True:
        try:
            line = input(f"[{director.rack.standing} standing] pins> ").strip()
        except EOFError:
            print()
            break

        if line == "q":
            break
        if line == "r":
            director.new_game()
            print("New game.")
            continue

        try:
            result = director.deliver(int(line))
        except ValueError as e:
            # OutOfRangeThrow is a ValueError too
            print(f"Error: {getattr(e, 'message', None) or f'not a pin count: {line!r}'}")
            continue
        except EngineError as e:
            print(f"Error: {e.message}")
            continue

        print(render(director.engine.history))
        print(result.instruction)
        if result.status.is_game_over:
            tally.add_game(director.engine.total_score())
            print(f"Final score: {director.engine.total_score()} "
                  f"(session total {tally.total} over {tally.games_played} game(s))")
            print("'r' for a new game, 'q' to quit.")


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    from dataclasses import replace
    import uvicorn
    from .api.app import create_app

    settings = replace(Settings.from_env(), strict_pin_count=args.strict)
    uvicorn.run(create_app(settings=settings), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
