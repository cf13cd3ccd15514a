"""Command-line interface for PyZorkCore."""

import argparse
import logging
import sys

from pyzorkcore import __version__
from pyzorkcore.config import get_config
from pyzorkcore.engine.game import Game, create_game

logger = logging.getLogger(__name__)


def configure_logging(level_name: str) -> None:
    """Set up root logging from a level name, falling back to WARNING."""
    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        print(f"Unknown log level '{level_name}', using WARNING", file=sys.stderr)
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_game(game: Game) -> None:
    """Run the main game loop."""
    # Print opening
    print(game.start())
    print()

    while True:
        try:
            # Get input
            user_input = input(game.get_prompt() + " ").strip()

            if not user_input:
                continue

            # Process input
            result = game.process_input(user_input)

            # Print messages
            for message in result.messages:
                print(message)
                print()

            # Handle quit
            if result.quit_requested:
                break

        except KeyboardInterrupt:
            print("\n")
            break
        except EOFError:
            print("\n\nGoodbye!")
            break


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="PyZorkCore - Zork-style parser, clock and actors",
        prog="pyzorkcore",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"PyZorkCore {__version__}",
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random number generator (reproducible games)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    parser.add_argument(
        "--name",
        type=str,
        help="Player name used in the greeting",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Report words missing from the vocabulary by name",
    )

    parser.add_argument(
        "--no-light-timers",
        action="store_true",
        help="Let the lamp and candles burn forever",
    )

    args = parser.parse_args(argv)

    # Get config
    config = get_config()
    if args.name:
        config.game.player_name = args.name
    if args.strict:
        config.parser.strict_vocabulary = True
    if args.no_light_timers:
        config.clock.light_timers = False

    configure_logging(args.log_level or config.game.log_level)
    logger.debug(f"Starting with seed={args.seed if args.seed is not None else config.game.seed}")

    game = create_game(seed=args.seed, config=config)
    run_game(game)
    return 0


if __name__ == "__main__":
    sys.exit(main())
