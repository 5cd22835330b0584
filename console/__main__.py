import argparse
import logging
import random

from holdem.game import GameEngine
from holdem.models import MAX_SEATS, MIN_SEATS, TableConfig

from .table import ConsoleCollaborator

LOGGER = logging.getLogger("console")


def main() -> None:
    parser = argparse.ArgumentParser(description="Texas Hold'em at the terminal")
    parser.add_argument("--players", type=int, default=2, help=f"Seats at the table ({MIN_SEATS}-{MAX_SEATS})")
    parser.add_argument("--humans", type=int, default=1, help="How many seats are played from the keyboard")
    parser.add_argument("--starting-stack", type=int, default=20_000)
    parser.add_argument("--sb", type=int, default=50)
    parser.add_argument("--bb", type=int, default=100)
    parser.add_argument("--hands", type=int, default=0, help="Stop after this many hands (0 plays to the end)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for shuffles and bots")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    try:
        config = TableConfig(seats=args.players, starting_stack=args.starting_stack, sb=args.sb, bb=args.bb)
    except ValueError as exc:
        parser.error(str(exc))
    if not 0 <= args.humans <= args.players:
        parser.error("--humans must be between 0 and --players")

    engine = GameEngine(config)
    for idx in range(config.seats):
        engine.assign_seat(f"Player {idx + 1}")

    rng = random.Random(args.seed)
    table = ConsoleCollaborator(engine, human_seats=range(args.humans), rng=rng)

    print("Welcome to Texas Hold'em!")
    hands_played = 0
    try:
        while engine.can_start_hand() and (args.hands <= 0 or hands_played < args.hands):
            seed = rng.getrandbits(32) if args.seed is not None else None
            engine.play_hand(table, seed=seed)
            hands_played += 1
    except (KeyboardInterrupt, EOFError):
        print("\nGame interrupted.")

    result = engine.match_result_payload()
    LOGGER.info("Played %s hands", hands_played)
    print(f"\nHands played: {hands_played}")
    for entry in result["final_stacks"]:
        print(f"  {entry['name']}: {entry['stack']}")
    if result["winner"]:
        print(f"{result['winner']['name']} wins the table!")


if __name__ == "__main__":
    main()
