"""
CLI entry point for hoops voter.

Parses arguments, validates config, and wires components.
"""

import argparse
import json
import random
import sys
from argparse import Namespace
from pathlib import Path

from prettytable import PrettyTable

from .config import RatingConfig, SamplerConfig, SessionConfig
from .exceptions import ConfigurationError, StoreError, ValidationError
from .fetchers.roster_fetcher import RosterFetcher
from .interfaces import Voter
from .logging_config import get_logger, setup_logging
from .models import TEAMS, PlayerRecord, RankedPlayer
from .pair_selectors.exposure_selector import ExposureSelector
from .rankers.bradley_terry_ranker import BradleyTerryRanker
from .session import VotingSession
from .storage.sqlite_storage import SQLiteAggregateStore
from .voters.console_voter import ConsoleVoter, describe
from .voters.sim_voter import SimulatedVoter

# Give up after this many votes in a row fail to reach the store
MAX_CONSECUTIVE_FAILURES = 3


def parse_args(argv: list[str] | None = None) -> Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Hoops Voter - Pairwise Trade-Value Ranking"
    )

    _ = parser.add_argument(
        "--db",
        default="hoops_voter.db",
        help="SQLite database path (default: hoops_voter.db)"
    )
    _ = parser.add_argument(
        "--team",
        choices=TEAMS,
        default=None,
        help="Only rank and compare players from this team (default: all teams)"
    )

    # Rating and sampling knobs
    _ = parser.add_argument("--prior", type=float, default=0.5, help="Pseudocount per win direction, must be positive (default: 0.5)")
    _ = parser.add_argument(
        "--prior-scope",
        choices=["observed", "all"],
        default="observed",
        help="Add the pseudocount to observed pairs only or to every pair (default: observed)"
    )
    _ = parser.add_argument("--iter-max", type=int, default=250, help="MM iteration budget (default: 250)")
    _ = parser.add_argument(
        "--explore",
        type=float,
        default=0.7,
        help="Probability of drawing the first player from the under-exposed slice (default: 0.7)"
    )
    _ = parser.add_argument("--cooldown", type=int, default=50, help="Recent pairs to avoid repeating (default: 50)")
    _ = parser.add_argument(
        "--cooldown-on-pool-change",
        choices=["clear", "prune"],
        default="clear",
        help="What to do with recent pairs when the team filter changes (default: clear)"
    )

    _ = parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level (default: WARNING)"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    seed = commands.add_parser("seed", help="Load a JSON roster into the database")
    _ = seed.add_argument("roster", help="Path to roster JSON file")

    simulate = commands.add_parser("simulate", help="Cast votes from a simulated voter")
    _ = simulate.add_argument("--votes", type=int, default=200, help="Number of votes to cast (default: 200)")
    _ = simulate.add_argument("--noise", type=float, default=0.1, help="Voter noise level (0-1, default: 0.1)")
    _ = simulate.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")

    _ = commands.add_parser("vote", help="Vote interactively on the console")

    leaderboard = commands.add_parser("leaderboard", help="Print the current rankings")
    _ = leaderboard.add_argument("--top", type=int, default=None, help="Only show the first N players")

    return parser.parse_args(argv)


def wire_session(args: Namespace, rng: random.Random | None = None) -> tuple[SQLiteAggregateStore, VotingSession]:
    """Wire dependency injection components."""
    logger = get_logger("wire_session")

    rating_config = RatingConfig(prior=args.prior, prior_scope=args.prior_scope, iter_max=args.iter_max)
    sampler_config = SamplerConfig(explore_probability=args.explore, cooldown_capacity=args.cooldown)
    session_config = SessionConfig(team_filter=args.team, cooldown_on_pool_change=args.cooldown_on_pool_change)

    logger.info(f"Opening store at {args.db}")
    store = SQLiteAggregateStore(Path(args.db))
    session = VotingSession(
        store=store,
        ranker=BradleyTerryRanker(rating_config),
        selector=ExposureSelector(sampler_config, rng=rng),
        config=session_config,
    )
    return store, session


def print_leaderboard(rows: list[RankedPlayer], top: int | None = None) -> None:
    """Print leaderboard rows as a table."""
    table = PrettyTable()
    table.field_names = ["Rank", "Player", "Team", "Score", "Votes", "W-L", "Win %"]
    table.align["Rank"] = "r"
    table.align["Player"] = "l"
    table.align["Score"] = "r"
    table.align["Votes"] = "r"
    table.align["Win %"] = "r"

    for row in rows[:top] if top else rows:
        record = PlayerRecord(wins=row.wins, losses=row.losses)
        table.add_row([
            row.rank,
            row.player.name,
            row.player.team or "",
            f"{row.score * 100:.1f}",
            row.exposure,
            f"{row.wins}-{row.losses}",
            f"{record.win_rate:.0%}",
        ])

    print(table)


def run_votes(session: VotingSession, voter: Voter, limit: int | None = None) -> int:
    """Show pairs to voter until limit votes are counted or the voter quits."""
    logger = get_logger("run_votes")
    counted = 0
    failures = 0
    pair = session.next_pair()
    while pair is not None and (limit is None or counted < limit):
        winner_id = voter.choose(*pair)
        if winner_id is None:
            pair = session.next_pair()
            continue
        if session.vote(winner_id):
            counted += 1
            failures = 0
            pair = session.current_pair
            continue

        failures += 1
        if failures >= MAX_CONSECUTIVE_FAILURES:
            logger.error(f"{failures} votes in a row were not counted, stopping")
            print("Votes are not being saved right now, stopping.")
            return counted
        logger.warning("Vote was not counted, showing the same pair again")
        print("Vote was not counted, please try again.")

    if pair is None:
        print("Not enough players in the pool to compare.")
    return counted


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(level=args.log_level, debug=args.debug)
    logger = get_logger("main")

    try:
        if args.command == "seed":
            store = SQLiteAggregateStore(Path(args.db))
            players = RosterFetcher(Path(args.roster)).list_players()
            count = store.upsert_players(players)
            print(f"Loaded {count} players into {args.db}")
            return

        rng = random.Random(getattr(args, "seed", None))
        store, session = wire_session(args, rng=rng)

        if not session.refresh():
            print(f"Error: could not read rankings from {args.db}")
            sys.exit(1)

        if args.command == "leaderboard":
            print_leaderboard(session.leaderboard(), top=args.top)
            print(f"{store.vote_count()} votes recorded")

        elif args.command == "simulate":
            ground_truth = {player.player_id: rng.random() for player in store.list_items()}
            voter = SimulatedVoter(ground_truth, noise=args.noise, rng=rng)
            counted = run_votes(session, voter, limit=args.votes)
            print(f"Cast {counted} simulated votes")
            print_leaderboard(session.leaderboard(), top=20)

        elif args.command == "vote":
            print("Hoops Voter - pick the player with more trade value")
            if session.state and session.state.pool:
                print(f"{len(session.state.pool)} players in pool")
            try:
                counted = run_votes(session, ConsoleVoter())
            except KeyboardInterrupt:
                counted = session.recorder.recorded_votes
            print(f"\nThanks! {counted} votes counted this session.")
            for row in session.leaderboard()[:10]:
                print(f"  {row.rank}. {describe(row.player)}  {row.score * 100:.1f}")

    except (ConfigurationError, ValidationError, FileNotFoundError, IsADirectoryError, json.JSONDecodeError) as e:
        logger.error(str(e))
        print(f"Error: {e}")
        sys.exit(1)
    except StoreError as e:
        logger.error(f"Store failure: {e}")
        print(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\nInterrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
