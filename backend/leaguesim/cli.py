"""Command line interface: serve the web app, print the table, or run a simulation."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core import config
from .core.logging_utils import configure_logging
from .data import DataFileError, load_snapshot
from .simulator import SimulationError, calculate_magic_number, calculate_results


logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="leaguesim",
        description="Premier League finishing position simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the web app on http://127.0.0.1:8080
  leaguesim serve

  # Print the current table
  leaguesim table

  # Chance Brighton finish in the top 4
  leaguesim simulate Brighton 4 -n 20000 --seed 7
        """
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding standings.json and fixtures.json"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the web app")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)

    subparsers.add_parser("table", help="Print the current standings")

    simulate = subparsers.add_parser("simulate", help="Estimate a team's chance of reaching a rank")
    simulate.add_argument("team", help="Team name exactly as in standings.json")
    simulate.add_argument("rank", type=int, help="Target rank (1 = champion)")
    simulate.add_argument(
        "--n-simulations", "-n",
        type=int,
        default=config.DEFAULT_SIMULATIONS,
        help=f"Number of simulated seasons (default: {config.DEFAULT_SIMULATIONS})"
    )
    simulate.add_argument(
        "--workers", "-w",
        type=int,
        default=config.NUM_SIM_WORKERS,
        help=f"Worker threads (default: {config.NUM_SIM_WORKERS})"
    )
    simulate.add_argument("--seed", type=int, default=None, help="Random seed")

    return parser


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("leaguesim.main:app", host=args.host, port=args.port)
    return 0


def _table(args: argparse.Namespace) -> int:
    snapshot = load_snapshot(args.data_dir or config.DATA_DIR)
    print(snapshot.table.format_table())
    print(f"\n{len(snapshot.fixtures)} fixtures remaining")
    return 0


def _simulate(args: argparse.Namespace) -> int:
    snapshot = load_snapshot(args.data_dir or config.DATA_DIR)
    summary = calculate_results(
        args.team,
        args.rank,
        snapshot.table,
        snapshot.fixtures,
        n_simulations=args.n_simulations,
        n_workers=args.workers,
        seed=args.seed
    )

    print(
        f"Percent chance {summary.team} finishes at or above rank {summary.target_rank}: "
        f"{summary.probability:.2f}%"
    )
    magic = calculate_magic_number(args.team, args.rank, snapshot.table, snapshot.fixtures)
    if magic.clinched:
        print(f"Rank {args.rank} or better is already mathematically clinched")
    elif magic.eliminated:
        print(f"Rank {args.rank} is mathematically out of reach")
    elif magic.magic is not None:
        print(f"Magic number: {magic.magic} points")
    if summary.average_wins_at_rank is not None:
        print(f"Average number of wins at rank {summary.target_rank}: {summary.average_wins_at_rank:.1f}")

    print("\nFinishing position distribution:")
    for rank, pct in summary.position_probabilities.items():
        if summary.position_counts[rank]:
            print(f"  {rank:>2}  {pct:6.2f}%")
    return 0


COMMANDS = {
    "serve": _serve,
    "table": _table,
    "simulate": _simulate,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else None)

    try:
        return COMMANDS[args.command](args)
    except DataFileError as e:
        logger.error("Could not load league data: %s", e)
        return 1
    except SimulationError as e:
        logger.error("%s", e)
        return 2
    except ValueError as e:
        logger.error("Invalid arguments: %s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
