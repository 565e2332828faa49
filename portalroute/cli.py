"""CLI entrypoint for finding a route between rooms."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence, TextIO

import orjson

from .costs import DEFAULT_COST
from .exits import GridExits
from .geo import Region
from .logger import Logger, LoggingMode
from .plan import plan, serialize_route
from .search.astar import ClosingMode, NoRouteError, SearchOptions

LOGGER = logging.getLogger(__name__)


def echo(message: str = "", *, stream: TextIO | None = None) -> None:
    """Write a line to the chosen stream (stdout by default) and flush."""
    stream = stream or sys.stdout
    stream.write(f"{message}\n")
    stream.flush()


def _parse_cost(value: str) -> tuple[str, int]:
    """Parse a ``ROOM=COST`` override."""
    room, sep, cost = value.partition("=")
    if not sep:
        msg = f"expected ROOM=COST, got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    try:
        Region.parse(room)
        return room, int(cost)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments for route finding."""
    parser = argparse.ArgumentParser(
        prog="portalroute",
        description="Find a route from an origin room to a goal room.",
    )
    parser.add_argument("origin", help="Origin room name, e.g. W1N1.")
    parser.add_argument("goals", nargs="+", help="One or more goal room names.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--map",
        type=Path,
        default=None,
        help="Node-link JSON map file (default: assets/regions.json).",
    )
    source.add_argument(
        "--grid",
        nargs=2,
        metavar=("TOP_LEFT", "BOTTOM_RIGHT"),
        default=None,
        help="Route over a fully connected grid between two corner rooms.",
    )
    parser.add_argument(
        "--cost",
        type=_parse_cost,
        action="append",
        default=[],
        metavar="ROOM=COST",
        help="Override the cost of a room (255 marks it impassable).",
    )
    parser.add_argument(
        "--default-cost",
        type=int,
        default=DEFAULT_COST,
        help=f"Cost of rooms without an override (default: {DEFAULT_COST}).",
    )
    parser.add_argument(
        "--closing",
        choices=[mode.value for mode in ClosingMode],
        default=ClosingMode.DISCOVERY.value,
        help="When regions are closed (default: discovery).",
    )
    parser.add_argument(
        "--max-expansions",
        type=int,
        default=None,
        help="Give up after expanding this many regions.",
    )
    parser.add_argument(
        "--accept-origin-goal",
        action="store_true",
        help="Succeed immediately when the origin is one of the goals.",
    )
    parser.add_argument(
        "--logging-mode",
        choices=[mode.value for mode in LoggingMode],
        default=LoggingMode.NONE.value,
        help="Search progress verbosity, written to stderr (default: none).",
    )
    return parser.parse_args(argv)


def run_cli(args: argparse.Namespace) -> int:
    """Run the search described by `args` and print the route as JSON."""
    mode = LoggingMode.from_value(args.logging_mode)
    logger = Logger(mode, stream=sys.stderr)
    try:
        options = SearchOptions(
            closing=ClosingMode.from_value(args.closing),
            max_expansions=args.max_expansions,
            accept_origin_goal=args.accept_origin_goal,
        )
        exits = _grid_exits(args.grid) if args.grid is not None else None
        result = plan(
            args.origin,
            args.goals,
            dict(args.cost),
            default_cost=args.default_cost,
            exits=exits,
            map_path=args.map,
            options=options,
            logger=logger,
        )
    except NoRouteError as exc:
        echo(f"{exc} ({exc.stats.expanded} regions expanded)", stream=sys.stderr)
        return 1
    except (FileNotFoundError, ValueError) as exc:
        echo(f"Invalid input: {exc}", stream=sys.stderr)
        return 2

    echo(orjson.dumps(serialize_route(result)).decode())
    return 0


def _grid_exits(corners: Sequence[str]) -> GridExits:
    top_left, bottom_right = (Region.parse(name) for name in corners)
    return GridExits(top_left, bottom_right)


def _configure_logging(mode: LoggingMode) -> None:
    """Configure a simple logging formatter for CLI runs."""
    level = logging.DEBUG if mode is LoggingMode.DEBUG else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_args(argv)
    _configure_logging(LoggingMode.from_value(args.logging_mode))
    LOGGER.debug("Routing %s -> %s", args.origin, ", ".join(args.goals))
    sys.exit(run_cli(args))


if __name__ == "__main__":
    main()
