"""CLI entrypoint for building a rectangular region map file."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from portalroute.exits import DEFAULT_MAP_FILE, build_grid_graph, write_exit_graph
from portalroute.geo import Region

# region Configuration

LOGGER = logging.getLogger(__name__)

# endregion Configuration


# region CLI


def run_cli(args: argparse.Namespace) -> None:
    """Build the grid map and drop the requested rooms and exits."""
    graph = build_grid_graph(
        Region.parse(args.top_left),
        Region.parse(args.bottom_right),
    )

    for name in args.remove_room:
        region = Region.parse(name)
        if region in graph:
            graph.remove_node(region)
        else:
            LOGGER.warning("Room %s is not part of the grid", name)

    for pair in args.remove_exit:
        u, v = (Region.parse(name) for name in pair)
        if graph.has_edge(u, v):
            graph.remove_edge(u, v)
        else:
            LOGGER.warning("No exit between %s and %s", u, v)

    write_exit_graph(graph, args.output)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments for map building."""
    parser = argparse.ArgumentParser(
        description="Write a node-link JSON map of a fully connected room grid.",
    )
    parser.add_argument("top_left", help="North-west corner room, e.g. W5N5.")
    parser.add_argument("bottom_right", help="South-east corner room, e.g. E5S5.")
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_MAP_FILE,
        help="Destination path for the serialized map (.json).",
    )
    parser.add_argument(
        "--remove-room",
        action="append",
        default=[],
        metavar="ROOM",
        help="Drop a room (and its exits) from the grid.",
    )
    parser.add_argument(
        "--remove-exit",
        action="append",
        nargs=2,
        default=[],
        metavar=("ROOM_A", "ROOM_B"),
        help="Drop the exit between two adjacent rooms.",
    )
    parser.set_defaults(func=run_cli)
    return parser.parse_args(argv)


def _configure_logging() -> None:
    """Configure a simple logging formatter for CLI runs."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    _configure_logging()
    args = parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()

# endregion CLI
