"""Connectivity providers describing which neighbouring regions exist."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Protocol

import networkx as nx
import orjson
from networkx.readwrite import json_graph

from .geo import CARDINAL_DIRECTIONS, Direction, Region

# region Configuration

LOGGER = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ASSETS_DIR = PROJECT_ROOT / "assets"
DEFAULT_MAP_FILE = ASSETS_DIR / "regions.json"

# endregion Configuration


# region Providers


class ExitProvider(Protocol):
    """Anything that can list the exits of a region."""

    def describe_exits(self, region: Region) -> Mapping[Direction, Region]:
        """Return the directions leading out of `region` to an existing region."""
        ...


class GridExits:
    """Fully connected cardinal grid spanning an inclusive rectangle."""

    __slots__ = ("_max_x", "_max_y", "_min_x", "_min_y")

    def __init__(self, top_left: Region, bottom_right: Region) -> None:
        if top_left.x > bottom_right.x or top_left.y > bottom_right.y:
            msg = f"Grid corners are inverted: {top_left} / {bottom_right}"
            raise ValueError(msg)
        self._min_x, self._min_y = top_left.x, top_left.y
        self._max_x, self._max_y = bottom_right.x, bottom_right.y

    def __contains__(self, region: object) -> bool:
        return (
            isinstance(region, Region)
            and self._min_x <= region.x <= self._max_x
            and self._min_y <= region.y <= self._max_y
        )

    def describe_exits(self, region: Region) -> dict[Direction, Region]:  # noqa: D102
        if region not in self:
            return {}
        exits: dict[Direction, Region] = {}
        for direction in CARDINAL_DIRECTIONS:
            neighbor = region.neighbor(direction)
            if neighbor is not None and neighbor in self:
                exits[direction] = neighbor
        return exits


class GraphExits:
    """Exits read from an undirected graph whose nodes are regions.

    Edges joining regions that are not adjacent on the world grid are
    ignored, since the search derives neighbours from directions.
    """

    __slots__ = ("graph",)

    def __init__(self, graph: nx.Graph) -> None:
        self.graph = graph

    def describe_exits(self, region: Region) -> dict[Direction, Region]:  # noqa: D102
        if region not in self.graph:
            return {}
        exits: dict[Direction, Region] = {}
        for neighbor in self.graph.neighbors(region):
            direction = Direction.between(region, neighbor)
            if direction is None:
                LOGGER.debug("Ignoring non-adjacent edge %s -> %s", region, neighbor)
                continue
            exits[direction] = neighbor
        return exits


# endregion Providers


# region Map files


def build_grid_graph(top_left: Region, bottom_right: Region) -> nx.Graph:
    """Return a cardinal grid graph covering the inclusive rectangle."""
    if top_left.x > bottom_right.x or top_left.y > bottom_right.y:
        msg = f"Grid corners are inverted: {top_left} / {bottom_right}"
        raise ValueError(msg)
    width = bottom_right.x - top_left.x + 1
    height = bottom_right.y - top_left.y + 1
    grid = nx.grid_2d_graph(width, height)
    mapping = {
        (col, row): Region.from_coords(top_left.x + col, top_left.y + row)
        for col, row in grid.nodes
    }
    return nx.relabel_nodes(grid, mapping)


def serialize_exit_graph(graph: nx.Graph) -> dict:
    """Convert a region graph into a node-link mapping keyed by room names."""
    named = nx.relabel_nodes(graph, str)
    return json_graph.node_link_data(named, edges="edges")


def write_exit_graph(graph: nx.Graph, output_path: Path) -> None:
    """Persist a region graph as node-link JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(
        orjson.dumps(serialize_exit_graph(graph), option=orjson.OPT_INDENT_2),
    )
    LOGGER.info(
        "Serialized map to %s (%d regions / %d exits)",
        output_path,
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )


def load_exit_graph(map_path: str | Path | None = None) -> nx.Graph:
    """Load a node-link JSON map and return a graph of regions.

    Parameters
    ----------
    map_path:
        Optional custom path to the map file. When omitted, the default
        `assets/regions.json` file is used.

    Returns
    -------
    nx.Graph
        An undirected graph whose nodes are `Region` instances.

    """
    path = Path(map_path) if map_path is not None else DEFAULT_MAP_FILE
    if not path.exists():
        msg = f"Map file not found: {path}"
        raise FileNotFoundError(msg)

    try:
        document = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        msg = f"Unable to parse map file {path}: {exc}"
        raise ValueError(msg) from exc

    named = json_graph.node_link_graph(
        document,
        directed=False,
        multigraph=False,
        edges="edges",
    )
    graph = nx.relabel_nodes(named, Region.parse)
    LOGGER.debug(
        "Loaded map %s with %d regions / %d exits",
        path,
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    return graph


# endregion Map files
