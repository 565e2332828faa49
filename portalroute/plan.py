"""High-level entrypoint for routing that wires map setup and the region search."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence

from .costs import DEFAULT_COST, CostTable
from .exits import GraphExits, load_exit_graph
from .geo import Region
from .logger import Logger, LoggingMode
from .search.astar import RouteResult, SearchOptions, search_route

if TYPE_CHECKING:
    from pathlib import Path

    from .exits import ExitProvider


def plan(
    origin: str,
    goals: Sequence[str],
    costs: Mapping[str, int] | None = None,
    *,
    default_cost: int = DEFAULT_COST,
    exits: ExitProvider | None = None,
    map_path: str | Path | None = None,
    options: SearchOptions = SearchOptions(),  # noqa: B008
    logger: Logger | None = None,
    logging_mode: LoggingMode | str = LoggingMode.NONE,
) -> RouteResult:
    """Find a route between room names.

    Parameters
    ----------
    origin:
        Room name the route starts from, e.g. ``"W1N1"``.
    goals:
        Room names of acceptable destinations.
    costs:
        Per-room cost overrides; rooms not listed cost `default_cost`.
    default_cost:
        Cost of entering any room missing from `costs`.
    exits:
        Connectivity provider. When omitted, the map at `map_path` (or the
        default map file) is loaded.
    map_path:
        Node-link JSON map to load when `exits` is not given.
    options:
        Search tunables forwarded to `search_route`.
    logger:
        Explicit logger; takes precedence over `logging_mode`.
    logging_mode:
        Controls log verbosity for the planning pipeline. Accepts
        `LoggingMode` values or their lowercase string names.

    """
    if logger is None:
        logger = Logger(LoggingMode.from_value(logging_mode))

    origin_region = Region.parse(origin)
    goal_regions = [Region.parse(goal) for goal in goals]
    cost_table = CostTable.from_names(costs or {}, default=default_cost)

    if exits is None:
        with logger.phase("map.setup"):
            graph = load_exit_graph(map_path)
        logger.map_stats(graph)
        exits = GraphExits(graph)

    return search_route(
        origin_region,
        goal_regions,
        cost_table,
        exits,
        options=options,
        logger=logger,
    )


def serialize_route(result: RouteResult) -> dict:
    """Return a JSON-serializable description of a route."""
    return {
        "route": [str(region) for region in sorted(result.path)],
        "goal": str(result.goal),
        "stats": result.stats.as_dict(),
    }
