"""Best-first (A*) route search between a region and a set of goal regions."""

from __future__ import annotations

import heapq
from dataclasses import asdict, dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from portalroute.costs import IMPASSABLE, CostCallback, check_cost
from portalroute.geo import Direction, Region, manhattan_distance
from portalroute.logger import Logger

if TYPE_CHECKING:
    from portalroute.exits import ExitProvider


# region Types


class ClosingMode(str, Enum):
    """When a region stops being eligible for (re)discovery."""

    # Closed the moment it is first seen as a neighbour; the first goal
    # discovered wins and its entering cost is never queried.
    DISCOVERY = "discovery"
    # Closed when popped as the best candidate; cheaper paths re-open regions
    # and the cheapest goal wins.
    EXPANSION = "expansion"

    @classmethod
    def from_value(cls, value: ClosingMode | str | None) -> ClosingMode:
        """Normalize arbitrary user input into a `ClosingMode`."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.DISCOVERY
        try:
            return cls(value.lower())
        except ValueError as exc:
            valid = ", ".join(mode.value for mode in cls)
            msg = f"Invalid closing mode: {value!r}. Expected one of {{{valid}}}."
            raise ValueError(msg) from exc


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Tunables for a single route search."""

    closing: ClosingMode = ClosingMode.DISCOVERY
    max_expansions: int | None = None
    accept_origin_goal: bool = False

    def __post_init__(self) -> None:
        if self.max_expansions is not None and self.max_expansions < 0:
            msg = f"max_expansions must be non-negative, got {self.max_expansions}."
            raise ValueError(msg)


@dataclass(slots=True)
class SearchStats:
    """Exploration counters collected during one search."""

    expanded: int = 0
    discovered: int = 0
    pushed: int = 0
    max_frontier: int = 0

    def note_push(self, frontier_size: int) -> None:  # noqa: D102
        self.pushed += 1
        self.max_frontier = max(self.max_frontier, frontier_size)

    def as_dict(self) -> dict[str, int]:  # noqa: D102
        return asdict(self)


@dataclass(slots=True)
class RouteResult:
    """Container for a successful route search."""

    goal: Region
    path: set[Region]
    stats: SearchStats


class NoRouteError(RuntimeError):
    """Raised when the frontier runs dry before any goal is reached."""

    def __init__(self, stats: SearchStats) -> None:
        super().__init__("No route found.")
        self.stats = stats


# endregion Types


# region Frontier & ledger


@dataclass(frozen=True, slots=True)
class OpenSetEntry:
    """A candidate region waiting in the frontier."""

    region: Region
    # cost of the best known path from the origin to `region`
    g_score: int
    # g_score plus the heuristic estimate to the closest goal
    f_score: int
    # direction travelled to reach `region`; None for the origin
    open_dir: Direction | None

    @classmethod
    def open(
        cls,
        region: Region,
        g_score: int,
        open_dir: Direction | None,
        goals: Iterable[Region],
    ) -> OpenSetEntry:
        """Score `region` against `goals` and wrap it as a frontier entry."""
        return cls(
            region=region,
            g_score=g_score,
            f_score=g_score + heuristic_cost(region, goals),
            open_dir=open_dir,
        )

    def __lt__(self, other: OpenSetEntry) -> bool:
        return self.f_score < other.f_score


class Frontier:
    """Min-heap of open entries ordered by f-score."""

    __slots__ = ("_heap",)

    def __init__(self) -> None:
        self._heap: list[OpenSetEntry] = []

    def push(self, entry: OpenSetEntry) -> None:  # noqa: D102
        heapq.heappush(self._heap, entry)

    def pop(self) -> OpenSetEntry:  # noqa: D102
        return heapq.heappop(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


class Ledger:
    """Discovered regions and the direction each one was reached by."""

    __slots__ = ("_came_from",)

    def __init__(self, origin: Region) -> None:
        self._came_from: dict[Region, Direction | None] = {origin: None}

    def __contains__(self, region: object) -> bool:
        return region in self._came_from

    def __getitem__(self, region: Region) -> Direction | None:
        return self._came_from[region]

    def __len__(self) -> int:
        return len(self._came_from)

    def record(self, region: Region, direction: Direction) -> None:
        """Store (or replace) the direction used to reach `region`."""
        self._came_from[region] = direction


# endregion Frontier & ledger


# region API


def heuristic_cost(region: Region, goals: Iterable[Region]) -> int:
    """Return the lowest Manhattan distance from `region` to any goal."""
    return min(manhattan_distance(region, goal) for goal in goals)


def reconstruct_path(
    goal: Region,
    ledger: Ledger,
    logger: Logger = Logger(),  # noqa: B008
) -> set[Region]:
    """Walk the ledger backwards from `goal` and collect the visited regions.

    The walk ends at the region recorded without a direction (the origin).
    A missing ledger entry or a step off the world edge ends it early; the
    regions gathered so far are returned and the stop is logged at debug
    level.
    """
    path = {goal}
    cursor = goal

    while True:
        try:
            direction = ledger[cursor]
        except KeyError:
            logger.debug("path.truncated", at=cursor, reason="missing")
            break
        if direction is None:
            break
        previous = cursor.neighbor(-direction)
        if previous is None or previous in path:
            logger.debug("path.truncated", at=cursor, reason="unreachable")
            break
        path.add(previous)
        cursor = previous

    return path


def search_route(
    origin: Region,
    goals: Iterable[Region],
    cost_callback: CostCallback,
    exits: ExitProvider,
    *,
    options: SearchOptions = SearchOptions(),  # noqa: B008
    logger: Logger = Logger(),  # noqa: B008
) -> RouteResult:
    """Search for a route from `origin` to any region in `goals`.

    Parameters
    ----------
    origin:
        Region the route starts from.
    goals:
        Non-empty collection of acceptable destinations.
    cost_callback:
        Returns the cost of entering a region, within ``0..IMPASSABLE``.
        Regions costing `IMPASSABLE` are never entered.
    exits:
        Connectivity provider listing the exits of each region.
    options:
        Closing mode, expansion budget and origin-goal handling.
    logger:
        Logger controlling status/timing output. Defaults to a silent logger.

    Returns
    -------
    RouteResult
        The reached goal, the unordered set of regions on the route
        (origin and goal included) and the exploration counters.

    Raises
    ------
    NoRouteError
        When every reachable region is exhausted, or the expansion budget
        runs out, before a goal is reached.

    """
    goal_set = frozenset(goals)
    if not goal_set:
        msg = "At least one goal region is required."
        raise ValueError(msg)

    if options.accept_origin_goal and origin in goal_set:
        logger.info("search.origin_is_goal", origin=origin)
        return RouteResult(goal=origin, path={origin}, stats=SearchStats())

    runner = (
        _search_expansion_closed
        if options.closing is ClosingMode.EXPANSION
        else _search_discovery_closed
    )

    search_phase = logger.phase(
        "search.run",
        origin=origin,
        goals=len(goal_set),
        closing=options.closing.value,
    )
    try:
        with search_phase:
            result = runner(origin, goal_set, cost_callback, exits, options, logger)
    except NoRouteError as exc:
        logger.search_stats(exc.stats)
        raise

    logger.search_stats(result.stats)
    logger.info("route.ready", goal=result.goal, regions=len(result.path))
    return result


def find_route(
    origin: Region,
    goals: Iterable[Region],
    cost_callback: CostCallback,
    exits: ExitProvider,
    *,
    options: SearchOptions = SearchOptions(),  # noqa: B008
    logger: Logger = Logger(),  # noqa: B008
) -> set[Region]:
    """Return the set of regions on a route from `origin` to a goal.

    See `search_route` for the parameters; raises `NoRouteError` when no
    goal can be reached.
    """
    return search_route(
        origin,
        goals,
        cost_callback,
        exits,
        options=options,
        logger=logger,
    ).path


# endregion API


# region Search loops


def _search_discovery_closed(
    origin: Region,
    goals: frozenset[Region],
    cost_callback: CostCallback,
    exits: ExitProvider,
    options: SearchOptions,
    logger: Logger,
) -> RouteResult:
    """Run the search closing regions as soon as they are discovered."""
    stats = SearchStats()
    frontier = Frontier()
    # the ledger doubles as the closed set: a region is recorded exactly once
    ledger = Ledger(origin)

    frontier.push(OpenSetEntry.open(origin, 0, None, goals))
    stats.note_push(len(frontier))

    while frontier:
        if _budget_spent(stats, options, logger):
            break
        entry = frontier.pop()
        stats.expanded += 1
        logger.debug(
            "search.expand",
            region=entry.region,
            g=entry.g_score,
            f=entry.f_score,
        )

        for direction in exits.describe_exits(entry.region):
            # skip the step straight back to the region that opened this entry
            if entry.open_dir is not None and direction == -entry.open_dir:
                continue
            neighbor = entry.region.neighbor(direction)
            if neighbor is None or neighbor in ledger:
                continue

            # unvisited: record before testing the goal or querying the cost
            ledger.record(neighbor, direction)
            stats.discovered += 1

            if neighbor in goals:
                path = reconstruct_path(neighbor, ledger, logger)
                return RouteResult(goal=neighbor, path=path, stats=stats)

            step_cost = check_cost(cost_callback(neighbor))
            if step_cost < IMPASSABLE:
                frontier.push(
                    OpenSetEntry.open(
                        neighbor,
                        entry.g_score + step_cost,
                        direction,
                        goals,
                    ),
                )
                stats.note_push(len(frontier))

    raise NoRouteError(stats)


def _search_expansion_closed(
    origin: Region,
    goals: frozenset[Region],
    cost_callback: CostCallback,
    exits: ExitProvider,
    options: SearchOptions,
    logger: Logger,
) -> RouteResult:
    """Run textbook A*: goal test at pop time, cheaper paths re-open regions."""
    stats = SearchStats()
    frontier = Frontier()
    ledger = Ledger(origin)
    best_g = {origin: 0}

    frontier.push(OpenSetEntry.open(origin, 0, None, goals))
    stats.note_push(len(frontier))

    while frontier:
        if _budget_spent(stats, options, logger):
            break
        entry = frontier.pop()
        if entry.g_score > best_g[entry.region]:
            # superseded by a cheaper entry for the same region
            continue
        stats.expanded += 1
        logger.debug(
            "search.expand",
            region=entry.region,
            g=entry.g_score,
            f=entry.f_score,
        )

        if entry.region in goals and (
            entry.region != origin or options.accept_origin_goal
        ):
            path = reconstruct_path(entry.region, ledger, logger)
            return RouteResult(goal=entry.region, path=path, stats=stats)

        for direction in exits.describe_exits(entry.region):
            if entry.open_dir is not None and direction == -entry.open_dir:
                continue
            neighbor = entry.region.neighbor(direction)
            if neighbor is None:
                continue

            step_cost = check_cost(cost_callback(neighbor))
            if step_cost >= IMPASSABLE:
                continue
            g_score = entry.g_score + step_cost
            if g_score >= best_g.get(neighbor, g_score + 1):
                continue

            if neighbor not in ledger:
                stats.discovered += 1
            best_g[neighbor] = g_score
            ledger.record(neighbor, direction)
            frontier.push(OpenSetEntry.open(neighbor, g_score, direction, goals))
            stats.note_push(len(frontier))

    raise NoRouteError(stats)


def _budget_spent(
    stats: SearchStats,
    options: SearchOptions,
    logger: Logger,
) -> bool:
    if options.max_expansions is None or stats.expanded < options.max_expansions:
        return False
    logger.info("search.budget_exhausted", expanded=stats.expanded)
    return True


# endregion Search loops
