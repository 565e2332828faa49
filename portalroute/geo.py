"""Region coordinates and compass directions shared across routing modules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

# Regions span -WORLD_HALF_SIZE..WORLD_HALF_SIZE - 1 on both axes.
WORLD_HALF_SIZE = 128
_AXIS_BITS = 8
_AXIS_MASK = (1 << _AXIS_BITS) - 1

_ROOM_NAME = re.compile(r"^([WE])(\d{1,3})([NS])(\d{1,3})$")

Offset = tuple[int, int]  # (dx, dy), y grows southwards


class Direction(IntEnum):
    """Compass direction between neighbouring regions."""

    TOP = 1
    TOP_RIGHT = 2
    RIGHT = 3
    BOTTOM_RIGHT = 4
    BOTTOM = 5
    BOTTOM_LEFT = 6
    LEFT = 7
    TOP_LEFT = 8

    def __neg__(self) -> Direction:
        return Direction((self.value + 3) % 8 + 1)

    @property
    def offset(self) -> Offset:
        """Return the `(dx, dy)` step taken when moving in this direction."""
        return _OFFSETS[self]

    @classmethod
    def between(cls, start: Region, end: Region) -> Direction | None:
        """Return the direction leading from `start` to an adjacent `end`."""
        return _BY_OFFSET.get((end.x - start.x, end.y - start.y))


_OFFSETS: dict[Direction, Offset] = {
    Direction.TOP: (0, -1),
    Direction.TOP_RIGHT: (1, -1),
    Direction.RIGHT: (1, 0),
    Direction.BOTTOM_RIGHT: (1, 1),
    Direction.BOTTOM: (0, 1),
    Direction.BOTTOM_LEFT: (-1, 1),
    Direction.LEFT: (-1, 0),
    Direction.TOP_LEFT: (-1, -1),
}
_BY_OFFSET: dict[Offset, Direction] = {
    offset: direction for direction, offset in _OFFSETS.items()
}

CARDINAL_DIRECTIONS = (
    Direction.TOP,
    Direction.RIGHT,
    Direction.BOTTOM,
    Direction.LEFT,
)


@dataclass(frozen=True, slots=True, order=True)
class Region:
    """A map region addressed by a packed coordinate key.

    The key stores `x + WORLD_HALF_SIZE` in the high byte and
    `y + WORLD_HALF_SIZE` in the low byte, which gives regions a cheap hash
    and a total ordering (column-major).
    """

    packed: int

    @classmethod
    def from_coords(cls, x: int, y: int) -> Region:
        """Build a region from world coordinates, validating the bounds."""
        if not (_in_bounds(x) and _in_bounds(y)):
            msg = f"Region coordinates out of range: {(x, y)}"
            raise ValueError(msg)
        return cls(
            ((x + WORLD_HALF_SIZE) << _AXIS_BITS) | (y + WORLD_HALF_SIZE),
        )

    @classmethod
    def parse(cls, name: str) -> Region:
        """Parse a room name such as ``"W3N7"`` or ``"E0S0"``.

        Parameters
        ----------
        name:
            Room name made of a horizontal part (`W`/`E` plus a number)
            followed by a vertical part (`N`/`S` plus a number).

        Returns
        -------
        Region
            The region addressed by `name`.

        """
        if not isinstance(name, str):
            msg = f"Room name must be a string, got {name!r}"
            raise ValueError(msg)  # noqa: TRY004
        match = _ROOM_NAME.match(name.strip().upper())
        if match is None:
            msg = f"Invalid room name: {name!r}"
            raise ValueError(msg)
        h_dir, h_num, v_dir, v_num = match.groups()
        x = -int(h_num) - 1 if h_dir == "W" else int(h_num)
        y = -int(v_num) - 1 if v_dir == "N" else int(v_num)
        try:
            return cls.from_coords(x, y)
        except ValueError as exc:
            msg = f"Room name outside of the world: {name!r}"
            raise ValueError(msg) from exc

    @property
    def x(self) -> int:  # noqa: D102
        return (self.packed >> _AXIS_BITS) - WORLD_HALF_SIZE

    @property
    def y(self) -> int:  # noqa: D102
        return (self.packed & _AXIS_MASK) - WORLD_HALF_SIZE

    def checked_add(self, offset: Offset) -> Region | None:
        """Return the region shifted by `offset`, or None past the world edge."""
        x = self.x + offset[0]
        y = self.y + offset[1]
        if not (_in_bounds(x) and _in_bounds(y)):
            return None
        return Region.from_coords(x, y)

    def neighbor(self, direction: Direction) -> Region | None:
        """Return the adjacent region in `direction`, if it exists."""
        return self.checked_add(direction.offset)

    def __str__(self) -> str:
        x, y = self.x, self.y
        horizontal = f"W{-x - 1}" if x < 0 else f"E{x}"
        vertical = f"N{-y - 1}" if y < 0 else f"S{y}"
        return horizontal + vertical

    def __repr__(self) -> str:
        return f"Region({self})"


def manhattan_distance(a: Region, b: Region) -> int:
    """Return the sum of absolute coordinate differences."""
    return abs(a.x - b.x) + abs(a.y - b.y)


def _in_bounds(value: int) -> bool:
    return -WORLD_HALF_SIZE <= value < WORLD_HALF_SIZE
