"""Per-region traversal costs consumed by the route search."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping

from .geo import Region

# Costs are small unsigned integers; the top of the range marks a blocked region.
IMPASSABLE = 255
DEFAULT_COST = 1

CostCallback = Callable[[Region], int]


def check_cost(value: object) -> int:
    """Return `value` when it is a valid traversal cost, else raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"Traversal cost must be an integer, got {value!r}."
        raise TypeError(msg)
    if not 0 <= value <= IMPASSABLE:
        msg = f"Traversal cost must be within 0..{IMPASSABLE}, got {value}."
        raise ValueError(msg)
    return value


def uniform_cost(region: Region) -> int:  # noqa: ARG001
    """Charge the default cost for every region."""
    return DEFAULT_COST


@dataclass(slots=True)
class CostTable:
    """Callable cost lookup with a default and per-region overrides."""

    default: int = DEFAULT_COST
    overrides: dict[Region, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        check_cost(self.default)
        for cost in self.overrides.values():
            check_cost(cost)

    @classmethod
    def from_names(
        cls,
        costs: Mapping[str, int],
        default: int = DEFAULT_COST,
    ) -> CostTable:
        """Build a table from room-name keys, e.g. ``{"W1N1": 255}``."""
        return cls(
            default=default,
            overrides={Region.parse(name): cost for name, cost in costs.items()},
        )

    def block(self, *regions: Region) -> None:
        """Mark `regions` as impassable."""
        for region in regions:
            self.overrides[region] = IMPASSABLE

    def __call__(self, region: Region) -> int:
        return self.overrides.get(region, self.default)
