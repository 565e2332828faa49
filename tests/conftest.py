from __future__ import annotations

import pytest

from portalroute.exits import GridExits
from portalroute.geo import Region


def at(x: int, y: int) -> Region:
    return Region.from_coords(x, y)


class RecordingExits:
    """Wraps a provider and remembers which regions were expanded."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.expanded: list[Region] = []

    def describe_exits(self, region):
        self.expanded.append(region)
        return self.inner.describe_exits(region)


class RecordingCost:
    """Cost callback that remembers every region it was asked about."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.queried: list[Region] = []

    def __call__(self, region: Region) -> int:
        self.queried.append(region)
        return self.inner(region)


@pytest.fixture
def grid() -> GridExits:
    """An 11x11 fully connected grid centred on E0S0."""
    return GridExits(at(-5, -5), at(5, 5))
