"""Tests for traversal cost tables."""

import pytest
from conftest import at

from portalroute.costs import (
    DEFAULT_COST,
    IMPASSABLE,
    CostTable,
    check_cost,
    uniform_cost,
)


def test_uniform_cost():
    assert uniform_cost(at(3, 3)) == DEFAULT_COST


def test_table_default_and_overrides():
    table = CostTable(default=2, overrides={at(1, 0): 7})
    assert table(at(0, 0)) == 2
    assert table(at(1, 0)) == 7


def test_block_marks_impassable():
    table = CostTable()
    table.block(at(0, 1), at(0, 2))
    assert table(at(0, 1)) == IMPASSABLE
    assert table(at(0, 2)) == IMPASSABLE


def test_from_names():
    table = CostTable.from_names({"W0N0": 9}, default=3)
    assert table(at(-1, -1)) == 9
    assert table(at(0, 0)) == 3


@pytest.mark.parametrize("value", [0, 1, 254, IMPASSABLE])
def test_check_cost_accepts_range(value):
    assert check_cost(value) == value


@pytest.mark.parametrize("value", [-1, 256, 1000])
def test_check_cost_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        check_cost(value)


@pytest.mark.parametrize("value", [True, 1.0, "1", None])
def test_check_cost_rejects_non_integers(value):
    with pytest.raises(TypeError):
        check_cost(value)


def test_table_validates_on_creation():
    with pytest.raises(ValueError):
        CostTable(default=-1)
    with pytest.raises(ValueError):
        CostTable.from_names({"E0S0": 300})
