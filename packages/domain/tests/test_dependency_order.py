"""Tests for dependency-ordered resolution and the shared Kahn helper."""

import logging

import pytest

from gridcalc_domain.engine import (
    CYCLE_DETECTED,
    UNRESOLVED_DEPENDENCY,
    DependencyOrderDriver,
    kahn_order,
    parse_grid,
    resolve_grid,
)
from gridcalc_domain.schemas import (
    EmptyStatus,
    ErrorStatus,
    FinishedStatus,
    NumberValue,
    PendingStatus,
    Position,
    ResolutionCFG,
)


P = Position.at


def resolve_ordered(text):
    grid = parse_grid(text, delimiter=";")
    report = DependencyOrderDriver().resolve(grid)
    return grid, report


def number_at(grid, row, column):
    status = grid.get(P(row, column))
    assert isinstance(status, FinishedStatus), f"{P(row, column)} is {status!r}"
    return status.cell.value.number


# =============================================================================
# kahn_order
# =============================================================================

def test_kahn_linear_chain():
    """Test nodes come after their dependencies."""
    ordered, remaining = kahn_order(["c", "a", "b"], {"c": {"b"}, "b": {"a"}})
    assert ordered == ["a", "b", "c"]
    assert remaining == []


def test_kahn_cycle():
    """Test cycle members are left over in input order."""
    ordered, remaining = kahn_order(["x", "a", "b"], {"a": {"b"}, "b": {"a"}})
    assert ordered == ["x"]
    assert remaining == ["a", "b"]


def test_kahn_self_dependency():
    """Test a node depending on itself can never be ordered."""
    ordered, remaining = kahn_order(["a"], {"a": {"a"}})
    assert ordered == []
    assert remaining == ["a"]


def test_kahn_ignores_external_dependencies():
    """Test dependencies outside the node set count as available."""
    ordered, remaining = kahn_order(["a"], {"a": {"outside"}})
    assert ordered == ["a"]
    assert remaining == []


# =============================================================================
# Resolution
# =============================================================================

def test_same_results_as_fixed_point():
    """Test the basic scenarios resolve identically."""
    grid, report = resolve_ordered("1;2;3\nSum(Span([0,0],[0,2]));[1,0]")

    assert number_at(grid, 1, 0) == 6.0
    assert number_at(grid, 1, 1) == 6.0
    assert report.converged
    assert report.errors == []
    assert report.passes_run == 1


def test_chain_longer_than_pass_budget():
    """Test a long chain resolves in one ordered sweep."""
    chain = ";".join(f"[0,{i + 1}]" for i in range(1000)) + ";1"
    grid, report = resolve_ordered(chain)

    assert report.converged
    assert number_at(grid, 0, 0) == 1.0


def test_chain_in_reverse_position_order():
    """Test order follows dependencies, not positions."""
    grid, _ = resolve_ordered("[1,0]\n[2,0]\nSum(Span([3,0],[4,0]))\n4\n5")
    assert number_at(grid, 0, 0) == 9.0


def test_reference_to_empty():
    """Test a reference to a blank field copies Empty."""
    grid, _ = resolve_ordered(";[0,0]")
    assert grid.get(P(0, 1)) == EmptyStatus()


def test_missing_target_is_error(caplog):
    """Test a reference to an absent position becomes an explicit error."""
    with caplog.at_level(logging.WARNING, logger="gridcalc_domain"):
        grid, report = resolve_ordered("1;[7,7]")

    assert grid.get(P(0, 1)) == ErrorStatus(reason=UNRESOLVED_DEPENDENCY)
    assert grid.get(P(0, 1)).display() == ("Error", None)
    assert report.errors == [P(0, 1)]
    assert "references missing position [7, 7]" in caplog.text


def test_error_propagates_to_dependents():
    """Test cells reading an error become errors too."""
    grid, report = resolve_ordered("[9,9];[0,0];Sum(Span([0,0],[0,1]))")

    assert grid.get(P(0, 1)) == ErrorStatus(reason=UNRESOLVED_DEPENDENCY)
    assert grid.get(P(0, 2)) == ErrorStatus(reason=UNRESOLVED_DEPENDENCY)
    assert report.errors == [P(0, 0), P(0, 1), P(0, 2)]


def test_cycle_detected(caplog):
    """Test mutual references become cycle errors."""
    with caplog.at_level(logging.WARNING, logger="gridcalc_domain"):
        grid, report = resolve_ordered("[0,1];[0,0];5")

    assert grid.get(P(0, 0)) == ErrorStatus(reason=CYCLE_DETECTED)
    assert grid.get(P(0, 1)) == ErrorStatus(reason=CYCLE_DETECTED)
    assert number_at(grid, 0, 2) == 5.0
    assert report.converged
    assert "Circular references: [0, 0], [0, 1]" in caplog.text


def test_self_reference_is_cycle():
    """Test a cell referencing itself is a cycle of one."""
    grid, _ = resolve_ordered("[0,0]")
    assert grid.get(P(0, 0)) == ErrorStatus(reason=CYCLE_DETECTED)


def test_sum_covering_itself_is_cycle():
    """Test an aggregate whose range includes its own position."""
    grid, _ = resolve_ordered("1\nSum(Span([0,0],[1,0]))")
    assert grid.get(P(1, 0)) == ErrorStatus(reason=CYCLE_DETECTED)


def test_downstream_of_cycle_is_unresolved():
    """Test cells that only read a cycle are not cycle members."""
    grid, report = resolve_ordered("[0,1];[0,0];[0,0]")

    assert grid.get(P(0, 2)) == ErrorStatus(reason=UNRESOLVED_DEPENDENCY)
    assert grid.get(P(0, 0)).reason == CYCLE_DETECTED
    assert report.errors == [P(0, 0), P(0, 1), P(0, 2)]


def test_malformed_formula_stays_pending():
    """Test malformed syntax is still left pending, not turned into an error."""
    grid, report = resolve_ordered("[abc];1")

    assert isinstance(grid.get(P(0, 0)), PendingStatus)
    assert report.pending == [P(0, 0)]
    assert report.errors == []


def test_sum_waits_on_malformed_member():
    """Test a sum over a stuck pending cell stays pending."""
    grid, _ = resolve_ordered("Span([0,0];2\nSum(Span([0,0],[0,1]))")
    assert isinstance(grid.get(P(1, 0)), PendingStatus)


def test_resolve_grid_selects_strategy():
    """Test resolve_grid dispatches on the configured strategy."""
    grid = parse_grid("[0,1];[0,0]", delimiter=";")
    report = resolve_grid(grid, ResolutionCFG(strategy="dependency_order"))

    assert report.strategy == "dependency_order"
    assert all(isinstance(grid.get(p), ErrorStatus) for p in grid)


@pytest.mark.parametrize("strategy", ["fixed_point", "dependency_order"])
def test_strategies_agree_on_acyclic_grids(strategy):
    """Test both strategies give the same finished values without cycles."""
    text = "1;2\n3;[0,0]\nSum(Span([0,0],[1,1]));[2,0]"
    grid = parse_grid(text, delimiter=";")
    resolve_grid(grid, ResolutionCFG(strategy=strategy))

    assert grid.get(P(2, 0)).cell.value == NumberValue(number=7.0)
    assert grid.get(P(2, 1)).cell.value == NumberValue(number=7.0)
