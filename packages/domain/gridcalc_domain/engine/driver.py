"""Resolution drivers: advance every pending cell of a grid.

FixedPointDriver (default)
    Jacobi iteration. Each pass takes a snapshot and advances every pending
    cell one step against it, so updates made during a pass are only seen by
    the next pass. A reference that copies a still-pending reference takes
    over its target, so a chain of k links needs about log2(k) + 2 passes.
    Chains beyond the reach of the budget, cycles and missing targets stay
    Pending.

DependencyOrderDriver
    Builds the cell dependency graph and evaluates in topological order.
    Cells on a cycle become Error("cycle_detected"); cells that depend on a
    missing position or on an error become Error("unresolved_dependency").

Both drivers mutate the grid in place and return a ResolutionReport.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional, Set

from ..schemas import (
    ErrorStatus,
    Grid,
    GridSnapshot,
    Position,
    ReferenceValue,
    ResolutionCFG,
    TextValue,
)
from .formula import formula_dependencies
from .graph import kahn_order
from .resolver import resolve_step

logger = logging.getLogger(__name__)

CYCLE_DETECTED = "cycle_detected"
UNRESOLVED_DEPENDENCY = "unresolved_dependency"


@dataclass
class ResolutionReport:
    """Outcome of resolving one grid.

    Attributes:
        strategy: Driver that produced the report
        passes_run: Number of passes executed (dependency order counts as one)
        updates_per_pass: Number of statuses replaced in each pass
        pending: Positions still Pending at the end, row-major
        errors: Positions turned into Error, row-major
    """

    strategy: str
    passes_run: int = 0
    updates_per_pass: List[int] = field(default_factory=list)
    pending: List[Position] = field(default_factory=list)
    errors: List[Position] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        """True when no cell is left Pending."""
        return not self.pending

    @property
    def total_updates(self) -> int:
        return sum(self.updates_per_pass)


# =============================================================================
# Fixed-Point Driver
# =============================================================================

class FixedPointDriver:
    """Bounded snapshot-then-update iteration.

    Example:
        grid = parse_grid("5\\n[0, 0]", delimiter=";")
        report = FixedPointDriver(max_passes=10).resolve(grid)
        report.passes_run   # 3 (the third pass changes nothing, iteration stops)
    """

    strategy = "fixed_point"

    def __init__(self, max_passes: int = 10):
        if max_passes < 1:
            raise ValueError(f"max_passes must be at least 1, got {max_passes}")
        self.max_passes = max_passes

    def run_pass(self, grid: Grid) -> int:
        """Run one pass over every pending cell.

        Returns:
            Number of statuses replaced
        """
        snapshot = grid.snapshot()
        updates = 0
        for position in grid.pending_positions():
            updated = resolve_step(snapshot, snapshot[position])
            if updated is not None:
                grid.set(position, updated)
                updates += 1
        return updates

    def resolve(self, grid: Grid) -> ResolutionReport:
        """Resolve the grid in place.

        Stops after ``max_passes`` or as soon as a pass changes nothing (the
        next snapshot would be identical, so later passes could not change
        anything either).
        """
        report = ResolutionReport(strategy=self.strategy)

        for _ in range(self.max_passes):
            updates = self.run_pass(grid)
            report.passes_run += 1
            report.updates_per_pass.append(updates)
            if updates == 0:
                break

        report.pending = grid.pending_positions()
        if report.pending:
            logger.info(
                "%d cell(s) still pending after %d pass(es)",
                len(report.pending), report.passes_run,
            )
        return report


# =============================================================================
# Dependency-Ordered Driver
# =============================================================================

class DependencyOrderDriver:
    """Topological evaluation with explicit cycle and missing-target errors."""

    strategy = "dependency_order"

    def resolve(self, grid: Grid) -> ResolutionReport:
        """Resolve the grid in place."""
        report = ResolutionReport(strategy=self.strategy, passes_run=1)
        live = MappingProxyType(grid.cells)
        updates = 0

        # 1. Expand formula text into structured values
        for position in grid.pending_positions():
            updated = resolve_step(live, grid.cells[position])
            if updated is not None:
                grid.set(position, updated)
                updates += 1

        # 2. Dependency graph between pending cells
        present = set(grid.cells)
        nodes: List[Position] = []
        dependencies: Dict[Position, Set[Position]] = {}
        for position in grid.pending_positions():
            value = grid.cells[position].cell.value
            if isinstance(value, TextValue):
                # Malformed formula, already reported during expansion
                continue
            if isinstance(value, ReferenceValue) and value.target not in present:
                logger.warning("%s references missing position %s", position, value.target)
                grid.set(position, ErrorStatus(reason=UNRESOLVED_DEPENDENCY))
                report.errors.append(position)
                updates += 1
                continue
            nodes.append(position)
            dependencies[position] = formula_dependencies(value, present)

        ordered, remaining = kahn_order(nodes, dependencies)

        # 3. Evaluate in order against the live grid
        for position in ordered:
            updates += self._evaluate(grid, live, position, dependencies[position], report)

        # 4. Cycles, and cells stuck behind them
        if remaining:
            updates += self._mark_cycles(grid, remaining, dependencies, report)

        report.updates_per_pass.append(updates)
        report.pending = grid.pending_positions()
        report.errors.sort(key=lambda p: (p.row, p.column))
        return report

    def _evaluate(
        self,
        grid: Grid,
        live: GridSnapshot,
        position: Position,
        deps: Set[Position],
        report: ResolutionReport,
    ) -> int:
        if any(isinstance(live.get(dep), ErrorStatus) for dep in deps if dep != position):
            grid.set(position, ErrorStatus(reason=UNRESOLVED_DEPENDENCY))
            report.errors.append(position)
            return 1

        updates = 0
        # A copied reference may bring formula text that needs one more step
        for _ in range(len(grid) + 1):
            updated = resolve_step(live, grid.cells[position])
            if updated is None:
                break
            grid.set(position, updated)
            updates += 1
        return updates

    def _mark_cycles(
        self,
        grid: Grid,
        remaining: List[Position],
        dependencies: Dict[Position, Set[Position]],
        report: ResolutionReport,
    ) -> int:
        # Peel cells that merely depend on a cycle: reverse the edges and
        # let Kahn's algorithm strip everything no cycle member depends on.
        remaining_set = set(remaining)
        dependents: Dict[Position, Set[Position]] = {p: set() for p in remaining}
        for position in remaining:
            for dep in dependencies[position]:
                if dep in remaining_set:
                    dependents[dep].add(position)

        downstream, on_cycle = kahn_order(remaining, dependents)

        for position in on_cycle:
            grid.set(position, ErrorStatus(reason=CYCLE_DETECTED))
        for position in downstream:
            grid.set(position, ErrorStatus(reason=UNRESOLVED_DEPENDENCY))
        report.errors.extend(remaining)

        logger.warning(
            "Circular references: %s",
            ", ".join(p.literal() for p in sorted(on_cycle, key=lambda p: (p.row, p.column))),
        )
        return len(remaining)


# =============================================================================
# Entry Point
# =============================================================================

def resolve_grid(grid: Grid, config: Optional[ResolutionCFG] = None) -> ResolutionReport:
    """Resolve a freshly parsed grid with the configured strategy.

    Args:
        grid: Grid to resolve in place
        config: Resolution options (default: ten fixed-point passes)

    Returns:
        ResolutionReport describing what happened
    """
    config = config or ResolutionCFG()
    if config.strategy == "dependency_order":
        driver = DependencyOrderDriver()
    else:
        driver = FixedPointDriver(max_passes=config.max_passes)

    report = driver.resolve(grid)
    logger.debug(
        "Resolved grid with %s: %d pass(es), %d update(s), %d pending, %d error(s)",
        report.strategy, report.passes_run, report.total_updates,
        len(report.pending), len(report.errors),
    )
    return report
