"""Cell resolution engine.

Parsing and resolution, leaves first:

    expression   arithmetic text -> float
    classify     raw delimited text -> Grid of Empty / Pending / Finished
    formula      "[r, c]", "Span(...)", "Sum(Span(...))" -> structured values
    resolver     one pending cell, one step, against a snapshot
    driver       repeated passes (or dependency order) over the whole grid

Usage:
    from gridcalc_domain.engine import parse_grid, resolve_grid

    grid = parse_grid("1;2;3\\nSum(Span([0,0],[0,2]))", delimiter=";")
    report = resolve_grid(grid)
    grid.get(Position.at(1, 0))   # Finished(Number(6.0))
"""

from .expression import evaluate, try_evaluate
from .classify import classify_cell, parse_grid, split_comment
from .formula import (
    formula_dependencies,
    parse_formula,
    parse_position,
    parse_span,
    parse_sum,
)
from .graph import kahn_order
from .resolver import resolve_step, statuses_in_range, sum_range
from .driver import (
    CYCLE_DETECTED,
    UNRESOLVED_DEPENDENCY,
    DependencyOrderDriver,
    FixedPointDriver,
    ResolutionReport,
    resolve_grid,
)

__all__ = [
    "evaluate",
    "try_evaluate",
    "classify_cell",
    "parse_grid",
    "split_comment",
    "formula_dependencies",
    "parse_formula",
    "parse_position",
    "parse_span",
    "parse_sum",
    "kahn_order",
    "resolve_step",
    "statuses_in_range",
    "sum_range",
    "CYCLE_DETECTED",
    "UNRESOLVED_DEPENDENCY",
    "DependencyOrderDriver",
    "FixedPointDriver",
    "ResolutionReport",
    "resolve_grid",
]
