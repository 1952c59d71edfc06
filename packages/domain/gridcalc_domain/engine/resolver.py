"""Reference resolution: advance one pending cell by exactly one step.

The resolver reads a snapshot of the whole grid and one status. It returns
the replacement status, or None when no progress is possible this step.
None means "try again later"; it never means the cell is broken.

Steps, by the pending cell's value:

    Text "[r, c]..."          -> Pending(Reference)
    Text "Span(...)..."       -> Pending(Range)
    Text "Sum(Span(...))..."  -> Pending(Aggregate(Range))
    Reference(p)              -> copy of the status at p (if p exists)
    Aggregate(Range)          -> Finished(Number(sum)) once no member is pending
    anything else             -> None

Malformed formula text is logged and left untouched.
"""

import logging
from typing import Iterator, List, Optional, Tuple

from ..exceptions import FormulaSyntaxError, InvariantViolationError
from ..schemas import (
    AggregateValue,
    FinishedStatus,
    GridSnapshot,
    NumberValue,
    PendingStatus,
    Position,
    RangeValue,
    ReferenceValue,
    Status,
    TextValue,
)
from .formula import is_formula_text, parse_formula

logger = logging.getLogger(__name__)


# =============================================================================
# Range Helpers
# =============================================================================

def statuses_in_range(
    snapshot: GridSnapshot,
    span: RangeValue,
) -> Iterator[Tuple[Position, Status]]:
    """Yield (position, status) for every present position inside span.

    Walks whichever is smaller: the rectangle or the grid. Order is not
    significant to callers.
    """
    if span.size <= len(snapshot):
        for position in span.positions():
            status = snapshot.get(position)
            if status is not None:
                yield position, status
    else:
        for position, status in snapshot.items():
            if span.contains(position):
                yield position, status


def sum_range(snapshot: GridSnapshot, span: RangeValue) -> Optional[float]:
    """Sum the finished numbers inside span.

    Returns:
        The sum, or None if any member is still pending

    Empty, error and absent positions contribute nothing and do not block.
    Finished cells without a value contribute nothing. Finished text is
    logged and skipped.
    """
    total = 0.0
    ready = True
    skipped: List[Position] = []

    for position, status in statuses_in_range(snapshot, span):
        if isinstance(status, PendingStatus):
            ready = False
        elif isinstance(status, FinishedStatus):
            value = status.cell.value
            if isinstance(value, NumberValue):
                total += value.number
            elif value is not None:
                skipped.append(position)

    if skipped:
        logger.warning(
            "Non-numeric values skipped in %s: %s",
            span.display(), ", ".join(p.literal() for p in skipped),
        )

    return total if ready else None


# =============================================================================
# Resolution Step
# =============================================================================

def _expand_text(status: PendingStatus, text: str) -> Optional[Status]:
    if not is_formula_text(text):
        logger.debug("No formula to expand in %r", text)
        return None
    try:
        value = parse_formula(text)
    except FormulaSyntaxError as e:
        logger.warning("%s (cell text %r)", e, status.cell.original_text)
        return None
    return PendingStatus(cell=status.cell.with_value(value))


def _follow_reference(snapshot: GridSnapshot, value: ReferenceValue) -> Optional[Status]:
    target = snapshot.get(value.target)
    if target is None:
        return None
    # Statuses are immutable, so the snapshot entry itself is the copy
    return target


def _aggregate(snapshot: GridSnapshot, status: PendingStatus, value: AggregateValue) -> Optional[Status]:
    if not isinstance(value.inner, RangeValue):
        raise InvariantViolationError(
            f"Aggregate must wrap a range, got {value.inner.kind!r} "
            f"(cell text {status.cell.original_text!r})"
        )
    total = sum_range(snapshot, value.inner)
    if total is None:
        return None
    return FinishedStatus(cell=status.cell.with_value(NumberValue(number=total)))


def resolve_step(snapshot: GridSnapshot, status: Status) -> Optional[Status]:
    """Advance one status by a single resolution step.

    Args:
        snapshot: Read-only view of the grid, used for every lookup
        status: Current status of the cell being resolved

    Returns:
        Replacement status, or None when nothing changes this step.
        Non-pending statuses always yield None.

    Raises:
        InvariantViolationError: If an aggregate wraps something other than a range
    """
    if not isinstance(status, PendingStatus):
        return None

    value = status.cell.value

    if isinstance(value, TextValue):
        updated = _expand_text(status, value.text)
    elif isinstance(value, ReferenceValue):
        updated = _follow_reference(snapshot, value)
    elif isinstance(value, AggregateValue):
        updated = _aggregate(snapshot, status, value)
    else:
        updated = None

    # A self-reference copies itself; that is not progress
    if updated is not None and updated == status:
        return None
    return updated
