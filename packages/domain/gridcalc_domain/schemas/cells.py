"""Cells and their resolution lifecycle.

A Cell carries the typed value of one grid position together with the raw
source text and an optional trailing comment. A Status wraps a cell with the
state it has reached in the resolution lifecycle:

    Empty                     blank source field (terminal)
    Pending(cell)  ──step──►  Pending(cell')  ──step──►  Finished(cell'')
    Error                     explicit failure, only from dependency-ordered
                              resolution or copied from a referenced error

Statuses are immutable. The resolver never edits one in place; it builds a
replacement and the driver swaps it into the grid.
"""

from typing import Annotated, Literal, Optional, Tuple, Union
from pydantic import Field

from .base import FrozenDomainModel
from .values import Value


DisplayPair = Tuple[Optional[str], Optional[str]]
"""(display text, comment) as consumed by renderers."""

PENDING_PREFIX = "PENDING: "
ERROR_DISPLAY = "Error"


# =============================================================================
# Cell
# =============================================================================

class Cell(FrozenDomainModel):
    """Typed payload of one grid position.

    Examples:
        Source field ``" 3 * 4 # area "``:
            original_text=" 3 * 4 # area "
            value=NumberValue(number=12.0)
            comment="area"

        Source field ``"Sum(Span([0,0],[0,2]))"`` right after parsing:
            original_text="Sum(Span([0,0],[0,2]))"
            value=TextValue(text="Sum(Span([0,0],[0,2]))")
            comment=None
    """

    original_text: str = Field(
        description="Raw source field, untrimmed (kept for diagnostics)"
    )

    value: Optional[Value] = Field(
        default=None,
        description="Typed value. None when the field held only a comment"
    )

    comment: Optional[str] = Field(
        default=None,
        description="Trimmed text after the first '#', carried through unchanged"
    )

    def with_value(self, value: Optional[Value]) -> "Cell":
        """Copy of this cell with a new value; text and comment are preserved."""
        return Cell(original_text=self.original_text, value=value, comment=self.comment)


# =============================================================================
# Statuses
# =============================================================================

class ErrorStatus(FrozenDomainModel):
    """Explicit failure marker.

    The fixed-point driver never produces this state. The dependency-ordered
    driver uses it for cells caught in a cycle or depending on a position that
    does not exist.
    """

    state: Literal["error"] = "error"

    reason: Optional[str] = Field(
        default=None,
        description="Machine-readable reason, e.g. 'cycle_detected'"
    )

    @property
    def is_terminal(self) -> bool:
        return True

    def display(self) -> DisplayPair:
        return ERROR_DISPLAY, None


class EmptyStatus(FrozenDomainModel):
    """Blank source field."""

    state: Literal["empty"] = "empty"

    @property
    def is_terminal(self) -> bool:
        return True

    def display(self) -> DisplayPair:
        return "", None


class PendingStatus(FrozenDomainModel):
    """Classified, but the value still needs other cells to become final."""

    state: Literal["pending"] = "pending"

    cell: Cell

    @property
    def is_terminal(self) -> bool:
        return False

    def display(self) -> DisplayPair:
        if self.cell.value is None:
            return None, self.cell.comment
        return f"{PENDING_PREFIX}{self.cell.value.display()}", self.cell.comment


class FinishedStatus(FrozenDomainModel):
    """Fully reduced cell; the value is a Number, a Text or None."""

    state: Literal["finished"] = "finished"

    cell: Cell

    @property
    def is_terminal(self) -> bool:
        return True

    def display(self) -> DisplayPair:
        if self.cell.value is None:
            return None, self.cell.comment
        return self.cell.value.display(), self.cell.comment


# =============================================================================
# Discriminated Union
# =============================================================================

Status = Annotated[
    Union[
        ErrorStatus,
        EmptyStatus,
        PendingStatus,
        FinishedStatus,
    ],
    Field(discriminator='state')
]
"""Discriminated union of the resolution lifecycle states.

The 'state' field serves as the discriminator. Renderers only need
``status.display()``; resolution code dispatches with ``isinstance``.
"""

STATE_NAMES = ("error", "empty", "pending", "finished")


def display_status(status: Optional[Status]) -> DisplayPair:
    """Renderer contract: (display, comment) for a status, or for an absent position."""
    if status is None:
        return None, None
    return status.display()
