"""Cell value types using discriminated unions for type safety.

A value is the typed payload of a cell:
- Number: a resolved numeric scalar
- Text: a resolved string literal, or an unparsed formula body while pending
- Reference: a single-cell reference awaiting resolution
- Range: an inclusive rectangle of positions
- Aggregate: a sum over a Range, waiting for every member to finish

Only Number and Text are ever held by a finished cell. Reference, Range and
Aggregate are intermediate shapes produced by the resolver.
"""

from typing import Annotated, Iterator, Literal, Union
from pydantic import Field

from .base import FrozenDomainModel
from .position import Position


# =============================================================================
# Scalars
# =============================================================================

class NumberValue(FrozenDomainModel):
    """Resolved numeric scalar."""

    kind: Literal["number"] = "number"

    number: float = Field(
        description="Numeric value (IEEE double)"
    )

    def display(self) -> str:
        return f"{self.number:.3f}"


class TextValue(FrozenDomainModel):
    """String literal, or the raw body of a formula that has not been parsed yet."""

    kind: Literal["text"] = "text"

    text: str = Field(
        description="Trimmed cell content"
    )

    def display(self) -> str:
        return self.text


# =============================================================================
# Formula Values
# =============================================================================

class ReferenceValue(FrozenDomainModel):
    """Reference to a single cell, e.g. ``[0, 2]``."""

    kind: Literal["reference"] = "reference"

    target: Position = Field(
        description="Referenced position"
    )

    def display(self) -> str:
        return self.target.literal()


class RangeValue(FrozenDomainModel):
    """Inclusive rectangle between two corners, e.g. ``Span([0, 0], [2, 1])``.

    Corners may be given in any order; enumeration always walks the normalised
    rectangle from the top-left to the bottom-right corner.
    """

    kind: Literal["range"] = "range"

    start: Position = Field(
        description="First corner (inclusive)"
    )

    end: Position = Field(
        description="Second corner (inclusive)"
    )

    def positions(self) -> Iterator[Position]:
        """Yield every position in the rectangle, row-major."""
        top, bottom = sorted((self.start.row, self.end.row))
        left, right = sorted((self.start.column, self.end.column))
        for row in range(top, bottom + 1):
            for column in range(left, right + 1):
                yield Position(row=row, column=column)

    def contains(self, position: Position) -> bool:
        """True if position lies inside the rectangle."""
        top, bottom = sorted((self.start.row, self.end.row))
        left, right = sorted((self.start.column, self.end.column))
        return top <= position.row <= bottom and left <= position.column <= right

    @property
    def size(self) -> int:
        """Number of positions covered by the rectangle."""
        rows = abs(self.end.row - self.start.row) + 1
        columns = abs(self.end.column - self.start.column) + 1
        return rows * columns

    def display(self) -> str:
        return f"Span({self.start.literal()}, {self.end.literal()})"


class AggregateValue(FrozenDomainModel):
    """Sum over a range.

    The wrapped value is expected to be a RangeValue. The type stays open so
    that a malformed aggregate can be represented and rejected explicitly by
    the resolver instead of failing somewhere deep inside validation.
    """

    kind: Literal["aggregate"] = "aggregate"

    inner: "Value" = Field(
        description="Range to sum (must be a RangeValue)"
    )

    def display(self) -> str:
        return f"Sum({self.inner.display()})"


# =============================================================================
# Discriminated Union
# =============================================================================

Value = Annotated[
    Union[
        NumberValue,
        TextValue,
        ReferenceValue,
        RangeValue,
        AggregateValue,
    ],
    Field(discriminator='kind')
]
"""Discriminated union of all value types.

The 'kind' field serves as the discriminator:

    NumberValue(number=5.0).kind        == "number"
    ReferenceValue(target=...).kind     == "reference"
    AggregateValue(inner=RangeValue(...)).kind == "aggregate"
"""

AggregateValue.model_rebuild()
