"""Grid coordinates.

A Position identifies one cell of a parsed grid. Positions are immutable and
hash structurally, so they serve directly as dictionary keys.
"""

from pydantic import Field

from .base import FrozenDomainModel, Coordinate


# =============================================================================
# Position
# =============================================================================

class Position(FrozenDomainModel):
    """Zero-based (row, column) coordinate of a grid cell.

    Examples:
        First field of the first line:
            Position(row=0, column=0)  -> "[0, 0]"

        Third field of the second line:
            Position(row=1, column=2)  -> "[1, 2]"
    """

    row: Coordinate = Field(
        description="Line index in the source file"
    )

    column: Coordinate = Field(
        description="Field index within the line"
    )

    @classmethod
    def at(cls, row: int, column: int) -> "Position":
        """Shorthand constructor: ``Position.at(1, 2)``."""
        return cls(row=row, column=column)

    def literal(self) -> str:
        """Render as a position literal, e.g. ``[1, 2]``."""
        return f"[{self.row}, {self.column}]"

    def __str__(self) -> str:
        return self.literal()
