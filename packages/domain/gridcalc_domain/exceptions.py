"""Exception classes for grid parsing and resolution.

Exception Hierarchy:
    GridError (base)
    ├── ExpressionError          arithmetic text could not be evaluated
    ├── FormulaSyntaxError       malformed [r, c] / Span(...) / Sum(...)
    ├── InvariantViolationError  internal precondition broken (fatal)
    ├── GridConfigError          invalid delimiter or run configuration
    ├── GridSizeError            source exceeds the addressable grid
    └── CircularDependencyError  blocks with circular dependencies

InvariantViolationError, GridConfigError and GridSizeError are meant to reach
callers.
Expression and formula errors are recovered locally by the classifier and the
resolver respectively.
"""

from typing import Optional


class GridError(Exception):
    """Base class for all grid errors."""
    pass


class ExpressionError(GridError):
    """Raised when text is not a valid arithmetic expression."""

    def __init__(self, message: str, expression: Optional[str] = None):
        super().__init__(message)
        self.expression = expression


class FormulaSyntaxError(GridError):
    """Raised when a reference, range or aggregate literal is malformed."""

    def __init__(self, message: str, text: Optional[str] = None):
        super().__init__(message)
        self.text = text


class InvariantViolationError(GridError):
    """Raised when a value breaks a structural invariant of the data model.

    Example: an AggregateValue whose inner value is not a RangeValue.
    """
    pass


class GridConfigError(GridError):
    """Raised for invalid parser or run configuration."""
    pass


class GridSizeError(GridError):
    """Raised when a source file has more rows or columns than a grid can address."""
    pass


class CircularDependencyError(GridError):
    """Raised when blocks have circular dependencies."""
    pass
