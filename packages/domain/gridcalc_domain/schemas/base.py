"""Base classes and type system for grid domain models.

This module provides the foundational types, validators, and base classes
used throughout the grid schema system.
"""

from typing import Annotated
from pydantic import BaseModel, Field, ConfigDict

# =============================================================================
# Base Model
# =============================================================================

class DomainModel(BaseModel):
    """Base class for all domain models.

    Provides common configuration for all Pydantic models in the domain layer:
    - Validation on assignment for runtime safety
    - Enum value serialization
    """

    model_config = ConfigDict(
        frozen=False,  # Allow mutation of config models
        validate_assignment=True,  # Validate on field assignment
        use_enum_values=True,  # Use enum values in JSON
    )


class FrozenDomainModel(DomainModel):
    """Immutable, hashable domain model (used for grid keys and values)."""

    model_config = ConfigDict(
        frozen=True,
        use_enum_values=True,
    )


# =============================================================================
# Type Aliases - Coordinates
# =============================================================================

MAX_COORDINATE = 20_000
"""Exclusive upper bound for a row or column index."""

Coordinate = Annotated[
    int,
    Field(ge=0, lt=MAX_COORDINATE, description="Zero-based row or column index")
]


# =============================================================================
# Type Aliases - Text
# =============================================================================

Delimiter = Annotated[
    str,
    Field(min_length=1, max_length=1, description="Single field separator character (e.g. ',' or '\\t')")
]


# =============================================================================
# Coordinate Conventions
# =============================================================================
#
# Positions are (row, column):
#   - row    = line index in the source file (0 = first line)
#   - column = field index within the line (0 = first field)
#
# Formula literals use the same order:
#   - "[2, 0]"                    -> row 2, column 0
#   - "Span([0, 0], [0, 2])"      -> first three fields of the first line
#   - "Sum(Span([0, 0], [3, 0]))" -> first field of the first four lines
#
# =============================================================================
