"""Grid domain schemas.

This package contains all Pydantic models for the grid domain layer:
- Base types and conventions
- Positions
- Values (number, text, reference, range, aggregate)
- Cells and resolution statuses
- The Grid container
- Run configuration

Usage:
    from gridcalc_domain.schemas import (
        Position, Cell, Grid,
        NumberValue, ReferenceValue,
        PendingStatus, FinishedStatus,
        RunCFG, ResolutionCFG,
    )
"""

# Base types
from .base import (
    DomainModel,
    FrozenDomainModel,
    Coordinate,
    Delimiter,
    MAX_COORDINATE,
)

# Positions
from .position import Position

# Values
from .values import (
    Value,
    NumberValue,
    TextValue,
    ReferenceValue,
    RangeValue,
    AggregateValue,
)

# Cells and statuses
from .cells import (
    Cell,
    Status,
    ErrorStatus,
    EmptyStatus,
    PendingStatus,
    FinishedStatus,
    DisplayPair,
    display_status,
)

# Grid
from .grid import Grid, GridSnapshot

# Configuration
from .config import (
    ResolutionCFG,
    ResolutionStrategy,
    GridSourceCFG,
    RunCFG,
)

__all__ = [
    # Base types
    "DomainModel",
    "FrozenDomainModel",
    "Coordinate",
    "Delimiter",
    "MAX_COORDINATE",
    # Positions
    "Position",
    # Values
    "Value",
    "NumberValue",
    "TextValue",
    "ReferenceValue",
    "RangeValue",
    "AggregateValue",
    # Cells and statuses
    "Cell",
    "Status",
    "ErrorStatus",
    "EmptyStatus",
    "PendingStatus",
    "FinishedStatus",
    "DisplayPair",
    "display_status",
    # Grid
    "Grid",
    "GridSnapshot",
    # Configuration
    "ResolutionCFG",
    "ResolutionStrategy",
    "GridSourceCFG",
    "RunCFG",
]
