"""Grid Domain Engine - tabular text parsing and formula resolution.

This package provides the core of gridcalc:
- Typed cell values and resolution statuses (Pydantic models)
- Classification of delimited text into a sparse grid
- Reference, range and range-sum resolution by repeated passes
  (or, optionally, in dependency order with cycle detection)
- Computation blocks producing DataFrames for renderers

The domain layer is designed to be:
- Framework-agnostic (no rendering or file-system concerns)
- Testable (pure Python with Pydantic validation)
"""

from .schemas import *  # noqa: F403, F401
from .engine import parse_grid, resolve_grid, resolve_step, ResolutionReport  # noqa: F401

__version__ = "0.1.0"
