"""Run configuration - which files to read and how to resolve them.

The RunCFG is the root configuration object that ties together:
- Source files (one delimiter per file)
- Resolution options (strategy, pass budget)

The CLI builds one from its flags; library callers can build one directly.
"""

from pathlib import Path
from typing import List, Literal, Optional
from pydantic import Field, field_validator, model_validator

from .base import DomainModel, Delimiter


ResolutionStrategy = Literal["fixed_point", "dependency_order"]

DEFAULT_MAX_PASSES = 10


# =============================================================================
# Resolution Configuration
# =============================================================================

class ResolutionCFG(DomainModel):
    """How pending cells are advanced to their final values.

    Strategies:
    - **fixed_point**: Snapshot the grid, advance every pending cell one step
      against the snapshot, repeat up to ``max_passes`` times. Chains longer
      than the budget, cycles and missing targets stay Pending.
    - **dependency_order**: Build the dependency graph between cells and
      evaluate in topological order. Cycles and missing targets become Error.

    Examples:
        # Default: ten blind passes
        ResolutionCFG()

        # Longer reference chains
        ResolutionCFG(max_passes=50)

        # Explicit cycle / missing-target reporting
        ResolutionCFG(strategy="dependency_order")
    """

    strategy: ResolutionStrategy = Field(
        default="fixed_point",
        description="Resolution algorithm ('fixed_point' or 'dependency_order')"
    )

    max_passes: int = Field(
        default=DEFAULT_MAX_PASSES,
        ge=1,
        description="Pass budget for the fixed-point strategy"
    )


# =============================================================================
# Source Configuration
# =============================================================================

class GridSourceCFG(DomainModel):
    """One delimited text file to parse.

    Example:
        GridSourceCFG(path=Path("data/budget.tsv"), delimiter="\\t")
    """

    path: Path = Field(
        description="File to read"
    )

    delimiter: Delimiter = Field(
        default=",",
        description="Field separator for this file"
    )

    label: Optional[str] = Field(
        default=None,
        description="Display label. None = file name"
    )

    @property
    def display_label(self) -> str:
        return self.label or self.path.name


class RunCFG(DomainModel):
    """Top-level configuration: a list of sources plus resolution options.

    Example:
        RunCFG.from_folder(
            folder=Path("data"),
            names=["1", "2", "budget"],
            extension="csv",
        )
    """

    sources: List[GridSourceCFG] = Field(
        default_factory=list,
        description="Files processed in order, each independently"
    )

    resolution: ResolutionCFG = Field(
        default_factory=ResolutionCFG,
        description="Resolution options shared by every source"
    )

    xlsx_dir: Optional[Path] = Field(
        default=None,
        description="Directory for .xlsx exports. None = no export"
    )

    @field_validator('sources')
    @classmethod
    def validate_unique_sources(cls, v: List[GridSourceCFG]) -> List[GridSourceCFG]:
        """The same file may not be listed twice."""
        seen = set()
        for source in v:
            if source.path in seen:
                raise ValueError(f"Source listed twice: {source.path}")
            seen.add(source.path)
        return v

    @model_validator(mode='after')
    def validate_xlsx_dir(self):
        """An export directory must not point at an existing regular file."""
        if self.xlsx_dir is not None and self.xlsx_dir.is_file():
            raise ValueError(f"xlsx_dir is a file, not a directory: {self.xlsx_dir}")
        return self

    @classmethod
    def from_folder(
        cls,
        folder: Path,
        names: List[str],
        extension: str = "csv",
        delimiter: str = ",",
        **kwargs,
    ) -> "RunCFG":
        """Build sources named ``folder/name.extension`` sharing one delimiter."""
        sources = [
            GridSourceCFG(path=Path(folder) / f"{name}.{extension}", delimiter=delimiter)
            for name in names
        ]
        return cls(sources=sources, **kwargs)
