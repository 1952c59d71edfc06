"""Grid resolution block.

Runs the configured driver over a copy of the parsed grid, so the parsed
grid stays available in the context for comparison.
"""

from typing import List

from .base import Block, BlockContext
from ..engine import resolve_grid
from ..schemas import Grid, ResolutionCFG


class ResolveGridBlock(Block):
    """Resolves pending cells of a parsed grid.

    Inputs (from context):
        - grid: Grid from ParseGridBlock (left untouched)
        - resolution_cfg: ResolutionCFG (strategy and pass budget)

    Outputs (to context):
        - resolved_grid: New Grid holding the final statuses
        - resolution_report: ResolutionReport (passes, updates, pending, errors)
    """

    def __init__(self, grid_key: str = "grid", config_key: str = "resolution_cfg"):
        """Initialize ResolveGridBlock.

        Args:
            grid_key: Context key for the parsed Grid
            config_key: Context key for ResolutionCFG
        """
        self.grid_key = grid_key
        self.config_key = config_key

    def inputs(self) -> List[str]:
        return [self.grid_key, self.config_key]

    def outputs(self) -> List[str]:
        return ["resolved_grid", "resolution_report"]

    def execute(self, context: BlockContext) -> None:
        parsed: Grid = context.get(self.grid_key)
        config: ResolutionCFG = context.get(self.config_key)

        # Statuses are immutable; copying the mapping is a full copy
        resolved = Grid(cells=dict(parsed.cells), width=parsed.width, height=parsed.height)
        report = resolve_grid(resolved, config)

        context.set("resolved_grid", resolved)
        context.set("resolution_report", report)
