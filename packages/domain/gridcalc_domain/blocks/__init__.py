"""Computation blocks for grid processing.

This package contains the pipeline layer that turns source text into
DataFrames suitable for text or spreadsheet rendering.

Architecture:
    Text → ParseGridBlock → Grid → ResolveGridBlock → Grid → DisplayFrameBlock → DataFrames

Key concepts:
- Blocks are reusable computation units with explicit dependencies
- Each block declares its inputs and outputs
- Dependency graph enables topological execution

Available blocks:
- ParseGridBlock: Classifies every field of the source text
- ResolveGridBlock: Resolves references, ranges and sums
- DisplayFrameBlock: Builds display/comment DataFrames and a summary

Usage:
    from gridcalc_domain.blocks import BlockContext, grid_pipeline

    context = BlockContext()
    context.set("source_text", "5\\n[0,0]")
    context.set("delimiter", ";")
    context.set("resolution_cfg", ResolutionCFG())

    grid_pipeline().execute(context)
    context.get("display_frame")
"""

from .base import Block, BlockExecutor, BlockContext
from .parse import ParseGridBlock
from .resolve import ResolveGridBlock
from .display import DisplayFrameBlock


def grid_pipeline() -> BlockExecutor:
    """Executor running parse → resolve → display."""
    return BlockExecutor([ParseGridBlock(), ResolveGridBlock(), DisplayFrameBlock()])


__all__ = [
    "Block",
    "BlockExecutor",
    "BlockContext",
    "ParseGridBlock",
    "ResolveGridBlock",
    "DisplayFrameBlock",
    "grid_pipeline",
]
