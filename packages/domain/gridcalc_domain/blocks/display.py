"""Display frame block.

Converts a resolved Grid into DataFrames for text or spreadsheet rendering.

Output DataFrames:
- display_frame: height x width display strings (None for absent / no value)
- comment_frame: height x width comments (None when there is no comment)
- cell_table: one row per present cell with state, display, comment, number
- status_summary: single row of counts per state
"""

from typing import Dict, List, Optional, Tuple

import pandas as pd

from .base import Block, BlockContext
from ..schemas import FinishedStatus, Grid, NumberValue, Position, display_status
from ..schemas.cells import STATE_NAMES


CELL_TABLE_COLUMNS = ["row", "column", "state", "display", "comment", "number"]


def build_display_frames(grid: Grid) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Build the (display_frame, comment_frame) pair for a grid.

    Every position inside the extent gets an entry; absent positions hold
    None in both frames.
    """
    displays: List[List[Optional[str]]] = []
    comments: List[List[Optional[str]]] = []
    for row in range(grid.height):
        display_row = []
        comment_row = []
        for column in range(grid.width):
            display, comment = display_status(grid.get(Position(row=row, column=column)))
            display_row.append(display)
            comment_row.append(comment)
        displays.append(display_row)
        comments.append(comment_row)

    index = pd.RangeIndex(grid.height, name="row")
    columns = pd.RangeIndex(grid.width, name="column")
    display_df = pd.DataFrame(displays, index=index, columns=columns, dtype=object)
    comment_df = pd.DataFrame(comments, index=index, columns=columns, dtype=object)
    return display_df, comment_df


def build_cell_table(grid: Grid) -> pd.DataFrame:
    """One row per present cell, row-major.

    Columns:
        * row, column: Position
        * state: "error" / "empty" / "pending" / "finished"
        * display: Display string (None for a finished cell without value)
        * comment: Comment text or None
        * number: Float for finished numeric cells, else None
    """
    rows = []
    for position in grid.positions():
        status = grid.cells[position]
        display, comment = status.display()
        number = None
        if isinstance(status, FinishedStatus) and isinstance(status.cell.value, NumberValue):
            number = status.cell.value.number
        rows.append({
            "row": position.row,
            "column": position.column,
            "state": status.state,
            "display": display,
            "comment": comment,
            "number": number,
        })

    if not rows:
        return pd.DataFrame(columns=CELL_TABLE_COLUMNS)
    return pd.DataFrame(rows, columns=CELL_TABLE_COLUMNS)


def build_status_summary(grid: Grid) -> pd.DataFrame:
    """Single-row DataFrame: width, height, cells and one count per state."""
    counts: Dict[str, int] = grid.counts()
    summary = {
        "width": grid.width,
        "height": grid.height,
        "cells": len(grid),
    }
    summary.update({name: counts[name] for name in STATE_NAMES})
    return pd.DataFrame([summary])


class DisplayFrameBlock(Block):
    """Converts a resolved Grid into display DataFrames.

    Inputs (from context):
        - resolved_grid: Grid after resolution

    Outputs (to context):
        - display_frame: DataFrame (height x width) of display strings
        - comment_frame: DataFrame (height x width) of comments
        - cell_table: DataFrame, one row per present cell
        - status_summary: DataFrame with a single row of counts

    Example:
        context.set("resolved_grid", grid)
        DisplayFrameBlock().execute(context)
        context.get("display_frame").loc[1, 0]   # "6.000"
    """

    def __init__(self, grid_key: str = "resolved_grid"):
        """Initialize DisplayFrameBlock.

        Args:
            grid_key: Context key for the Grid to display
        """
        self.grid_key = grid_key

    def inputs(self) -> List[str]:
        return [self.grid_key]

    def outputs(self) -> List[str]:
        return [
            "display_frame",
            "comment_frame",
            "cell_table",
            "status_summary",
        ]

    def execute(self, context: BlockContext) -> None:
        grid: Grid = context.get(self.grid_key)

        display_df, comment_df = build_display_frames(grid)
        context.set("display_frame", display_df)
        context.set("comment_frame", comment_df)
        context.set("cell_table", build_cell_table(grid))
        context.set("status_summary", build_status_summary(grid))
