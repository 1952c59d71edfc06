"""Spreadsheet export of a resolved grid (one-way, values only)."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Union

import pandas as pd
from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from gridcalc_domain.blocks.display import build_cell_table, build_status_summary
from gridcalc_domain.engine import ResolutionReport
from gridcalc_domain.schemas import Grid

COMMENT_AUTHOR = "gridcalc"
MAX_SHEET_TITLE = 31
_INVALID_TITLE_CHARS = re.compile(r"[\[\]:*?/\\]")


class XlsxGridRenderer:
    """Render a resolved grid as a workbook with a grid sheet and a summary sheet.

    Grid sheet: source cell (row r, column c) lands in spreadsheet cell
    (r + 1, c + 1). Finished numbers are written as numbers, everything else
    as its display string (never as a formula). Pending cells are highlighted,
    error cells are red and comments become cell notes.
    """

    def __init__(self, grid: Grid, report: Optional[ResolutionReport] = None, title: str = "Grid"):
        self.grid = grid
        self.report = report
        self.title = self.sheet_title(title)

        # Define styles
        self.bold_font = Font(bold=True)
        self.error_font = Font(bold=True, color="C00000")  # Dark red for errors
        self.pending_font = Font(italic=True, color="7F6000")  # Dark amber for pending
        self.pending_fill = PatternFill(start_color="FFF2CC", end_color="FFF2CC", fill_type="solid")  # Light yellow

        # Header styling
        self.header_font = Font(bold=True, color="FFFFFF")  # White text on dark blue
        self.header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")  # Dark blue

        self.thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )
        self.right_align = Alignment(horizontal='right')
        self.number_format = "0.000"

    def render(self, output_path: Union[str, Path]) -> str:
        wb = self.build_workbook()
        wb.save(output_path)
        return str(output_path)

    def build_workbook(self) -> Workbook:
        wb = Workbook()
        wb.remove(wb.active)

        self._render_grid_sheet(wb, build_cell_table(self.grid))
        self._render_summary_sheet(wb, build_status_summary(self.grid))

        return wb

    # ------------------------------------------------------------------ #
    # Sheets
    # ------------------------------------------------------------------ #

    def _render_grid_sheet(self, wb: Workbook, cells: pd.DataFrame) -> None:
        ws = wb.create_sheet(self.title)

        for item in cells.itertuples(index=False):
            cell = ws.cell(row=int(item.row) + 1, column=int(item.column) + 1)

            if item.state == "finished" and item.number is not None and not pd.isna(item.number):
                cell.value = float(item.number)
                cell.number_format = self.number_format
                cell.alignment = self.right_align
            elif item.display:
                cell.value = item.display
                # Text starting with "=" is data here, not a formula
                cell.data_type = "s"

            if item.state == "pending":
                cell.fill = self.pending_fill
                cell.font = self.pending_font
            elif item.state == "error":
                cell.font = self.error_font

            if item.comment:
                cell.comment = Comment(item.comment, COMMENT_AUTHOR)

        for column in range(1, self.grid.width + 1):
            ws.column_dimensions[get_column_letter(column)].width = 14

    def _render_summary_sheet(self, wb: Workbook, summary: pd.DataFrame) -> None:
        ws = wb.create_sheet("Summary")

        for col, header in enumerate(("Metric", "Value"), start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.border = self.thin_border

        rows = [(name, int(summary.iloc[0][name])) for name in summary.columns]
        if self.report is not None:
            rows.extend([
                ("strategy", self.report.strategy),
                ("passes_run", self.report.passes_run),
                ("converged", "yes" if self.report.converged else "no"),
            ])

        for offset, (name, value) in enumerate(rows, start=2):
            label = ws.cell(row=offset, column=1, value=name)
            label.font = self.bold_font
            label.border = self.thin_border
            ws.cell(row=offset, column=2, value=value).border = self.thin_border

        ws.column_dimensions["A"].width = 14
        ws.column_dimensions["B"].width = 18

    @staticmethod
    def sheet_title(label: str) -> str:
        """Spreadsheet-safe sheet title derived from a source label."""
        title = _INVALID_TITLE_CHARS.sub("_", label).strip() or "Grid"
        return title[:MAX_SHEET_TITLE]


__all__ = ["XlsxGridRenderer"]
