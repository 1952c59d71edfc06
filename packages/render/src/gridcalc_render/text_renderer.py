"""Aligned plain-text table renderer."""

from __future__ import annotations

from typing import List, Optional

import pandas as pd


class TextTableRenderer:
    """Render display/comment frames as aligned text.

    Each grid row becomes two lines: the comments, then the values. Every
    column is padded to the widest comment or value it holds, and every field
    is followed by one space.

    Example:
        values:   [["1.000", "total"]]      comments: [[None, "sum"]]

        "      sum   "
        "1.000 total "
    """

    def __init__(self, separator: str = " "):
        self.separator = separator

    def render(self, values_df: pd.DataFrame, comments_df: pd.DataFrame) -> str:
        """Render both frames; they must share shape and labels."""
        return "\n".join(self.render_lines(values_df, comments_df))

    def render_lines(self, values_df: pd.DataFrame, comments_df: pd.DataFrame) -> List[str]:
        if values_df.shape != comments_df.shape:
            raise ValueError(
                f"Value and comment frames differ in shape: {values_df.shape} vs {comments_df.shape}"
            )

        values = [[self._text(v) for v in row] for row in values_df.itertuples(index=False)]
        comments = [[self._text(c) for c in row] for row in comments_df.itertuples(index=False)]
        widths = self.column_widths(values, comments)

        lines: List[str] = []
        for value_row, comment_row in zip(values, comments):
            lines.append(self._line(comment_row, widths))
            lines.append(self._line(value_row, widths))
        return lines

    @staticmethod
    def column_widths(values: List[List[str]], comments: List[List[str]]) -> List[int]:
        """Widest comment or value per column."""
        widths: List[int] = []
        for value_row, comment_row in zip(values, comments):
            for i, (value, comment) in enumerate(zip(value_row, comment_row)):
                while i >= len(widths):
                    widths.append(0)
                widths[i] = max(widths[i], len(value), len(comment))
        return widths

    def _line(self, fields: List[str], widths: List[int]) -> str:
        return "".join(f"{field.ljust(width)}{self.separator}" for field, width in zip(fields, widths))

    @staticmethod
    def _text(item: Optional[str]) -> str:
        if item is None or (not isinstance(item, str) and pd.isna(item)):
            return ""
        return str(item)


__all__ = ["TextTableRenderer"]
