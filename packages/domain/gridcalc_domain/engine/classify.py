"""Grid parsing: raw delimited text to a grid of classified statuses.

Each field is classified on its own, without looking at any other cell:

1. blank                        -> Empty
2. split at the first '#'       -> content / comment
3. content empty                -> Finished, no value (comment only)
4. arithmetic expression        -> Finished(Number)
5. no '[' in content            -> Finished(Text)
6. otherwise                    -> Pending(Text), parsed later by the resolver
"""

import logging
from typing import List, Optional, Tuple

from ..exceptions import GridConfigError, GridSizeError
from ..schemas import (
    Cell,
    EmptyStatus,
    FinishedStatus,
    Grid,
    MAX_COORDINATE,
    NumberValue,
    PendingStatus,
    Position,
    Status,
    TextValue,
)
from .expression import try_evaluate

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
FORMULA_MARKER = "["


def split_comment(text: str) -> Tuple[str, Optional[str]]:
    """Split trimmed cell text at the first '#'.

    Returns:
        (content, comment) both trimmed; comment is None when there is no '#'
    """
    content, marker, comment = text.partition(COMMENT_MARKER)
    if not marker:
        return text.strip(), None
    return content.strip(), comment.strip()


def classify_cell(raw: str) -> Status:
    """Classify one raw field.

    Args:
        raw: Field text exactly as it appeared between delimiters

    Returns:
        EmptyStatus, FinishedStatus or PendingStatus

    Example:
        classify_cell("  ")              # EmptyStatus()
        classify_cell("2 * 3 # six")     # Finished(Number(6.0), comment="six")
        classify_cell("hello")           # Finished(Text("hello"))
        classify_cell("[0, 1]")          # Pending(Text("[0, 1]"))
    """
    trimmed = raw.strip()
    if not trimmed:
        return EmptyStatus()

    content, comment = split_comment(trimmed)

    if not content:
        return FinishedStatus(cell=Cell(original_text=raw, value=None, comment=comment))

    number = try_evaluate(content)
    if number is not None:
        return FinishedStatus(
            cell=Cell(original_text=raw, value=NumberValue(number=number), comment=comment)
        )

    cell = Cell(original_text=raw, value=TextValue(text=content), comment=comment)
    if FORMULA_MARKER not in content:
        return FinishedStatus(cell=cell)
    return PendingStatus(cell=cell)


def split_lines(text: str) -> List[str]:
    r"""Split text into lines at "\n" only.

    A "\r" before the "\n" is dropped, and a final line ending does not start
    an extra empty line. Other control characters stay inside the line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
        ending = len(lines)
    else:
        ending = len(lines) - 1
    for i in range(ending):
        if lines[i].endswith("\r"):
            lines[i] = lines[i][:-1]
    return lines


def parse_grid(text: str, delimiter: str = ",") -> Grid:
    """Parse delimited text into a Grid.

    Lines become rows and fields become columns. The extent is one past the
    largest row and column index seen.

    Args:
        text: Full file contents
        delimiter: Single field separator character

    Returns:
        Grid with one status per field

    Raises:
        GridConfigError: If delimiter is not exactly one character
        GridSizeError: If the text has too many lines or fields
    """
    if len(delimiter) != 1:
        raise GridConfigError(f"Delimiter must be a single character, got {delimiter!r}")

    grid = Grid()
    max_row = max_column = -1

    for row, line in enumerate(split_lines(text)):
        if row >= MAX_COORDINATE:
            raise GridSizeError(f"Too many lines: more than {MAX_COORDINATE}")
        fields = line.split(delimiter)
        if len(fields) > MAX_COORDINATE:
            raise GridSizeError(f"Line {row} has {len(fields)} fields, more than {MAX_COORDINATE}")
        for column, raw in enumerate(fields):
            grid.cells[Position(row=row, column=column)] = classify_cell(raw)
            max_column = max(max_column, column)
        max_row = row

    grid.width = max_column + 1
    grid.height = max_row + 1

    counts = grid.counts()
    logger.debug(
        "Parsed grid %dx%d: %d finished, %d pending, %d empty",
        grid.width, grid.height, counts["finished"], counts["pending"], counts["empty"],
    )
    return grid
