"""Tests for the aligned text table renderer."""

import pandas as pd
import pytest

from gridcalc_domain.blocks import BlockContext, grid_pipeline
from gridcalc_domain.schemas import ResolutionCFG
from gridcalc_render.text_renderer import TextTableRenderer


def frames(text, delimiter=";"):
    context = BlockContext()
    context.set("source_text", text)
    context.set("delimiter", delimiter)
    context.set("resolution_cfg", ResolutionCFG())
    grid_pipeline().execute(context)
    return context.get("display_frame"), context.get("comment_frame")


# =============================================================================
# Layout
# =============================================================================

def test_comment_line_then_value_line():
    """Test each grid row becomes a comment line followed by a value line."""
    values, comments = frames("1 # first;label\n[0,0]")
    lines = TextTableRenderer().render(values, comments).split("\n")

    # The reference copies the whole status, comment included
    assert lines == [
        "first " + " " * 5 + " ",
        "1.000 label ",
        "first " + " " * 5 + " ",
        "1.000 " + " " * 5 + " ",
    ]


def test_columns_padded_to_widest_entry():
    """Test padding uses the widest comment or value per column."""
    values = pd.DataFrame([["1.000", "x"], ["22.000", None]], dtype=object)
    comments = pd.DataFrame([["a long comment", None], [None, None]], dtype=object)

    lines = TextTableRenderer().render_lines(values, comments)

    assert lines[0] == "a long comment" + " " + " " + " "
    assert lines[1] == "1.000".ljust(14) + " " + "x" + " "
    assert lines[2] == " " * 14 + " " + " " + " "
    assert lines[3] == "22.000".ljust(14) + " " + " " + " "


def test_pending_and_empty_cells():
    """Test pending cells show their value and blanks stay blank."""
    values, comments = frames(";[9,9]")
    lines = TextTableRenderer().render_lines(values, comments)

    assert lines[1] == " PENDING: [9, 9] "


def test_column_widths():
    """Test width computation on raw lists."""
    widths = TextTableRenderer.column_widths(
        [["1.000", "ab"], ["1", ""]],
        [["", "a comment"], ["", ""]],
    )
    assert widths == [5, 9]


def test_empty_grid_renders_nothing():
    """Test a 0x0 grid has no lines."""
    values, comments = frames("")
    assert TextTableRenderer().render(values, comments) == ""


def test_shape_mismatch_rejected():
    """Test value and comment frames must line up."""
    with pytest.raises(ValueError, match="differ in shape"):
        TextTableRenderer().render(pd.DataFrame([["a"]]), pd.DataFrame([["a", "b"]]))
