"""Tests for the spreadsheet export."""

from openpyxl import load_workbook

from gridcalc_domain.engine import parse_grid, resolve_grid
from gridcalc_domain.schemas import ResolutionCFG
from gridcalc_render.xlsx_renderer import XlsxGridRenderer


def resolved(text, strategy="fixed_point"):
    grid = parse_grid(text, delimiter=";")
    report = resolve_grid(grid, ResolutionCFG(strategy=strategy))
    return grid, report


# =============================================================================
# Grid Sheet
# =============================================================================

def test_numbers_written_as_numbers(tmp_path):
    """Test finished numbers keep their numeric type and three decimals."""
    grid, report = resolved("1;2;3\nSum(Span([0,0],[0,2])) # total")
    path = tmp_path / "sums.xlsx"

    XlsxGridRenderer(grid, report, title="sums.csv").render(path)

    wb = load_workbook(path)
    ws = wb["sums.csv"]
    assert ws["A1"].value == 1
    assert ws["C1"].value == 3
    assert ws["A2"].value == 6
    assert ws["A2"].number_format == "0.000"
    assert ws["A2"].comment.text == "total"


def test_text_pending_and_error_cells():
    """Test non-numeric states are written as their display strings."""
    grid, report = resolved("label;[9,9];[0,2]\n[0,0]")
    wb = XlsxGridRenderer(grid, report).build_workbook()
    ws = wb["Grid"]

    assert ws["A1"].value == "label"
    assert ws["B1"].value == "PENDING: [9, 9]"
    assert ws["B1"].fill.start_color.rgb.endswith("FFF2CC")
    assert ws["A2"].value == "label"

    grid, report = resolved("[0,1];[0,0]", strategy="dependency_order")
    ws = XlsxGridRenderer(grid, report).build_workbook()["Grid"]
    assert ws["A1"].value == "Error"
    assert ws["A1"].font.bold


def test_empty_and_absent_cells_left_blank():
    """Test blanks and absent positions produce no value."""
    grid, report = resolved(";1\n2")
    ws = XlsxGridRenderer(grid, report).build_workbook()["Grid"]

    assert ws["A1"].value is None
    assert ws["B2"].value is None


# =============================================================================
# Summary Sheet
# =============================================================================

def test_summary_sheet():
    """Test the summary lists extent, state counts and the run outcome."""
    grid, report = resolved("1;;[9,9]")
    wb = XlsxGridRenderer(grid, report).build_workbook()

    assert wb.sheetnames == ["Grid", "Summary"]
    rows = {row[0]: row[1] for row in wb["Summary"].iter_rows(min_row=2, values_only=True)}
    assert rows["width"] == 3
    assert rows["cells"] == 3
    assert rows["finished"] == 1
    assert rows["empty"] == 1
    assert rows["pending"] == 1
    assert rows["strategy"] == "fixed_point"
    assert rows["converged"] == "no"


def test_sheet_title_sanitised():
    """Test invalid characters and long labels are made sheet-safe."""
    assert XlsxGridRenderer.sheet_title("a/b[1]") == "a_b_1_"
    assert len(XlsxGridRenderer.sheet_title("x" * 40)) == 31
    assert XlsxGridRenderer.sheet_title("   ") == "Grid"


def test_text_starting_with_equals_stays_text(tmp_path):
    """Test text that looks like a spreadsheet formula is exported as a string."""
    grid, report = resolved('=HYPERLINK("http://x");=1+2')
    path = tmp_path / "text.xlsx"

    XlsxGridRenderer(grid, report).render(path)

    ws = load_workbook(path)["Grid"]
    assert ws["A1"].data_type == "s"
    assert ws["A1"].value == '=HYPERLINK("http://x")'
    assert ws["B1"].data_type == "s"
    assert ws["B1"].value == "=1+2"
