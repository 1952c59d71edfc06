"""Smoke tests for schema validation.

These tests verify that:
1. All schemas can be imported
2. Basic instantiation works
3. Field validation catches obvious errors
4. Discriminated unions work correctly
"""

import pytest
from pathlib import Path
from pydantic import TypeAdapter, ValidationError

from gridcalc_domain.schemas import (
    # Base
    DomainModel,
    MAX_COORDINATE,
    # Positions
    Position,
    # Values
    Value,
    NumberValue,
    TextValue,
    ReferenceValue,
    RangeValue,
    AggregateValue,
    # Cells and statuses
    Cell,
    Status,
    ErrorStatus,
    EmptyStatus,
    PendingStatus,
    FinishedStatus,
    display_status,
    # Grid
    Grid,
    # Configuration
    ResolutionCFG,
    GridSourceCFG,
    RunCFG,
)


def finished(value, comment=None):
    return FinishedStatus(cell=Cell(original_text="x", value=value, comment=comment))


class TestBasicInstantiation:
    """Test that basic schema instantiation works."""

    def test_position(self):
        """Test creating a position and its literal form."""
        position = Position(row=1, column=2)
        assert position.row == 1
        assert position.column == 2
        assert position.literal() == "[1, 2]"
        assert str(position) == "[1, 2]"

    def test_position_shorthand(self):
        """Test Position.at shorthand."""
        assert Position.at(3, 4) == Position(row=3, column=4)

    def test_cell_defaults(self):
        """Test creating a cell with only source text."""
        cell = Cell(original_text=" # note")
        assert cell.value is None
        assert cell.comment is None

    def test_cell_with_value_keeps_text_and_comment(self):
        """Test with_value replaces only the value."""
        cell = Cell(original_text=" [0,0] # c", value=TextValue(text="[0,0]"), comment="c")
        updated = cell.with_value(NumberValue(number=1.0))
        assert updated.value == NumberValue(number=1.0)
        assert updated.original_text == " [0,0] # c"
        assert updated.comment == "c"
        # Original untouched
        assert cell.value == TextValue(text="[0,0]")

    def test_domain_model_is_base(self):
        """Test configuration models share the DomainModel base."""
        assert isinstance(ResolutionCFG(), DomainModel)


class TestValidation:
    """Test that field validation catches errors."""

    def test_negative_row_rejected(self):
        """Test that negative coordinates are rejected."""
        with pytest.raises(ValidationError):
            Position(row=-1, column=0)

    def test_coordinate_upper_bound(self):
        """Test that coordinates must stay below MAX_COORDINATE."""
        Position(row=MAX_COORDINATE - 1, column=0)
        with pytest.raises(ValidationError):
            Position(row=0, column=MAX_COORDINATE)

    def test_position_is_frozen(self):
        """Test that positions cannot be mutated (they are dict keys)."""
        position = Position.at(0, 0)
        with pytest.raises(ValidationError):
            position.row = 5

    def test_positions_hash_structurally(self):
        """Test equal positions collapse to one dict key."""
        cells = {Position.at(1, 1): "a"}
        cells[Position(row=1, column=1)] = "b"
        assert len(cells) == 1

    def test_max_passes_must_be_positive(self):
        """Test that a zero pass budget is rejected."""
        with pytest.raises(ValidationError):
            ResolutionCFG(max_passes=0)

    def test_unknown_strategy_rejected(self):
        """Test that only known strategies are accepted."""
        with pytest.raises(ValidationError):
            ResolutionCFG(strategy="gauss_seidel")

    def test_delimiter_single_character(self):
        """Test that delimiters must be exactly one character."""
        with pytest.raises(ValidationError):
            GridSourceCFG(path=Path("a.csv"), delimiter=";;")
        with pytest.raises(ValidationError):
            GridSourceCFG(path=Path("a.csv"), delimiter="")

    def test_duplicate_sources_rejected(self):
        """Test that the same file cannot be listed twice."""
        with pytest.raises(ValidationError, match="Source listed twice"):
            RunCFG(sources=[
                GridSourceCFG(path=Path("a.csv")),
                GridSourceCFG(path=Path("a.csv"), delimiter=";"),
            ])

    def test_xlsx_dir_must_not_be_file(self, tmp_path):
        """Test that an existing file is not accepted as export directory."""
        target = tmp_path / "out.xlsx"
        target.write_text("")
        with pytest.raises(ValidationError, match="xlsx_dir is a file"):
            RunCFG(xlsx_dir=target)


class TestDiscriminatedUnions:
    """Test that discriminated unions pick the right model."""

    def test_value_union_by_kind(self):
        """Test 'kind' selects the value model."""
        adapter = TypeAdapter(Value)
        value = adapter.validate_python({"kind": "reference", "target": {"row": 2, "column": 0}})
        assert isinstance(value, ReferenceValue)
        assert value.target == Position.at(2, 0)

    def test_nested_aggregate(self):
        """Test aggregate with nested range validates from plain data."""
        adapter = TypeAdapter(Value)
        value = adapter.validate_python({
            "kind": "aggregate",
            "inner": {
                "kind": "range",
                "start": {"row": 0, "column": 0},
                "end": {"row": 0, "column": 2},
            },
        })
        assert isinstance(value, AggregateValue)
        assert isinstance(value.inner, RangeValue)

    def test_status_union_by_state(self):
        """Test 'state' selects the status model."""
        adapter = TypeAdapter(Status)
        status = adapter.validate_python({"state": "error", "reason": "cycle_detected"})
        assert isinstance(status, ErrorStatus)
        assert status.reason == "cycle_detected"

    def test_unknown_kind_rejected(self):
        """Test unknown discriminator values are rejected."""
        with pytest.raises(ValidationError):
            TypeAdapter(Value).validate_python({"kind": "formula", "text": "x"})


class TestRanges:
    """Test range enumeration."""

    def test_row_major_enumeration(self):
        """Test ranges walk rows first, then columns."""
        span = RangeValue(start=Position.at(0, 0), end=Position.at(1, 1))
        assert list(span.positions()) == [
            Position.at(0, 0), Position.at(0, 1),
            Position.at(1, 0), Position.at(1, 1),
        ]
        assert span.size == 4

    def test_reversed_corners_normalised(self):
        """Test reversed corners cover the same rectangle."""
        forward = RangeValue(start=Position.at(0, 0), end=Position.at(2, 1))
        backward = RangeValue(start=Position.at(2, 1), end=Position.at(0, 0))
        assert list(forward.positions()) == list(backward.positions())
        assert backward.size == 6

    def test_contains(self):
        """Test membership uses the normalised rectangle."""
        span = RangeValue(start=Position.at(3, 3), end=Position.at(1, 1))
        assert span.contains(Position.at(2, 2))
        assert not span.contains(Position.at(0, 2))


class TestDisplay:
    """Test the renderer contract."""

    def test_value_display_forms(self):
        """Test canonical display of every value kind."""
        span = RangeValue(start=Position.at(0, 0), end=Position.at(0, 2))
        assert NumberValue(number=5).display() == "5.000"
        assert NumberValue(number=-0.1234).display() == "-0.123"
        assert TextValue(text="hello").display() == "hello"
        assert ReferenceValue(target=Position.at(1, 0)).display() == "[1, 0]"
        assert span.display() == "Span([0, 0], [0, 2])"
        assert AggregateValue(inner=span).display() == "Sum(Span([0, 0], [0, 2]))"

    def test_status_display(self):
        """Test (display, comment) pairs per state."""
        assert ErrorStatus().display() == ("Error", None)
        assert EmptyStatus().display() == ("", None)
        assert finished(NumberValue(number=6), "total").display() == ("6.000", "total")
        assert finished(None, "only a note").display() == (None, "only a note")

        pending = PendingStatus(cell=Cell(original_text="[0,0]", value=TextValue(text="[0,0]")))
        assert pending.display() == ("PENDING: [0,0]", None)

    def test_absent_position_display(self):
        """Test absent positions render as (None, None)."""
        assert display_status(None) == (None, None)

    def test_terminal_states(self):
        """Test only Pending is non-terminal."""
        assert ErrorStatus().is_terminal
        assert EmptyStatus().is_terminal
        assert finished(TextValue(text="a")).is_terminal
        assert not PendingStatus(cell=Cell(original_text="[0,0]")).is_terminal


class TestGrid:
    """Test the Grid container."""

    def test_set_rejects_new_positions(self):
        """Test grids never grow after parsing."""
        grid = Grid(cells={Position.at(0, 0): EmptyStatus()}, width=1, height=1)
        with pytest.raises(KeyError, match="not part of the grid"):
            grid.set(Position.at(5, 5), EmptyStatus())

    def test_snapshot_is_decoupled(self):
        """Test writes after a snapshot are not visible through it."""
        grid = Grid(cells={Position.at(0, 0): EmptyStatus()}, width=1, height=1)
        snapshot = grid.snapshot()
        grid.set(Position.at(0, 0), ErrorStatus())
        assert isinstance(snapshot[Position.at(0, 0)], EmptyStatus)

    def test_snapshot_is_read_only(self):
        """Test snapshots cannot be written to."""
        grid = Grid(cells={Position.at(0, 0): EmptyStatus()}, width=1, height=1)
        with pytest.raises(TypeError):
            grid.snapshot()[Position.at(0, 0)] = ErrorStatus()

    def test_counts_and_ordering(self):
        """Test per-state counts and row-major positions."""
        grid = Grid(
            cells={
                Position.at(1, 0): EmptyStatus(),
                Position.at(0, 1): finished(NumberValue(number=1)),
                Position.at(0, 0): ErrorStatus(),
            },
            width=2,
            height=2,
        )
        assert grid.counts() == {"error": 1, "empty": 1, "pending": 0, "finished": 1}
        assert grid.positions() == [Position.at(0, 0), Position.at(0, 1), Position.at(1, 0)]
        assert list(grid) == grid.positions()
        assert Position.at(1, 1) not in grid
        assert grid.get(Position.at(1, 1)) is None
        assert len(grid) == 3


class TestConfig:
    """Test run configuration helpers."""

    def test_defaults(self):
        """Test default resolution options."""
        cfg = ResolutionCFG()
        assert cfg.strategy == "fixed_point"
        assert cfg.max_passes == 10

    def test_from_folder(self):
        """Test building sources from folder, names and extension."""
        cfg = RunCFG.from_folder(Path("data"), ["1", "budget"], extension="tsv", delimiter="\t")
        assert [s.path for s in cfg.sources] == [Path("data/1.tsv"), Path("data/budget.tsv")]
        assert all(s.delimiter == "\t" for s in cfg.sources)

    def test_display_label(self):
        """Test label falls back to the file name."""
        assert GridSourceCFG(path=Path("data/1.csv")).display_label == "1.csv"
        assert GridSourceCFG(path=Path("data/1.csv"), label="first").display_label == "first"

    def test_config_models_are_mutable_and_validated(self):
        """Test config fields can be reassigned, with validation on assignment."""
        cfg = ResolutionCFG()
        cfg.max_passes = 25
        assert cfg.max_passes == 25
        with pytest.raises(ValidationError):
            cfg.max_passes = 0
