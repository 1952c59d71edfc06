"""Formula literal syntax.

Three formula shapes are recognised at the start of a cell's content:

    [row, column]                              single-cell reference
    Span([r1, c1], [r2, c2])                   inclusive rectangle
    Sum(Span([r1, c1], [r2, c2]))              sum over a rectangle

Whitespace between tokens is optional. Text after the closing bracket or
parenthesis is ignored. Anything else raises FormulaSyntaxError.
"""

from typing import Collection, Optional, Set, Tuple

from pydantic import ValidationError
from pyparsing import (
    Group,
    Keyword,
    ParseBaseException,
    ParserElement,
    Regex,
    Suppress,
)

from ..exceptions import FormulaSyntaxError
from ..schemas import (
    AggregateValue,
    Position,
    RangeValue,
    ReferenceValue,
    Value,
)

REFERENCE_PREFIX = "["
SPAN_PREFIX = "Span("
SUM_PREFIX = "Sum("


# =============================================================================
# Grammar
# =============================================================================

def _build_grammar() -> Tuple[ParserElement, ParserElement, ParserElement]:
    lbrack, rbrack = Suppress("["), Suppress("]")
    lpar, rpar = Suppress("("), Suppress(")")
    comma = Suppress(",")

    integer = Regex(r"\d+").set_parse_action(lambda t: int(t[0]))
    position = Group(lbrack + integer + comma + integer + rbrack)
    span = Group(Suppress(Keyword("Span")) + lpar + position + comma + position + rpar)
    total = Suppress(Keyword("Sum")) + lpar + span + rpar

    return position, span, total


_POSITION, _SPAN, _SUM = _build_grammar()


def _to_position(pair, text: str) -> Position:
    row, column = pair
    try:
        return Position(row=row, column=column)
    except ValidationError as e:
        raise FormulaSyntaxError(f"Position out of bounds: [{row}, {column}]", text) from e


def _to_range(tokens, text: str) -> RangeValue:
    start, end = tokens
    return RangeValue(start=_to_position(start, text), end=_to_position(end, text))


def _parse(grammar: ParserElement, text: str, what: str):
    try:
        return grammar.parse_string(text.strip(), parse_all=False)
    except ParseBaseException as e:
        raise FormulaSyntaxError(f"Malformed {what} '{text}': {e.msg}", text) from e


# =============================================================================
# Public API
# =============================================================================

def parse_position(text: str) -> Position:
    """Parse a position literal such as ``[2, 0]``.

    Raises:
        FormulaSyntaxError: On missing brackets, non-integer or out-of-bounds components
    """
    tokens = _parse(_POSITION, text, "position literal")
    return _to_position(tokens[0], text)


def parse_span(text: str) -> RangeValue:
    """Parse a range literal such as ``Span([0, 0], [2, 1])``.

    Raises:
        FormulaSyntaxError: On malformed input
    """
    tokens = _parse(_SPAN, text, "range literal")
    return _to_range(tokens[0], text)


def parse_sum(text: str) -> AggregateValue:
    """Parse an aggregate literal such as ``Sum(Span([0, 0], [0, 2]))``.

    Raises:
        FormulaSyntaxError: On malformed input
    """
    tokens = _parse(_SUM, text, "aggregate literal")
    return AggregateValue(inner=_to_range(tokens[0], text))


def parse_formula(text: str) -> Value:
    """Parse whichever formula shape the text starts with.

    Returns:
        ReferenceValue, RangeValue or AggregateValue

    Raises:
        FormulaSyntaxError: If the text does not start with a known formula or is malformed
    """
    stripped = text.strip()
    if stripped.startswith(REFERENCE_PREFIX):
        return ReferenceValue(target=parse_position(stripped))
    if stripped.startswith(SPAN_PREFIX):
        return parse_span(stripped)
    if stripped.startswith(SUM_PREFIX):
        return parse_sum(stripped)
    raise FormulaSyntaxError(f"Unrecognised formula '{text}'", text)


def is_formula_text(text: str) -> bool:
    """True if text starts with one of the formula prefixes."""
    stripped = text.strip()
    return stripped.startswith((REFERENCE_PREFIX, SPAN_PREFIX, SUM_PREFIX))


def formula_dependencies(
    value: Value,
    present: Optional[Collection[Position]] = None,
) -> Set[Position]:
    """Positions a structured formula value reads.

    Text (not yet parsed), numbers and bare ranges read nothing.

    Args:
        value: Cell value to inspect
        present: If given, aggregate members are limited to these positions
            (avoids enumerating huge, mostly absent rectangles)
    """
    if isinstance(value, ReferenceValue):
        return {value.target}
    if isinstance(value, AggregateValue) and isinstance(value.inner, RangeValue):
        span = value.inner
        if present is not None and len(present) < span.size:
            return {p for p in present if span.contains(p)}
        return set(span.positions())
    return set()
