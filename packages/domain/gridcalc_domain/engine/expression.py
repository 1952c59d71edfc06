"""Arithmetic expression evaluation.

Evaluates infix numeric expressions such as ``2 * (3 + 4) ^ 2 / sqrt(16)``.

Grammar (pyparsing, highest precedence last):

    expr    := term (('+' | '-') term)*
    term    := factor (('*' | '/') factor)*
    factor  := ('+' | '-') factor | power
    power   := atom ('^' factor)?          # right associative, -2^2 == -4
    atom    := number | call | constant | '(' expr ')'
    call    := name '(' [expr (',' expr)*] ')'

Names are case-sensitive. Anything the grammar does not accept, unknown names,
wrong arity and arithmetic faults (division by zero, math domain errors,
overflow, non-finite results) raise ExpressionError. Text nested deeper than
MAX_NESTING_DEPTH parentheses is rejected before parsing.
"""

import math
import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from pyparsing import (
    DelimitedList,
    Forward,
    Group,
    Literal,
    Opt,
    ParseBaseException,
    ParserElement,
    Regex,
    Suppress,
    Word,
    ZeroOrMore,
    alphanums,
    alphas,
    one_of,
)

from ..exceptions import ExpressionError

NUMBER_PATTERN = r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_PLAIN_NUMBER = re.compile(NUMBER_PATTERN)

MAX_NESTING_DEPTH = 12
"""Deepest parenthesis nesting accepted; deeper text is not an expression."""


# =============================================================================
# Functions and Constants
# =============================================================================

def _round_half_away(x: float) -> float:
    return math.copysign(math.floor(abs(x) + 0.5), x)


def _signum(x: float) -> float:
    if x > 0:
        return 1.0
    if x < 0:
        return -1.0
    return 0.0


CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}

# name -> (callable, min_args, max_args); max_args None = variadic
FUNCTIONS: Dict[str, Tuple[Callable[..., float], int, object]] = {
    "sqrt": (math.sqrt, 1, 1),
    "abs": (abs, 1, 1),
    "exp": (math.exp, 1, 1),
    "ln": (math.log, 1, 1),
    "log": (math.log, 1, 2),
    "log10": (math.log10, 1, 1),
    "log2": (math.log2, 1, 1),
    "sin": (math.sin, 1, 1),
    "cos": (math.cos, 1, 1),
    "tan": (math.tan, 1, 1),
    "asin": (math.asin, 1, 1),
    "acos": (math.acos, 1, 1),
    "atan": (math.atan, 1, 1),
    "atan2": (math.atan2, 2, 2),
    "sinh": (math.sinh, 1, 1),
    "cosh": (math.cosh, 1, 1),
    "tanh": (math.tanh, 1, 1),
    "asinh": (math.asinh, 1, 1),
    "acosh": (math.acosh, 1, 1),
    "atanh": (math.atanh, 1, 1),
    "floor": (math.floor, 1, 1),
    "ceil": (math.ceil, 1, 1),
    "round": (_round_half_away, 1, 1),
    "signum": (_signum, 1, 1),
    "max": (max, 1, None),
    "min": (min, 1, None),
}


# =============================================================================
# Syntax Tree
# =============================================================================

class _Node:
    def evaluate(self) -> float:
        raise NotImplementedError


class _Number(_Node):
    def __init__(self, text: str):
        self.value = float(text)

    def evaluate(self) -> float:
        return self.value


class _Constant(_Node):
    def __init__(self, name: str):
        if name not in CONSTANTS:
            raise ExpressionError(f"Unknown constant '{name}'", name)
        self.name = name

    def evaluate(self) -> float:
        return CONSTANTS[self.name]


class _Call(_Node):
    def __init__(self, name: str, args: Sequence[_Node]):
        if name not in FUNCTIONS:
            raise ExpressionError(f"Unknown function '{name}'", name)
        func, min_args, max_args = FUNCTIONS[name]
        if len(args) < min_args or (max_args is not None and len(args) > max_args):
            raise ExpressionError(f"Wrong number of arguments for '{name}': {len(args)}", name)
        self.func = func
        self.args = list(args)

    def evaluate(self) -> float:
        return float(self.func(*(arg.evaluate() for arg in self.args)))


class _Negate(_Node):
    def __init__(self, operand: _Node):
        self.operand = operand

    def evaluate(self) -> float:
        return -self.operand.evaluate()


class _BinaryOp(_Node):
    OPERATORS: Dict[str, Callable[[float, float], float]] = {
        "+": lambda a, b: a + b,
        "-": lambda a, b: a - b,
        "*": lambda a, b: a * b,
        "/": lambda a, b: a / b,
        "^": lambda a, b: math.pow(a, b),
    }

    def __init__(self, op: str, left: _Node, right: _Node):
        self.op = op
        self.left = left
        self.right = right

    def evaluate(self) -> float:
        return self.OPERATORS[self.op](self.left.evaluate(), self.right.evaluate())


class _Chain(_Node):
    """Left-associative run of operands, e.g. ``1 + 2 - 3 + ...``, evaluated in a loop."""

    def __init__(self, first: _Node, rest: Sequence[Tuple[str, _Node]]):
        self.first = first
        self.rest = list(rest)

    def evaluate(self) -> float:
        result = self.first.evaluate()
        for op, operand in self.rest:
            result = _BinaryOp.OPERATORS[op](result, operand.evaluate())
        return result


# =============================================================================
# Parse Actions
# =============================================================================

def _fold_left(tokens) -> _Node:
    items: List = list(tokens[0])
    if len(items) == 1:
        return items[0]
    return _Chain(items[0], [(items[i], items[i + 1]) for i in range(1, len(items), 2)])


def _build_power(tokens) -> _Node:
    items: List = list(tokens[0])
    if len(items) == 1:
        return items[0]
    return _BinaryOp("^", items[0], items[2])


def _build_sign(tokens) -> _Node:
    items: List = list(tokens[0])
    node = items[-1]
    if items[:-1].count("-") % 2:
        node = _Negate(node)
    return node


def _build_call(tokens) -> _Node:
    name, *args = tokens[0]
    return _Call(name, args)


def _build_grammar() -> ParserElement:
    lpar, rpar = Suppress("("), Suppress(")")

    expr = Forward()
    factor = Forward()

    number = Regex(NUMBER_PATTERN).set_parse_action(lambda t: _Number(t[0]))
    name = Word(alphas, alphanums + "_")
    call = Group(name + lpar + Opt(DelimitedList(expr)) + rpar).set_parse_action(_build_call)
    constant = name.copy().set_parse_action(lambda t: _Constant(t[0]))

    atom = number | call | constant | (lpar + expr + rpar)
    power = Group(atom + Opt(Literal("^") + factor)).set_parse_action(_build_power)
    factor <<= Group(ZeroOrMore(one_of("+ -")) + power).set_parse_action(_build_sign)
    term = Group(factor + ZeroOrMore(one_of("* /") + factor)).set_parse_action(_fold_left)
    expr <<= Group(term + ZeroOrMore(one_of("+ -") + term)).set_parse_action(_fold_left)

    return expr


_GRAMMAR = _build_grammar()


# =============================================================================
# Public API
# =============================================================================

def nesting_depth(text: str) -> int:
    """Deepest parenthesis nesting in text (unbalanced parentheses are counted as written)."""
    depth = deepest = 0
    for char in text:
        if char == "(":
            depth += 1
            deepest = max(deepest, depth)
        elif char == ")":
            depth -= 1
    return deepest


def evaluate(expression: str) -> float:
    """Evaluate an arithmetic expression.

    Args:
        expression: Expression text, e.g. "3 * (2 + 1)" or "sqrt(2) ^ 2"

    Returns:
        Numeric result

    Raises:
        ExpressionError: If the text is not a valid expression or evaluation fails

    Example:
        evaluate("2 ^ 3 ^ 2")   # 512.0 (right associative)
        evaluate("-2 ^ 2")      # -4.0
        evaluate("max(1, 7, 3)")  # 7.0
    """
    text = expression.strip()
    if not text:
        raise ExpressionError("Empty expression", expression)

    # Plain numeric literals ("12", "1e-3") skip the grammar
    if _PLAIN_NUMBER.fullmatch(text):
        result = float(text)
    else:
        if nesting_depth(text) > MAX_NESTING_DEPTH:
            raise ExpressionError(f"Nested deeper than {MAX_NESTING_DEPTH} parentheses", expression)

        try:
            tree = _GRAMMAR.parse_string(text, parse_all=True)[0]
        except ParseBaseException as e:
            raise ExpressionError(f"Not an arithmetic expression: {e.msg}", expression) from e
        except RecursionError as e:
            raise ExpressionError("Not an arithmetic expression: too deeply nested", expression) from e

        try:
            result = tree.evaluate()
        except (ZeroDivisionError, OverflowError, ValueError, TypeError) as e:
            raise ExpressionError(f"Evaluation failed: {e}", expression) from e
        except RecursionError as e:
            raise ExpressionError("Evaluation failed: too deeply nested", expression) from e

    if not math.isfinite(result):
        raise ExpressionError(f"Evaluation failed: non-finite result {result}", expression)
    return result


def try_evaluate(expression: str) -> Optional[float]:
    """Evaluate an expression, returning None instead of raising ExpressionError."""
    try:
        return evaluate(expression)
    except ExpressionError:
        return None
