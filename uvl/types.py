"""Runtime values and operator semantics for uvl.

uvl values are represented with Python natives: `str` for strings,
`float` for numbers and `bool` for booleans. `nil` is the `NIL` marker
object. Operators are pure functions that dispatch on the operator token
type and the kinds of their operands; any combination not listed in the
tables below raises `UnsupportedOperatorError`.
"""

from __future__ import annotations

from decimal import Decimal
import math
import operator
from typing import TYPE_CHECKING, Any, Callable, Dict, Union

from .errors import UnsupportedOperatorError, UvlRuntimeError, format_diagnostic
from .tokens import Token, TokenType

if TYPE_CHECKING:
    from .ast import Context


class NilVal:
    """Marker object for the uvl `nil` value."""
    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()

Value = Union[str, float, bool, NilVal]


BINARY_SYMBOLS: Dict[TokenType, str] = {
    TokenType.PLUS: '+',
    TokenType.MINUS: '-',
    TokenType.STAR: '*',
    TokenType.SLASH: '/',
    TokenType.GREATER: '>',
    TokenType.GREATER_EQUAL: '>=',
    TokenType.LESS: '<',
    TokenType.LESS_EQUAL: '<=',
    TokenType.EQUAL_EQUAL: '==',
    TokenType.BANG_EQUAL: '!=',
}

# Operators defined for a pair of numbers
NUMBER_OPS: Dict[TokenType, Callable[[float, float], Any]] = {
    TokenType.PLUS: operator.add,
    TokenType.MINUS: operator.sub,
    TokenType.STAR: operator.mul,
    TokenType.SLASH: operator.truediv,
    TokenType.GREATER: operator.gt,
    TokenType.GREATER_EQUAL: operator.ge,
    TokenType.LESS: operator.lt,
    TokenType.LESS_EQUAL: operator.le,
}


def type_name(value: Any) -> str:
    """Return the uvl type name of a runtime value."""
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, NilVal):
        return 'Nil'
    return type(value).__name__


def format_number(value: float) -> str:
    """Format a number the way uvl prints it.

    Integral values drop the fractional part (`2`, not `2.0`) and no
    exponent notation is used, so `1e21` prints all of its digits.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    text = format(Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def to_string(value: Any) -> str:
    """Convert a uvl value to its display representation.

    Strings are shown quoted and nil is shown as `()`. This is what both
    `println` and the interactive prompt print.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, NilVal):
        return '()'
    return str(value)


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality; values of different kinds are never equal."""
    if type_name(a) != type_name(b):
        return False
    if isinstance(a, NilVal):
        return True
    return a == b


def _unsupported(ctx: 'Context', symbol: str, lhs: Any, rhs: Any) -> UnsupportedOperatorError:
    reason = (
        f"Operator '{symbol}' is not supported for {to_string(lhs)} of type {type_name(lhs)}"
        f" and {to_string(rhs)} of type {type_name(rhs)}"
    )
    return UnsupportedOperatorError(format_diagnostic(ctx, reason))


def apply_binary(ctx: 'Context', op: Token, lhs: Any, rhs: Any) -> Value:
    """Apply the binary operator `op` to two evaluated operands."""
    kind = op.type
    if kind is TokenType.EQUAL_EQUAL:
        return values_equal(lhs, rhs)
    if kind is TokenType.BANG_EQUAL:
        return not values_equal(lhs, rhs)
    symbol = BINARY_SYMBOLS.get(kind)
    if symbol is None:
        raise UnsupportedOperatorError(format_diagnostic(ctx, f"Unsupported operator '{op.lexeme}'"))

    lhs_kind = type_name(lhs)
    rhs_kind = type_name(rhs)
    if lhs_kind == 'Number' and rhs_kind == 'Number':
        if kind is TokenType.SLASH and rhs == 0.0:
            reason = f"Division by zero: {format_number(lhs)}/{format_number(rhs)}"
            raise UvlRuntimeError(format_diagnostic(ctx, reason))
        return NUMBER_OPS[kind](lhs, rhs)
    if kind is TokenType.PLUS and lhs_kind == 'String' and rhs_kind == 'String':
        return lhs + rhs
    raise _unsupported(ctx, symbol, lhs, rhs)


def apply_unary(ctx: 'Context', op: Token, operand: Any) -> Value:
    """Apply a prefix operator. Only numeric negation is defined."""
    if op.type is not TokenType.MINUS:
        raise UnsupportedOperatorError(format_diagnostic(ctx, f"Unsupported operator '{op.lexeme}'"))
    if type_name(operand) != 'Number':
        reason = f"Operator '-' is not supported for {to_string(operand)} of type {type_name(operand)}"
        raise UnsupportedOperatorError(format_diagnostic(ctx, reason))
    return -operand
