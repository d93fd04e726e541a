"""Error types raised by the uvl pipeline.

Every stage reports failures by raising a subclass of `UvlError`. The
message carried by the exception is already fully formatted for display,
usually through `format_diagnostic`, so callers only need `str(err)`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ast import Context


def format_diagnostic(ctx: 'Context', reason: str) -> str:
    """Render `reason` with the source location held by `ctx`."""
    return f'File "{ctx.source_name}", line {ctx.line}, in {ctx.unit}\n    {reason}'


class UvlError(Exception):
    """Base exception for all uvl errors."""
    name = 'Error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class LexError(UvlError):
    """Unterminated string or unexpected character in the source."""
    name = 'LexError'


class ParseError(UvlError):
    """Grammar violation found by the parser."""
    name = 'ParseError'


class UvlNameError(UvlError):
    """Undeclared, redeclared or immutable name."""
    name = 'NameError'


class UnsupportedOperatorError(UvlError):
    """Operator applied to operands it is not defined for."""
    name = 'UnsupportedOperator'


class UvlRuntimeError(UvlError):
    name = 'RuntimeError'
