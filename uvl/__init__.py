# uvl language package
# This package provides the lexer, parser and interpreter for the uvl language.
from .errors import (
    LexError, ParseError, UnsupportedOperatorError, UvlError, UvlNameError, UvlRuntimeError,
)
from .interpreter import Interpreter, run_file, run_source
from .types import NIL

__all__ = [
    'Interpreter',
    'run_source',
    'run_file',
    'NIL',
    'UvlError',
    'LexError',
    'ParseError',
    'UvlNameError',
    'UnsupportedOperatorError',
    'UvlRuntimeError',
]
