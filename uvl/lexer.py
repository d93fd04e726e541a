"""Tokenizer for uvl source text.

The lexer makes a single left-to-right pass over the source. It looks at
most one character ahead to recognise two-character operators, and two
characters ahead to decide whether a `.` after a number starts a
fractional part. Whitespace and `//` comments produce no tokens. The
token list always ends with a single EOF token.
"""

from __future__ import annotations

from typing import List

from .ast import Context
from .errors import LexError, format_diagnostic
from .tokens import KEYWORDS, Token, TokenType

SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# first char -> (type when followed by '=', type otherwise)
ONE_OR_TWO_CHAR_TOKENS = {
    '!': (TokenType.BANG_EQUAL, TokenType.BANG),
    '=': (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    '<': (TokenType.LESS_EQUAL, TokenType.LESS),
    '>': (TokenType.GREATER_EQUAL, TokenType.GREATER),
}


def is_digit(c: str) -> bool:
    # str.isdigit() also accepts characters float() cannot parse, e.g. '²'
    return '0' <= c <= '9'


class Lexer:
    """Converts uvl source into a list of tokens.

    Usage:
        tokens = Lexer(source, 'main.uvl').scan()
    """

    def __init__(self, source: str, source_name: str = '<input>'):
        self.source = source
        self.source_name = source_name
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan(self) -> List[Token]:
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, '', self.line))
        return self.tokens

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def scan_token(self) -> None:
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
        elif c in ONE_OR_TWO_CHAR_TOKENS:
            with_equal, alone = ONE_OR_TWO_CHAR_TOKENS[c]
            self.add_token(with_equal if self.match('=') else alone)
        elif c == '/':
            if self.match('/'):
                # comment runs to the end of the line; the newline itself is left for scan_token
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
        elif c == '"':
            self.scan_string()
        elif is_digit(c):
            self.scan_number()
        elif c.isalpha():
            self.scan_identifier()
        elif c == '\n':
            self.line += 1
        elif c in (' ', '\r', '\t'):
            pass
        else:
            raise self.error(f"Unexpected character '{c}'")

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def add_token(self, token_type: TokenType, literal=None) -> None:
        text = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, text, self.line, literal))

    def error(self, reason: str) -> LexError:
        ctx = Context(self.source_name, self.line)
        return LexError(format_diagnostic(ctx, reason))

    def scan_string(self) -> None:
        start_line = self.line
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            self.line = start_line
            raise self.error("Unterminated string")
        self.advance()  # closing quote
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def scan_number(self) -> None:
        while is_digit(self.peek()):
            self.advance()
        # only a '.' followed by a digit starts a fractional part
        if self.peek() == '.' and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        text = self.source[self.start:self.current]
        self.add_token(TokenType.NUMBER, float(text))

    def scan_identifier(self) -> None:
        while self.peek().isalnum():
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))


def scan(source: str, source_name: str = '<input>') -> List[Token]:
    """Tokenize `source`, raising `LexError` on malformed input."""
    return Lexer(source, source_name).scan()
