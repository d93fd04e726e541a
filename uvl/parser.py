"""Recursive-descent parser for uvl.

Grammar, from lowest to highest precedence:

    statement   := letStmt | printStmt | block | exprStmt
    letStmt     := "let" "mut"? IDENTIFIER "=" expression ";"
    printStmt   := "println" expression ";"
    block       := "{" statement* "}"
    exprStmt    := expression ";"
    expression  := assignment
    assignment  := equality ( "=" assignment )?
    equality    := comparison ( ( "!=" | "==" ) comparison )*
    comparison  := term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        := factor ( ( "-" | "+" ) factor )*
    factor      := unary ( ( "/" | "*" ) unary )*
    unary       := ( "!" | "-" ) unary | primary
    primary     := NUMBER | STRING | "true" | "false" | "nil"
                 | IDENTIFIER | "(" expression ")"

Binary operators are left associative; assignment is right associative.
In prompt mode the trailing `;` is optional and only the first statement
of the input is parsed. Parsing stops at the first syntax error, which is
raised as a `ParseError`. Input nested deeper than the interpreter stack
allows is reported the same way.
"""

from __future__ import annotations

from typing import Callable, List

from .ast import (
    Assign, Binary, Block, Context, Expr, ExpressionStmt, Grouping, LetStmt,
    Literal, PrintStmt, Stmt, Unary, Variable,
)
from .errors import ParseError, format_diagnostic
from .lexer import scan
from .tokens import Token, TokenType

LITERAL_TOKENS = (
    TokenType.NUMBER, TokenType.STRING, TokenType.TRUE, TokenType.FALSE, TokenType.NIL,
)


class Parser:
    def __init__(self, tokens: List[Token], source_name: str = '<input>', prompt_mode: bool = False):
        self.tokens = tokens
        self.source_name = source_name
        self.prompt_mode = prompt_mode
        self.pos = 0

    # Public API
    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            try:
                statements.append(self.parse_statement())
            except RecursionError:
                raise self.error(self.peek(), "Maximum nesting depth exceeded") from None
            if self.prompt_mode:
                # the prompt only runs the first statement of a line
                break
        return statements

    def parse_expression(self) -> Expr:
        return self.parse_assignment()

    # Token helpers
    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type is TokenType.EOF

    def check(self, token_type: TokenType) -> bool:
        return not self.is_at_end() and self.peek().type is token_type

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def match(self, *token_types: TokenType) -> bool:
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def context(self, token: Token) -> Context:
        return Context.from_token(token, self.source_name)

    def error(self, token: Token, message: str) -> ParseError:
        if token.type is TokenType.EOF:
            reason = f"{message} at end"
        else:
            reason = f"Error at '{token.lexeme}': {message}"
        return ParseError(format_diagnostic(self.context(token), reason))

    def consume_terminator(self, message: str) -> None:
        if self.match(TokenType.SEMICOLON) or self.prompt_mode:
            return
        raise self.error(self.peek(), message)

    # Statements
    def parse_statement(self) -> Stmt:
        if self.match(TokenType.LET):
            return self.parse_let_statement()
        if self.match(TokenType.PRINTLN):
            return self.parse_print_statement()
        if self.match(TokenType.LEFT_BRACE):
            return self.parse_block()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStmt:
        mutable = self.match(TokenType.MUT)
        name = self.consume(TokenType.IDENTIFIER, "Expect identifier after let")
        self.consume(TokenType.EQUAL, "Expect initialization")
        initializer = self.parse_expression()
        self.consume_terminator("Expect ';' after expression")
        return LetStmt(self.context(name), name, mutable, initializer)

    def parse_print_statement(self) -> PrintStmt:
        expr = self.parse_expression()
        self.consume_terminator("Expect ';' after statement")
        return PrintStmt(self.context(self.previous()), expr)

    def parse_block(self) -> Block:
        ctx = self.context(self.previous())
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            statements.append(self.parse_statement())
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block")
        return Block(ctx, statements)

    def parse_expression_statement(self) -> ExpressionStmt:
        expr = self.parse_expression()
        self.consume_terminator("Expect ';' after expression")
        return ExpressionStmt(self.context(self.previous()), expr)

    # Expressions
    def parse_assignment(self) -> Expr:
        expr = self.parse_equality()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Assign(expr.ctx, expr.name, value)
            raise self.error(equals, "Invalid assignment value")
        return expr

    def parse_binary(self, operand: Callable[[], Expr], *operators: TokenType) -> Expr:
        expr = operand()
        while self.match(*operators):
            op_token = self.previous()
            right = operand()
            expr = Binary(self.context(op_token), expr, op_token, right)
        return expr

    def parse_equality(self) -> Expr:
        return self.parse_binary(self.parse_comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def parse_comparison(self) -> Expr:
        return self.parse_binary(
            self.parse_term,
            TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL,
        )

    def parse_term(self) -> Expr:
        return self.parse_binary(self.parse_factor, TokenType.MINUS, TokenType.PLUS)

    def parse_factor(self) -> Expr:
        return self.parse_binary(self.parse_unary, TokenType.SLASH, TokenType.STAR)

    def parse_unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            op_token = self.previous()
            operand = self.parse_unary()
            return Unary(self.context(op_token), op_token, operand)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        if self.match(*LITERAL_TOKENS):
            token = self.previous()
            return Literal(self.context(token), token)
        if self.match(TokenType.IDENTIFIER):
            token = self.previous()
            return Variable(self.context(token), token)
        if self.match(TokenType.LEFT_PAREN):
            paren = self.previous()
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression")
            return Grouping(self.context(paren), expr)
        raise self.error(self.peek(), "Expect expression")


def parse_program(source: str, source_name: str = '<input>', prompt_mode: bool = False) -> List[Stmt]:
    """Lex and parse uvl source into a list of statements."""
    return Parser(scan(source, source_name), source_name, prompt_mode).parse()
