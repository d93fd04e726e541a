"""Abstract Syntax Tree (AST) definitions for uvl.

Expressions and statements are plain dataclasses. Every node carries a
`Context` recording where it came from; the context is only used to build
diagnostic messages and has no effect on evaluation. Operators, literals
and names are kept as the `Token` that produced them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from .tokens import Token, TokenType
from .types import format_number

# uvl has no functions or modules, so every node belongs to the same unit
ROOT_UNIT = '<root>'


@dataclass(frozen=True)
class Context:
    source_name: str
    line: int
    unit: str = ROOT_UNIT

    @staticmethod
    def from_token(token: Token, source_name: str) -> 'Context':
        return Context(source_name, token.line)


@dataclass
class Node:
    """Base class for all AST nodes."""
    ctx: Context


# Expressions

@dataclass
class Binary(Node):
    left: 'Expr'
    operator: Token
    right: 'Expr'


@dataclass
class Grouping(Node):
    expression: 'Expr'


@dataclass
class Literal(Node):
    token: Token


@dataclass
class Unary(Node):
    operator: Token
    operand: 'Expr'


@dataclass
class Variable(Node):
    name: Token


@dataclass
class Assign(Node):
    name: Token  # target variable
    value: 'Expr'


Expr = Union[Binary, Grouping, Literal, Unary, Variable, Assign]


# Statements

@dataclass
class ExpressionStmt(Node):
    expression: Expr


@dataclass
class PrintStmt(Node):
    expression: Expr


@dataclass
class LetStmt(Node):
    name: Token
    mutable: bool
    initializer: Expr


@dataclass
class Block(Node):
    statements: List['Stmt']


Stmt = Union[ExpressionStmt, PrintStmt, LetStmt, Block]


def to_string(node: Node) -> str:
    """Render a node as a parenthesized prefix expression, e.g. `(+ 1 4)`."""
    if isinstance(node, Binary):
        return f"({node.operator.lexeme} {to_string(node.left)} {to_string(node.right)})"
    if isinstance(node, Grouping):
        return f"(group {to_string(node.expression)})"
    if isinstance(node, Literal):
        token = node.token
        if token.type is TokenType.NUMBER:
            return format_number(token.literal)
        if token.type is TokenType.STRING:
            return f'"{token.literal}"'
        return token.lexeme
    if isinstance(node, Unary):
        return f"({node.operator.lexeme} {to_string(node.operand)})"
    if isinstance(node, Variable):
        return node.name.lexeme
    if isinstance(node, Assign):
        return f"(= {node.name.lexeme} {to_string(node.value)})"
    if isinstance(node, ExpressionStmt):
        return f"(expr {to_string(node.expression)})"
    if isinstance(node, PrintStmt):
        return f"(println {to_string(node.expression)})"
    if isinstance(node, LetStmt):
        keyword = 'let mut' if node.mutable else 'let'
        return f"({keyword} {node.name.lexeme} {to_string(node.initializer)})"
    if isinstance(node, Block):
        inner = ' '.join(to_string(stmt) for stmt in node.statements)
        return f"(block {inner})" if inner else "(block)"
    raise TypeError(f"unknown AST node {type(node).__name__}")
