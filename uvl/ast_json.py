"""JSON serialization/deserialization for uvl ASTs.

This module converts between the AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Nodes are tagged with
`"type"`; tokens and contexts are tagged with `"__type__"`. Loading what
was dumped gives back an equal tree.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .ast import (
    Assign, Binary, Block, Context, ExpressionStmt, Grouping, LetStmt,
    Literal, PrintStmt, Stmt, Unary, Variable,
)
from .tokens import Token, TokenType


def token_to_obj(token: Token) -> Dict[str, Any]:
    return {
        "__type__": "Token",
        "kind": token.type.name,
        "lexeme": token.lexeme,
        "line": token.line,
        "literal": token.literal,
    }


def token_from_obj(o: Dict[str, Any]) -> Token:
    kind = TokenType[o["kind"]]
    literal = o.get("literal")
    if kind is TokenType.NUMBER:
        literal = float(literal)
    return Token(kind, o["lexeme"], o["line"], literal)


def context_to_obj(ctx: Context) -> Dict[str, Any]:
    return {"__type__": "Context", "source_name": ctx.source_name, "line": ctx.line, "unit": ctx.unit}


def context_from_obj(o: Dict[str, Any]) -> Context:
    return Context(o["source_name"], o["line"], o["unit"])


def ast_to_obj(node: Any) -> Any:
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, Token):
        return token_to_obj(node)
    if isinstance(node, Context):
        return context_to_obj(node)

    ctx = context_to_obj(node.ctx)
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "ctx": ctx,
            "left": ast_to_obj(node.left),
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Grouping):
        return {"type": "Grouping", "ctx": ctx, "expression": ast_to_obj(node.expression)}
    if isinstance(node, Literal):
        return {"type": "Literal", "ctx": ctx, "token": token_to_obj(node.token)}
    if isinstance(node, Unary):
        return {
            "type": "Unary",
            "ctx": ctx,
            "operator": token_to_obj(node.operator),
            "operand": ast_to_obj(node.operand),
        }
    if isinstance(node, Variable):
        return {"type": "Variable", "ctx": ctx, "name": token_to_obj(node.name)}
    if isinstance(node, Assign):
        return {"type": "Assign", "ctx": ctx, "name": token_to_obj(node.name), "value": ast_to_obj(node.value)}
    if isinstance(node, ExpressionStmt):
        return {"type": "ExpressionStmt", "ctx": ctx, "expression": ast_to_obj(node.expression)}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "ctx": ctx, "expression": ast_to_obj(node.expression)}
    if isinstance(node, LetStmt):
        return {
            "type": "LetStmt",
            "ctx": ctx,
            "name": token_to_obj(node.name),
            "mutable": node.mutable,
            "initializer": ast_to_obj(node.initializer),
        }
    if isinstance(node, Block):
        return {"type": "Block", "ctx": ctx, "statements": [ast_to_obj(s) for s in node.statements]}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    if obj.get("__type__") == "Token":
        return token_from_obj(obj)
    if obj.get("__type__") == "Context":
        return context_from_obj(obj)

    t = obj.get("type")
    if t == "Program":
        return [ast_from_obj(s) for s in obj["body"]]
    ctx = context_from_obj(obj["ctx"])
    if t == "Binary":
        return Binary(
            ctx,
            left=ast_from_obj(obj["left"]),
            operator=token_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Grouping":
        return Grouping(ctx, expression=ast_from_obj(obj["expression"]))
    if t == "Literal":
        return Literal(ctx, token=token_from_obj(obj["token"]))
    if t == "Unary":
        return Unary(ctx, operator=token_from_obj(obj["operator"]), operand=ast_from_obj(obj["operand"]))
    if t == "Variable":
        return Variable(ctx, name=token_from_obj(obj["name"]))
    if t == "Assign":
        return Assign(ctx, name=token_from_obj(obj["name"]), value=ast_from_obj(obj["value"]))
    if t == "ExpressionStmt":
        return ExpressionStmt(ctx, expression=ast_from_obj(obj["expression"]))
    if t == "PrintStmt":
        return PrintStmt(ctx, expression=ast_from_obj(obj["expression"]))
    if t == "LetStmt":
        return LetStmt(
            ctx,
            name=token_from_obj(obj["name"]),
            mutable=bool(obj.get("mutable", False)),
            initializer=ast_from_obj(obj["initializer"]),
        )
    if t == "Block":
        return Block(ctx, statements=[ast_from_obj(s) for s in obj["statements"]])

    raise ValueError(f"Unknown AST node type: {t}")


def program_to_obj(statements: List[Stmt]) -> Dict[str, Any]:
    """Wrap a parsed statement list as a JSON-ready `Program` object."""
    return {"type": "Program", "body": [ast_to_obj(s) for s in statements]}
