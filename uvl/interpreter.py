"""Interpreter for the uvl language.

This module ties the pipeline together: source text is tokenized by
`uvl.lexer`, parsed by `uvl.parser` and the resulting statements are
executed here by walking the AST. Errors at any stage are raised as
`UvlError` subclasses and abort the rest of the run.

An `Interpreter` keeps its root scope between calls to `run`, which is
what lets the interactive prompt remember earlier declarations. In prompt
mode statement terminators are optional and only the first statement of
each input is executed.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Assign, Binary, Block, Expr, ExpressionStmt, Grouping, LetStmt, Literal,
    PrintStmt, Stmt, Unary, Variable, to_string as node_to_string,
)
from .environment import Environment
from .errors import UvlError, UvlNameError, UvlRuntimeError, format_diagnostic
from .lexer import Lexer
from .parser import Parser
from .tokens import TokenType
from .types import NIL, Value, apply_binary, apply_unary, to_string


class Interpreter:
    """Core interpreter that executes uvl statements."""
    def __init__(self, prompt_mode: bool = False, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.prompt_mode = prompt_mode
        self.global_env = Environment()
        self.environment = self.global_env
        self.had_error = False
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        # no-op when tracing is off or after close()
        if self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, source_name: str, source: str) -> Value:
        """Lex, parse and execute `source`, returning the last statement's value."""
        self.environment = self.global_env
        try:
            tokens = Lexer(source, source_name).scan()
            statements = Parser(tokens, source_name, self.prompt_mode).parse()
            self.debug(f"run {source_name}: {len(tokens)} tokens, {len(statements)} statements")
            return self.execute(statements)
        except UvlError as err:
            self.had_error = True
            self.debug(f"{err.name}: {err.message}")
            raise

    def reset(self):
        """Clear the error flag. Declared names are kept."""
        self.had_error = False

    def execute(self, statements: List[Stmt]) -> Value:
        """Execute top-level statements, returning the last one's value."""
        result: Value = NIL
        for stmt in statements:
            try:
                result = self.execute_statement(stmt)
            except RecursionError:
                self.environment = self.global_env
                raise UvlRuntimeError(format_diagnostic(stmt.ctx, "Maximum nesting depth exceeded")) from None
        return result

    def execute_block(self, statements: List[Stmt], env: Environment) -> Value:
        previous = self.environment
        self.environment = env
        try:
            result: Value = NIL
            for stmt in statements:
                result = self.execute_statement(stmt)
            return result
        finally:
            self.environment = previous

    def execute_statement(self, node: Stmt) -> Value:
        if self.debug_level >= 3:
            self.debug(f"exec {node_to_string(node)}")
        if isinstance(node, ExpressionStmt):
            return self.evaluate(node.expression)
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expression)
            print(to_string(value))
            return NIL
        if isinstance(node, LetStmt):
            name = node.name.lexeme
            if self.environment.contains(name):
                raise UvlNameError(format_diagnostic(node.ctx, f"Name '{name}' has already been declared"))
            value = self.evaluate(node.initializer)
            self.environment.define(name, node.mutable, value)
            if self.debug_level >= 2:
                kind = 'mut' if node.mutable else 'const'
                self.debug(f"declare {name} ({kind}) = {to_string(value)}")
            return NIL
        if isinstance(node, Block):
            if self.debug_level >= 3:
                self.debug(f"enter block at line {node.ctx.line}")
            self.execute_block(node.statements, self.environment.child())
            if self.debug_level >= 3:
                self.debug(f"leave block at line {node.ctx.line}")
            return NIL
        raise TypeError(f"unknown statement {type(node).__name__}")

    def evaluate(self, node: Expr) -> Value:
        if isinstance(node, Literal):
            token = node.token
            if token.type in (TokenType.STRING, TokenType.NUMBER):
                return token.literal
            if token.type is TokenType.TRUE:
                return True
            if token.type is TokenType.FALSE:
                return False
            return NIL
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, Unary):
            operand = self.evaluate(node.operand)
            return apply_unary(node.ctx, node.operator, operand)
        if isinstance(node, Binary):
            return self.evaluate_binary(node)
        if isinstance(node, Variable):
            name = node.name.lexeme
            binding = self.environment.get(name)
            if binding is None:
                raise UvlNameError(format_diagnostic(node.ctx, f"Name '{name}' is not defined"))
            return binding.value
        if isinstance(node, Assign):
            name = node.name.lexeme
            binding = self.environment.get(name)
            if binding is None:
                raise UvlNameError(format_diagnostic(node.ctx, f"Name '{name}' is not defined"))
            if not binding.mutable:
                raise UvlNameError(format_diagnostic(node.ctx, f"Name '{name}' is immutable"))
            # an assignment evaluates to the value held before its right side ran
            previous = binding.value
            value = self.evaluate(node.value)
            self.environment.assign(name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {name} = {to_string(value)} (was {to_string(previous)})")
            return previous
        raise TypeError(f"unknown expression {type(node).__name__}")

    def evaluate_binary(self, node: Binary) -> Value:
        # Both operands are evaluated before either error is reported
        left_error: Optional[UvlError] = None
        right_error: Optional[UvlError] = None
        left: Value = NIL
        right: Value = NIL
        try:
            left = self.evaluate(node.left)
        except UvlError as err:
            left_error = err
        try:
            right = self.evaluate(node.right)
        except UvlError as err:
            right_error = err
        if left_error is not None:
            raise left_error
        if right_error is not None:
            raise right_error
        return apply_binary(node.ctx, node.operator, left, right)


def run_source(source: str, source_name: str = '<input>', debug_level: int = 0) -> Value:
    """Convenience function to run uvl source with a fresh interpreter."""
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.run(source_name, source)
    finally:
        interpreter.close()


def run_file(file_path: str, debug_level: int = 0) -> Value:
    """Run a uvl file, returning the value of its last statement."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_source(source, file_path, debug_level)
