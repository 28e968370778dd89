from __future__ import annotations

import logging
import sys
from typing import Callable, Dict, Mapping, Optional, Sequence, TextIO

from lark import Token
from typing_extensions import assert_never

from . import tree as ast
from .runtime import install_globals
from .types import (
    COMPLETED,
    Environment,
    ExecResult,
    LoxNil,
    LoxRuntimeError,
    LoxValue,
    NameResolutionError,
)
from .utils import stringify

from .eval.blocks import eval_block, run_statements
from .eval.control import eval_if_stmt, eval_return_stmt, eval_while_stmt
from .eval.expr import eval_binary, eval_logical, eval_unary
from .eval.fn import eval_call, eval_fn_def
from .eval.objects import eval_class_stmt, eval_get, eval_set, eval_super

logger = logging.getLogger(__name__)

RuntimeErrorCallback = Callable[[Token, str], None]

class Interpreter:
    """Tree-walking evaluator.

    Holds the global scope and the resolver's side table (expression node to
    scope distance). Both outlive a single `interpret` call so a REPL can feed
    it one line at a time.
    """

    def __init__(self, out: Optional[TextIO]=None, on_runtime_error: Optional[RuntimeErrorCallback]=None):
        self.globals = install_globals(Environment())
        self.locals: Dict[ast.Expr, int] = {}
        self._out = out
        self.on_runtime_error = on_runtime_error

    @property
    def out(self) -> TextIO:
        # resolved per write so pytest's capsys swap is honoured
        return self._out if self._out is not None else sys.stdout

    # ---------------- Resolver side table ----------------

    def add_locals(self, table: Mapping[ast.Expr, int]) -> None:
        self.locals.update(table)

    # ---------------- Public API ----------------

    def interpret(self, statements: Sequence[ast.Stmt]) -> Optional[LoxRuntimeError]:
        """Run a program. Returns the runtime error that aborted it, if any."""
        try:
            for stmt in statements:
                self.execute(stmt, self.globals)
        except LoxRuntimeError as exc:
            logger.debug("runtime error on line %s: %s", exc.line, exc.message)

            if self.on_runtime_error is not None:
                self.on_runtime_error(exc.token, exc.message)

            return exc

        return None

    def execute_block(self, statements: Sequence[ast.Stmt], env: Environment) -> ExecResult:
        return run_statements(statements, env, self)

    # ---------------- Core evaluator ----------------

    def execute(self, stmt: ast.Stmt, env: Environment) -> ExecResult:
        match stmt:
            case ast.Expression(expression=expr):
                self.evaluate(expr, env)
                return COMPLETED
            case ast.Print(expression=expr):
                value = self.evaluate(expr, env)
                self.out.write(stringify(value) + "\n")
                return COMPLETED
            case ast.Var(name=name, initializer=initializer):
                value = self.evaluate(initializer, env) if initializer is not None else LoxNil()
                env.define(name.value, value)
                return COMPLETED
            case ast.Block():
                return eval_block(stmt, env, self)
            case ast.If():
                return eval_if_stmt(stmt, env, self)
            case ast.While():
                return eval_while_stmt(stmt, env, self)
            case ast.Function():
                return eval_fn_def(stmt, env, self)
            case ast.Return():
                return eval_return_stmt(stmt, env, self)
            case ast.Class():
                return eval_class_stmt(stmt, env, self)
            case _:
                assert_never(stmt)

    def evaluate(self, expr: ast.Expr, env: Environment) -> LoxValue:
        match expr:
            case ast.Literal(value=value):
                return value
            case ast.Grouping(expression=inner):
                return self.evaluate(inner, env)
            case ast.Variable(name=name):
                return self._lookup(name, expr, env)
            case ast.This(keyword=keyword):
                return self._lookup(keyword, expr, env)
            case ast.Assign(name=name, value=value_expr):
                value = self.evaluate(value_expr, env)
                self._assign(name, expr, value, env)
                return value
            case ast.Unary():
                return eval_unary(expr, env, self)
            case ast.Binary():
                return eval_binary(expr, env, self)
            case ast.Logical():
                return eval_logical(expr, env, self)
            case ast.Call():
                return eval_call(expr, env, self)
            case ast.Get():
                return eval_get(expr, env, self)
            case ast.Set():
                return eval_set(expr, env, self)
            case ast.Super():
                return eval_super(expr, env, self)
            case _:
                assert_never(expr)

    def _lookup(self, name, expr: ast.Expr, env: Environment) -> LoxValue:
        distance = self.locals.get(expr)

        try:
            if distance is not None:
                return env.get_at(name.value, distance)
            return self.globals.get_at(name.value, 0)
        except NameResolutionError as exc:
            raise LoxRuntimeError(name, str(exc)) from None

    def _assign(self, name, expr: ast.Expr, value: LoxValue, env: Environment) -> None:
        distance = self.locals.get(expr)

        try:
            if distance is not None:
                env.assign_at(name.value, value, distance)
            else:
                self.globals.assign_at(name.value, value, 0)
        except NameResolutionError as exc:
            raise LoxRuntimeError(name, str(exc)) from None
