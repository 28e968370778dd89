"""
Static scope resolution.

Walks the statements once before execution and records, for every variable
reference that binds to a local, how many scopes out its declaration lives.
References that are not found in any local scope are left out of the table
and become global lookups at run time.

It also reports the misuses that are visible without running anything:
reading a variable in its own initializer, redeclaring in the same scope,
returning at top level or returning a value from `init`, and `this`/`super`
outside of the class shapes that allow them.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from lark import Token
from typing_extensions import assert_never

from . import tree as ast
from .diagnostics import Diagnostic, at_token

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[Token, str], None]

class FunctionKind(enum.Enum):
    NONE = "none"
    FUNCTION = "function"
    METHOD = "method"
    INITIALIZER = "initializer"

class ClassKind(enum.Enum):
    NONE = "none"
    CLASS = "class"
    SUBCLASS = "subclass"

class VarState(enum.Enum):
    DECLARED = "declared"
    DEFINED = "defined"

Scope = Dict[str, VarState]

@dataclass
class Resolution:
    locals: Dict[ast.Expr, int] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

class Resolver:
    def __init__(self, on_error: Optional[ErrorCallback]=None):
        self.scopes: List[Scope] = []
        self.result = Resolution()
        self.on_error = on_error

    # ---- bookkeeping ----
    def _error(self, token: Token, message: str) -> None:
        self.result.diagnostics.append(at_token(token, message))

        if self.on_error is not None:
            self.on_error(token, message)

    def _begin_scope(self) -> None:
        self.scopes.append({})

    def _end_scope(self) -> None:
        self.scopes.pop()

    def _declare(self, name: Token) -> None:
        if not self.scopes:
            return

        scope = self.scopes[-1]

        if name.value in scope:
            self._error(name, "Already a variable with this name in this scope.")

        scope[name.value] = VarState.DECLARED

    def _define(self, name: Token) -> None:
        if not self.scopes:
            return

        self.scopes[-1][name.value] = VarState.DEFINED

    def _resolve_local(self, expr: ast.Expr, name: str) -> None:
        for depth, scope in enumerate(reversed(self.scopes)):
            if name in scope:
                self.result.locals[expr] = depth
                return
        # not found: global

    # ---- statements ----
    def resolve_statements(self, statements: Sequence[ast.Stmt], fn: FunctionKind, cls: ClassKind) -> None:
        for stmt in statements:
            self.resolve_stmt(stmt, fn, cls)

    def resolve_stmt(self, stmt: ast.Stmt, fn: FunctionKind, cls: ClassKind) -> None:
        match stmt:
            case ast.Block(statements=statements):
                self._begin_scope()
                self.resolve_statements(statements, fn, cls)
                self._end_scope()
            case ast.Var(name=name, initializer=initializer):
                self._declare(name)
                if initializer is not None:
                    self.resolve_expr(initializer, fn, cls)
                self._define(name)
            case ast.Function(name=name):
                self._declare(name)
                self._define(name)
                self._resolve_function(stmt, FunctionKind.FUNCTION, cls)
            case ast.Class():
                self._resolve_class(stmt, fn, cls)
            case ast.Expression(expression=expr) | ast.Print(expression=expr):
                self.resolve_expr(expr, fn, cls)
            case ast.If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self.resolve_expr(condition, fn, cls)
                self.resolve_stmt(then_branch, fn, cls)
                if else_branch is not None:
                    self.resolve_stmt(else_branch, fn, cls)
            case ast.Return(keyword=keyword, value=value):
                if fn is FunctionKind.NONE:
                    self._error(keyword, "Can't return from top-level code.")
                if value is not None:
                    if fn is FunctionKind.INITIALIZER:
                        self._error(keyword, "Can't return a value from an initializer.")
                    self.resolve_expr(value, fn, cls)
            case ast.While(condition=condition, body=body):
                self.resolve_expr(condition, fn, cls)
                self.resolve_stmt(body, fn, cls)
            case _:
                assert_never(stmt)

    def _resolve_function(self, function: ast.Function, kind: FunctionKind, cls: ClassKind) -> None:
        # parameters and body share one scope
        self._begin_scope()

        for param in function.params:
            self._declare(param)
            self._define(param)

        self.resolve_statements(function.body, kind, cls)
        self._end_scope()

    def _resolve_class(self, klass: ast.Class, fn: FunctionKind, enclosing: ClassKind) -> None:
        self._declare(klass.name)
        self._define(klass.name)

        kind = ClassKind.CLASS

        if klass.superclass is not None:
            if klass.superclass.name.value == klass.name.value:
                self._error(klass.superclass.name, "A class can't inherit from itself.")

            # the superclass name is read in the enclosing class context
            self.resolve_expr(klass.superclass, fn, enclosing)
            kind = ClassKind.SUBCLASS

            self._begin_scope()
            self.scopes[-1]["super"] = VarState.DEFINED

        self._begin_scope()
        self.scopes[-1]["this"] = VarState.DEFINED

        for method in klass.methods:
            method_kind = FunctionKind.INITIALIZER if method.name.value == "init" else FunctionKind.METHOD
            self._resolve_function(method, method_kind, kind)

        self._end_scope()

        if klass.superclass is not None:
            self._end_scope()

    # ---- expressions ----
    def resolve_expr(self, expr: ast.Expr, fn: FunctionKind, cls: ClassKind) -> None:
        match expr:
            case ast.Variable(name=name):
                if self.scopes and self.scopes[-1].get(name.value) is VarState.DECLARED:
                    self._error(name, "Can't read local variable in its own initializer.")
                self._resolve_local(expr, name.value)
            case ast.Assign(name=name, value=value):
                self.resolve_expr(value, fn, cls)
                self._resolve_local(expr, name.value)
            case ast.Binary(left=left, right=right) | ast.Logical(left=left, right=right):
                self.resolve_expr(left, fn, cls)
                self.resolve_expr(right, fn, cls)
            case ast.Call(callee=callee, arguments=arguments):
                self.resolve_expr(callee, fn, cls)
                for arg in arguments:
                    self.resolve_expr(arg, fn, cls)
            case ast.Get(obj=obj):
                self.resolve_expr(obj, fn, cls)
            case ast.Set(obj=obj, value=value):
                self.resolve_expr(value, fn, cls)
                self.resolve_expr(obj, fn, cls)
            case ast.Grouping(expression=inner):
                self.resolve_expr(inner, fn, cls)
            case ast.Unary(right=right):
                self.resolve_expr(right, fn, cls)
            case ast.Literal():
                pass
            case ast.This(keyword=keyword):
                if cls is ClassKind.NONE:
                    self._error(keyword, "Can't use 'this' outside of a class.")
                    return
                self._resolve_local(expr, "this")
            case ast.Super(keyword=keyword):
                if cls is ClassKind.NONE:
                    self._error(keyword, "Can't use 'super' outside of a class.")
                elif cls is not ClassKind.SUBCLASS:
                    self._error(keyword, "Can't use 'super' in a class with no superclass.")
                self._resolve_local(expr, "super")
            case _:
                assert_never(expr)

def resolve(statements: Sequence[ast.Stmt], on_error: Optional[ErrorCallback]=None) -> Resolution:
    resolver = Resolver(on_error)
    resolver.resolve_statements(statements, FunctionKind.NONE, ClassKind.NONE)

    logger.debug(
        "resolved %d local references (%d diagnostics)",
        len(resolver.result.locals),
        len(resolver.result.diagnostics),
    )

    return resolver.result
