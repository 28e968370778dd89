"""
Parse-tree to AST lowering. `AstBuilder` walks the lark tree bottom-up and
produces the dataclass nodes from `tree.py`, desugaring `for` loops into
blocks and `while` loops along the way.

Some static errors are only visible here (assignment targets, argument and
parameter limits). They are collected on the builder instead of raised so
the whole program still lowers and every such error is reported.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from lark import Token, Transformer, Tree, v_args

from . import tree as ast
from .diagnostics import Diagnostic, at_token
from .types import LoxBool, LoxNil, LoxNumber, LoxString

MAX_ARITY = 255

class AstBuilder(Transformer):
    def __init__(self) -> None:
        super().__init__(visit_tokens=False)
        self.diagnostics: List[Diagnostic] = []

    def _error(self, token: Token, message: str) -> None:
        self.diagnostics.append(at_token(token, message))

    @staticmethod
    def _fold(c: Sequence, node_type: type) -> ast.Expr:
        # children alternate operand, operator, operand, ... and associate left
        expr = c[0]

        for i in range(1, len(c), 2):
            expr = node_type(expr, c[i], c[i + 1])

        return expr

    # ---- declarations ----
    def program(self, c) -> List[ast.Stmt]:
        return list(c)

    @v_args(inline=True)
    def class_decl(self, name: Token, superclass: Optional[Token], *methods: ast.Function) -> ast.Class:
        parent = ast.Variable(superclass) if superclass is not None else None
        return ast.Class(name, parent, tuple(methods))

    def fun_decl(self, c) -> ast.Function:
        return c[0]

    @v_args(inline=True)
    def function(self, name: Token, params: Optional[Tuple[Token, ...]], body: ast.Block) -> ast.Function:
        return ast.Function(name, params or (), body.statements)

    def parameters(self, c) -> Tuple[Token, ...]:
        if len(c) > MAX_ARITY:
            self._error(c[MAX_ARITY], f"Can't have more than {MAX_ARITY} parameters.")

        return tuple(c)

    @v_args(inline=True)
    def var_decl(self, name: Token, initializer: Optional[ast.Expr]) -> ast.Var:
        return ast.Var(name, initializer)

    # ---- statements ----
    @v_args(inline=True)
    def expr_stmt(self, expr: ast.Expr) -> ast.Expression:
        return ast.Expression(expr)

    def for_init(self, c) -> Optional[ast.Stmt]:
        return c[0] if c else None

    @v_args(inline=True)
    def for_stmt(
        self,
        init: Optional[ast.Stmt],
        condition: Optional[ast.Expr],
        increment: Optional[ast.Expr],
        body: ast.Stmt,
    ) -> ast.Stmt:
        if increment is not None:
            body = ast.Block((body, ast.Expression(increment)))

        loop: ast.Stmt = ast.While(
            condition if condition is not None else ast.Literal(LoxBool(True)),
            body,
        )

        if init is not None:
            loop = ast.Block((init, loop))

        return loop

    @v_args(inline=True)
    def if_stmt(self, condition: ast.Expr, then_branch: ast.Stmt, else_branch: Optional[ast.Stmt]) -> ast.If:
        return ast.If(condition, then_branch, else_branch)

    @v_args(inline=True)
    def print_stmt(self, expr: ast.Expr) -> ast.Print:
        return ast.Print(expr)

    @v_args(inline=True)
    def return_stmt(self, keyword: Token, value: Optional[ast.Expr]) -> ast.Return:
        return ast.Return(keyword, value)

    @v_args(inline=True)
    def while_stmt(self, condition: ast.Expr, body: ast.Stmt) -> ast.While:
        return ast.While(condition, body)

    def block(self, c) -> ast.Block:
        return ast.Block(tuple(c))

    # ---- expressions ----
    @v_args(inline=True)
    def assign(self, target: ast.Expr, equals: Token, value: ast.Expr) -> ast.Expr:
        match target:
            case ast.Variable(name=name):
                return ast.Assign(name, value)
            case ast.Get(obj=obj, name=name):
                return ast.Set(obj, name, value)
            case _:
                self._error(equals, "Invalid assignment target.")
                return target

    def logic_or(self, c) -> ast.Expr:
        return self._fold(c, ast.Logical)

    def logic_and(self, c) -> ast.Expr:
        return self._fold(c, ast.Logical)

    def equality(self, c) -> ast.Expr:
        return self._fold(c, ast.Binary)

    def comparison(self, c) -> ast.Expr:
        return self._fold(c, ast.Binary)

    def term(self, c) -> ast.Expr:
        return self._fold(c, ast.Binary)

    def factor(self, c) -> ast.Expr:
        return self._fold(c, ast.Binary)

    @v_args(inline=True)
    def unary_op(self, op: Token, right: ast.Expr) -> ast.Unary:
        return ast.Unary(op, right)

    @v_args(inline=True)
    def call_expr(self, callee: ast.Expr, arguments: Optional[Tuple[ast.Expr, ...]], paren: Token) -> ast.Call:
        args = arguments or ()

        if len(args) > MAX_ARITY:
            self._error(paren, f"Can't have more than {MAX_ARITY} arguments.")

        return ast.Call(callee, paren, args)

    def arguments(self, c) -> Tuple[ast.Expr, ...]:
        return tuple(c)

    @v_args(inline=True)
    def get_expr(self, obj: ast.Expr, name: Token) -> ast.Get:
        return ast.Get(obj, name)

    # ---- primaries ----
    def true_literal(self, _c) -> ast.Literal:
        return ast.Literal(LoxBool(True))

    def false_literal(self, _c) -> ast.Literal:
        return ast.Literal(LoxBool(False))

    def nil_literal(self, _c) -> ast.Literal:
        return ast.Literal(LoxNil())

    @v_args(inline=True)
    def number(self, tok: Token) -> ast.Literal:
        return ast.Literal(LoxNumber(float(tok.value)))

    @v_args(inline=True)
    def string(self, tok: Token) -> ast.Literal:
        return ast.Literal(LoxString(tok.value[1:-1]))

    @v_args(inline=True)
    def this_expr(self, keyword: Token) -> ast.This:
        return ast.This(keyword)

    @v_args(inline=True)
    def variable(self, name: Token) -> ast.Variable:
        return ast.Variable(name)

    @v_args(inline=True)
    def grouping(self, expr: ast.Expr) -> ast.Grouping:
        return ast.Grouping(expr)

    @v_args(inline=True)
    def super_expr(self, keyword: Token, method: Token) -> ast.Super:
        return ast.Super(keyword, method)

def build_ast(parse_tree: Tree) -> Tuple[object, List[Diagnostic]]:
    builder = AstBuilder()
    result = builder.transform(parse_tree)

    return result, builder.diagnostics
