"""Syntax tree node types produced by the parser and consumed by the resolver
and the evaluator.

Nodes are frozen dataclasses compared by identity: the resolver keys its
side table on the node object itself, so two structurally equal `Variable`
nodes at different places in a program must stay distinct.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple, Union

from lark import Token
from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from .types import LoxValue

# ---------------- Expressions ----------------

@dataclass(frozen=True, eq=False)
class Assign:
    name: Token
    value: Expr

@dataclass(frozen=True, eq=False)
class Binary:
    left: Expr
    op: Token
    right: Expr

@dataclass(frozen=True, eq=False)
class Call:
    callee: Expr
    paren: Token
    arguments: Tuple[Expr, ...]

@dataclass(frozen=True, eq=False)
class Get:
    obj: Expr
    name: Token

@dataclass(frozen=True, eq=False)
class Grouping:
    expression: Expr

@dataclass(frozen=True, eq=False)
class Literal:
    value: LoxValue

@dataclass(frozen=True, eq=False)
class Logical:
    left: Expr
    op: Token
    right: Expr

@dataclass(frozen=True, eq=False)
class Set:
    obj: Expr
    name: Token
    value: Expr

@dataclass(frozen=True, eq=False)
class Super:
    keyword: Token
    method: Token

@dataclass(frozen=True, eq=False)
class This:
    keyword: Token

@dataclass(frozen=True, eq=False)
class Unary:
    op: Token
    right: Expr

@dataclass(frozen=True, eq=False)
class Variable:
    name: Token

Expr: TypeAlias = Union[
    Assign, Binary, Call, Get, Grouping, Literal, Logical, Set, Super, This, Unary, Variable
]

# ---------------- Statements ----------------

@dataclass(frozen=True, eq=False)
class Block:
    statements: Tuple[Stmt, ...]

@dataclass(frozen=True, eq=False)
class Function:
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]

@dataclass(frozen=True, eq=False)
class Class:
    name: Token
    superclass: Optional[Variable]
    methods: Tuple[Function, ...]

@dataclass(frozen=True, eq=False)
class Expression:
    expression: Expr

@dataclass(frozen=True, eq=False)
class If:
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]

@dataclass(frozen=True, eq=False)
class Print:
    expression: Expr

@dataclass(frozen=True, eq=False)
class Return:
    keyword: Token
    value: Optional[Expr]

@dataclass(frozen=True, eq=False)
class Var:
    name: Token
    initializer: Optional[Expr]

@dataclass(frozen=True, eq=False)
class While:
    condition: Expr
    body: Stmt

Stmt: TypeAlias = Union[Block, Class, Expression, Function, If, Print, Return, Var, While]

def synthetic_token(type_: str, value: str, line: int = 0) -> Token:
    """Build a token for nodes that have no source text of their own."""
    return Token(type_, value, line=line, column=0)
