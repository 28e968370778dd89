from __future__ import annotations

from typing import TYPE_CHECKING

from ..tree import If, Return, While
from ..types import COMPLETED, EarlyReturn, Environment, ExecResult, LoxNil
from .helpers import is_truthy

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_if_stmt(stmt: If, env: Environment, interp: 'Interpreter') -> ExecResult:
    if is_truthy(interp.evaluate(stmt.condition, env)):
        return interp.execute(stmt.then_branch, env)

    if stmt.else_branch is not None:
        return interp.execute(stmt.else_branch, env)

    return COMPLETED

def eval_while_stmt(stmt: While, env: Environment, interp: 'Interpreter') -> ExecResult:
    while is_truthy(interp.evaluate(stmt.condition, env)):
        result = interp.execute(stmt.body, env)

        if isinstance(result, EarlyReturn):
            return result

    return COMPLETED

def eval_return_stmt(stmt: Return, env: Environment, interp: 'Interpreter') -> EarlyReturn:
    if stmt.value is None:
        return EarlyReturn(LoxNil())

    return EarlyReturn(interp.evaluate(stmt.value, env))
