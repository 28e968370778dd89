from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from ..runtime import is_callable
from ..tree import Call, Function
from ..types import COMPLETED, Environment, ExecResult, LoxFunction, LoxRuntimeError, LoxValue

if TYPE_CHECKING:
    from ..evaluator import Interpreter

logger = logging.getLogger(__name__)

def eval_fn_def(stmt: Function, env: Environment, interp: 'Interpreter') -> ExecResult:
    # the closure is the scope the declaration runs in, captured by reference
    env.define(stmt.name.value, LoxFunction(stmt, env, is_initializer=False))
    return COMPLETED

def eval_call(expr: Call, env: Environment, interp: 'Interpreter') -> LoxValue:
    callee = interp.evaluate(expr.callee, env)

    if not is_callable(callee):
        raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")

    # arity is checked before any argument is evaluated
    expected = callee.arity()
    got = len(expr.arguments)

    if got != expected:
        raise LoxRuntimeError(expr.paren, f"Expected {expected} arguments but got {got}.")

    args: List[LoxValue] = [interp.evaluate(arg, env) for arg in expr.arguments]

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("call %s with %d args (line %s)", callee, got, expr.paren.line)

    return callee.call(interp, args)
