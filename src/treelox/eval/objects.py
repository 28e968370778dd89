from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from ..tree import Class, Get, Set, Super
from ..types import (
    COMPLETED,
    Environment,
    ExecResult,
    InternalError,
    LoxClass,
    LoxFunction,
    LoxInstance,
    LoxNil,
    LoxRuntimeError,
    LoxValue,
    NameResolutionError,
)

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_class_stmt(stmt: Class, env: Environment, interp: 'Interpreter') -> ExecResult:
    superclass: Optional[LoxClass] = None

    if stmt.superclass is not None:
        parent = interp.evaluate(stmt.superclass, env)

        if not isinstance(parent, LoxClass):
            raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

        superclass = parent

    env.define(stmt.name.value, LoxNil())

    method_env = env

    if superclass is not None:
        method_env = Environment(env)
        method_env.define("super", superclass)

    methods: Dict[str, LoxFunction] = {}

    for method in stmt.methods:
        name = method.name.value
        methods[name] = LoxFunction(method, method_env, is_initializer=name == "init")

    klass = LoxClass(stmt.name.value, methods, superclass)

    try:
        env.assign_at(stmt.name.value, klass, 0)
    except NameResolutionError as exc:
        raise LoxRuntimeError(stmt.name, str(exc)) from None

    return COMPLETED

def eval_get(expr: Get, env: Environment, interp: 'Interpreter') -> LoxValue:
    obj = interp.evaluate(expr.obj, env)

    if isinstance(obj, LoxInstance):
        return obj.get(expr.name)

    raise LoxRuntimeError(expr.name, "Only instances have properties.")

def eval_set(expr: Set, env: Environment, interp: 'Interpreter') -> LoxValue:
    obj = interp.evaluate(expr.obj, env)

    # the target is checked before the value is evaluated
    if not isinstance(obj, LoxInstance):
        raise LoxRuntimeError(expr.name, "Only instances have fields.")

    value = interp.evaluate(expr.value, env)
    obj.set(expr.name, value)

    return value

def eval_super(expr: Super, env: Environment, interp: 'Interpreter') -> LoxValue:
    distance = interp.locals.get(expr)

    if distance is None:
        raise InternalError(f"'super' on line {expr.keyword.line} was never resolved")

    superclass = env.get_at("super", distance)
    # `this` lives in the scope just inside the one holding `super`
    instance = env.get_at("this", distance - 1)

    if not isinstance(superclass, LoxClass) or not isinstance(instance, LoxInstance):
        raise InternalError("'super' binding does not hold a class and receiver")

    method = superclass.find_method(expr.method.value)

    if method is None:
        raise LoxRuntimeError(expr.method, f"Undefined property '{expr.method.value}'.")

    return method.bind(instance)
