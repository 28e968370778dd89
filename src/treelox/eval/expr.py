from __future__ import annotations

from typing import TYPE_CHECKING

from ..tree import Binary, Logical, Unary
from ..types import Environment, InternalError, LoxBool, LoxNumber, LoxRuntimeError, LoxString, LoxValue
from ..utils import lox_equals
from .helpers import is_truthy, require_number, require_numbers

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_unary(expr: Unary, env: Environment, interp: 'Interpreter') -> LoxValue:
    right = interp.evaluate(expr.right, env)

    match expr.op.type:
        case 'MINUS':
            return LoxNumber(-require_number(expr.op, right))
        case 'BANG':
            return LoxBool(not is_truthy(right))
        case _:
            raise InternalError(f"Unexpected unary operator {expr.op.value!r}")

def eval_binary(expr: Binary, env: Environment, interp: 'Interpreter') -> LoxValue:
    # both sides are evaluated before any type check
    left = interp.evaluate(expr.left, env)
    right = interp.evaluate(expr.right, env)
    op = expr.op

    match op.type:
        case 'EQUAL_EQUAL':
            return LoxBool(lox_equals(left, right))
        case 'BANG_EQUAL':
            return LoxBool(not lox_equals(left, right))
        case 'PLUS':
            match (left, right):
                case (LoxNumber(value=a), LoxNumber(value=b)):
                    return LoxNumber(a + b)
                case (LoxString(value=a), LoxString(value=b)):
                    return LoxString(a + b)
                case _:
                    raise LoxRuntimeError(op, "Operands must be two numbers or two strings.")
        case 'MINUS':
            a, b = require_numbers(op, left, right)
            return LoxNumber(a - b)
        case 'STAR':
            a, b = require_numbers(op, left, right)
            return LoxNumber(a * b)
        case 'SLASH':
            a, b = require_numbers(op, left, right)
            if b == 0:
                raise LoxRuntimeError(op, "Cannot divide by 0.")
            return LoxNumber(a / b)
        case 'GREATER':
            a, b = require_numbers(op, left, right)
            return LoxBool(a > b)
        case 'GREATER_EQUAL':
            a, b = require_numbers(op, left, right)
            return LoxBool(a >= b)
        case 'LESS':
            a, b = require_numbers(op, left, right)
            return LoxBool(a < b)
        case 'LESS_EQUAL':
            a, b = require_numbers(op, left, right)
            return LoxBool(a <= b)
        case _:
            raise InternalError(f"Unexpected operator in binary expression: {op.value!r}")

def eval_logical(expr: Logical, env: Environment, interp: 'Interpreter') -> LoxValue:
    """`or`/`and` return an operand value, not a coerced boolean."""
    left = interp.evaluate(expr.left, env)

    if expr.op.type == 'OR':
        if is_truthy(left):
            return left
    elif not is_truthy(left):
        return left

    return interp.evaluate(expr.right, env)
