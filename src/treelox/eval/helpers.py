from __future__ import annotations

from typing import Tuple

from lark import Token

from ..types import LoxBool, LoxNil, LoxNumber, LoxRuntimeError, LoxValue

def is_truthy(val: LoxValue) -> bool:
    match val:
        case LoxBool(value=b):
            return b
        case LoxNil():
            return False
        case _:
            return True

def require_number(op: Token, operand: LoxValue) -> float:
    if isinstance(operand, LoxNumber):
        return operand.value

    raise LoxRuntimeError(op, "Operand must be a number.")

def require_numbers(op: Token, left: LoxValue, right: LoxValue) -> Tuple[float, float]:
    if isinstance(left, LoxNumber) and isinstance(right, LoxNumber):
        return left.value, right.value

    raise LoxRuntimeError(op, "Operands must be two numbers.")
