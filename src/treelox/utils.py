from __future__ import annotations

import logging
import math
import os as _os
from decimal import Decimal
from typing import Optional

from .types import (
    LoxValue,
    LoxNil,
    LoxBool,
    LoxNumber,
    LoxString,
    LoxFunction,
    NativeFunction,
    LoxClass,
    LoxInstance,
)

DEBUG_PY_TRACE_ENV = "TREELOX_DEBUG_PY_TRACE"
LOG_LEVEL_ENV = "TREELOX_LOG_LEVEL"

def debug_py_trace_enabled() -> bool:
    """Whether to show Python tracebacks alongside Lox errors."""
    return _os.environ.get(DEBUG_PY_TRACE_ENV, "").lower() in ("1", "true", "yes", "on")

def set_debug_py_trace(enabled: bool) -> None:
    _os.environ[DEBUG_PY_TRACE_ENV] = "1" if enabled else "0"

def env_log_level(default: int=logging.WARNING) -> int:
    raw = _os.environ.get(LOG_LEVEL_ENV)
    return parse_log_level(raw) if raw else default

def parse_log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())

    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")

    return level

def lox_equals(lhs: LoxValue, rhs: LoxValue) -> bool:
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxNumber(value=a), LoxNumber(value=b)):
            # Lox treats NaN as equal to itself.
            if math.isnan(a) and math.isnan(b):
                return True
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        case (
            (LoxFunction(), LoxFunction())
            | (NativeFunction(), NativeFunction())
            | (LoxClass(), LoxClass())
            | (LoxInstance(), LoxInstance())
        ):
            return lhs is rhs
        case _:
            return False

def format_number(num: float) -> str:
    """Shortest round-trip text, laid out the way JavaScript prints numbers."""
    num = float(num)

    if math.isnan(num):
        return "NaN"

    if math.isinf(num):
        return "Infinity" if num > 0 else "-Infinity"

    if num == 0:
        # -0 prints as 0
        return "0"

    sign = "-" if num < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(num))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    # value is 0.<digits> * 10**point
    point = k + exponent

    if k <= point <= 21:
        text = digits + "0" * (point - k)
    elif 0 < point <= 21:
        text = digits[:point] + "." + digits[point:]
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
        text = f"{mantissa}e{'+' if point > 0 else '-'}{abs(point - 1)}"

    return sign + text

def stringify(value: Optional[LoxValue]) -> str:
    if isinstance(value, LoxNil) or value is None:
        return "nil"

    if isinstance(value, LoxString):
        return value.value

    if isinstance(value, LoxNumber):
        return format_number(value.value)

    if isinstance(value, LoxBool):
        return "true" if value.value else "false"

    return str(value)
