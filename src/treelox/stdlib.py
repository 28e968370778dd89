"""Native functions registered into the global scope via treelox.runtime."""

from __future__ import annotations

import time
from typing import List

from .runtime import register_native
from .types import LoxNumber, LoxValue

@register_native("clock", arity=0)
def std_clock(_interpreter, _args: List[LoxValue]) -> LoxNumber:
    # wall-clock seconds, fractional
    return LoxNumber(time.time())
