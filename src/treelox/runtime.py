from __future__ import annotations

import importlib
import logging
from typing import Optional

from .types import (
    Builtins,
    Environment,
    LoxCallable,
    LoxValue,
    NativeFn,
    NativeFunction,
    is_callable,
)

logger = logging.getLogger(__name__)

__all__ = [
    "init_stdlib",
    "install_globals",
    "is_callable",
    "LoxCallable",
    "register_native",
]

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load native modules (idempotent) so register_native hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("treelox.stdlib")
    _STDLIB_INITIALIZED = True
    logger.debug("natives registered: %s", sorted(Builtins.natives))

def register_native(name: str, *, arity: int=0):
    def dec(fn: NativeFn):
        Builtins.natives[name] = NativeFunction(name=name, fn=fn, param_count=arity)
        return fn

    return dec

def install_globals(env: Optional[Environment]=None) -> Environment:
    """Define every registered native in `env` (a fresh root scope by default)."""
    init_stdlib()

    if env is None:
        env = Environment()

    for name, native in Builtins.natives.items():
        value: LoxValue = native
        env.define(name, value)

    return env
