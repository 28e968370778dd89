"""Static (scan/parse/resolve) diagnostics and their printed form.

A diagnostic renders as ``[line N] Error<where>: <message>`` where ``where``
is `` at 'lexeme'``, `` at end`` or empty. Runtime errors render as the
message followed by ``[line N]`` on its own line.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lark import Token

from .types import LoxRuntimeError

@dataclass(frozen=True)
class Diagnostic:
    line: int
    message: str
    where: str = ""

    def format(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"

    def __str__(self) -> str:
        return self.format()

def at_token(token: Token, message: str) -> Diagnostic:
    line = token.line or 0

    if token.type == "$END":
        return Diagnostic(line, message, " at end")

    return Diagnostic(line, message, f" at '{token.value}'")

def at_line(line: int, message: str) -> Diagnostic:
    return Diagnostic(line, message)

def format_runtime_error(error: LoxRuntimeError) -> str:
    line: Optional[int] = error.line
    return f"{error.message}\n[line {line if line is not None else '?'}]"
