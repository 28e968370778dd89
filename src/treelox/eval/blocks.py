from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from ..tree import Block, Stmt
from ..types import COMPLETED, EarlyReturn, Environment, ExecResult

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def run_statements(statements: Sequence[Stmt], env: Environment, interp: 'Interpreter') -> ExecResult:
    """Execute in order; the first EarlyReturn skips the rest and is passed up."""
    for stmt in statements:
        result = interp.execute(stmt, env)

        if isinstance(result, EarlyReturn):
            return result

    return COMPLETED

def eval_block(stmt: Block, env: Environment, interp: 'Interpreter') -> ExecResult:
    return run_statements(stmt.statements, Environment(env), interp)
