from __future__ import annotations

import enum
import logging
import sys
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple

from . import tree as ast
from .diagnostics import Diagnostic, format_runtime_error
from .evaluator import Interpreter
from .parser import parse_expression, parse_source
from .resolver import resolve
from .types import LoxRuntimeError, LoxSyntaxError, LoxValue
from .utils import debug_py_trace_enabled, env_log_level, parse_log_level

logger = logging.getLogger(__name__)

# sysexits.h
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

USAGE = "Usage: treelox [--log-level LEVEL] [script]"

class RunStatus(enum.Enum):
    OK = "ok"
    STATIC_ERROR = "static_error"
    RUNTIME_ERROR = "runtime_error"

@dataclass
class RunResult:
    status: RunStatus
    diagnostics: List[Diagnostic] = field(default_factory=list)
    runtime_error: Optional[LoxRuntimeError] = None

    @property
    def exit_code(self) -> int:
        if self.status is RunStatus.STATIC_ERROR:
            return EX_DATAERR
        if self.status is RunStatus.RUNTIME_ERROR:
            return EX_SOFTWARE
        return 0

    def report(self, stream: TextIO) -> None:
        for diagnostic in self.diagnostics:
            print(diagnostic.format(), file=stream)

        if self.runtime_error is not None:
            print(format_runtime_error(self.runtime_error), file=stream)

            if debug_py_trace_enabled():
                traceback.print_exception(self.runtime_error, file=stream)

def run(src: str, interpreter: Optional[Interpreter]=None, out: Optional[TextIO]=None) -> RunResult:
    """Parse, resolve and execute `src`, stopping at the first failing stage."""
    if interpreter is None:
        interpreter = Interpreter(out=out)

    parsed = parse_source(src)

    if not parsed.ok:
        return RunResult(RunStatus.STATIC_ERROR, parsed.diagnostics)

    resolution = resolve(parsed.statements)

    if not resolution.ok:
        return RunResult(RunStatus.STATIC_ERROR, resolution.diagnostics)

    interpreter.add_locals(resolution.locals)
    error = interpreter.interpret(parsed.statements)

    if error is not None:
        return RunResult(RunStatus.RUNTIME_ERROR, runtime_error=error)

    return RunResult(RunStatus.OK)

def repl_eval(src: str, interpreter: Interpreter) -> Tuple[RunResult, Optional[LoxValue]]:
    """Run one REPL entry. A lone expression also yields its value."""
    try:
        expr = parse_expression(src)
    except LoxSyntaxError:
        return run(src, interpreter), None

    resolution = resolve([ast.Expression(expr)])

    if not resolution.ok:
        return RunResult(RunStatus.STATIC_ERROR, resolution.diagnostics), None

    interpreter.add_locals(resolution.locals)

    try:
        value = interpreter.evaluate(expr, interpreter.globals)
    except LoxRuntimeError as exc:
        return RunResult(RunStatus.RUNTIME_ERROR, runtime_error=exc), None

    return RunResult(RunStatus.OK), value

def run_file(path: str, out: Optional[TextIO]=None, err: Optional[TextIO]=None) -> int:
    err = err if err is not None else sys.stderr

    try:
        source = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Could not read {path}: {exc.strerror or exc}", file=err)
        return EX_NOINPUT

    logger.debug("running %s (%d bytes)", path, len(source))
    result = run(source, out=out)
    result.report(err)

    return result.exit_code

def _configure_logging(level: int) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )

def main(argv: Optional[Sequence[str]]=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    script: Optional[str] = None

    try:
        level = env_log_level()
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return EX_USAGE

    it = iter(args)

    for token in it:
        if token.startswith("--log-level="):
            raw_level: Optional[str] = token.split("=", 1)[1]
        elif token == "--log-level":
            raw_level = next(it, None)
            if raw_level is None:
                print("--log-level flag requires a value", file=sys.stderr)
                return EX_USAGE
        else:
            if script is not None:
                print(USAGE, file=sys.stderr)
                return EX_USAGE
            script = token
            continue

        try:
            level = parse_log_level(raw_level)
        except ValueError as exc:
            print(exc, file=sys.stderr)
            return EX_USAGE

    _configure_logging(level)

    if script is None:
        from .repl import repl
        repl()
        return 0

    return run_file(script)

if __name__ == "__main__":
    sys.exit(main())
