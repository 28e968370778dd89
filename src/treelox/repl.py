"""Interactive REPL for Lox, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, NamedTuple, Optional

from lark import UnexpectedInput
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .evaluator import Interpreter
from .parser import tokenize
from .repl_highlight import LoxLexer
from .runner import RunStatus, repl_eval
from .utils import debug_py_trace_enabled, set_debug_py_trace, stringify

# Pasted text often carries these; the lexer would reject them.
_STRIP_RE = re.compile("[\u200b\u200c\u200d\u2060\ufeff\u00a0\r]")

_OPENERS = {"LPAR", "LBRACE"}
_CLOSERS = {"RPAR", "RBRACE"}

_SWITCH_ON = frozenset({"on", "1", "true", "yes"})
_SWITCH_OFF = frozenset({"off", "0", "false", "no"})

@dataclass
class ReplState:
    """What survives between prompts. `/reset` swaps the interpreter."""

    interpreter: Interpreter = field(default_factory=Interpreter)

class SlashCommand(NamedTuple):
    summary: str
    usage: str
    handler: Callable[[ReplState, str], None]

def open_depth(text: str) -> int:
    """Count of `(`/`{` still open at the end of *text*.

    Text the lexer rejects (e.g. a string still open) counts as unfinished.
    """
    depth = 0

    try:
        for tok in tokenize(text):
            if tok.type in _OPENERS:
                depth += 1
            elif tok.type in _CLOSERS:
                depth = max(depth - 1, 0)
    except UnexpectedInput:
        return depth + 1 if text.count('"') % 2 else depth

    return depth

def needs_more_input(text: str) -> bool:
    return open_depth(text) > 0

def _cmd_clear(state: ReplState, arg: str) -> None:
    clear()

def _cmd_traceback(state: ReplState, arg: str) -> None:
    choice = arg.strip().lower()

    if not choice:
        set_debug_py_trace(not debug_py_trace_enabled())
    elif choice in _SWITCH_ON:
        set_debug_py_trace(True)
    elif choice in _SWITCH_OFF:
        set_debug_py_trace(False)
    else:
        print(f"Usage: /py-traceback {SLASH_COMMANDS['/py-traceback'].usage}", file=sys.stderr)
        return

    print(f"Python traceback: {'on' if debug_py_trace_enabled() else 'off'}")

def _cmd_reset(state: ReplState, arg: str) -> None:
    state.interpreter = Interpreter()
    print("Environment reset.")

SLASH_COMMANDS: Dict[str, SlashCommand] = {
    "/clear": SlashCommand("Clear the screen", "", _cmd_clear),
    "/py-traceback": SlashCommand("Show Python tracebacks after runtime errors", "[on|off]", _cmd_traceback),
    "/reset": SlashCommand("Drop all globals and start over", "", _cmd_reset),
}

class SlashCompleter(Completer):
    """Completes command names while the buffer starts with `/`."""

    def get_completions(self, document, complete_event):
        prefix = document.text_before_cursor
        if not prefix.startswith("/") or " " in prefix:
            return

        for name, command in SLASH_COMMANDS.items():
            if name.startswith(prefix):
                yield Completion(name, start_position=-len(prefix), display_meta=command.summary)

def handle_slash(line: str, state: ReplState) -> bool:
    """Run *line* as a slash command. False means it is Lox source."""
    name, _, arg = line.strip().partition(" ")
    if not name.startswith("/"):
        return False

    command = SLASH_COMMANDS.get(name)
    if command is None:
        print(f"Unknown command: {name}", file=sys.stderr)
        return True

    command.handler(state, arg)
    return True

def eval_entry(text: str, interpreter: Interpreter) -> Optional[str]:
    """Run one entry, report errors on stderr, and return the text to echo."""
    result, value = repl_eval(text, interpreter)

    if result.status is not RunStatus.OK:
        result.report(sys.stderr)
        return None

    return stringify(value) if value is not None else None

def _key_bindings() -> KeyBindings:
    bindings = KeyBindings()

    @bindings.add("enter")
    def _(event):
        buf = event.app.current_buffer
        text = buf.text

        if text.startswith("/") or not needs_more_input(text):
            buf.validate_and_handle()
            return

        buf.insert_text("\n" + "  " * open_depth(text))

    return bindings

def repl() -> None:
    """Read-eval-print loop; Ctrl-D exits, Ctrl-C drops the current entry."""
    state = ReplState()
    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=LoxLexer(),
        completer=SlashCompleter(),
        complete_while_typing=True,
        key_bindings=_key_bindings(),
        multiline=True,
        prompt_continuation="... ",
    )

    print("treelox repl (Ctrl-D to exit, / for commands)")

    while True:
        try:
            entry = session.prompt("> ")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print()
            return

        entry = _STRIP_RE.sub("", entry)

        if not entry.strip() or handle_slash(entry, state):
            continue

        echo = eval_entry(entry, state.interpreter)
        if echo is not None:
            print(echo)
