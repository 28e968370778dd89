from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

from lark import Lark, Token, UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from . import tree as ast
from .ast_transforms import build_ast
from .diagnostics import Diagnostic, at_line, at_token
from .types import LoxSyntaxError

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).with_name("lox.lark")

# Checked in order; the first terminal the parser would have accepted picks the message.
_EXPECT_MESSAGES = (
    ("NUMBER", "Expect expression."),
    ("SEMICOLON", "Expect ';'."),
    ("RPAR", "Expect ')'."),
    ("RBRACE", "Expect '}'."),
    ("LBRACE", "Expect '{'."),
    ("LPAR", "Expect '('."),
    ("DOT", "Expect '.'."),
    ("IDENTIFIER", "Expect identifier."),
)

_parser: Optional[Lark] = None

@dataclass
class ParseOutcome:
    statements: List[ast.Stmt] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

def make_parser() -> Lark:
    global _parser

    if _parser is None:
        _parser = _build(GRAMMAR_PATH)

    return _parser

def _build(grammar_path: Path) -> Lark:
    grammar = grammar_path.read_text(encoding="utf-8")
    logger.debug("building LALR parser from %s", grammar_path)

    return Lark(
        grammar,
        parser="lalr",
        lexer="basic",
        start=["program", "expression"],
        maybe_placeholders=True,
    )

def _end_line(source: str) -> int:
    return source.count("\n") + 1

def _syntax_diagnostic(exc: UnexpectedInput, source: str) -> Diagnostic:
    if isinstance(exc, UnexpectedCharacters):
        if exc.char == '"':
            return at_line(exc.line, "Unterminated string.")
        return at_line(exc.line, "Unexpected character.")

    if isinstance(exc, UnexpectedToken):
        token = exc.token

        if token.line is None:
            token = ast.synthetic_token(token.type, token.value, _end_line(source))

        expected = exc.expected or set()

        # `a + b = c`: the parser reached `=` where no assignment can start.
        if token.type == "EQUAL" and "IDENTIFIER" not in expected:
            return at_token(token, "Invalid assignment target.")

        for terminal, message in _EXPECT_MESSAGES:
            if terminal in expected:
                return at_token(token, message)

        return at_token(token, "Unexpected token.")

    return at_line(getattr(exc, "line", None) or _end_line(source), "Unexpected end of input.")

def parse_source(source: str) -> ParseOutcome:
    """Parse a whole program. The first syntax error stops parsing."""
    parser = make_parser()

    try:
        parse_tree = parser.parse(source, start="program")
    except UnexpectedInput as exc:
        diagnostic = _syntax_diagnostic(exc, source)
        logger.debug("syntax error: %s", diagnostic)
        return ParseOutcome([], [diagnostic])

    statements, diagnostics = build_ast(parse_tree)
    logger.debug("parsed %d statements (%d diagnostics)", len(statements), len(diagnostics))

    if diagnostics:
        return ParseOutcome([], diagnostics)

    return ParseOutcome(statements, [])

def parse_expression(source: str) -> ast.Expr:
    """Parse a single expression with nothing after it.

    Raises LoxSyntaxError carrying the first diagnostic.
    """
    parser = make_parser()

    try:
        parse_tree = parser.parse(source, start="expression")
    except UnexpectedInput as exc:
        diagnostic = _syntax_diagnostic(exc, source)
        raise LoxSyntaxError(getattr(exc, "token", None), diagnostic.message, diagnostic) from None

    expr, diagnostics = build_ast(parse_tree)

    if diagnostics:
        raise LoxSyntaxError(None, diagnostics[0].message, diagnostics[0])

    return expr

def tokenize(source: str) -> Iterator[Token]:
    """Raw token stream, comments and whitespace included."""
    return make_parser().lex(source, dont_ignore=True)
