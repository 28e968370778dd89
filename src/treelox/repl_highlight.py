"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable, List

from lark import UnexpectedInput
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .parser import tokenize

GROUP_STYLE = {
    "keyword": "bold ansiblue",
    "receiver": "italic ansiblue",
    "literal": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "comment": "ansibrightblack",
    "error": "bold ansired",
}

_KEYWORDS = frozenset(
    {"AND", "CLASS", "ELSE", "FOR", "FUN", "IF", "OR", "PRINT", "RETURN", "VAR", "WHILE"}
)

def token_group(kind: str) -> str:
    """Highlight group for a lark terminal name; "" means unstyled."""
    if kind in _KEYWORDS:
        return "keyword"

    match kind:
        case "THIS" | "SUPER":
            return "receiver"
        case "TRUE" | "FALSE" | "NIL":
            return "literal"
        case "NUMBER":
            return "number"
        case "STRING":
            return "string"
        case "COMMENT":
            return "comment"
        case _:
            return ""

def highlight_line(text: str) -> StyleAndTextTuples:
    """Style one line. Text the lexer cannot get past is marked as an error."""
    fragments: StyleAndTextTuples = []
    pos = 0

    try:
        for tok in tokenize(text):
            fragments.append((GROUP_STYLE.get(token_group(tok.type), ""), tok.value))
            pos = tok.end_pos
    except UnexpectedInput:
        fragments.append((GROUP_STYLE["error"], text[pos:]))
        return fragments

    if pos < len(text):
        fragments.append(("", text[pos:]))

    return fragments or [("", "")]

class LoxLexer(Lexer):
    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        styled: List[StyleAndTextTuples] = [highlight_line(line) for line in document.lines]

        def get_line(lineno: int) -> StyleAndTextTuples:
            return styled[lineno] if lineno < len(styled) else [("", "")]

        return get_line
