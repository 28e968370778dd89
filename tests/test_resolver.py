from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import parse_ok
from treelox import tree as ast
from treelox.resolver import resolve

def _find(node, kind, name: str):
    """Depth-first search for the first `kind` node referring to `name`."""
    if isinstance(node, kind):
        token = getattr(node, "name", None) or getattr(node, "keyword", None)
        if token is not None and token.value == name:
            return node

    if isinstance(node, (list, tuple)):
        children = node
    elif hasattr(node, "__dataclass_fields__"):
        children = [getattr(node, f) for f in node.__dataclass_fields__]
    else:
        return None

    for child in children:
        found = _find(child, kind, name)
        if found is not None:
            return found

    return None

@pytest.mark.parametrize("depth", [0, 1, 3, 6])
def test_distance_equals_nesting_depth(depth: int) -> None:
    source = "{ var a = 1; " + "{ " * depth + "print a;" + " }" * depth + " }"
    statements = parse_ok(source)

    resolution = resolve(statements)
    use = _find(statements, ast.Variable, "a")

    assert resolution.ok
    assert resolution.locals[use] == depth

def test_globals_are_not_recorded() -> None:
    statements = parse_ok("var g = 1; print g; print later;")
    resolution = resolve(statements)

    assert resolution.ok
    assert resolution.locals == {}

def test_function_params_and_body_share_scope() -> None:
    statements = parse_ok("fun f(a) { print a; }")
    resolution = resolve(statements)

    use = _find(statements, ast.Variable, "a")
    assert resolution.locals[use] == 0

def test_closure_reference_distance() -> None:
    source = dedent(
        """\
        fun outer() {
          var x = 1;
          fun inner() { return x; }
          return inner;
        }
        """
    )
    statements = parse_ok(source)
    resolution = resolve(statements)

    use = _find(statements, ast.Variable, "x")
    assert resolution.locals[use] == 1

def test_this_and_super_distances() -> None:
    source = dedent(
        """\
        class A { m() {} }
        class B < A {
          m() { this.x = 1; super.m(); }
        }
        """
    )
    statements = parse_ok(source)
    resolution = resolve(statements)

    this_node = _find(statements, ast.This, "this")
    super_node = _find(statements, ast.Super, "super")

    assert resolution.ok
    assert resolution.locals[this_node] == 1
    assert resolution.locals[super_node] == 2

def test_superclass_in_nested_class_resolves_in_enclosing_scope() -> None:
    source = dedent(
        """\
        class Outer {
          make() {
            class Base { hi() { return "base"; } }
            class Derived < Base { hi() { return super.hi(); } }
            return Derived;
          }
        }
        """
    )
    statements = parse_ok(source)
    resolution = resolve(statements)

    superclass = _find(statements, ast.Variable, "Base")

    assert resolution.ok
    assert resolution.locals[superclass] == 0

ERRORS = [
    pytest.param(
        "{ var a = a; }",
        ["[line 1] Error at 'a': Can't read local variable in its own initializer."],
        id="own-initializer",
    ),
    pytest.param(
        "{ var a = 1; var a = 2; }",
        ["[line 1] Error at 'a': Already a variable with this name in this scope."],
        id="redeclare-local",
    ),
    pytest.param(
        "return 1;",
        ["[line 1] Error at 'return': Can't return from top-level code."],
        id="top-level-return",
    ),
    pytest.param(
        "class A { init() { return 1; } }",
        ["[line 1] Error at 'return': Can't return a value from an initializer."],
        id="return-value-from-init",
    ),
    pytest.param(
        "print this;",
        ["[line 1] Error at 'this': Can't use 'this' outside of a class."],
        id="this-outside-class",
    ),
    pytest.param(
        "fun f() { super.m(); }",
        ["[line 1] Error at 'super': Can't use 'super' outside of a class."],
        id="super-outside-class",
    ),
    pytest.param(
        "class A { m() { super.m(); } }",
        ["[line 1] Error at 'super': Can't use 'super' in a class with no superclass."],
        id="super-without-superclass",
    ),
    pytest.param(
        "class A < A {}",
        ["[line 1] Error at 'A': A class can't inherit from itself."],
        id="self-inheritance",
    ),
    pytest.param(
        dedent(
            """\
            return;
            { var b = 1; var b = 2; }
            """
        ),
        [
            "[line 1] Error at 'return': Can't return from top-level code.",
            "[line 2] Error at 'b': Already a variable with this name in this scope.",
        ],
        id="errors-accumulate",
    ),
]

@pytest.mark.parametrize("source, expected", ERRORS)
def test_resolver_errors(source: str, expected) -> None:
    reported = []
    resolution = resolve(parse_ok(source), on_error=lambda token, message: reported.append(message))

    assert [d.format() for d in resolution.diagnostics] == expected
    assert len(reported) == len(expected)

def test_redeclaring_globals_is_allowed() -> None:
    assert resolve(parse_ok("var a = 1; var a = 2;")).ok

def test_bare_return_in_init_is_allowed() -> None:
    assert resolve(parse_ok("class A { init() { return; } }")).ok
