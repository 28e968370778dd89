from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import run_runtime_case

SCENARIOS = [
    pytest.param(
        "var a = 1; { var a = 2; print a; } print a;",
        ("output", ["2", "1"]),
        None,
        id="block-shadowing",
    ),
    pytest.param(
        dedent(
            """\
            var a = "outer";
            {
              var a = "inner";
              {
                a = "assigned";
                print a;
              }
              print a;
            }
            print a;
            """
        ),
        ("output", ["assigned", "assigned", "outer"]),
        None,
        id="assign-hits-nearest-declaration",
    ),
    pytest.param(
        'if (true) print "then"; else print "else";',
        ("output", ["then"]),
        None,
        id="if-then",
    ),
    pytest.param(
        'if (nil) print "then"; else print "else";',
        ("output", ["else"]),
        None,
        id="if-else",
    ),
    pytest.param(
        'if (true) if (false) print "inner"; else print "dangling";',
        ("output", ["dangling"]),
        None,
        id="dangling-else-binds-nearest-if",
    ),
    pytest.param(
        "if (0) print \"zero is truthy\";",
        ("output", ["zero is truthy"]),
        None,
        id="zero-is-truthy",
    ),
    pytest.param(
        dedent(
            """\
            var i = 0;
            while (i < 3) { print i; i = i + 1; }
            """
        ),
        ("output", ["0", "1", "2"]),
        None,
        id="while-loop",
    ),
    pytest.param(
        "for (var i = 0; i < 3; i = i + 1) print i;",
        ("output", ["0", "1", "2"]),
        None,
        id="for-loop",
    ),
    pytest.param(
        dedent(
            """\
            var i = 10;
            for (var i = 0; i < 1; i = i + 1) {}
            print i;
            """
        ),
        ("output", ["10"]),
        None,
        id="for-initializer-scoped-to-loop",
    ),
    pytest.param(
        dedent(
            """\
            var n = 0;
            for (; n < 2;) n = n + 1;
            print n;
            """
        ),
        ("output", ["2"]),
        None,
        id="for-without-init-or-increment",
    ),
    pytest.param(
        dedent(
            """\
            fun first() {
              for (var i = 0;; i = i + 1) {
                if (i == 4) return i;
              }
            }
            print first();
            """
        ),
        ("output", ["4"]),
        None,
        id="for-without-condition",
    ),
    pytest.param(
        dedent(
            """\
            fun capture(x) { fun get() { return x; } return get; }
            var a = capture(1);
            var b = capture(2);
            print a();
            print b();
            """
        ),
        ("output", ["1", "2"]),
        None,
        id="each-call-gets-fresh-scope",
    ),
    pytest.param(
        dedent(
            """\
            // comments are ignored
            var s = "multi
            line";
            print s;
            """
        ),
        ("output", ["multi", "line"]),
        None,
        id="multiline-string-and-comment",
    ),
    pytest.param(
        "var x; print x;",
        ("output", ["nil"]),
        None,
        id="var-without-initializer",
    ),
]

@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_control_flow(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)
