from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import LoxRuntimeError, run_runtime_case

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            fun add(a, b) { return a + b; }
            print add(1, 2);
            """
        ),
        ("output", ["3"]),
        None,
        id="call-with-args",
    ),
    pytest.param(
        dedent(
            """\
            fun noop() {}
            print noop();
            """
        ),
        ("output", ["nil"]),
        None,
        id="implicit-nil-return",
    ),
    pytest.param(
        dedent(
            """\
            fun early(n) {
              while (true) {
                if (n > 2) return "big";
                n = n + 1;
              }
              print "unreachable";
            }
            print early(0);
            """
        ),
        ("output", ["big"]),
        None,
        id="return-unwinds-nested-loops",
    ),
    pytest.param(
        dedent(
            """\
            fun counter() {
              var i = 0;
              fun inc() { i = i + 1; return i; }
              return inc;
            }
            var c = counter();
            print c();
            print c();
            """
        ),
        ("output", ["1", "2"]),
        None,
        id="closure-counter",
    ),
    pytest.param(
        dedent(
            """\
            var a = "global";
            {
              fun show() { print a; }
              show();
              var a = "block";
              show();
            }
            """
        ),
        ("output", ["global", "global"]),
        None,
        id="closure-binds-statically",
    ),
    pytest.param(
        dedent(
            """\
            fun make() {
              var n = 0;
              fun get() { return n; }
              fun set(v) { n = v; }
              set(41);
              n = n + 1;
              return get;
            }
            print make()();
            """
        ),
        ("output", ["42"]),
        None,
        id="closures-share-environment",
    ),
    pytest.param(
        dedent(
            """\
            fun fib(n) {
              if (n < 2) return n;
              return fib(n - 1) + fib(n - 2);
            }
            print fib(15);
            """
        ),
        ("output", ["610"]),
        None,
        id="recursion",
    ),
    pytest.param(
        dedent(
            """\
            fun f() {}
            print f;
            print clock;
            """
        ),
        ("output", ["<fn f>", "<native fn>"]),
        None,
        id="function-stringify",
    ),
    pytest.param(
        dedent(
            """\
            var t = clock();
            print t > 0;
            """
        ),
        ("output", ["true"]),
        None,
        id="clock-native",
    ),
    pytest.param(
        dedent(
            """\
            fun f() {}
            var g = f;
            print f == g;
            fun h() {}
            print f == h;
            """
        ),
        ("output", ["true", "false"]),
        None,
        id="function-identity-equality",
    ),
    pytest.param(
        dedent(
            """\
            fun f(a, b) {}
            f(1);
            """
        ),
        ("error", "Expected 2 arguments but got 1."),
        LoxRuntimeError,
        id="arity-too-few",
    ),
    pytest.param(
        "clock(1);",
        ("error", "Expected 0 arguments but got 1."),
        LoxRuntimeError,
        id="arity-native",
    ),
    pytest.param(
        dedent(
            """\
            fun f(a) {}
            fun loud() { print "evaluated"; return 1; }
            f(loud(), loud());
            """
        ),
        ("output", []),
        LoxRuntimeError,
        id="arity-checked-before-arguments",
    ),
    pytest.param(
        '"not a function"();',
        ("error", "Can only call functions and classes."),
        LoxRuntimeError,
        id="call-non-callable",
    ),
    pytest.param(
        "print missing;",
        ("error", "Undefined variable 'missing'."),
        LoxRuntimeError,
        id="undefined-global",
    ),
    pytest.param(
        "missing = 1;",
        ("error", "Undefined variable 'missing'."),
        LoxRuntimeError,
        id="assign-undefined-global",
    ),
    pytest.param(
        dedent(
            """\
            fun f() { return later; }
            var later = "defined after";
            print f();
            """
        ),
        ("output", ["defined after"]),
        None,
        id="global-declared-after-use",
    ),
]

@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)
