"""Direct interpreter tests: values, scopes, outcomes and the public entry points."""

import io
import math
import sys

import pytest

from tryzub import execute, parse
from tryzub.runtime import (
    NULL,
    Interpreter,
    Scope,
    TryzubError,
    TryzubRuntimeError,
    VArray,
    VBool,
    VChar,
    VFloat,
    VInt,
    VString,
    format_float,
    run,
    truthy,
)


def _output(source: str) -> str:
    out = io.StringIO()
    execute(source, out=out)
    return out.getvalue()


def test_execute_writes_lines_to_stream():
    src = 'функція головна() { друк("а", 1, 2.5) друк() }'
    assert _output(src) == "а 1 2.5\n\n"


def test_run_defaults_to_stdout(capsys):
    run(parse("функція головна() { друк(7) }"))
    assert capsys.readouterr().out == "7\n"


def test_runtime_error_is_tryzub_error():
    with pytest.raises(TryzubError) as exc_info:
        _output("функція головна() {\n    друк(1 / 0)\n}")
    err = exc_info.value
    assert isinstance(err, TryzubRuntimeError)
    assert err.msg == "division by zero"
    assert (err.pos.line, err.pos.col) == (2, 10)


def test_output_before_error_is_kept():
    out = io.StringIO()
    with pytest.raises(TryzubRuntimeError):
        execute("функція головна() { друк(1) друк(x) }", out=out)
    assert out.getvalue() == "1\n"


def test_recursion_limit_is_restored():
    before = sys.getrecursionlimit()
    _output("функція головна() { }")
    assert sys.getrecursionlimit() == before


@pytest.mark.parametrize(
    "value,text",
    [
        (3.0, "3"),
        (-0.5, "-0.5"),
        (0.1, "0.1"),
        (1e22, "10000000000000000000000"),
        (1.5e-7, "0.00000015"),
        (math.inf, "inf"),
        (-math.inf, "-inf"),
        (math.nan, "NaN"),
    ],
)
def test_format_float(value, text):
    assert format_float(value) == text


def test_value_rendering():
    assert VBool(True).to_string() == "істина"
    assert VBool(False).to_string() == "хиба"
    assert NULL.to_string() == "нуль"
    assert VArray((VInt(1), VString("a"), VChar("б"))).to_string() == "[1, a, б]"
    assert VArray(()).to_string() == "[]"


def test_truthiness():
    assert truthy(VInt(2))
    assert not truthy(VInt(0))
    assert not truthy(VFloat(0.0))
    assert truthy(VString(" "))
    assert not truthy(VString(""))
    assert not truthy(NULL)
    assert truthy(VArray(()))
    assert truthy(VChar("\0"))


def test_scope_lookup_walks_parents():
    outer = Scope()
    outer.declare("x", VInt(1))
    inner = Scope(outer)
    assert inner.get("x") == VInt(1)
    inner.declare("x", VInt(2))
    assert inner.get("x") == VInt(2)
    assert outer.get("x") == VInt(1)


def test_scope_assign_updates_declaring_scope():
    outer = Scope()
    outer.declare("x", VInt(1))
    inner = Scope(outer)
    inner.assign("x", VInt(5))
    assert outer.get("x") == VInt(5)
    assert "x" not in inner.bindings


def test_scope_assign_errors():
    scope = Scope()
    scope.declare("c", VInt(1), mutable=False)
    with pytest.raises(TryzubRuntimeError, match="cannot assign to constant 'c'"):
        scope.assign("c", VInt(2))
    with pytest.raises(TryzubRuntimeError, match="unknown name 'y'"):
        scope.assign("y", VInt(2))
    with pytest.raises(TryzubRuntimeError, match="unknown name 'y'"):
        scope.get("y")


def test_interpreter_globals_hold_declarations():
    rt = Interpreter(io.StringIO())
    rt.run(parse("змінна a = 2 * 21\nфункція головна() { }"))
    assert rt.globals.get("a") == VInt(42)


def test_same_function_sees_same_captured_bindings():
    src = """
змінна спільна = "до"

функція читати() -> тхт {
    повернути спільна
}

функція перший() -> тхт { повернути читати() }

функція другий() -> тхт {
    змінна спільна = "тінь"
    повернути читати()
}

функція головна() {
    друк(перший(), другий())
    спільна = "після"
    друк(перший(), другий())
}
"""
    assert _output(src) == "до до\nпісля після\n"
