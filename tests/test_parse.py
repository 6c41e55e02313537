"""Direct parser tests against the AST node classes."""

import pytest

from tryzub import parse
from tryzub.ast import (
    BinaryOp,
    Call,
    FnDecl,
    Ident,
    IntLit,
    Lambda,
    Pos,
    ReturnStmt,
    VarDecl,
)
from tryzub.parse import ParseError, Parser, UnexpectedEnd, UnexpectedToken
from tryzub.tokens import tokenize


def _value_of(source: str):
    program = parse(source)
    decl = program.decls[0]
    assert isinstance(decl, VarDecl)
    return decl.value


def test_parser_over_token_list():
    program = Parser(tokenize("функція головна() { }")).parse_program()
    assert len(program.decls) == 1
    fn = program.decls[0]
    assert isinstance(fn, FnDecl)
    assert fn.name == "головна"
    assert fn.body == []
    assert fn.pos == Pos(1, 1)


def test_additive_and_multiplicative_precedence():
    expr = _value_of("змінна x = 2 + 3 * 4")
    assert expr == BinaryOp(
        Pos(1, 12),
        "+",
        IntLit(Pos(1, 12), 2),
        BinaryOp(Pos(1, 16), "*", IntLit(Pos(1, 16), 3), IntLit(Pos(1, 20), 4)),
    )


def test_power_right_associative():
    expr = _value_of("змінна x = 2 ** 3 ** 2")
    assert isinstance(expr, BinaryOp)
    assert isinstance(expr.left, IntLit)
    assert isinstance(expr.right, BinaryOp)
    assert expr.right.op == "**"


def test_lambda_body_is_expression():
    expr = _value_of("змінна f = (a) => a")
    assert isinstance(expr, Lambda)
    assert expr.body == Ident(Pos(1, 19), "a")


def test_struct_literal_needs_adjacent_brace():
    expr = _value_of("змінна p = Точка { x: 1 }")
    assert expr is not None
    assert type(expr).__name__ == "StructLit"


def test_call_with_no_args():
    expr = _value_of("змінна r = f()")
    assert isinstance(expr, Call)
    assert expr.args == []


def test_return_value_on_same_line():
    program = parse("функція f() { повернути 1 }")
    fn = program.decls[0]
    assert isinstance(fn, FnDecl)
    ret = fn.body[0]
    assert isinstance(ret, ReturnStmt)
    assert ret.value == IntLit(Pos(1, 25), 1)


def test_unexpected_token_details():
    with pytest.raises(UnexpectedToken) as exc_info:
        parse("функція головна() {\n    змінна = 1\n}")
    err = exc_info.value
    assert err.expected == "variable name"
    assert err.found == "'='"
    assert (err.line, err.col) == (2, 12)


def test_unexpected_end_is_parse_error():
    with pytest.raises(ParseError) as exc_info:
        parse("змінна x = (1 + 2")
    assert isinstance(exc_info.value, UnexpectedEnd)
    assert "unexpected end of input" in str(exc_info.value)


def test_string_token_is_not_punctuation():
    with pytest.raises(UnexpectedToken) as exc_info:
        parse('функція f() "{" ')
    assert exc_info.value.found == "string '{'"


def test_deep_nesting_is_parse_error():
    source = "змінна x = " + "(" * 3000 + "1" + ")" * 3000
    with pytest.raises(ParseError) as exc_info:
        parse(source)
    err = exc_info.value
    assert err.msg == "expression nested too deeply"
    assert err.line == 1
