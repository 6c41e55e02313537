"""Direct tokenizer tests: properties that are awkward to express in .tests files."""

import pytest

from tryzub.serialize import serialize
from tryzub.tokens import (
    KEYWORDS,
    PRIMITIVE_TYPES,
    TK_CHAR,
    TK_EOF,
    TK_IDENT,
    TK_INT,
    TK_STRING,
    LexError,
    Token,
    tokenize,
)

SAMPLE = """\
/* приклад */
функція головна() {
    змінна x: цл64 = 2 ** 3 ** 2 // коментар
    друк("x =\\t", x, 'я', 1.5)
}
"""


def test_tokenize_is_idempotent():
    first = tokenize(SAMPLE)
    second = tokenize(SAMPLE)
    assert first == second
    assert [(t.kind, t.lexeme, t.line, t.col) for t in first] == [
        (t.kind, t.lexeme, t.line, t.col) for t in second
    ]


def test_stream_ends_with_single_eof():
    tokens = tokenize(SAMPLE)
    assert tokens[-1].kind == TK_EOF
    assert sum(1 for t in tokens if t.kind == TK_EOF) == 1


def test_every_keyword_lexes_as_itself():
    for word in sorted(KEYWORDS | PRIMITIVE_TYPES):
        tokens = tokenize(word)
        assert tokens[0].kind == word
        assert tokens[0].lexeme == word


def test_string_escapes_are_resolved():
    tokens = tokenize(r'"a\tb\n\"c\" \\ \'d\'"')
    assert tokens[0].kind == TK_STRING
    assert tokens[0].lexeme == "a\tb\n\"c\" \\ 'd'"


def test_unknown_escape_keeps_character():
    tokens = tokenize(r'"\q"')
    assert tokens[0].lexeme == "q"


def test_char_escape():
    tokens = tokenize(r"'\t'")
    assert tokens[0].kind == TK_CHAR
    assert tokens[0].lexeme == "\t"


def test_positions_after_multiline_string():
    tokens = tokenize('"один\nдва\nтри" x')
    assert tokens[0].line == 1
    assert tokens[1].kind == TK_IDENT
    assert (tokens[1].line, tokens[1].col) == (3, 6)


def test_lex_error_carries_location():
    with pytest.raises(LexError) as exc_info:
        tokenize("змінна x\n   $")
    err = exc_info.value
    assert (err.line, err.col) == (2, 4)
    assert "unknown character" in err.msg
    assert str(err).endswith("at line 2 col 4")


def test_token_repr_and_equality():
    tok = Token(TK_IDENT, "x", 1, 2)
    assert tok == Token(TK_IDENT, "x", 1, 2)
    assert tok != Token(TK_IDENT, "x", 1, 3)
    assert hash(tok) == hash(Token(TK_IDENT, "x", 1, 2))
    assert repr(tok) == "Token(IDENT, 'x', 1, 2)"


def test_huge_integer_literal_is_lex_error():
    with pytest.raises(LexError) as exc_info:
        tokenize("1" * 5000)
    err = exc_info.value
    assert err.msg.startswith("invalid number '111")
    assert (err.line, err.col) == (1, 1)


def test_leading_zeros_do_not_count_toward_range():
    tokens = tokenize("0" * 5000 + "42")
    assert tokens[0].kind == TK_INT
    assert int(tokens[0].lexeme) == 42


def test_positions_after_char_literal_with_raw_newline():
    tokens = tokenize("'\n' x")
    assert tokens[0].kind == TK_CHAR
    assert tokens[0].lexeme == "\n"
    assert tokens[1].kind == TK_IDENT
    assert (tokens[1].line, tokens[1].col) == (2, 3)


def test_token_serializes_to_dict():
    tok = tokenize("змінна")[0]
    assert serialize(tok) == {"kind": "змінна", "lexeme": "змінна", "line": 1, "col": 1}
    assert serialize(tokenize("")) == [{"kind": TK_EOF, "lexeme": "", "line": 1, "col": 1}]
