"""Tryzub tokenizer — lexes source into a flat token list."""

from __future__ import annotations


# Token type constants
TK_INT = "INT"
TK_FLOAT = "FLOAT"
TK_STRING = "STRING"
TK_CHAR = "CHAR"
TK_BOOL = "BOOL"
TK_IDENT = "IDENT"
TK_OP = "OP"
TK_EOF = "EOF"

KEYWORDS: set[str] = {
    "змінна",
    "стала",
    "функція",
    "повернути",
    "якщо",
    "інакше",
    "поки",
    "для",
    "від",
    "до",
    "через",
    "переривати",
    "продовжити",
    "структура",
    "модуль",
    "імпорт",
    "експорт",
    "як",
    "тип",
    "інтерфейс",
    "реалізує",
    "приватний",
    "публічний",
    "статичний",
    "асинхронний",
    "чекати",
    "спробувати",
    "зловити",
    "нарешті",
    "новий",
    "це",
    "супер",
    "нуль",
}

PRIMITIVE_TYPES: set[str] = {
    "цл8",
    "цл16",
    "цл32",
    "цл64",
    "чс8",
    "чс16",
    "чс32",
    "чс64",
    "дрб32",
    "дрб64",
    "лог",
    "сим",
    "тхт",
}

BOOL_WORDS: dict[str, bool] = {"істина": True, "хиба": False}

# Multi-character operators, checked in order before single characters
MULTI_OPS: list[str] = [
    "**",
    "->",
    "=>",
    "&&",
    "||",
    "<=",
    ">=",
    "==",
    "!=",
    "+=",
    "-=",
    "*=",
    "/=",
]

SINGLE_OPS: set[str] = {
    "+",
    "-",
    "*",
    "/",
    "%",
    "!",
    "<",
    ">",
    "=",
    "(",
    ")",
    "[",
    "]",
    "{",
    "}",
    ",",
    ";",
    ":",
    ".",
}

ESCAPE_MAP: dict[str, str] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

INT64_MAX = (1 << 63) - 1


class LexError(Exception):
    """Error during tokenization."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


class Token:
    """A token with kind, lexeme, and position."""

    def __init__(self, kind: str, lexeme: str, line: int, col: int):
        self.kind: str = kind
        self.lexeme: str = lexeme
        self.line: int = line
        self.col: int = col

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.lexeme == other.lexeme
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.lexeme, self.line, self.col))

    def __repr__(self) -> str:
        return (
            "Token("
            + self.kind
            + ", "
            + repr(self.lexeme)
            + ", "
            + str(self.line)
            + ", "
            + str(self.col)
            + ")"
        )


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_ident_start(c: str) -> bool:
    return c.isalpha() or c == "_"


def _is_ident_part(c: str) -> bool:
    return c.isalnum() or c == "_" or c == "'"


def _process_escape(src: str, pos: int) -> tuple[str, int]:
    """Resolve the escape after a backslash. Returns (resolved_char, new_pos).

    Unknown escapes resolve to the escaped character itself.
    """
    c = src[pos]
    if c in ESCAPE_MAP:
        return ESCAPE_MAP[c], pos + 1
    return c, pos + 1


def tokenize(source: str) -> list[Token]:
    """Tokenize Tryzub source into a flat list ending with TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    col = 1
    length = len(source)

    while pos < length:
        c = source[pos]

        # Newlines
        if c == "\n":
            pos += 1
            line += 1
            col = 1
            continue

        # Whitespace
        if c == " " or c == "\t" or c == "\r":
            pos += 1
            col += 1
            continue

        start_line = line
        start_col = col

        # Line comment: //
        if c == "/" and pos + 1 < length and source[pos + 1] == "/":
            while pos < length and source[pos] != "\n":
                pos += 1
                col += 1
            continue

        # Block comment: /* ... */, nestable
        if c == "/" and pos + 1 < length and source[pos + 1] == "*":
            pos += 2
            col += 2
            depth = 1
            while depth > 0 and pos < length:
                if source.startswith("/*", pos):
                    depth += 1
                    pos += 2
                    col += 2
                elif source.startswith("*/", pos):
                    depth -= 1
                    pos += 2
                    col += 2
                elif source[pos] == "\n":
                    pos += 1
                    line += 1
                    col = 1
                else:
                    pos += 1
                    col += 1
            if depth > 0:
                raise LexError("unterminated comment", start_line, start_col)
            continue

        start_pos = pos

        # Number: int or float
        if _is_digit(c):
            while pos < length and _is_digit(source[pos]):
                pos += 1
                col += 1
            is_float = False
            if (
                pos + 1 < length
                and source[pos] == "."
                and _is_digit(source[pos + 1])
            ):
                is_float = True
                pos += 1
                col += 1
                while pos < length and _is_digit(source[pos]):
                    pos += 1
                    col += 1
            raw = source[start_pos:pos]
            if is_float:
                tokens.append(Token(TK_FLOAT, raw, start_line, start_col))
            else:
                digits = raw.lstrip("0")
                if len(digits) > len(str(INT64_MAX)) or int(digits or "0") > INT64_MAX:
                    raise LexError("invalid number '" + raw + "'", start_line, start_col)
                tokens.append(Token(TK_INT, raw, start_line, start_col))
            continue

        # String literal: "...", may span lines
        if c == '"':
            pos += 1
            col += 1
            chars: list[str] = []
            while pos < length and source[pos] != '"':
                if source[pos] == "\n":
                    chars.append("\n")
                    pos += 1
                    line += 1
                    col = 1
                    continue
                if source[pos] == "\\" and pos + 1 < length:
                    ch, pos = _process_escape(source, pos + 1)
                    chars.append(ch)
                    col += 2
                    continue
                chars.append(source[pos])
                pos += 1
                col += 1
            if pos >= length:
                raise LexError("unterminated string", start_line, start_col)
            pos += 1  # skip closing "
            col += 1
            tokens.append(Token(TK_STRING, "".join(chars), start_line, start_col))
            continue

        # Char literal: 'x' or '\n'
        if c == "'":
            pos += 1
            col += 1
            if pos >= length:
                raise LexError("unterminated char literal", start_line, start_col)
            if source[pos] == "\\" and pos + 1 < length:
                char_val, pos = _process_escape(source, pos + 1)
                col += 2
            else:
                char_val = source[pos]
                pos += 1
                if char_val == "\n":
                    line += 1
                    col = 1
                else:
                    col += 1
            if pos >= length or source[pos] != "'":
                raise LexError("unterminated char literal", start_line, start_col)
            pos += 1  # skip closing '
            col += 1
            tokens.append(Token(TK_CHAR, char_val, start_line, start_col))
            continue

        # Identifier, keyword, type name, or bool literal
        if _is_ident_start(c):
            while pos < length and _is_ident_part(source[pos]):
                pos += 1
                col += 1
            word = source[start_pos:pos]
            if word in BOOL_WORDS:
                tokens.append(Token(TK_BOOL, word, start_line, start_col))
            elif word in KEYWORDS or word in PRIMITIVE_TYPES:
                tokens.append(Token(word, word, start_line, start_col))
            else:
                tokens.append(Token(TK_IDENT, word, start_line, start_col))
            continue

        # Multi-character operators
        matched = False
        for op in MULTI_OPS:
            op_len = len(op)
            if source.startswith(op, pos):
                tokens.append(Token(TK_OP, op, start_line, start_col))
                pos += op_len
                col += op_len
                matched = True
                break
        if matched:
            continue

        # Single-character operators
        if c in SINGLE_OPS:
            tokens.append(Token(TK_OP, c, start_line, start_col))
            pos += 1
            col += 1
            continue

        raise LexError("unknown character " + repr(c), line, col)

    tokens.append(Token(TK_EOF, "", line, col))
    return tokens
