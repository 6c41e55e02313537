"""Tryzub lexer, parser and interpreter — public API."""

from __future__ import annotations

from typing import TextIO

from .ast import Program
from .parse import ParseError as ParseError, Parser, UnexpectedEnd as UnexpectedEnd
from .parse import UnexpectedToken as UnexpectedToken
from .runtime import TryzubError as TryzubError, TryzubRuntimeError as TryzubRuntimeError
from .runtime import run as run
from .serialize import serialize as serialize
from .tokens import LexError as LexError, Token as Token, tokenize as tokenize


def parse(source: str) -> Program:
    """Parse Tryzub source code into a Program AST."""
    tokens = tokenize(source)
    parser = Parser(tokens)
    return parser.parse_program()


def execute(source: str, *, out: TextIO | None = None) -> None:
    """Parse and run Tryzub source, writing program output to `out`."""
    run(parse(source), out=out)
