"""Tryzub CLI — lex, parse and run .тризуб files."""

from __future__ import annotations

import json
import sys

from .parse import ParseError, Parser
from .runtime import TryzubError, run
from .serialize import serialize
from .tokens import LexError, Token, tokenize


USAGE: str = """\
tryzub [OPTIONS] FILE

Run a Tryzub program.

Options:
  --check   Lex and parse only, print "ok"
  --tokens  Print the token stream, one token per line
  --ast     Print the parsed program as JSON
  --help    Show this help message
"""

MODES: dict[str, str] = {"--check": "check", "--tokens": "tokens", "--ast": "ast"}


def _format_token(tok: Token) -> str:
    return str(tok.line) + ":" + str(tok.col) + " " + tok.kind + " " + repr(tok.lexeme)


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    mode = "run"
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg in MODES:
            if mode != "run":
                print("tryzub: only one of --check, --tokens, --ast may be given", file=sys.stderr)
                return 2
            mode = MODES[arg]
            i += 1
        elif arg.startswith("-"):
            print("tryzub: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("tryzub: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2
    if filepath == "":
        print("tryzub: missing file argument", file=sys.stderr)
        return 2

    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("tryzub: " + filepath + ": No such file or directory", file=sys.stderr)
        return 1
    except OSError as e:
        print("tryzub: " + filepath + ": " + str(e), file=sys.stderr)
        return 1
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("tryzub: " + filepath + ": invalid utf-8", file=sys.stderr)
        return 1

    try:
        tokens = tokenize(source)
    except LexError as e:
        print("tryzub: lex error: " + str(e), file=sys.stderr)
        return 1
    if mode == "tokens":
        for tok in tokens:
            print(_format_token(tok))
        return 0

    try:
        program = Parser(tokens).parse_program()
    except ParseError as e:
        print("tryzub: parse error: " + str(e), file=sys.stderr)
        return 1
    if mode == "check":
        print("ok")
        return 0
    if mode == "ast":
        print(json.dumps(serialize(program), ensure_ascii=False, indent=2))
        return 0

    try:
        run(program, out=sys.stdout)
    except TryzubError as e:
        sys.stdout.flush()
        print("tryzub: runtime error: " + str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
