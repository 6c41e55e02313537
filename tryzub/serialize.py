"""Serialization of AST nodes to JSON-compatible dicts."""

from __future__ import annotations

import dataclasses

from .ast import Pos
from .tokens import Token


def serialize(obj: object) -> object:
    """Recursively serialize an object to a JSON-compatible structure."""
    if obj is None:
        return None
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, (int, float)):
        return obj
    if isinstance(obj, str):
        return obj
    if isinstance(obj, (list, tuple)):
        return [serialize(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): serialize(v) for k, v in obj.items()}
    return _node_serialize(obj)


def _node_serialize(obj: object) -> object:
    """Serialize AST dataclasses, tagging each with its node name."""
    if isinstance(obj, Pos):
        return {"line": obj.line, "col": obj.col}
    if isinstance(obj, Token):
        return {"kind": obj.kind, "lexeme": obj.lexeme, "line": obj.line, "col": obj.col}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        out: dict[str, object] = {"_type": type(obj).__name__}
        for f in dataclasses.fields(obj):
            out[f.name] = serialize(getattr(obj, f.name))
        return out
    raise TypeError("cannot serialize " + type(obj).__name__)
