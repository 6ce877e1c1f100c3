"""JSON serialization/deserialization for the Lox AST and token stream.

This module converts between AST nodes and plain Python dict/list
structures suitable for JSON encoding. The conversion is a full round-trip,
and comparing two converted trees compares them by shape rather than by
node identity.
"""

from __future__ import annotations

from dataclasses import asdict, fields, is_dataclass
from typing import Any, Dict, Iterable, List

from .ast import Node, PAYLOADS
from .lexer import Token

_PAYLOAD_TYPES = {cls.__name__: cls for cls in PAYLOADS}


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (int, float, str, bool)):
        return node
    if isinstance(node, tuple):
        return [ast_to_obj(item) for item in node]
    if isinstance(node, Node):
        return {
            "type": node.type,
            "start": list(node.start),
            "end": list(node.end),
            "data": ast_to_obj(node.data),
        }
    if is_dataclass(node) and type(node).__name__ in _PAYLOAD_TYPES:
        obj: Dict[str, Any] = {"__payload__": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"cannot serialize {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if isinstance(obj, list):
        return tuple(ast_from_obj(item) for item in obj)
    if isinstance(obj, dict):
        if "__payload__" in obj:
            name = obj["__payload__"]
            cls = _PAYLOAD_TYPES.get(name)
            if cls is None:
                raise ValueError(f"unknown payload type {name!r}")
            return cls(**{f.name: ast_from_obj(obj[f.name]) for f in fields(cls)})
        return Node(
            obj["type"],
            tuple(obj["start"]),
            tuple(obj["end"]),
            ast_from_obj(obj.get("data")),
        )
    raise ValueError(f"cannot deserialize {obj!r}")


def tokens_to_obj(tokens: Iterable[Token]) -> List[Dict[str, Any]]:
    result = []
    for token in tokens:
        obj = asdict(token)
        obj["start"] = list(token.start)
        obj["end"] = list(token.end)
        result.append(obj)
    return result
