"""JSON serialization/deserialization for the HackScript AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Every node becomes
`{"type": <class name>, <field>: ...}` (including its `line`/`column`),
`TypeInfo` values become `{"__type__": "TypeInfo", ...}` and tuples become
lists. Loading reverses the mapping, so a stored program can be executed
without re-parsing.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict

from . import ast as nodes
from .types import TypeInfo


NODE_TYPES: Dict[str, type] = {
    cls.__name__: cls
    for cls in vars(nodes).values()
    if isinstance(cls, type) and issubclass(cls, nodes.Node) and cls is not nodes.Node
}


def typeinfo_to_obj(t: TypeInfo) -> Dict[str, Any]:
    return {
        "name": t.name,
        "primitive": t.primitive,
        "nullable": t.nullable,
        "generic_params": [typeinfo_to_obj(p) for p in t.generic_params],
    }


def typeinfo_from_obj(o: Dict[str, Any]) -> TypeInfo:
    return TypeInfo(
        o["name"],
        o.get("primitive", False),
        o.get("nullable", False),
        tuple(typeinfo_from_obj(p) for p in o.get("generic_params", [])),
    )


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (bool, int, float, str)):
        return node
    if isinstance(node, TypeInfo):
        return {"__type__": "TypeInfo", "value": typeinfo_to_obj(node)}
    if isinstance(node, (tuple, list)):
        return [ast_to_obj(item) for item in node]
    if isinstance(node, nodes.Node):
        obj: Dict[str, Any] = {"type": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"cannot serialize {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, list):
        return tuple(ast_from_obj(item) for item in obj)
    if isinstance(obj, dict):
        if obj.get("__type__") == "TypeInfo":
            return typeinfo_from_obj(obj["value"])
        node_type = obj.get("type")
        cls = NODE_TYPES.get(node_type)
        if cls is None:
            raise ValueError(f"unknown AST node type {node_type!r}")
        kwargs = {key: ast_from_obj(value) for key, value in obj.items() if key != "type"}
        return cls(**kwargs)
    raise ValueError(f"cannot deserialize {obj!r}")
