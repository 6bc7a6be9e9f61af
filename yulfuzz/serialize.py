"""JSON-compatible dict form of the input tree.

Every node is a dict tagged with "_type" and carrying its dataclass fields:

    {"_type": "VarDecl", "expr": {"_type": "Literal", "intval": 7}}

Missing fields take their dataclass defaults; a null expression stands for an
unset choice and is rendered as a dictionary token.
"""

from __future__ import annotations

import dataclasses

from . import ast
from .convert import (
    BINARY_OPS,
    COPY_OPS,
    NULLARY_OPS,
    RET_REV_OPS,
    STOP_INVALID_OPS,
    STORE_OPS,
    TERNARY_OPS,
    UNARY_OPS,
    VAR_TYPES,
)
from .registry import CALL_USAGES


class TreeError(Exception):
    """Raised when a dict does not describe a valid input tree."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(f"{path}: {message}")
        self.message = message
        self.path = path


NODE_TYPES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        ast.Literal,
        ast.VarRef,
        ast.UnaryOp,
        ast.BinaryOp,
        ast.TernaryOp,
        ast.NullaryOp,
        ast.Block,
        ast.VarDecl,
        ast.TypedVarDecl,
        ast.Assignment,
        ast.IfStmt,
        ast.StoreFunc,
        ast.ForStmt,
        ast.BoundedForStmt,
        ast.CaseStmt,
        ast.SwitchStmt,
        ast.BreakStmt,
        ast.ContinueStmt,
        ast.LogFunc,
        ast.CopyFunc,
        ast.ExtCodeCopy,
        ast.StopInvalidStmt,
        ast.RetRevStmt,
        ast.SelfDestructStmt,
        ast.FunctionCall,
        ast.FunctionDef,
        ast.Program,
    )
}

# Closed vocabularies for string-valued fields.
_ENUM_FIELDS: dict[tuple[type, str], frozenset[str]] = {
    (ast.UnaryOp, "op"): frozenset(UNARY_OPS),
    (ast.BinaryOp, "op"): frozenset(BINARY_OPS),
    (ast.TernaryOp, "op"): frozenset(TERNARY_OPS),
    (ast.NullaryOp, "op"): frozenset(NULLARY_OPS),
    (ast.StoreFunc, "op"): frozenset(STORE_OPS),
    (ast.CopyFunc, "op"): frozenset(COPY_OPS),
    (ast.StopInvalidStmt, "op"): frozenset(STOP_INVALID_OPS),
    (ast.RetRevStmt, "op"): frozenset(RET_REV_OPS),
    (ast.TypedVarDecl, "typ"): frozenset(VAR_TYPES),
    (ast.FunctionCall, "returns"): frozenset(CALL_USAGES),
}

# Node class expected in each child position; anything else holds expressions.
_CHILD_TYPES: dict[str, type] = {
    "block": ast.Block,
    "body": ast.Block,
    "init": ast.Block,
    "post": ast.Block,
    "default": ast.Block,
    "ref": ast.VarRef,
    "outs": ast.VarRef,
    "literal": ast.Literal,
    "cases": ast.CaseStmt,
    "statements": ast.Stmt,
}

_LIST_FIELDS: frozenset[str] = frozenset(
    {"statements", "cases", "topics", "args", "outs"}
)
_INT_FIELDS: frozenset[str] = frozenset(
    {"intval", "varnum", "func_index", "num_inputs", "num_outputs", "num_topics"}
)
_STR_FIELDS: frozenset[str] = frozenset({"hexval", "strval", "op", "typ", "returns"})


# ── To dict ─────────────────────────────────────────────────


def to_dict(obj: object) -> object:
    """Recursively serialize a tree (or subtree) to a JSON-compatible structure."""
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, list):
        return [to_dict(x) for x in obj]
    if type(obj).__name__ not in NODE_TYPES:
        raise TypeError(f"cannot serialize {type(obj).__name__}")
    d: dict[str, object] = {"_type": type(obj).__name__}
    for f in dataclasses.fields(obj):
        d[f.name] = to_dict(getattr(obj, f.name))
    return d


# ── From dict ───────────────────────────────────────────────


def from_dict(data: object) -> ast.Program:
    """Build a `Program` from its dict form."""
    node = _node(data, "$")
    if not isinstance(node, ast.Program):
        raise TreeError(f"expected Program, got {type(node).__name__}", "$")
    return node


def _node(data: object, path: str) -> object:
    if not isinstance(data, dict):
        raise TreeError("expected an object", path)
    type_name = data.get("_type")
    if not isinstance(type_name, str) or type_name not in NODE_TYPES:
        raise TreeError(f"unknown node type {type_name!r}", path)
    cls = NODE_TYPES[type_name]
    # Null is accepted only where the field itself defaults to None.
    nullable = {f.name: f.default is None for f in dataclasses.fields(cls)}
    kwargs: dict[str, object] = {}
    for key, value in data.items():
        if key == "_type":
            continue
        if key not in nullable:
            raise TreeError(f"unknown field {key!r} for {type_name}", path)
        kwargs[key] = _value(cls, key, value, f"{path}.{key}", nullable[key])
    try:
        node = cls(**kwargs)
    except TypeError as e:
        raise TreeError(str(e), path) from None
    if isinstance(node, ast.Literal):
        _check_literal(node, path)
    return node


def _value(cls: type, key: str, value: object, path: str, nullable: bool) -> object:
    if value is None:
        if not nullable:
            raise TreeError(f"{key!r} must not be null", path)
        return None
    if key in _LIST_FIELDS:
        if not isinstance(value, list):
            raise TreeError("expected a list", path)
        items: list[object] = []
        for i, v in enumerate(value):
            if v is None and key not in _CHILD_TYPES:
                items.append(None)
            else:
                items.append(_child(key, v, f"{path}[{i}]"))
        return items
    if isinstance(value, list):
        raise TreeError("unexpected list", path)
    if key in _INT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TreeError("expected an integer", path)
        return value
    if key in _STR_FIELDS:
        if not isinstance(value, str):
            raise TreeError("expected a string", path)
        allowed = _ENUM_FIELDS.get((cls, key))
        if allowed is not None and value not in allowed:
            raise TreeError(f"unknown {key} {value!r}", path)
        return value
    if isinstance(value, dict):
        return _child(key, value, path)
    raise TreeError(f"unexpected scalar for {key!r}", path)


def _child(key: str, value: object, path: str) -> object:
    node = _node(value, path)
    expected = _CHILD_TYPES.get(key, ast.Expr)
    if not isinstance(node, expected):
        raise TreeError(
            f"expected {expected.__name__}, got {type(node).__name__}", path
        )
    return node


def _check_literal(lit: ast.Literal, path: str) -> None:
    set_fields = [v for v in (lit.intval, lit.hexval, lit.strval) if v is not None]
    if len(set_fields) > 1:
        raise TreeError("literal has more than one value set", path)
