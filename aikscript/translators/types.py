"""
Python type annotation translation to Aiken types
"""

import ast
import json
import logging
from typing import Optional

from ..core.config import (
    AIKEN_TYPE_NAMES,
    LIST_TYPE_NAMES,
    OPTION,
    PY_TYPE_TO_AIKEN,
    TUPLE_TYPE_NAMES,
    VOID,
)
from ..core.models import TargetKind, TargetType

logger = logging.getLogger(__name__)

VOID_TYPE = TargetType(TargetKind.VOID)


def map_primitive(name: str) -> str:
    """Map a source type name onto its Aiken name; unknown names pass through"""
    if name in AIKEN_TYPE_NAMES:
        return name
    return PY_TYPE_TO_AIKEN.get(name, name)


def should_wrap_in_option(type_name: str) -> bool:
    return not type_name.startswith(f"{OPTION}<") and type_name != VOID


def wrap_in_option(type_name: str) -> str:
    if should_wrap_in_option(type_name):
        return f"{OPTION}<{type_name}>"
    return type_name


def transform_type_node(node: Optional[ast.AST]) -> str:
    """Translate an annotation node to Aiken type syntax"""
    return resolve_type(node).render()


def resolve_type(node: Optional[ast.AST]) -> TargetType:
    """
    Translate an annotation node to a TargetType.

    Never raises: anything that cannot be classified becomes Void.
    """
    if node is None:
        return VOID_TYPE

    if isinstance(node, ast.Constant):
        return _resolve_constant(node)

    if isinstance(node, ast.Name):
        return TargetType(TargetKind.PRIMITIVE, map_primitive(node.id))

    if isinstance(node, ast.Attribute):
        return TargetType(TargetKind.PRIMITIVE, map_primitive(_base_name(node)))

    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        members = _union_members(node.left) + _union_members(node.right)
        return TargetType(TargetKind.UNION, args=tuple(members))

    if isinstance(node, ast.Subscript):
        return _resolve_subscript(node)

    if isinstance(node, ast.Dict):
        return _resolve_record(node)

    if isinstance(node, ast.Set):
        fields = []
        for elt in node.elts:
            name = _field_name(elt)
            if name is None:
                logger.warning("Unsupported record field: %s", ast.dump(elt))
                continue
            fields.append((name, VOID_TYPE))
        return TargetType(TargetKind.RECORD, fields=tuple(fields))

    if isinstance(node, (ast.List, ast.Tuple)):
        # Bare `[T]` / `(A, B)` displays used as annotations
        items = tuple(resolve_type(elt) for elt in node.elts)
        if isinstance(node, ast.List) and len(items) == 1:
            return TargetType(TargetKind.LIST, args=items)
        if isinstance(node, ast.Tuple) and items:
            return TargetType(TargetKind.TUPLE, args=items)

    logger.warning("Unsupported type annotation %s, using Void", type(node).__name__)
    return VOID_TYPE


def _resolve_constant(node: ast.Constant) -> TargetType:
    if node.value is None:
        return VOID_TYPE
    if isinstance(node.value, str):
        # String annotations are forward references
        try:
            parsed = ast.parse(node.value, mode="eval").body
        except SyntaxError:
            logger.warning("Unparseable string annotation %r, using Void", node.value)
            return VOID_TYPE
        return resolve_type(parsed)
    if node.value is Ellipsis:
        return VOID_TYPE
    logger.warning("Unsupported constant annotation %r, using Void", node.value)
    return VOID_TYPE


def _resolve_subscript(node: ast.Subscript) -> TargetType:
    base = _base_name(node.value)
    args = _subscript_args(node.slice)

    if base == "Literal":
        literals = [_literal(arg) for arg in args]
        if len(literals) == 1:
            return literals[0]
        return TargetType(TargetKind.UNION, args=tuple(literals))

    if base in ("Annotated", "Final", "ClassVar"):
        return resolve_type(args[0]) if args else VOID_TYPE

    if base == "Union":
        members = []
        for arg in args:
            members.extend(_union_members(arg))
        return TargetType(TargetKind.UNION, args=tuple(members))

    if base in LIST_TYPE_NAMES and len(args) == 1:
        return TargetType(TargetKind.LIST, args=(resolve_type(args[0]),))

    if base in TUPLE_TYPE_NAMES:
        return TargetType(TargetKind.TUPLE, args=tuple(resolve_type(arg) for arg in args))

    if base is None:
        logger.warning("Unsupported generic base %s, using Void", type(node.value).__name__)
        return VOID_TYPE

    return TargetType(
        TargetKind.APPLICATION,
        map_primitive(base),
        args=tuple(resolve_type(arg) for arg in args)
    )


def _resolve_record(node: ast.Dict) -> TargetType:
    fields = []
    for key, value in zip(node.keys, node.values):
        name = _field_name(key) if key is not None else None
        if name is None:
            logger.warning("Unsupported record field key, skipping")
            continue
        fields.append((name, resolve_type(value)))
    return TargetType(TargetKind.RECORD, fields=tuple(fields))


def _literal(node: ast.AST) -> TargetType:
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool):
            return TargetType(TargetKind.LITERAL, "True" if node.value else "False")
        if isinstance(node.value, str):
            return TargetType(TargetKind.LITERAL, json.dumps(node.value))
        if isinstance(node.value, (int, float)):
            return TargetType(TargetKind.LITERAL, str(node.value))
    if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.USub):
        inner = _literal(node.operand)
        if inner.kind == TargetKind.LITERAL:
            return TargetType(TargetKind.LITERAL, f"-{inner.name}")
    logger.warning("Unsupported literal type argument, using Void")
    return VOID_TYPE


def _union_members(node: ast.AST) -> list:
    """Left-to-right members of a `A | B | C` chain"""
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _union_members(node.left) + _union_members(node.right)
    return [resolve_type(node)]


def _subscript_args(node: ast.AST) -> list:
    if isinstance(node, ast.Tuple):
        return list(node.elts)
    return [node]


def _base_name(node: ast.AST) -> Optional[str]:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        # typing.Optional, t.List ...
        if isinstance(node.value, ast.Name) and node.value.id in ("typing", "t", "typing_extensions"):
            return node.attr
        return _dotted_name(node)
    return None


def _dotted_name(node: ast.AST) -> str:
    if isinstance(node, ast.Attribute):
        return f"{_dotted_name(node.value)}.{node.attr}"
    if isinstance(node, ast.Name):
        return node.id
    return ""


def _field_name(node: ast.AST) -> Optional[str]:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    if isinstance(node, ast.Name):
        return node.id
    return None
