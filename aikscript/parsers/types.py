"""
Type declaration parsing: aliases, record classes and enums
"""

import ast
import logging
from typing import List, Optional

from ..core.config import AIKEN_TYPE_NAMES, PY_TYPE_TO_AIKEN
from ..core.models import TargetKind, TargetType, TypeDefinition
from ..translators.naming import is_constructor_name, to_constructor_name
from ..translators.types import VOID_TYPE, resolve_type

logger = logging.getLogger(__name__)

ENUM_BASES = {"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"}


def _base_names(node: ast.ClassDef) -> List[str]:
    names = []
    for base in node.bases:
        target = base.value if isinstance(base, ast.Subscript) else base
        if isinstance(target, ast.Name):
            names.append(target.id)
        elif isinstance(target, ast.Attribute):
            names.append(target.attr)
    return names


def is_enum_class(node: ast.ClassDef) -> bool:
    return any(name in ENUM_BASES for name in _base_names(node))


def enum_members(node: ast.ClassDef) -> List[str]:
    members = []
    for item in node.body:
        if isinstance(item, ast.Assign):
            members.extend(t.id for t in item.targets if isinstance(t, ast.Name))
        elif isinstance(item, ast.AnnAssign) and isinstance(item.target, ast.Name):
            members.append(item.target.id)
    return [m for m in members if not m.startswith("_")]


def is_type_expression(value: ast.AST) -> bool:
    """Whether a module-level `Name = value` reads as a type alias"""
    if isinstance(value, (ast.Subscript, ast.Dict, ast.Set)):
        return True
    if isinstance(value, ast.BinOp) and isinstance(value.op, ast.BitOr):
        return is_type_expression(value.left) and is_type_expression(value.right)
    if isinstance(value, ast.Name):
        return (value.id in PY_TYPE_TO_AIKEN
                or value.id in AIKEN_TYPE_NAMES
                or is_constructor_name(value.id))
    if isinstance(value, ast.Attribute):
        return is_constructor_name(value.attr)
    if isinstance(value, ast.Constant):
        return value.value is None
    return False


def generic_parameters(node: ast.AST) -> Optional[List[str]]:
    """PEP 695 parameters, or the arguments of a Generic[...] base"""
    params = [p.name for p in getattr(node, "type_params", None) or []]
    if params:
        return params

    for base in getattr(node, "bases", []):
        if (isinstance(base, ast.Subscript)
                and isinstance(base.value, ast.Name)
                and base.value.id in ("Generic", "Protocol")):
            args = base.slice.elts if isinstance(base.slice, ast.Tuple) else [base.slice]
            names = [arg.id for arg in args if isinstance(arg, ast.Name)]
            if names:
                return names
    return None


class TypeParser:
    """Parses type declarations into TypeDefinition records"""

    def parse_type_alias(self, name: str, value: Optional[ast.AST],
                         type_params: Optional[List[str]] = None,
                         is_public: bool = False,
                         is_opaque: bool = False,
                         docs: Optional[List[str]] = None) -> TypeDefinition:
        target = resolve_type(value) if value is not None else VOID_TYPE
        if target.kind == TargetKind.VOID and value is not None and not _is_none(value):
            logger.warning("Type alias %s has an unsupported body, using Void", name)
        return self._definition(name, target, type_params, is_public, is_opaque, docs)

    def parse_pep695_alias(self, node: ast.AST, is_public: bool = False,
                           docs: Optional[List[str]] = None) -> TypeDefinition:
        """`type Name[T] = ...`"""
        return self.parse_type_alias(
            node.name.id,
            node.value,
            type_params=generic_parameters(node),
            is_public=is_public,
            docs=docs
        )

    def parse_record(self, node: ast.ClassDef, is_public: bool = False,
                     is_opaque: bool = False,
                     docs: Optional[List[str]] = None) -> TypeDefinition:
        """A class body of annotated fields becomes a record type"""
        fields = []
        for item in node.body:
            if isinstance(item, ast.AnnAssign) and isinstance(item.target, ast.Name):
                fields.append((item.target.id, resolve_type(item.annotation)))
            elif isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef)):
                logger.warning("Method %s.%s is not part of the record type", node.name, item.name)

        if not fields:
            logger.warning("Record %s has no annotated fields", node.name)

        target = TargetType(TargetKind.RECORD, fields=tuple(fields))
        return self._definition(node.name, target, generic_parameters(node), is_public, is_opaque, docs)

    def parse_enum(self, node: ast.ClassDef, is_public: bool = False,
                   docs: Optional[List[str]] = None) -> TypeDefinition:
        """Enum members become the constructors of a union type"""
        members = [
            TargetType(TargetKind.PRIMITIVE, to_constructor_name(member))
            for member in enum_members(node)
        ]
        if not members:
            logger.warning("Enum %s has no members, using Void", node.name)
            return self._definition(node.name, VOID_TYPE, None, is_public, False, docs)
        target = TargetType(TargetKind.UNION, args=tuple(members))
        return self._definition(node.name, target, None, is_public, False, docs)

    def _definition(self, name, target, type_params, is_public, is_opaque, docs) -> TypeDefinition:
        return TypeDefinition(
            name=name,
            definition=target.render(),
            type_params=type_params,
            is_opaque=is_opaque,
            is_public=is_public,
            docs=docs,
            target=target
        )


def _is_none(node: ast.AST) -> bool:
    return isinstance(node, ast.Constant) and node.value is None
