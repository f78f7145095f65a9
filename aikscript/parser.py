"""
Parser that collects the declarations of an annotated Python module.
"""

import ast
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .core.builtins import BuiltinRegistry
from .core.config import TranspilerOptions
from .core.errors import SourceParseError
from .core.models import (
    Annotation,
    DeclarationRole,
    ModuleScope,
    TranspilerAST,
)
from .parsers.annotations import collect_annotations, doc_lines_of
from .parsers.constants import ConstantParser, is_final_annotation
from .parsers.directives import scan_directives
from .parsers.functions import FunctionParser
from .parsers.imports import ImportParser
from .parsers.types import TypeParser, enum_members, is_enum_class, is_type_expression
from .translators.expressions import make_expression_translator
from .translators.naming import is_constant_name, is_constructor_name
from .translators.types import resolve_type

logger = logging.getLogger(__name__)

# PEP 695 `type X = ...` statements, Python 3.12+
TYPE_ALIAS_NODE = getattr(ast, "TypeAlias", None)


def _is_type_alias_annotation(annotation: Optional[ast.AST]) -> bool:
    if isinstance(annotation, ast.Name):
        return annotation.id == "TypeAlias"
    if isinstance(annotation, ast.Attribute):
        return annotation.attr == "TypeAlias"
    return False


def _is_type_var(value: Optional[ast.AST]) -> bool:
    """`T = TypeVar("T")`; generic parameters are emitted by name only"""
    if not isinstance(value, ast.Call):
        return False
    func = value.func
    name = func.id if isinstance(func, ast.Name) else getattr(func, "attr", None)
    return name in ("TypeVar", "ParamSpec", "TypeVarTuple")


def _is_main_guard(node: ast.AST) -> bool:
    return (isinstance(node, ast.If)
            and isinstance(node.test, ast.Compare)
            and isinstance(node.test.left, ast.Name)
            and node.test.left.id == "__name__")


def _string_statement(node: Optional[ast.AST]) -> Optional[List[str]]:
    """Lines of a bare string statement, used as an attribute docstring"""
    if (isinstance(node, ast.Expr)
            and isinstance(node.value, ast.Constant)
            and isinstance(node.value.value, str)):
        return [line.strip() for line in node.value.value.strip().splitlines()]
    return None


class SourceParser:
    """
    Parse an annotated Python module into a TranspilerAST.

    Parsing is best-effort per declaration: anything that cannot be
    classified is logged and skipped, and only unreadable source raises.
    """

    def __init__(self,
                 builtins: Optional[BuiltinRegistry] = None,
                 options: Optional[TranspilerOptions] = None):
        self.builtins = builtins
        self.options = options or TranspilerOptions()
        self.import_parser = ImportParser()
        self.type_parser = TypeParser()

    def parse_file(self, file_path: str) -> TranspilerAST:
        """
        Parse a Python file.

        Raises:
            SourceParseError: If the file cannot be read or is not valid Python
        """
        path = Path(file_path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceParseError(str(e), filename=str(path)) from e
        return self.parse(source, module_name=path.stem, filename=str(path))

    def parse(self, source: str, module_name: Optional[str] = None,
              filename: str = "<source>") -> TranspilerAST:
        try:
            tree = ast.parse(source, filename=filename)
        except SyntaxError as e:
            raise SourceParseError(str(e), filename=filename, lineno=e.lineno) from e

        annotations = collect_annotations(tree)
        scope = self._collect_scope(tree, annotations)
        exports = self._exports(tree)

        result = TranspilerAST(
            module_name=module_name or Path(filename).stem,
            docs=doc_lines_of(tree),
            scope=scope,
            source=source
        )

        functions = FunctionParser(
            scope=scope,
            builtins=self.builtins,
            options=self.options,
            source=source,
            directives=scan_directives(source)
        )
        constants = ConstantParser(make_expression_translator(scope, self.builtins, self.options))

        def is_public(name: str) -> bool:
            if exports is not None:
                return name in exports
            return not name.startswith("_")

        body = tree.body
        for index, node in enumerate(body):
            following = body[index + 1] if index + 1 < len(body) else None

            if isinstance(node, ast.Import):
                result.imports.extend(self.import_parser.parse_import(node))

            elif isinstance(node, ast.ImportFrom):
                declaration = self.import_parser.parse_import_from(node)
                if declaration is not None:
                    result.imports.append(declaration)

            elif isinstance(node, ast.ClassDef):
                self._parse_class(node, annotations, functions, result, is_public(node.name))

            elif isinstance(node, ast.FunctionDef):
                annotation = annotations.get(node.name)
                docs = doc_lines_of(node)
                if annotation is not None and annotation.role == DeclarationRole.TEST:
                    result.tests.append(functions.parse_test(node, docs))
                else:
                    result.functions.append(functions.parse_function(node, is_public(node.name), docs))

            elif TYPE_ALIAS_NODE is not None and isinstance(node, TYPE_ALIAS_NODE):
                result.types.append(self.type_parser.parse_pep695_alias(
                    node, is_public(node.name.id), _string_statement(following)))

            elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
                name = node.target.id
                if _is_type_alias_annotation(node.annotation):
                    result.types.append(self.type_parser.parse_type_alias(
                        name, node.value, is_public=is_public(name), docs=_string_statement(following)))
                elif node.value is not None and (is_constant_name(name) or is_final_annotation(node.annotation)):
                    result.constants.append(constants.parse(
                        name, node.value, node.annotation, is_public(name), _string_statement(following)))
                else:
                    logger.warning("Skipping module variable %s on line %d", name, node.lineno)

            elif (isinstance(node, ast.Assign)
                  and len(node.targets) == 1
                  and isinstance(node.targets[0], ast.Name)):
                name = node.targets[0].id
                if name == "__all__" or _is_type_var(node.value):
                    continue
                if is_constructor_name(name) and is_type_expression(node.value):
                    result.types.append(self.type_parser.parse_type_alias(
                        name, node.value, is_public=is_public(name), docs=_string_statement(following)))
                elif is_constant_name(name):
                    result.constants.append(constants.parse(
                        name, node.value, None, is_public(name), _string_statement(following)))
                else:
                    logger.warning("Skipping module variable %s on line %d", name, node.lineno)

            elif isinstance(node, ast.Expr) and isinstance(node.value, ast.Constant):
                # Module and attribute docstrings
                continue

            elif _is_main_guard(node):
                logger.debug("Skipping __main__ block on line %d", node.lineno)

            else:
                logger.warning("Skipping unsupported %s on line %d",
                               type(node).__name__, getattr(node, "lineno", 0))

        return result

    def _parse_class(self, node: ast.ClassDef, annotations: Dict[str, Annotation],
                     functions: FunctionParser, result: TranspilerAST, is_public: bool) -> None:
        annotation = annotations.get(node.name)
        docs = doc_lines_of(node)

        if annotation is not None and annotation.role == DeclarationRole.CONTRACT:
            self._parse_contract(node, annotation, annotations, functions, result)
            return

        if is_enum_class(node):
            result.types.append(self.type_parser.parse_enum(node, is_public, docs))
            return

        is_opaque = annotation is not None and annotation.role == DeclarationRole.OPAQUE
        result.types.append(self.type_parser.parse_record(node, is_public, is_opaque, docs))

    def _parse_contract(self, node: ast.ClassDef, annotation: Annotation,
                        annotations: Dict[str, Annotation],
                        functions: FunctionParser, result: TranspilerAST) -> None:
        contract = annotation.argument or node.name
        datum_type = self._contract_datum(node, annotations, result)

        for item in node.body:
            if not isinstance(item, ast.FunctionDef):
                continue
            handler = annotations.get(f"{node.name}.{item.name}")
            if handler is not None and handler.role == DeclarationRole.VALIDATOR:
                result.functions.append(functions.parse_validator(
                    item, contract, handler.purpose, handler.doc, datum_type))
            else:
                # Undecorated methods become private helpers of the module
                result.functions.append(functions.parse_function(item, False, doc_lines_of(item), is_method=True))

    def _contract_datum(self, node: ast.ClassDef,
                        annotations: Dict[str, Annotation], result: TranspilerAST) -> Optional[str]:
        """Type of the contract's datum property; inline records become `<Contract>Datum`"""
        for item in node.body:
            if not (isinstance(item, ast.AnnAssign) and isinstance(item.target, ast.Name)):
                continue
            marker = annotations.get(f"{node.name}.{item.target.id}")
            if marker is None or marker.role != DeclarationRole.DATUM:
                continue

            inner = item.annotation.slice.elts[0]
            if isinstance(inner, (ast.Dict, ast.Set)):
                name = f"{node.name}Datum"
                result.types.append(self.type_parser.parse_type_alias(name, inner, is_public=True))
                return name
            return resolve_type(inner).render()
        return None

    def _collect_scope(self, tree: ast.Module, annotations: Dict[str, Annotation]) -> ModuleScope:
        scope = ModuleScope()
        for node in tree.body:
            if isinstance(node, ast.FunctionDef):
                scope.known_functions.add(node.name)
            elif isinstance(node, ast.ClassDef):
                annotation = annotations.get(node.name)
                if is_enum_class(node):
                    scope.enums[node.name] = set(enum_members(node))
                elif annotation is not None and annotation.role == DeclarationRole.CONTRACT:
                    scope.known_functions.update(
                        item.name for item in node.body if isinstance(item, ast.FunctionDef))
            elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
                if is_constant_name(node.target.id) or is_final_annotation(node.annotation):
                    scope.constants.add(node.target.id)
            elif isinstance(node, ast.Assign) and not _is_type_var(node.value):
                for target in node.targets:
                    if isinstance(target, ast.Name) and is_constant_name(target.id):
                        scope.constants.add(target.id)
        return scope

    def _exports(self, tree: ast.Module) -> Optional[set]:
        """Names listed in `__all__`, or None when the module has none"""
        for node in tree.body:
            if (isinstance(node, ast.Assign)
                    and any(isinstance(t, ast.Name) and t.id == "__all__" for t in node.targets)
                    and isinstance(node.value, (ast.List, ast.Tuple))):
                return {
                    elt.value for elt in node.value.elts
                    if isinstance(elt, ast.Constant) and isinstance(elt.value, str)
                }
        return None
