"""
Collects the decorator annotations of a module in one pass.

The result is a plain table keyed by qualified declaration name
(`Vesting`, `Vesting.spend`, `Vesting.state`, `test_unlock`), so later
stages never inspect decorators themselves.
"""

import ast
from typing import Dict, Iterator, List, Optional, Tuple

from ..core.config import (
    CONTRACT_DECORATOR,
    DATUM_MARKER,
    OPAQUE_DECORATOR,
    TEST_DECORATOR,
    VALIDATOR_DECORATOR,
)
from ..core.models import Annotation, DeclarationRole


def doc_lines_of(node: ast.AST) -> Optional[List[str]]:
    """Docstring of a module, class or function as a list of lines"""
    docstring = ast.get_docstring(node)
    if not docstring:
        return None
    return docstring.splitlines()


def iter_decorators(node: ast.AST) -> Iterator[Tuple[str, Optional[str]]]:
    """
    Yield (name, first string argument) for each decorator.

    Handles `@name`, `@name("arg")` and the qualified `@aikscript.name(...)`.
    """
    for decorator in getattr(node, "decorator_list", []):
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if isinstance(target, ast.Name):
            name = target.id
        elif isinstance(target, ast.Attribute):
            name = target.attr
        else:
            continue

        argument = None
        if isinstance(decorator, ast.Call) and decorator.args:
            first = decorator.args[0]
            if isinstance(first, ast.Constant) and isinstance(first.value, str):
                argument = first.value
        yield name, argument


def has_decorator(node: ast.AST, name: str) -> bool:
    return any(decorator == name for decorator, _ in iter_decorators(node))


def is_datum_annotation(annotation: Optional[ast.AST]) -> bool:
    """`Annotated[T, datum]`"""
    if not isinstance(annotation, ast.Subscript):
        return False
    base = annotation.value
    base_name = base.id if isinstance(base, ast.Name) else getattr(base, "attr", None)
    if base_name != "Annotated" or not isinstance(annotation.slice, ast.Tuple):
        return False
    for marker in annotation.slice.elts[1:]:
        if isinstance(marker, ast.Call):
            marker = marker.func
        if isinstance(marker, ast.Name) and marker.id == DATUM_MARKER:
            return True
        if isinstance(marker, ast.Attribute) and marker.attr == DATUM_MARKER:
            return True
    return False


def is_test_function(node: ast.AST) -> bool:
    return (isinstance(node, ast.FunctionDef)
            and (has_decorator(node, TEST_DECORATOR) or node.name.startswith("test_")))


def collect_annotations(module: ast.Module) -> Dict[str, Annotation]:
    table: Dict[str, Annotation] = {}

    for node in module.body:
        if isinstance(node, ast.ClassDef):
            for name, argument in iter_decorators(node):
                if name == CONTRACT_DECORATOR:
                    table[node.name] = Annotation(
                        DeclarationRole.CONTRACT,
                        argument=argument or node.name,
                        doc=doc_lines_of(node)
                    )
                elif name == OPAQUE_DECORATOR:
                    table[node.name] = Annotation(DeclarationRole.OPAQUE, doc=doc_lines_of(node))

            for item in node.body:
                if isinstance(item, ast.FunctionDef):
                    for name, argument in iter_decorators(item):
                        if name == VALIDATOR_DECORATOR:
                            table[f"{node.name}.{item.name}"] = Annotation(
                                DeclarationRole.VALIDATOR,
                                purpose=argument or item.name,
                                doc=doc_lines_of(item)
                            )
                elif (isinstance(item, ast.AnnAssign)
                      and isinstance(item.target, ast.Name)
                      and is_datum_annotation(item.annotation)):
                    table[f"{node.name}.{item.target.id}"] = Annotation(
                        DeclarationRole.DATUM,
                        argument=item.target.id
                    )

        elif is_test_function(node):
            table[node.name] = Annotation(DeclarationRole.TEST, doc=doc_lines_of(node))

    return table
