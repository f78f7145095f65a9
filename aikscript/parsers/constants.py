"""
Module constant parsing
"""

import ast
import logging
from typing import List, Optional

from ..core.models import ConstantDefinition
from ..translators.expressions import ExpressionTranslator
from ..translators.naming import constant_name
from ..translators.types import transform_type_node

logger = logging.getLogger(__name__)


def infer_literal_type(node: ast.AST) -> Optional[str]:
    """Type of a literal constant value, when it is evident"""
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool):
            return "Bool"
        if isinstance(node.value, (int, float)):
            return "Int"
        if isinstance(node.value, (str, bytes)):
            return "ByteArray"
        return None
    if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.USub):
        return infer_literal_type(node.operand)
    if isinstance(node, ast.List) and node.elts:
        element = infer_literal_type(node.elts[0])
        return f"List<{element}>" if element else None
    return None


def is_final_annotation(annotation: Optional[ast.AST]) -> bool:
    if isinstance(annotation, ast.Subscript):
        annotation = annotation.value
    if isinstance(annotation, ast.Name):
        return annotation.id == "Final"
    if isinstance(annotation, ast.Attribute):
        return annotation.attr == "Final"
    return False


class ConstantParser:
    """
    Turns module-level constants into Aiken `const` declarations.

        MIN_FEE: int = 2_000_000   -> const min_fee: Int = 2000000
        OWNER = b"\\xab\\xcd"        -> const owner: ByteArray = #"abcd"
    """

    def __init__(self, expr_translator: ExpressionTranslator):
        self.expr_translator = expr_translator

    def parse(self, name: str, value: ast.AST, annotation: Optional[ast.AST] = None,
              is_public: bool = False, docs: Optional[List[str]] = None) -> ConstantDefinition:
        type_annotation = None
        if annotation is not None:
            if is_final_annotation(annotation) and not isinstance(annotation, ast.Subscript):
                type_annotation = infer_literal_type(value)
            else:
                type_annotation = transform_type_node(annotation)
        else:
            type_annotation = infer_literal_type(value)

        if type_annotation is None:
            logger.debug("Constant %s has no evident type", name)

        return ConstantDefinition(
            name=constant_name(name),
            value=self.expr_translator.visit(value),
            type_annotation=type_annotation,
            is_public=is_public,
            docs=docs
        )
