"""
Python match-statement pattern translation
"""

import ast
import logging
from typing import Optional

from ..core.models import Pattern, PatternKind
from ..generators.expressions import generate_pattern
from .expressions import ExpressionTranslator

logger = logging.getLogger(__name__)


class PatternTranslator:
    """Turns `case` patterns into Pattern records"""

    def __init__(self, expr_translator: ExpressionTranslator, source: Optional[str] = None):
        self.expr_translator = expr_translator
        self.source = source

    def translate(self, node: ast.pattern) -> Pattern:
        if isinstance(node, ast.MatchAs):
            if node.pattern is not None:
                if node.name:
                    logger.warning("Dropping `as %s` binding in pattern", node.name)
                return self.translate(node.pattern)
            if node.name is None:
                return Pattern(PatternKind.WILDCARD)
            return Pattern(PatternKind.VARIABLE, name=node.name)

        if isinstance(node, ast.MatchValue):
            return Pattern(PatternKind.LITERAL, value=self.expr_translator.visit(node.value))

        if isinstance(node, ast.MatchSingleton):
            if node.value is None:
                return Pattern(PatternKind.CONSTRUCTOR, constructor="None")
            return Pattern(PatternKind.LITERAL, value="True" if node.value else "False")

        if isinstance(node, ast.MatchClass):
            name = self.expr_translator.visit(node.cls)
            pattern = Pattern(PatternKind.CONSTRUCTOR, constructor=name)
            pattern.args = [self.translate(arg) for arg in node.patterns]
            pattern.fields = {
                label: self.translate(sub)
                for label, sub in zip(node.kwd_attrs, node.kwd_patterns)
            }
            return pattern

        if isinstance(node, ast.MatchSequence):
            kind = PatternKind.TUPLE if self._is_parenthesized(node) else PatternKind.LIST
            return Pattern(kind, args=[self.translate(elt) for elt in node.patterns])

        if isinstance(node, ast.MatchStar):
            return Pattern(PatternKind.VARIABLE, name=f"..{node.name}" if node.name else "..")

        if isinstance(node, ast.MatchOr):
            alternatives = [generate_pattern(self.translate(p)) for p in node.patterns]
            return Pattern(PatternKind.LITERAL, value=" | ".join(alternatives))

        logger.warning("Unsupported pattern %s, matching anything", type(node).__name__)
        return Pattern(PatternKind.WILDCARD)

    def _is_parenthesized(self, node: ast.MatchSequence) -> bool:
        if self.source is None:
            return False
        segment = ast.get_source_segment(self.source, node)
        return bool(segment) and segment.lstrip().startswith("(")
