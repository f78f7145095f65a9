"""
Function, validator handler and test parsing
"""

import ast
import logging
from typing import Dict, List, Optional

from ..core.builtins import BuiltinRegistry
from ..core.config import TranspilerOptions
from ..core.models import (
    Directive,
    FunctionDefinition,
    ModuleScope,
    ParameterDefinition,
    TestDefinition,
    ValidatorPurpose,
)
from ..translators.expressions import make_expression_translator
from ..translators.naming import to_snake_case
from ..translators.statements import function_header_lines, translate_function_body
from ..translators.types import transform_type_node
from .types import generic_parameters

logger = logging.getLogger(__name__)


def directives_within(node: ast.FunctionDef,
                      directives: Dict[int, List[Directive]]) -> Dict[int, List[Directive]]:
    """Directives bound to lines of this function, decorators included"""
    start = min(function_header_lines(node))
    end = getattr(node, "end_lineno", None) or node.lineno
    return {line: found for line, found in directives.items() if start <= line <= end}


class FunctionParser:
    """Parses `def` statements into FunctionDefinition and TestDefinition records"""

    def __init__(self,
                 scope: Optional[ModuleScope] = None,
                 builtins: Optional[BuiltinRegistry] = None,
                 options: Optional[TranspilerOptions] = None,
                 source: Optional[str] = None,
                 directives: Optional[Dict[int, List[Directive]]] = None):
        self.scope = scope or ModuleScope()
        self.builtins = builtins
        self.options = options or TranspilerOptions()
        self.source = source
        self.directives = directives or {}

    def parse_parameters(self, node: ast.FunctionDef, is_method: bool = False) -> List[ParameterDefinition]:
        args = node.args
        positional = list(args.posonlyargs) + list(args.args)
        if is_method and positional and positional[0].arg in ("self", "cls"):
            positional = positional[1:]

        if args.vararg or args.kwarg:
            logger.warning("Variadic parameters of %s are dropped", node.name)

        parameters = []
        for arg in positional + list(args.kwonlyargs):
            param_type = transform_type_node(arg.annotation) if arg.annotation is not None else None
            parameters.append(ParameterDefinition(name=arg.arg, type=param_type))
        return parameters

    def parse_function(self, node: ast.FunctionDef, is_public: bool = False,
                       docs: Optional[List[str]] = None,
                       is_method: bool = False) -> FunctionDefinition:
        translator = make_expression_translator(self.scope, self.builtins, self.options)
        body = translate_function_body(node, translator, self.directives, self.source)

        return FunctionDefinition(
            name=node.name,
            parameters=self.parse_parameters(node, is_method),
            body=body,
            return_type=transform_type_node(node.returns) if node.returns is not None else None,
            type_params=generic_parameters(node),
            is_public=is_public,
            docs=docs,
            when_expressions=translator.when_expressions,
            pipe_expressions=translator.pipe_expressions,
            expect_expressions=translator.expect_expressions
        )

    def parse_validator(self, node: ast.FunctionDef, contract: str, purpose_name: str,
                        docs: Optional[List[str]] = None,
                        datum_type: Optional[str] = None) -> FunctionDefinition:
        """
        Parse a validator handler.

        Parameters keep their source shape here; canonicalization and body
        translation happen in the transform stage.
        """
        parameters = self.parse_parameters(node, is_method=True)
        if datum_type and parameters and parameters[0].name == "datum" and parameters[0].type is None:
            parameters[0].type = datum_type

        return FunctionDefinition(
            name=node.name,
            parameters=parameters,
            return_type=transform_type_node(node.returns) if node.returns is not None else None,
            is_public=True,
            docs=docs,
            purpose=ValidatorPurpose.parse(purpose_name),
            purpose_name=purpose_name,
            contract=to_snake_case(contract),
            source_node=node,
            directives=directives_within(node, self.directives)
        )

    def parse_test(self, node: ast.FunctionDef, docs: Optional[List[str]] = None) -> TestDefinition:
        if node.args.args:
            logger.warning("Test %s takes parameters; they are dropped", node.name)
        translator = make_expression_translator(self.scope, self.builtins, self.options)
        body = translate_function_body(node, translator, self.directives, self.source)
        return TestDefinition(name=node.name, body=body, docs=docs)
