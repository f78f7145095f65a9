"""
Validator handler canonicalization
"""

import logging
from dataclasses import replace
from typing import List, Optional

from ..core.builtins import BuiltinRegistry
from ..core.config import BOOL, DATA, PURPOSE_TRAILING_PARAMS, VOID, TranspilerOptions
from ..core.models import (
    FunctionDefinition,
    ModuleScope,
    ParameterDefinition,
    ValidatorPurpose,
)
from .expressions import make_expression_translator
from .statements import translate_function_body
from .types import wrap_in_option

logger = logging.getLogger(__name__)


def _untyped(param: ParameterDefinition) -> bool:
    return param.type is None or param.type == VOID


def canonicalize_parameters(parameters: List[ParameterDefinition],
                            purpose: ValidatorPurpose) -> List[ParameterDefinition]:
    """
    Rewrite a handler's parameters to its purpose's calling convention.

    Each rule only fires when its shape is missing, so canonical lists come
    back unchanged. The input list is never modified.

    Example (spend):
        (datum: Pool, redeemer) ->
        (datum: Option<Pool>, redeemer: Data,
         output_reference: OutputReference, transaction: Transaction)
    """
    if purpose == ValidatorPurpose.PUBLISH:
        return []

    params = [replace(param) for param in parameters]
    rule = PURPOSE_TRAILING_PARAMS.get(purpose.value)

    if purpose in (ValidatorPurpose.MINT, ValidatorPurpose.WITHDRAW):
        if params and params[0].name == "redeemer" and _untyped(params[0]):
            params[0].type = DATA
    else:
        if params and params[0].name == "datum":
            params[0].type = wrap_in_option(params[0].type or VOID)
        if len(params) >= 2 and params[1].name == "redeemer" and _untyped(params[1]):
            params[1].type = DATA

    if rule is not None:
        leading, trailing = rule
        for offset, (name, type_name) in enumerate(trailing):
            if len(params) < leading + offset + 1:
                params.append(ParameterDefinition(name, type_name))

    return params


class ValidatorTransformer:
    """Turns a parsed validator handler into its canonical Aiken form"""

    def __init__(self,
                 scope: Optional[ModuleScope] = None,
                 builtins: Optional[BuiltinRegistry] = None,
                 options: Optional[TranspilerOptions] = None,
                 source: Optional[str] = None):
        self.scope = scope or ModuleScope()
        self.builtins = builtins
        self.options = options or TranspilerOptions()
        self.source = source

    def transform(self, function: FunctionDefinition) -> FunctionDefinition:
        purpose = function.purpose or ValidatorPurpose.OTHER
        parameters = canonicalize_parameters(function.parameters, purpose)
        changes = {
            "parameters": parameters,
            "return_type": function.return_type or BOOL,
        }

        node = function.source_node
        if node is None:
            logger.debug("Validator %s has no source node, keeping its body", function.name)
            return replace(function, **changes)

        # Both source and canonical names may front a `.transaction` alias
        alias_roots = {param.name for param in function.parameters}
        alias_roots.update(param.name for param in parameters)

        translator = make_expression_translator(self.scope, self.builtins, self.options)
        changes["body"] = translate_function_body(
            node, translator, function.directives, self.source, alias_roots
        )
        changes["when_expressions"] = translator.when_expressions
        changes["pipe_expressions"] = translator.pipe_expressions
        changes["expect_expressions"] = translator.expect_expressions
        return replace(function, **changes)
