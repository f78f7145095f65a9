"""
Transform stage: parsed AST to Aiken-ready AST
"""

import logging
from dataclasses import replace
from typing import Optional

from .builtins import BuiltinRegistry
from .config import TranspilerOptions
from .models import TranspilerAST
from ..translators.validators import ValidatorTransformer

logger = logging.getLogger(__name__)


class AikenTransformer:
    """
    Produces a new TranspilerAST with every validator handler canonicalized.

    The input AST is left untouched.
    """

    def __init__(self,
                 builtins: Optional[BuiltinRegistry] = None,
                 options: Optional[TranspilerOptions] = None):
        self.builtins = builtins
        self.options = options or TranspilerOptions()

    def transform(self, module: TranspilerAST) -> TranspilerAST:
        validators = ValidatorTransformer(
            scope=module.scope,
            builtins=self.builtins,
            options=self.options,
            source=module.source
        )

        functions = []
        for function in module.functions:
            if function.is_validator:
                logger.debug("Canonicalizing %s.%s", function.contract, function.purpose_name)
                functions.append(validators.transform(function))
            else:
                functions.append(function)

        return replace(
            module,
            imports=list(module.imports),
            types=list(module.types),
            constants=list(module.constants),
            functions=functions,
            tests=list(module.tests)
        )
