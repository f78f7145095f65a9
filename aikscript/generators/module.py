"""
Whole-module Aiken generation
"""

from typing import List, Optional

from ..core.builtins import BuiltinRegistry
from ..core.config import TranspilerOptions
from ..core.models import TranspilerAST
from .constants import generate_constant
from .functions import generate_function, generate_validators
from .imports import generate_import
from .tests import generate_test
from .types import generate_type
from .utils import doc_lines


class CodeGenerator:
    """
    Renders a transformed TranspilerAST as one Aiken module.

    Sections, in order: module docs, `use` lines, types, constants,
    functions, validators and tests, separated by blank lines.
    """

    def __init__(self,
                 builtins: Optional[BuiltinRegistry] = None,
                 options: Optional[TranspilerOptions] = None):
        self.builtins = builtins
        self.options = options or TranspilerOptions()

    def generate(self, module: TranspilerAST) -> str:
        sections: List[str] = []

        if self.options.emit_docs and module.docs:
            sections.append("\n".join(doc_lines(module.docs, "////")))

        uses = []
        if self.builtins is not None:
            builtin_line = self.builtins.import_line()
            if builtin_line:
                uses.append(builtin_line)
        uses.extend(generate_import(declaration) for declaration in module.imports)
        if uses:
            sections.append("\n".join(uses))

        sections.extend(generate_type(type_def, self.options) for type_def in module.types)
        sections.extend(generate_constant(constant, self.options) for constant in module.constants)
        sections.extend(
            generate_function(function, self.options)
            for function in module.functions if not function.is_validator
        )
        sections.extend(generate_validators(module.validators, self.options))
        sections.extend(generate_test(test, self.options) for test in module.tests)

        return "\n\n".join(section for section in sections if section) + "\n"
