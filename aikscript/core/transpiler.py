"""
Main transpilation pipeline
"""

import logging
from typing import Optional

from .builtins import BuiltinRegistry
from .config import TranspilerOptions
from .models import TranspilerAST
from .transformer import AikenTransformer
from ..generators.module import CodeGenerator
from ..parser import SourceParser

logger = logging.getLogger(__name__)


class Transpiler:
    """
    Source Parser -> Transformer -> Code Generator.

    Each instance owns its builtin registry, so separate instances can be
    used from separate threads. A single instance is not reentrant.
    """

    def __init__(self, options: Optional[TranspilerOptions] = None):
        self.options = options or TranspilerOptions()
        self.builtins = BuiltinRegistry()

    def parse(self, source: str, module_name: Optional[str] = None,
              filename: str = "<source>") -> TranspilerAST:
        parser = SourceParser(builtins=self.builtins, options=self.options)
        return parser.parse(source, module_name=module_name, filename=filename)

    def transform(self, module: TranspilerAST) -> TranspilerAST:
        return AikenTransformer(builtins=self.builtins, options=self.options).transform(module)

    def generate(self, module: TranspilerAST) -> str:
        return CodeGenerator(builtins=self.builtins, options=self.options).generate(module)

    def transpile(self, source: str, module_name: Optional[str] = None,
                  filename: str = "<source>") -> str:
        """
        Transpile one Python module to Aiken.

        Args:
            source: Python source code
            module_name: Optional name recorded on the AST
            filename: Name used in parse error messages

        Returns:
            Aiken module text, ending with a single newline

        Raises:
            SourceParseError: If the source is not valid Python
        """
        self.builtins.reset()
        parsed = self.parse(source, module_name=module_name, filename=filename)
        transformed = self.transform(parsed)
        logger.debug("Transpiled %s: %d types, %d constants, %d functions, %d tests",
                     transformed.module_name, len(transformed.types), len(transformed.constants),
                     len(transformed.functions), len(transformed.tests))
        return self.generate(transformed)

    def transpile_file(self, file_path: str) -> str:
        """
        Read and transpile a Python file.

        Raises:
            SourceParseError: If the file cannot be read or is not valid Python
        """
        self.builtins.reset()
        parser = SourceParser(builtins=self.builtins, options=self.options)
        transformed = self.transform(parser.parse_file(file_path))
        return self.generate(transformed)


def transpile(source: str, module_name: Optional[str] = None) -> str:
    """Transpile Python source to Aiken with default options"""
    return Transpiler().transpile(source, module_name=module_name)
