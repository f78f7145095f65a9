"""
Aiken test generation
"""

from typing import Optional

from ..core.config import TranspilerOptions
from ..core.models import TestDefinition
from .utils import doc_lines, indent_block


def generate_test(test: TestDefinition, options: Optional[TranspilerOptions] = None) -> str:
    options = options or TranspilerOptions()
    lines = doc_lines(test.docs) if options.emit_docs else []
    body = test.body or "True"
    lines.append(f"test {test.name}() {{\n{indent_block(body, options.indent)}\n}}")
    return "\n".join(lines)
