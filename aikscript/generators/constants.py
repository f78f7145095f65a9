"""
Aiken constant generation
"""

from typing import Optional

from ..core.config import TranspilerOptions
from ..core.models import ConstantDefinition
from .utils import doc_lines


def generate_constant(constant: ConstantDefinition, options: Optional[TranspilerOptions] = None) -> str:
    options = options or TranspilerOptions()
    lines = doc_lines(constant.docs) if options.emit_docs else []
    prefix = "pub " if constant.is_public else ""
    annotation = f": {constant.type_annotation}" if constant.type_annotation else ""
    lines.append(f"{prefix}const {constant.name}{annotation} = {constant.value}")
    return "\n".join(lines)
