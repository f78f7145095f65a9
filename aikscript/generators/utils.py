"""
Text helpers shared by the generators
"""

import textwrap
from typing import List, Optional


def indent_block(text: str, spaces: int = 2) -> str:
    """Indent a block of text"""
    return textwrap.indent(text, " " * spaces)


def doc_lines(docs: Optional[List[str]], marker: str = "///") -> List[str]:
    """Render documentation lines behind a comment marker"""
    if not docs:
        return []
    return [f"{marker} {line}".rstrip() for line in docs]


def generic_params(type_params: Optional[List[str]]) -> str:
    if not type_params:
        return ""
    return f"<{', '.join(type_params)}>"
