"""
Aiken function and validator block generation
"""

from collections import OrderedDict
from typing import List, Optional

from ..core.config import TranspilerOptions
from ..core.models import FunctionDefinition, ParameterDefinition
from .utils import doc_lines, generic_params, indent_block


def format_parameters(parameters: List[ParameterDefinition]) -> str:
    parts = []
    for param in parameters:
        if param.type:
            parts.append(f"{param.name}: {param.type}")
        else:
            parts.append(param.name)
    return ", ".join(parts)


def _block(header: str, body: str, indent: int) -> str:
    return f"{header} {{\n{indent_block(body or 'todo', indent)}\n}}"


def generate_function(function: FunctionDefinition, options: Optional[TranspilerOptions] = None) -> str:
    """
    Render a module function.

    Example:
        pub fn add(a: Int, b: Int) -> Int {
          a + b
        }
    """
    options = options or TranspilerOptions()
    lines = doc_lines(function.docs) if options.emit_docs else []
    prefix = "pub " if function.is_public else ""
    header = (f"{prefix}fn {function.name}{generic_params(function.type_params)}"
              f"({format_parameters(function.parameters)})")
    if function.return_type:
        header += f" -> {function.return_type}"
    lines.append(_block(header, function.body, options.indent))
    return "\n".join(lines)


def generate_handler(handler: FunctionDefinition, options: Optional[TranspilerOptions] = None) -> str:
    """One purpose handler inside a validator block"""
    options = options or TranspilerOptions()
    lines = doc_lines(handler.docs) if options.emit_docs else []
    purpose = handler.purpose_name or handler.purpose.value
    if purpose == "else":
        header = "else(_)"
    else:
        header = f"{purpose}({format_parameters(handler.parameters)})"
    lines.append(_block(header, handler.body, options.indent))
    return "\n".join(lines)


def generate_validators(handlers: List[FunctionDefinition],
                        options: Optional[TranspilerOptions] = None) -> List[str]:
    """
    Group handlers into one validator block per contract.

    Example:
        validator hello_world {
          spend(datum: Option<Datum>, redeemer: Data, ...) {
            True
          }
        }
    """
    options = options or TranspilerOptions()
    contracts = OrderedDict()
    for handler in handlers:
        contracts.setdefault(handler.contract or handler.name, []).append(handler)

    blocks = []
    for contract, members in contracts.items():
        body = "\n\n".join(generate_handler(handler, options) for handler in members)
        blocks.append(f"validator {contract} {{\n{indent_block(body, options.indent)}\n}}")
    return blocks
