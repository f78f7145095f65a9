"""
Aiken type declaration generation
"""

from typing import List, Optional

from ..core.config import TranspilerOptions
from ..core.models import TargetKind, TargetType, TypeDefinition
from ..translators.naming import is_constructor_name
from .utils import doc_lines, generic_params, indent_block


def is_block_definition(type_def: TypeDefinition) -> bool:
    """Braces or bars in the definition text make a block; anything else is an alias"""
    return "{" in type_def.definition or "|" in type_def.definition


def split_top_level(text: str, separator: str) -> List[str]:
    """Split on `separator` outside of <>, (), {} and [] nesting"""
    parts, depth, current = [], 0, []
    i = 0
    while i < len(text):
        char = text[i]
        if char in "<({[":
            depth += 1
        elif char in ">)}]":
            depth -= 1
        if depth == 0 and text.startswith(separator, i):
            parts.append("".join(current).strip())
            current = []
            i += len(separator)
            continue
        current.append(char)
        i += 1
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def _variant(member: TargetType) -> str:
    """One constructor line of a union block"""
    if member.kind == TargetKind.RECORD and len(member.fields) == 1:
        label, value = member.fields[0]
        if is_constructor_name(label):
            # { Ok: T } -> Ok(T); { None: {} } -> None
            if value.kind == TargetKind.VOID or (value.kind == TargetKind.RECORD and not value.fields):
                return label
            return f"{label}({value.render()})"
    return member.render()


def _block_lines(type_def: TypeDefinition) -> List[str]:
    target = type_def.target
    if target is not None and target.kind == TargetKind.RECORD:
        return [f"{name}: {value.render()}," for name, value in target.fields]
    if target is not None and target.kind == TargetKind.UNION:
        return [_variant(member) for member in target.args]

    definition = type_def.definition.strip()
    if definition.startswith("{") and definition.endswith("}"):
        return [f"{field}," for field in split_top_level(definition[1:-1], ",")]
    return split_top_level(definition, "|")


def generate_type(type_def: TypeDefinition, options: Optional[TranspilerOptions] = None) -> str:
    """
    Render a type declaration.

    Examples:
        pub type Lovelace = Int

        pub type Datum {
          owner: PubKeyHash,
          deadline: Int,
        }
    """
    options = options or TranspilerOptions()
    lines = doc_lines(type_def.docs) if options.emit_docs else []

    if type_def.is_opaque:
        keyword = "pub opaque type"
    elif type_def.is_public:
        keyword = "pub type"
    else:
        keyword = "type"
    header = f"{keyword} {type_def.name}{generic_params(type_def.type_params)}"

    if not is_block_definition(type_def):
        lines.append(f"{header} = {type_def.definition}")
        return "\n".join(lines)

    body = "\n".join(_block_lines(type_def))
    lines.append(f"{header} {{")
    if body:
        lines.append(indent_block(body, options.indent))
    lines.append("}")
    return "\n".join(lines)
