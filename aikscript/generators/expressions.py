"""
Rendering of when, pipe and expect records and of patterns
"""

import json
from typing import Optional

from ..core.config import DEFAULT_EXPECT_MESSAGE
from ..core.models import (
    ExpectExpression,
    Pattern,
    PatternKind,
    PipeExpression,
    WhenClause,
    WhenExpression,
)
from .utils import indent_block

# Built-in option/result constructors render with fixed binders
FIXED_CONSTRUCTOR_PATTERNS = {
    "Ok": "Ok(value)",
    "Error": "Error(error)",
    "Some": "Some(value)",
    "None": "None"
}


def generate_pattern(pattern: Pattern) -> str:
    kind = pattern.kind

    if kind == PatternKind.WILDCARD:
        return "_"

    if kind == PatternKind.LITERAL:
        return pattern.value or "_"

    if kind == PatternKind.VARIABLE:
        return pattern.name or "_"

    if kind == PatternKind.CONSTRUCTOR:
        name = pattern.constructor or "_"
        if name in FIXED_CONSTRUCTOR_PATTERNS:
            return FIXED_CONSTRUCTOR_PATTERNS[name]
        if pattern.fields:
            fields = ", ".join(f"{label}: {generate_pattern(p)}" for label, p in pattern.fields.items())
            return f"{name} {{ {fields} }}"
        if pattern.args:
            return f"{name}({', '.join(generate_pattern(arg) for arg in pattern.args)})"
        return name

    if kind == PatternKind.TUPLE:
        return f"({', '.join(generate_pattern(arg) for arg in pattern.args)})"

    # List
    return f"[{', '.join(generate_pattern(arg) for arg in pattern.args)}]"


def generate_when_clause(clause: WhenClause, indent: int = 2) -> str:
    head = generate_pattern(clause.pattern)
    if clause.guard:
        head += f" if {clause.guard}"

    body = clause.body or "todo"
    if "\n" in body:
        return f"{head} => {{\n{indent_block(body, indent)}\n}}"
    return f"{head} => {body}"


def generate_when(when: WhenExpression, indent: int = 2) -> str:
    """
    Render a when expression.

    Example:
        when n {
          _ if n == 0 => "zero",
          _ => "negative",
        }
    """
    clauses = [generate_when_clause(clause, indent) + "," for clause in when.clauses]
    body = indent_block("\n".join(clauses), indent)
    return f"when {when.expression} {{\n{body}\n}}"


def generate_pipe(pipe: PipeExpression) -> str:
    """Left-fold the operations, each wrapping the result so far as its first argument"""
    result = pipe.initial_value
    for operation in pipe.operations:
        args = [result] + list(operation.args)
        result = f"{operation.function_name}({', '.join(args)})"
    return result


def generate_expect(expect: ExpectExpression, default_message: Optional[str] = None) -> str:
    message = expect.error_message or default_message or DEFAULT_EXPECT_MESSAGE
    return f"expect({expect.expression}, {json.dumps(message)})"
