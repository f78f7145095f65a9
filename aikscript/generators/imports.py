"""
Aiken `use` line generation
"""

from ..core.models import ImportDeclaration


def generate_import(declaration: ImportDeclaration) -> str:
    """use cardano/transaction.{Transaction} as tx"""
    line = f"use {declaration.module}"
    if declaration.exposing:
        line += f".{{{', '.join(declaration.exposing)}}}"
    if declaration.alias:
        line += f" as {declaration.alias}"
    return line
