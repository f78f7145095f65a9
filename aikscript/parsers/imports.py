"""
Import statement parsing
"""

import ast
import logging
from typing import List, Optional

from ..core.config import IGNORED_IMPORT_MODULES
from ..core.models import ImportDeclaration

logger = logging.getLogger(__name__)


def module_path(dotted: str) -> str:
    """cardano.transaction -> cardano/transaction"""
    return dotted.replace(".", "/")


def is_ignored_module(dotted: Optional[str]) -> bool:
    if not dotted:
        return True
    return dotted.split(".")[0] in IGNORED_IMPORT_MODULES


class ImportParser:
    """
    Turns Python imports into Aiken `use` declarations.

        import aiken.collection.list           -> use aiken/collection/list
        import cardano.assets as assets        -> use cardano/assets as assets
        from cardano.transaction import Transaction, OutputReference
            -> use cardano/transaction.{Transaction, OutputReference}
    """

    def parse_import(self, node: ast.Import) -> List[ImportDeclaration]:
        declarations = []
        for alias in node.names:
            if is_ignored_module(alias.name):
                continue
            declarations.append(ImportDeclaration(module=module_path(alias.name), alias=alias.asname))
        return declarations

    def parse_import_from(self, node: ast.ImportFrom) -> Optional[ImportDeclaration]:
        if node.level:
            logger.warning("Relative import on line %d is not supported", node.lineno)
            return None
        if is_ignored_module(node.module):
            return None

        exposing = []
        for alias in node.names:
            if alias.name == "*":
                logger.warning("Wildcard import from %s is not supported", node.module)
                continue
            if alias.asname and alias.asname != alias.name:
                logger.warning("Renamed import %s as %s keeps its original name", alias.name, alias.asname)
            exposing.append(alias.name)

        if not exposing:
            return ImportDeclaration(module=module_path(node.module))
        return ImportDeclaration(module=module_path(node.module), exposing=exposing)
