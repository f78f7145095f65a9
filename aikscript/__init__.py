"""
AikScript: annotated Python to Aiken transpiler
"""

from .core.errors import ManifestUpdateError, SourceParseError, TranspileError
from .core.models import TranspilerAST, ValidatorPurpose
from .core.transpiler import Transpiler, transpile
from .decorators import contract, datum, expect, opaque, pipe, test, validator

__version__ = "0.1.0"
__all__ = [
    "transpile",
    "Transpiler",
    "TranspilerAST",
    "ValidatorPurpose",
    "TranspileError",
    "SourceParseError",
    "ManifestUpdateError",
    "contract",
    "validator",
    "datum",
    "opaque",
    "test",
    "pipe",
    "expect"
]
