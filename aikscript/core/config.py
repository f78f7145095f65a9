"""
Type mappings and configuration constants
"""

import ast
import os
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

# Target-language type names
VOID = "Void"
DATA = "Data"
BOOL = "Bool"
OPTION = "Option"

DEFAULT_EXPECT_MESSAGE = "Expected value but found None"

# Operator mappings
BIN_OP_TO_AIKEN = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.Div: "/",
    ast.FloorDiv: "/",
    ast.Mod: "%"
}

CMP_OP_TO_AIKEN = {
    ast.Eq: "==",
    ast.NotEq: "!=",
    ast.Lt: "<",
    ast.LtE: "<=",
    ast.Gt: ">",
    ast.GtE: ">=",
    ast.Is: "==",
    ast.IsNot: "!="
}

# Binding strength of rendered operators, loosest first
PRECEDENCE_OR = 1
PRECEDENCE_AND = 2
PRECEDENCE_COMPARE = 3
PRECEDENCE_ADD = 4
PRECEDENCE_MULT = 5
PRECEDENCE_UNARY = 6
PRECEDENCE_ATOM = 7

BIN_OP_PRECEDENCE = {
    ast.Add: PRECEDENCE_ADD,
    ast.Sub: PRECEDENCE_ADD,
    ast.Mult: PRECEDENCE_MULT,
    ast.Div: PRECEDENCE_MULT,
    ast.FloorDiv: PRECEDENCE_MULT,
    ast.Mod: PRECEDENCE_MULT
}

# Type mappings
PY_TYPE_TO_AIKEN = {
    "str": "ByteArray",
    "bytes": "ByteArray",
    "bytearray": "ByteArray",
    "int": "Int",
    "float": "Int",
    "bool": "Bool",
    "Any": DATA,
    "object": DATA,
    "dict": "Dict",
    "Dict": "Dict",
    "Mapping": "Dict",
    "list": "List",
    "List": "List",
    "Sequence": "List",
    "Optional": OPTION
}

# Names that are already valid target types
AIKEN_TYPE_NAMES = {
    "Int",
    "Bool",
    "ByteArray",
    "String",
    DATA,
    VOID,
    "POSIXTime",
    "PubKeyHash",
    "ScriptHash",
    "VerificationKeyHash",
    "PolicyId",
    "AssetName",
    "Address",
    "ScriptContext",
    "Transaction",
    "OutputReference",
    "Credential",
    "Value"
}

# Source annotations that map onto List<T>
LIST_TYPE_NAMES = {"list", "List", "Sequence"}

# Source annotations that map onto (A, B)
TUPLE_TYPE_NAMES = {"tuple", "Tuple"}

# Modules of the source language itself, never emitted as `use` lines
IGNORED_IMPORT_MODULES = {
    "aikscript",
    "typing",
    "typing_extensions",
    "__future__",
    "dataclasses",
    "enum"
}

# Decorator names recognised on declarations
CONTRACT_DECORATOR = "contract"
VALIDATOR_DECORATOR = "validator"
OPAQUE_DECORATOR = "opaque"
TEST_DECORATOR = "test"
DATUM_MARKER = "datum"

# Validator calling conventions: purpose -> (leading params, trailing params)
# Trailing params are appended in order while the list is shorter than their position.
PURPOSE_TRAILING_PARAMS: Dict[str, Tuple[int, List[Tuple[str, str]]]] = {
    "spend": (2, [("output_reference", "OutputReference"), ("transaction", "Transaction")]),
    "mint": (1, [("policy_id", "PolicyId"), ("transaction", "Transaction")]),
    "withdraw": (1, [("credential", "Credential"), ("transaction", "Transaction")])
}

# Attribute on a validator parameter that a local alias may be inlined from
TRANSACTION_ATTRIBUTE = "transaction"

# Aiken stdlib version pins used when scaffolding projects
AIKEN_COMPILER_VERSION = "v1.1.19"
PLUTUS_VERSION = "v3"
STDLIB_VERSION = "v2.2.0"


@dataclass
class TranspilerOptions:
    """Rendering options shared by the generators"""
    indent: int = 2
    emit_docs: bool = True
    expect_message: str = DEFAULT_EXPECT_MESSAGE


@dataclass
class ProjectSettings:
    """Version pins written into scaffolded projects"""
    compiler: str = AIKEN_COMPILER_VERSION
    plutus: str = PLUTUS_VERSION
    stdlib: str = STDLIB_VERSION
    license: str = "Apache-2.0"
    extra_dependencies: List[Dict[str, str]] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "ProjectSettings":
        """Build settings, letting AIKSCRIPT_* environment variables override the pins"""
        return cls(
            compiler=os.environ.get("AIKSCRIPT_COMPILER", AIKEN_COMPILER_VERSION),
            plutus=os.environ.get("AIKSCRIPT_PLUTUS", PLUTUS_VERSION),
            stdlib=os.environ.get("AIKSCRIPT_STDLIB", STDLIB_VERSION),
            license=os.environ.get("AIKSCRIPT_LICENSE", "Apache-2.0")
        )
