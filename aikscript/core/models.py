"""
Data models for the transpiler AST
"""

import ast
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple


class ValidatorPurpose(str, Enum):
    """Script purposes a validator handler can serve"""
    SPEND = "spend"
    MINT = "mint"
    WITHDRAW = "withdraw"
    PUBLISH = "publish"
    VOTE = "vote"
    PROPOSE = "propose"
    OTHER = "other"

    @classmethod
    def parse(cls, name: str) -> "ValidatorPurpose":
        for member in cls:
            if member.value == name:
                return member
        return cls.OTHER


class DeclarationRole(str, Enum):
    """Role a decorator or marker gives a declaration"""
    CONTRACT = "contract"
    DATUM = "datum"
    VALIDATOR = "validator"
    OPAQUE = "opaque"
    TEST = "test"


@dataclass
class Annotation:
    role: DeclarationRole
    purpose: Optional[str] = None
    argument: Optional[str] = None
    doc: Optional[List[str]] = None


class TargetKind(str, Enum):
    """Shapes a mapped target type can take"""
    PRIMITIVE = "primitive"
    APPLICATION = "application"
    RECORD = "record"
    UNION = "union"
    LIST = "list"
    TUPLE = "tuple"
    LITERAL = "literal"
    VOID = "void"


@dataclass(frozen=True)
class TargetType:
    """Immutable target type decided once during parsing"""
    kind: TargetKind
    name: str = ""
    args: Tuple["TargetType", ...] = ()
    fields: Tuple[Tuple[str, "TargetType"], ...] = ()

    def render(self) -> str:
        if self.kind == TargetKind.VOID:
            return "Void"
        if self.kind in (TargetKind.PRIMITIVE, TargetKind.LITERAL):
            return self.name
        if self.kind == TargetKind.LIST:
            return f"List<{self.args[0].render()}>"
        if self.kind == TargetKind.APPLICATION:
            args = ", ".join(arg.render() for arg in self.args)
            return f"{self.name}<{args}>"
        if self.kind == TargetKind.TUPLE:
            return "(" + ", ".join(arg.render() for arg in self.args) + ")"
        if self.kind == TargetKind.UNION:
            return " | ".join(arg.render() for arg in self.args)
        # Record
        body = ", ".join(f"{name}: {value.render()}" for name, value in self.fields)
        return f"{{ {body} }}" if body else "{}"


class PatternKind(str, Enum):
    WILDCARD = "wildcard"
    LITERAL = "literal"
    VARIABLE = "variable"
    CONSTRUCTOR = "constructor"
    TUPLE = "tuple"
    LIST = "list"


@dataclass
class Pattern:
    """A `when` clause pattern"""
    kind: PatternKind
    value: Optional[str] = None
    name: Optional[str] = None
    constructor: Optional[str] = None
    args: List["Pattern"] = field(default_factory=list)
    fields: Dict[str, "Pattern"] = field(default_factory=dict)


@dataclass
class WhenClause:
    pattern: Pattern
    body: str
    guard: Optional[str] = None


@dataclass
class WhenExpression:
    """Ordered pattern dispatch, first matching clause wins"""
    expression: str
    clauses: List[WhenClause]


@dataclass
class PipeOperation:
    function_name: str
    args: List[str] = field(default_factory=list)


@dataclass
class PipeExpression:
    """Left-to-right composition chain"""
    initial_value: str
    operations: List[PipeOperation]


@dataclass
class ExpectExpression:
    """Unwrap of a present variant, failing with a message"""
    expression: str
    error_message: Optional[str] = None


@dataclass
class Directive:
    """A `# @when`, `# @pipe` or `# @expect` comment bound to the code line after it"""
    kind: str
    text: str
    line: int


@dataclass
class ImportDeclaration:
    module: str
    alias: Optional[str] = None
    exposing: Optional[List[str]] = None


@dataclass
class TypeDefinition:
    name: str
    definition: str
    type_params: Optional[List[str]] = None
    is_opaque: bool = False
    is_public: bool = False
    docs: Optional[List[str]] = None
    target: Optional[TargetType] = field(default=None, compare=False)


@dataclass
class ConstantDefinition:
    name: str
    value: str
    type_annotation: Optional[str] = None
    is_public: bool = False
    docs: Optional[List[str]] = None


@dataclass
class ParameterDefinition:
    name: str
    type: Optional[str] = None


@dataclass
class FunctionDefinition:
    """A function, or one handler of a validator block"""
    name: str
    parameters: List[ParameterDefinition]
    body: str = ""
    return_type: Optional[str] = None
    type_params: Optional[List[str]] = None
    is_public: bool = False
    docs: Optional[List[str]] = None
    when_expressions: List[WhenExpression] = field(default_factory=list)
    pipe_expressions: List[PipeExpression] = field(default_factory=list)
    expect_expressions: List[ExpectExpression] = field(default_factory=list)
    purpose: Optional[ValidatorPurpose] = None
    purpose_name: Optional[str] = None
    contract: Optional[str] = None
    source_node: Optional[ast.FunctionDef] = field(default=None, compare=False, repr=False)
    directives: Dict[int, List[Directive]] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_validator(self) -> bool:
        return self.purpose is not None


@dataclass
class TestDefinition:
    __test__ = False

    name: str
    body: str
    docs: Optional[List[str]] = None


@dataclass
class ModuleScope:
    """Module-level names that expressions resolve against"""
    known_functions: Set[str] = field(default_factory=set)
    constants: Set[str] = field(default_factory=set)
    enums: Dict[str, Set[str]] = field(default_factory=dict)


@dataclass
class TranspilerAST:
    """Everything parsed from one source module, in emission order"""
    module_name: str
    imports: List[ImportDeclaration] = field(default_factory=list)
    types: List[TypeDefinition] = field(default_factory=list)
    constants: List[ConstantDefinition] = field(default_factory=list)
    functions: List[FunctionDefinition] = field(default_factory=list)
    tests: List[TestDefinition] = field(default_factory=list)
    docs: Optional[List[str]] = None
    scope: ModuleScope = field(default_factory=ModuleScope, compare=False, repr=False)
    source: Optional[str] = field(default=None, compare=False, repr=False)

    @property
    def validators(self) -> List[FunctionDefinition]:
        return [f for f in self.functions if f.is_validator]
