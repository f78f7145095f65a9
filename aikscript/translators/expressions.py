"""
Python AST expression translation to Aiken
"""

import ast
import json
import logging
from typing import Dict, List, Optional, Set

from ..core.builtins import BuiltinRegistry
from ..core.config import (
    BIN_OP_PRECEDENCE,
    BIN_OP_TO_AIKEN,
    CMP_OP_TO_AIKEN,
    PRECEDENCE_AND,
    PRECEDENCE_ATOM,
    PRECEDENCE_COMPARE,
    PRECEDENCE_OR,
    PRECEDENCE_UNARY,
    TranspilerOptions,
)
from ..core.models import (
    ExpectExpression,
    ModuleScope,
    PipeExpression,
    PipeOperation,
    WhenExpression,
)
from ..generators.expressions import generate_expect, generate_pipe
from .naming import constant_name, is_constructor_name, to_constructor_name

logger = logging.getLogger(__name__)


class ExpressionTranslator(ast.NodeVisitor):
    """
    Translates Python expressions to Aiken syntax.

    Unsupported expressions are logged and translated to empty text. Every
    pipe and expect built along the way is recorded so the caller can attach
    it to the enclosing function.
    """

    def __init__(self,
                 known_functions: Optional[Set[str]] = None,
                 constants: Optional[Set[str]] = None,
                 enums: Optional[Dict[str, Set[str]]] = None,
                 builtins: Optional[BuiltinRegistry] = None,
                 aliases: Optional[Dict[str, str]] = None,
                 options: Optional[TranspilerOptions] = None):
        self.known_functions = known_functions or set()
        self.constants = constants or set()
        self.enums = enums or {}
        self.builtins = builtins
        self.aliases = aliases if aliases is not None else {}
        self.options = options or TranspilerOptions()
        self.when_expressions: List[WhenExpression] = []
        self.pipe_expressions: List[PipeExpression] = []
        self.expect_expressions: List[ExpectExpression] = []

    def translate(self, node: ast.AST) -> str:
        return self.visit(node)

    # ------------------------------------------------------------------
    # Precedence
    # ------------------------------------------------------------------

    def precedence(self, node: ast.AST) -> int:
        if isinstance(node, ast.BoolOp):
            return PRECEDENCE_OR if isinstance(node.op, ast.Or) else PRECEDENCE_AND
        if isinstance(node, ast.Compare):
            if len(node.ops) > 1:
                return PRECEDENCE_AND
            if isinstance(node.ops[0], ast.In):
                return PRECEDENCE_ATOM
            if isinstance(node.ops[0], ast.NotIn):
                return PRECEDENCE_UNARY
            return PRECEDENCE_COMPARE
        if isinstance(node, ast.BinOp):
            return BIN_OP_PRECEDENCE.get(type(node.op), PRECEDENCE_ATOM)
        if isinstance(node, ast.UnaryOp):
            if isinstance(node.op, ast.UAdd):
                return self.precedence(node.operand)
            return PRECEDENCE_UNARY
        if isinstance(node, (ast.IfExp, ast.Lambda)):
            return 0
        return PRECEDENCE_ATOM

    def operand(self, node: ast.AST, parent: int, strict: bool = False) -> str:
        """Translate `node`, parenthesized when it binds looser than its parent"""
        text = self.visit(node)
        own = self.precedence(node)
        if own < parent or (strict and own == parent):
            return f"({text})"
        return text

    # ------------------------------------------------------------------
    # Atoms
    # ------------------------------------------------------------------

    def visit_Name(self, node: ast.Name) -> str:
        if node.id in self.aliases:
            return self.aliases[node.id]
        if node.id in self.constants:
            return constant_name(node.id)
        return node.id

    def visit_Constant(self, node: ast.Constant) -> str:
        value = node.value
        if isinstance(value, bool):
            return "True" if value else "False"
        if value is None:
            return "None"
        if value is Ellipsis:
            return "todo"
        if isinstance(value, str):
            return json.dumps(value, ensure_ascii=False)
        if isinstance(value, bytes):
            return f'#"{value.hex()}"'
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            if not value.is_integer():
                logger.warning("Truncating non-integral number %r", value)
            return str(int(value))
        logger.warning("Unsupported constant: %r", value)
        return ""

    def visit_Attribute(self, node: ast.Attribute) -> str:
        if isinstance(node.value, ast.Name) and node.attr in self.enums.get(node.value.id, ()):
            return to_constructor_name(node.attr)
        if isinstance(node.value, ast.Name) and node.value.id == "self" and "self" not in self.aliases:
            # Contract helper methods are emitted as module functions
            return node.attr
        return f"{self.operand(node.value, PRECEDENCE_ATOM)}.{node.attr}"

    def visit_Subscript(self, node: ast.Subscript) -> str:
        if isinstance(node.slice, ast.Slice):
            logger.warning("Slices are not supported")
            return ""
        return f"{self.operand(node.value, PRECEDENCE_ATOM)}[{self.visit(node.slice)}]"

    def visit_List(self, node: ast.List) -> str:
        return f"[{', '.join(self.visit(elt) for elt in node.elts)}]"

    def visit_Tuple(self, node: ast.Tuple) -> str:
        return f"({', '.join(self.visit(elt) for elt in node.elts)})"

    def visit_Starred(self, node: ast.Starred) -> str:
        return f"..{self.visit(node.value)}"

    def visit_Dict(self, node: ast.Dict) -> str:
        fields = []
        for key, value in zip(node.keys, node.values):
            if key is None:
                fields.append(f"..{self.visit(value)}")
            elif isinstance(key, ast.Constant) and isinstance(key.value, str):
                fields.append(f"{key.value}: {self.visit(value)}")
            else:
                fields.append(f"{self.visit(key)}: {self.visit(value)}")
        if not fields:
            return "{}"
        return f"{{ {', '.join(fields)} }}"

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def visit_UnaryOp(self, node: ast.UnaryOp) -> str:
        if isinstance(node.op, ast.UAdd):
            return self.visit(node.operand)
        operand = self.operand(node.operand, PRECEDENCE_UNARY)
        if isinstance(node.op, ast.USub):
            return f"-{operand}"
        if isinstance(node.op, ast.Not):
            return f"!{operand}"
        logger.warning("Unsupported unary operator: %s", type(node.op).__name__)
        return ""

    def visit_BinOp(self, node: ast.BinOp) -> str:
        op = BIN_OP_TO_AIKEN.get(type(node.op))
        if not op:
            logger.warning("Unsupported binary operator: %s", type(node.op).__name__)
            return ""
        own = BIN_OP_PRECEDENCE[type(node.op)]
        left = self.operand(node.left, own)
        right = self.operand(node.right, own, strict=True)
        return f"{left} {op} {right}"

    def visit_BoolOp(self, node: ast.BoolOp) -> str:
        if isinstance(node.op, ast.And):
            op, own = "&&", PRECEDENCE_AND
        else:
            op, own = "||", PRECEDENCE_OR
        return f" {op} ".join(self.operand(value, own) for value in node.values)

    def visit_Compare(self, node: ast.Compare) -> str:
        parts = []
        left = node.left
        for op, right in zip(node.ops, node.comparators):
            parts.append(self._comparison(left, op, right))
            left = right
        return " && ".join(parts)

    def _comparison(self, left: ast.AST, op: ast.cmpop, right: ast.AST) -> str:
        if isinstance(op, (ast.In, ast.NotIn)):
            text = f"list.has({self.visit(right)}, {self.visit(left)})"
            return text if isinstance(op, ast.In) else f"!{text}"

        symbol = CMP_OP_TO_AIKEN.get(type(op))
        if not symbol:
            logger.warning("Unsupported comparison: %s", type(op).__name__)
            return ""
        lhs = self.operand(left, PRECEDENCE_COMPARE, strict=True)
        rhs = self.operand(right, PRECEDENCE_COMPARE, strict=True)
        return f"{lhs} {symbol} {rhs}"

    def visit_IfExp(self, node: ast.IfExp) -> str:
        test = self.visit(node.test)
        body = self.visit(node.body)
        orelse = self.visit(node.orelse)
        return f"if {test} {{ {body} }} else {{ {orelse} }}"

    # ------------------------------------------------------------------
    # Calls and functions
    # ------------------------------------------------------------------

    def function_name(self, node: ast.AST) -> str:
        """Callee text, resolving builtins the module does not shadow"""
        if (isinstance(node, ast.Name)
                and self.builtins is not None
                and node.id not in self.known_functions
                and node.id not in self.aliases
                and self.builtins.is_builtin(node.id)):
            return self.builtins.resolve(node.id)
        return self.operand(node, PRECEDENCE_ATOM)

    def visit_Call(self, node: ast.Call) -> str:
        callee = node.func
        if isinstance(callee, ast.Name) and callee.id not in self.known_functions:
            if callee.id == "pipe" and node.args:
                return self.translate_pipe(node)
            if callee.id == "expect" and node.args:
                return self.translate_expect(node)

        name = self.function_name(callee)
        short_name = name.rsplit(".", 1)[-1]

        if is_constructor_name(short_name) and node.keywords and not node.args:
            fields = []
            for keyword in node.keywords:
                if keyword.arg is None:
                    fields.append(f"..{self.visit(keyword.value)}")
                else:
                    fields.append(f"{keyword.arg}: {self.visit(keyword.value)}")
            return f"{name} {{ {', '.join(fields)} }}"

        return f"{name}({self._arguments(node)})"

    def _arguments(self, node: ast.Call) -> str:
        args = [self.visit(arg) for arg in node.args]
        for keyword in node.keywords:
            if keyword.arg is None:
                logger.warning("Keyword unpacking is not supported in calls")
                continue
            args.append(f"{keyword.arg}: {self.visit(keyword.value)}")
        return ", ".join(args)

    def translate_pipe(self, node: ast.Call) -> str:
        """pipe(value, f, g(a)) -> g(f(value), a)"""
        initial = self.visit(node.args[0])
        operations = [self.pipe_operation(step) for step in node.args[1:]]
        pipe = PipeExpression(initial_value=initial, operations=operations)
        self.pipe_expressions.append(pipe)
        return generate_pipe(pipe)

    def pipe_operation(self, node: ast.AST) -> PipeOperation:
        if isinstance(node, ast.Call):
            args = [self.visit(arg) for arg in node.args]
            args.extend(f"{kw.arg}: {self.visit(kw.value)}" for kw in node.keywords if kw.arg)
            return PipeOperation(self.function_name(node.func), args)
        return PipeOperation(self.function_name(node))

    def translate_expect(self, node: ast.Call) -> str:
        """expect(value, "message") -> expect(value, "message")"""
        message = None
        if len(node.args) > 1:
            message_node = node.args[1]
            if isinstance(message_node, ast.Constant) and isinstance(message_node.value, str):
                message = message_node.value
            else:
                logger.warning("expect() message must be a string literal, using the default")
        expect = ExpectExpression(expression=self.visit(node.args[0]), error_message=message)
        self.expect_expressions.append(expect)
        return generate_expect(expect, self.options.expect_message)

    def visit_Lambda(self, node: ast.Lambda) -> str:
        params = [arg.arg for arg in node.args.args]
        saved = self.aliases
        self.aliases = {name: text for name, text in saved.items() if name not in params}
        try:
            body = self.visit(node.body)
        finally:
            self.aliases = saved
        return f"fn({', '.join(params)}) {{ {body} }}"

    def visit_ListComp(self, node: ast.ListComp) -> str:
        """[f(x) for x in xs if p(x)] -> list.map(list.filter(xs, fn(x) { p(x) }), fn(x) { f(x) })"""
        if len(node.generators) != 1 or not isinstance(node.generators[0].target, ast.Name):
            logger.warning("Only single-target list comprehensions are supported")
            return ""
        generator = node.generators[0]
        target = generator.target.id
        source = self.visit(generator.iter)

        saved = self.aliases
        self.aliases = {name: text for name, text in saved.items() if name != target}
        try:
            for condition in generator.ifs:
                source = f"list.filter({source}, fn({target}) {{ {self.visit(condition)} }})"
            if isinstance(node.elt, ast.Name) and node.elt.id == target:
                return source
            return f"list.map({source}, fn({target}) {{ {self.visit(node.elt)} }})"
        finally:
            self.aliases = saved

    def generic_visit(self, node: ast.AST) -> str:
        logger.warning("Unsupported expression: %s", type(node).__name__)
        return ""


def make_expression_translator(scope: Optional[ModuleScope] = None,
                               builtins: Optional[BuiltinRegistry] = None,
                               options: Optional[TranspilerOptions] = None) -> ExpressionTranslator:
    """Fresh translator for one function body"""
    scope = scope or ModuleScope()
    return ExpressionTranslator(
        known_functions=set(scope.known_functions),
        constants=set(scope.constants),
        enums=dict(scope.enums),
        builtins=builtins,
        options=options
    )
