"""
Python statement translation to Aiken expression blocks
"""

import ast
import logging
from typing import Dict, List, Optional, Set

from ..core.config import TRANSACTION_ATTRIBUTE
from ..core.models import (
    Directive,
    ExpectExpression,
    Pattern,
    PatternKind,
    PipeExpression,
    WhenClause,
    WhenExpression,
)
from ..generators.expressions import generate_expect, generate_pipe, generate_when
from ..generators.utils import indent_block
from .expressions import ExpressionTranslator
from .patterns import PatternTranslator
from .types import transform_type_node

logger = logging.getLogger(__name__)

# Statements that only carry nested statement lists
_NESTED_BODY_FIELDS = ("body", "orelse", "handlers", "finalbody")


def _target_names(target: Optional[ast.AST]) -> List[str]:
    """Names bound by an assignment-like target"""
    if isinstance(target, ast.Name):
        return [target.id]
    if isinstance(target, (ast.Tuple, ast.List)):
        return [name for elt in target.elts for name in _target_names(elt)]
    if isinstance(target, ast.Starred):
        return _target_names(target.value)
    return []


def _loop_and_context_targets(stmt: ast.stmt) -> List[str]:
    """`for` targets and `with ... as` names; they end aliases like `=` does"""
    if isinstance(stmt, (ast.For, ast.AsyncFor)):
        return _target_names(stmt.target)
    if isinstance(stmt, (ast.With, ast.AsyncWith)):
        return [name for item in stmt.items for name in _target_names(item.optional_vars)]
    return []


def _walrus_targets(stmt: ast.stmt) -> List[str]:
    """Names bound by `:=` in the statement's own expressions, not its nested blocks"""
    names = []
    for field, value in ast.iter_fields(stmt):
        if field in _NESTED_BODY_FIELDS:
            continue
        for node in value if isinstance(value, list) else [value]:
            if not isinstance(node, ast.AST):
                continue
            for child in ast.walk(node):
                if isinstance(child, ast.NamedExpr) and isinstance(child.target, ast.Name):
                    names.append(child.target.id)
    return names


def parse_directive_expression(text: str) -> Optional[ast.expr]:
    try:
        return ast.parse(text.strip(), mode="eval").body
    except SyntaxError:
        logger.warning("Cannot parse directive expression: %r", text)
        return None


class StatementTranslator:
    """
    Translates Python statement lists to Aiken.

    Statements become lines of one Aiken block; the last line is the block's
    value, so `return` statements render as their bare expression.
    """

    def __init__(self,
                 expr_translator: ExpressionTranslator,
                 directives: Optional[Dict[int, List[Directive]]] = None,
                 source: Optional[str] = None,
                 alias_roots: Optional[Set[str]] = None):
        self.expr = expr_translator
        self.directives = directives or {}
        self.patterns = PatternTranslator(expr_translator, source)
        self.alias_roots = alias_roots or set()
        self.indent = expr_translator.options.indent

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def translate(self, statements: List[ast.stmt]) -> str:
        """Translate a statement list in the current alias scope"""
        lines = []
        for index, stmt in enumerate(statements):
            rest = statements[index + 1:]
            if self._is_guard_clause(stmt) and rest:
                for name in _walrus_targets(stmt):
                    self.expr.aliases.pop(name, None)
                # `if c: return x` followed by more code is `if c { x } else { rest }`
                lines.extend(self._expect_prefix(stmt))
                lines.append(self._translate_if(stmt, orelse=rest))
                break
            text = self.translate_statement(stmt)
            if text:
                lines.append(text)
        return "\n".join(lines)

    def translate_block(self, statements: List[ast.stmt]) -> str:
        """Translate a nested block; bindings made inside do not leak out"""
        saved = dict(self.expr.aliases)
        try:
            return self.translate(statements)
        finally:
            self.expr.aliases = saved

    def _is_guard_clause(self, stmt: ast.stmt) -> bool:
        return (isinstance(stmt, ast.If)
                and not stmt.orelse
                and bool(stmt.body)
                and isinstance(stmt.body[-1], (ast.Return, ast.Raise))
                and not self._directives(stmt, "when"))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def translate_statement(self, stmt: ast.stmt) -> str:
        pipe = self._pipe_directive(stmt)
        text = self._translate_statement(stmt, pipe)
        lines = [line for line in self._expect_prefix(stmt) + [text] if line]
        return "\n".join(lines)

    def _expect_prefix(self, stmt: ast.stmt) -> List[str]:
        texts = [self.translate_expect_directive(d.text) for d in self._directives(stmt, "expect")]
        return [text for text in texts if text]

    def _translate_statement(self, stmt: ast.stmt, pipe: Optional[str]) -> str:
        for name in _walrus_targets(stmt):
            self.expr.aliases.pop(name, None)

        if isinstance(stmt, ast.Return):
            if pipe is not None:
                return pipe
            if stmt.value is None:
                return "Void"
            return self.expr.visit(stmt.value)

        if isinstance(stmt, ast.If):
            when = self._directives(stmt, "when")
            if when:
                return self._translate_when_chain(stmt, when[-1].text)
            return self._translate_if(stmt)

        if isinstance(stmt, ast.Match):
            return self._translate_match(stmt)

        if isinstance(stmt, ast.Assign):
            return self._translate_assign(stmt, pipe)

        if isinstance(stmt, ast.AnnAssign):
            return self._translate_ann_assign(stmt, pipe)

        if isinstance(stmt, ast.AugAssign):
            return self._translate_aug_assign(stmt)

        if isinstance(stmt, ast.Assert):
            return f"expect {self.expr.visit(stmt.test)}"

        if isinstance(stmt, ast.Raise):
            return self._translate_raise(stmt)

        if isinstance(stmt, ast.Pass):
            return ""

        if isinstance(stmt, ast.Expr):
            if isinstance(stmt.value, ast.Constant) and isinstance(stmt.value.value, str):
                return ""
            if pipe is not None:
                return pipe
            return self.expr.visit(stmt.value)

        return self._translate_nested(stmt)

    def _translate_nested(self, stmt: ast.stmt) -> str:
        logger.warning("Unsupported statement %s at line %s, translating its body only",
                       type(stmt).__name__, getattr(stmt, "lineno", "?"))
        for name in _loop_and_context_targets(stmt):
            self.expr.aliases.pop(name, None)
        parts = []
        for field_name in _NESTED_BODY_FIELDS:
            for child in getattr(stmt, field_name, None) or []:
                if isinstance(child, ast.excepthandler):
                    text = self.translate_block(child.body)
                elif isinstance(child, ast.stmt):
                    text = self.translate_block([child])
                else:
                    continue
                if text:
                    parts.append(text)
        return "\n".join(parts)

    def _translate_if(self, stmt: ast.If, orelse: Optional[List[ast.stmt]] = None) -> str:
        condition = self.expr.visit(stmt.test)
        then_body = self.translate_block(stmt.body)
        text = f"if {condition} {{\n{indent_block(then_body, self.indent)}\n}}"

        orelse = stmt.orelse if orelse is None else orelse
        if not orelse:
            logger.warning("if without else at line %s", stmt.lineno)
            return text

        if (len(orelse) == 1 and isinstance(orelse[0], ast.If)
                and not self._directives(orelse[0], "when")):
            return f"{text} else {self._translate_if(orelse[0])}"

        else_body = self.translate_block(orelse)
        return f"{text} else {{\n{indent_block(else_body, self.indent)}\n}}"

    def _translate_when_chain(self, stmt: ast.If, scrutinee_text: str) -> str:
        """An if/elif/else chain under `# @when x` becomes guarded wildcard clauses"""
        scrutinee_node = parse_directive_expression(scrutinee_text)
        scrutinee = self.expr.visit(scrutinee_node) if scrutinee_node is not None else scrutinee_text.strip()

        clauses = []
        node = stmt
        while True:
            clauses.append(WhenClause(
                pattern=Pattern(PatternKind.WILDCARD),
                guard=self.expr.visit(node.test),
                body=self.translate_block(node.body)
            ))
            if len(node.orelse) == 1 and isinstance(node.orelse[0], ast.If):
                node = node.orelse[0]
                continue
            if node.orelse:
                clauses.append(WhenClause(
                    pattern=Pattern(PatternKind.WILDCARD),
                    body=self.translate_block(node.orelse)
                ))
            break

        when = WhenExpression(expression=scrutinee, clauses=clauses)
        self.expr.when_expressions.append(when)
        return generate_when(when, self.indent)

    def _translate_match(self, stmt: ast.Match) -> str:
        clauses = []
        for case in stmt.cases:
            clauses.append(WhenClause(
                pattern=self.patterns.translate(case.pattern),
                guard=self.expr.visit(case.guard) if case.guard is not None else None,
                body=self.translate_block(case.body)
            ))
        when = WhenExpression(expression=self.expr.visit(stmt.subject), clauses=clauses)
        self.expr.when_expressions.append(when)
        return generate_when(when, self.indent)

    def _translate_assign(self, stmt: ast.Assign, pipe: Optional[str]) -> str:
        if len(stmt.targets) != 1:
            logger.warning("Chained assignment at line %s, binding the first target only", stmt.lineno)
        target = stmt.targets[0]

        if isinstance(target, ast.Name) and pipe is None and self._is_transaction_alias(stmt.value):
            self.expr.aliases[target.id] = self.expr.visit(stmt.value)
            logger.debug("Inlining %s as %s", target.id, self.expr.aliases[target.id])
            return ""

        value = pipe if pipe is not None else self.expr.visit(stmt.value)
        pattern = self._binding_pattern(target)
        if pattern is None:
            logger.warning("Unsupported assignment target %s at line %s",
                           type(target).__name__, stmt.lineno)
            return ""
        return f"let {pattern} = {value}"

    def _translate_ann_assign(self, stmt: ast.AnnAssign, pipe: Optional[str]) -> str:
        if stmt.value is None or not isinstance(stmt.target, ast.Name):
            return ""
        name = stmt.target.id
        if pipe is None and self._is_transaction_alias(stmt.value):
            self.expr.aliases[name] = self.expr.visit(stmt.value)
            return ""
        value = pipe if pipe is not None else self.expr.visit(stmt.value)
        self.expr.aliases.pop(name, None)
        return f"let {name}: {transform_type_node(stmt.annotation)} = {value}"

    def _translate_aug_assign(self, stmt: ast.AugAssign) -> str:
        if not isinstance(stmt.target, ast.Name):
            logger.warning("Unsupported augmented assignment target at line %s", stmt.lineno)
            return ""
        name = stmt.target.id
        combined = ast.BinOp(left=ast.Name(id=name, ctx=ast.Load()), op=stmt.op, right=stmt.value)
        value = self.expr.visit(combined)
        self.expr.aliases.pop(name, None)
        return f"let {name} = {value}"

    def _translate_raise(self, stmt: ast.Raise) -> str:
        exc = stmt.exc
        if isinstance(exc, ast.Call) and exc.args:
            message = exc.args[0]
            if isinstance(message, ast.Constant) and isinstance(message.value, str):
                return f"fail @{self.expr.visit(message)}"
        return "fail"

    def _binding_pattern(self, target: ast.AST) -> Optional[str]:
        """Left-hand side of a let; rebinding a name ends any alias for it"""
        if isinstance(target, ast.Name):
            self.expr.aliases.pop(target.id, None)
            return target.id
        if isinstance(target, (ast.Tuple, ast.List)):
            names = [self._binding_pattern(elt) for elt in target.elts]
            if any(name is None for name in names):
                return None
            if isinstance(target, ast.Tuple):
                return f"({', '.join(names)})"
            return f"[{', '.join(names)}]"
        if isinstance(target, ast.Starred) and isinstance(target.value, ast.Name):
            self.expr.aliases.pop(target.value.id, None)
            return f"..{target.value.id}"
        return None

    def _is_transaction_alias(self, value: ast.AST) -> bool:
        """`name = <validator parameter>.transaction`"""
        return (isinstance(value, ast.Attribute)
                and value.attr == TRANSACTION_ATTRIBUTE
                and isinstance(value.value, ast.Name)
                and value.value.id in self.alias_roots)

    # ------------------------------------------------------------------
    # Directives
    # ------------------------------------------------------------------

    def _directives(self, stmt: ast.stmt, kind: str) -> List[Directive]:
        return [d for d in self.directives.get(stmt.lineno, []) if d.kind == kind]

    def _pipe_directive(self, stmt: ast.stmt) -> Optional[str]:
        pipes = self._directives(stmt, "pipe")
        if not pipes:
            return None
        return self.translate_pipe_directive(pipes[-1].text)

    def translate_pipe_directive(self, text: str) -> Optional[str]:
        """`value |> f |> g(a)` -> g(f(value), a)"""
        parts = [parse_directive_expression(part) for part in text.split("|>")]
        if len(parts) < 2 or any(part is None for part in parts):
            logger.warning("Ignoring malformed pipe directive: %r", text)
            return None
        pipe = PipeExpression(
            initial_value=self.expr.visit(parts[0]),
            operations=[self.expr.pipe_operation(part) for part in parts[1:]]
        )
        self.expr.pipe_expressions.append(pipe)
        return generate_pipe(pipe)

    def expect_from_directive(self, text: str) -> Optional[ExpectExpression]:
        """`value, "message"` -> ExpectExpression"""
        node = parse_directive_expression(text)
        if node is None:
            return None
        message = None
        if isinstance(node, ast.Tuple) and len(node.elts) == 2:
            message_node = node.elts[1]
            if isinstance(message_node, ast.Constant) and isinstance(message_node.value, str):
                node, message = node.elts[0], message_node.value
        expect = ExpectExpression(expression=self.expr.visit(node), error_message=message)
        self.expr.expect_expressions.append(expect)
        return expect

    def translate_expect_directive(self, text: str) -> str:
        expect = self.expect_from_directive(text)
        if expect is None:
            return ""
        return generate_expect(expect, self.expr.options.expect_message)


def function_header_lines(node: ast.FunctionDef) -> List[int]:
    """Lines a function-level directive can be bound to: decorators and the def"""
    return [decorator.lineno for decorator in node.decorator_list] + [node.lineno]


def body_statements(node: ast.FunctionDef) -> List[ast.stmt]:
    """Function body without its docstring"""
    body = node.body
    if (body and isinstance(body[0], ast.Expr)
            and isinstance(body[0].value, ast.Constant)
            and isinstance(body[0].value.value, str)):
        return body[1:]
    return body


def translate_function_body(node: ast.FunctionDef,
                            expr_translator: ExpressionTranslator,
                            directives: Optional[Dict[int, List[Directive]]] = None,
                            source: Optional[str] = None,
                            alias_roots: Optional[Set[str]] = None) -> str:
    """
    Translate a whole function body.

    `# @expect` directives written above the function render as the first
    lines of the body.
    """
    directives = directives or {}
    translator = StatementTranslator(expr_translator, directives, source, alias_roots)

    lines = []
    for line in function_header_lines(node):
        for directive in directives.get(line, []):
            if directive.kind != "expect":
                logger.warning("Ignoring @%s directive above function %s", directive.kind, node.name)
                continue
            text = translator.translate_expect_directive(directive.text)
            if text:
                lines.append(text)

    body = translator.translate(body_statements(node))
    if body:
        lines.append(body)
    return "\n".join(lines)
