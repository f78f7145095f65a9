"""
Tests for statement translation: blocks, when, pipe, expect and aliases
"""

import ast
import textwrap

from aikscript.parsers.directives import scan_directives
from aikscript.translators.expressions import ExpressionTranslator
from aikscript.translators.statements import StatementTranslator, translate_function_body


def translate(source, alias_roots=None, translator=None):
    source = textwrap.dedent(source)
    tree = ast.parse(source)
    expr = translator or ExpressionTranslator()
    statements = StatementTranslator(expr, scan_directives(source), source, alias_roots)
    return statements.translate(tree.body)


def test_let_and_return():
    """Test assignments become lets and the last expression is the value"""
    result = translate("""
        x = 1
        return x + 1
    """)
    assert result == "let x = 1\nx + 1"


def test_annotated_and_augmented_assignment():
    """Test annotated and augmented assignments"""
    assert translate("x: int = 1") == "let x: Int = 1"
    result = translate("""
        x = 1
        x += 2
        return x
    """)
    assert result == "let x = 1\nlet x = x + 2\nx"


def test_tuple_unpacking():
    """Test destructuring assignments"""
    assert translate("a, b = pair") == "let (a, b) = pair"


def test_if_elif_else():
    """Test if chains become nested if/else expressions"""
    result = translate("""
        if a:
            return 1
        elif b:
            return 2
        else:
            return 3
    """)
    assert result == "if a {\n  1\n} else if b {\n  2\n} else {\n  3\n}"


def test_guard_clause():
    """Test an early return wraps the rest of the block in else"""
    result = translate("""
        if a:
            return 1
        y = 2
        return y
    """)
    assert result == "if a {\n  1\n} else {\n  let y = 2\n  y\n}"


def test_assert_raise_pass():
    """Test assert, raise and pass"""
    assert translate("assert x > 0") == "expect x > 0"
    assert translate('raise ValueError("bad")') == 'fail @"bad"'
    assert translate("raise ValueError") == "fail"
    assert translate("pass") == ""


def test_match_statement():
    """Test match statements become when expressions"""
    translator = ExpressionTranslator()
    result = translate("""
        match r:
            case Some(value):
                return value
            case Claim(amount=a) if a > 0:
                return a
            case [x, *rest]:
                return x
            case (a, b):
                return a
            case 1 | 2:
                return 0
            case _:
                return 0
    """, translator=translator)
    assert result == "\n".join([
        "when r {",
        "  Some(value) => value,",
        "  Claim { amount: a } if a > 0 => a,",
        "  [x, ..rest] => x,",
        "  (a, b) => a,",
        "  1 | 2 => 0,",
        "  _ => 0,",
        "}",
    ])
    assert len(translator.when_expressions) == 1
    assert len(translator.when_expressions[0].clauses) == 6


def test_when_directive_keeps_guards_in_order():
    """Test an if chain under a when directive becomes guarded clauses"""
    translator = ExpressionTranslator()
    result = translate("""
        # @when n
        if n == 0:
            return "zero"
        elif n > 0:
            return "positive"
        else:
            return "negative"
    """, translator=translator)
    assert result == "\n".join([
        "when n {",
        '  _ if n == 0 => "zero",',
        '  _ if n > 0 => "positive",',
        '  _ => "negative",',
        "}",
    ])
    guards = [clause.guard for clause in translator.when_expressions[0].clauses]
    assert guards == ["n == 0", "n > 0", None]


def test_multiline_clause_body():
    """Test clause bodies with several lines are wrapped in braces"""
    result = translate("""
        match r:
            case _:
                y = 1
                return y
    """)
    assert result == "when r {\n  _ => {\n    let y = 1\n    y\n  },\n}"


def test_pipe_directive():
    """Test a pipe directive replaces the value of the next statement"""
    translator = ExpressionTranslator()
    result = translate("""
        # @pipe xs |> list.filter(is_valid) |> list.length
        count = 0
        return count
    """, translator=translator)
    assert result == "let count = list.length(list.filter(xs, is_valid))\ncount"
    assert len(translator.pipe_expressions) == 1


def test_malformed_pipe_directive_is_ignored():
    """Test a pipe directive that does not parse leaves the statement alone"""
    result = translate("""
        # @pipe xs |>
        x = 1
    """)
    assert result == "let x = 1"


def test_expect_directive_on_statement():
    """Test an expect directive emits a line before its statement"""
    result = translate("""
        # @expect datum, "Datum required"
        return True
    """)
    assert result == 'expect(datum, "Datum required")\nTrue'


def test_expect_directive_above_function():
    """Test an expect directive above a def is the first body line"""
    source = textwrap.dedent("""
        # @expect datum
        def spend(datum):
            \"\"\"Docs are skipped\"\"\"
            return True
    """)
    node = ast.parse(source).body[0]
    body = translate_function_body(node, ExpressionTranslator(), scan_directives(source), source)
    assert body == 'expect(datum, "Expected value but found None")\nTrue'


def test_transaction_alias_is_inlined():
    """Test `tx = ctx.transaction` is inlined into later uses"""
    result = translate("""
        tx = ctx.transaction
        return tx.validity_range
    """, alias_roots={"ctx"})
    assert result == "ctx.transaction.validity_range"


def test_alias_requires_a_parameter_root():
    """Test aliases only apply to parameters of the handler"""
    result = translate("""
        tx = ctx.transaction
        return tx.validity_range
    """, alias_roots=set())
    assert result == "let tx = ctx.transaction\ntx.validity_range"


def test_alias_ends_when_rebound():
    """Test rebinding a name ends its alias"""
    result = translate("""
        tx = ctx.transaction
        tx = other
        return tx
    """, alias_roots={"ctx"})
    assert result == "let tx = other\ntx"


def test_alias_does_not_touch_similar_names():
    """Test aliasing replaces whole identifiers only"""
    result = translate("""
        tx = ctx.transaction
        txn = 5
        return txn + tx.fee
    """, alias_roots={"ctx"})
    assert result == "let txn = 5\ntxn + ctx.transaction.fee"


def test_alias_is_scoped_to_its_block():
    """Test an alias made in a branch does not leak into its sibling"""
    result = translate("""
        if a:
            tx = ctx.transaction
            return tx.fee
        else:
            return tx
    """, alias_roots={"ctx"})
    assert result == "if a {\n  ctx.transaction.fee\n} else {\n  tx\n}"


def test_unsupported_statements_keep_their_body():
    """Test unsupported statements are walked instead of aborting"""
    result = translate("""
        for x in xs:
            y = x
    """)
    assert result == "let y = x"


def test_alias_ends_at_loop_and_context_targets():
    """Test `for` and `with ... as` targets end an alias like `=` does"""
    result = translate("""
        tx = ctx.transaction
        for tx in txs:
            fee = tx.fee
    """, alias_roots={"ctx"})
    assert result == "let fee = tx.fee"

    result = translate("""
        tx = ctx.transaction
        with open_scope() as (tx, other):
            fee = tx.fee
    """, alias_roots={"ctx"})
    assert result == "let fee = tx.fee"


def test_alias_ends_at_walrus_target():
    """Test `:=` ends an alias for the rest of the block"""
    result = translate("""
        tx = ctx.transaction
        found = (tx := other)
        return tx
    """, alias_roots={"ctx"})
    assert result.endswith("\ntx")
    assert "ctx.transaction" not in result
