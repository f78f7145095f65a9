"""
Transpile every sample contract under examples/.
"""

from pathlib import Path

import pytest

from aikscript import Transpiler

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"
EXAMPLES = sorted(EXAMPLES_DIR.glob("*.py"))


@pytest.mark.parametrize("path", EXAMPLES, ids=[p.stem for p in EXAMPLES])
def test_example_transpiles(path):
    """Each sample produces a non-empty module ending in one newline."""
    aiken = Transpiler().transpile_file(str(path))
    assert aiken.strip()
    assert aiken.endswith("\n") and not aiken.endswith("\n\n")


def test_hello_world_example():
    """Aliases and helper calls inside a handler."""
    aiken = Transpiler().transpile_file(str(EXAMPLES_DIR / "hello_world.py"))
    assert "validator hello_world {" in aiken
    assert "says_hello(redeemer) && list.has(transaction.extra_signatories, datum.owner)" in aiken
    assert "fn says_hello(redeemer: Redeemer) -> Bool {" in aiken


def test_vesting_example():
    """Inline datum, enum constructors and the ctx.transaction alias."""
    aiken = Transpiler().transpile_file(str(EXAMPLES_DIR / "vesting.py"))
    assert "pub type VestingDatum {" in aiken
    assert "pub type Action {\n  Claim\n  PartialClaim\n  Cancel\n}" in aiken
    assert "spend(datum: Option<VestingDatum>, redeemer: Action, ctx, transaction: Transaction) {" in aiken
    assert "if redeemer == Cancel {" in aiken
    assert "ctx.transaction.validity_range" in aiken
    assert " tx." not in aiken


def test_pipes_example():
    """pipe() calls and directives render as nested calls."""
    aiken = Transpiler().transpile_file(str(EXAMPLES_DIR / "pipes.py"))
    assert aiken.count("add(double(x), 1)") == 2
    assert 'expect(maybe_owner, "Owner required")' in aiken
    assert 'expect(value, "Expected value but found None")' in aiken
