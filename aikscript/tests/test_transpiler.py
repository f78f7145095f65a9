"""
Integration tests for the full transpiler
"""

import textwrap

import pytest

from aikscript import SourceParseError, Transpiler, transpile

HELLO_WORLD = '''
from typing import Annotated

from aikscript import contract, datum, validator
from cardano.transaction import OutputReference, Transaction


class Datum:
    owner: bytes
    deadline: int


@contract("HelloWorld")
class HelloWorld:
    state: Annotated[Datum, datum]

    @validator("spend")
    def spend(self, datum: Datum, redeemer) -> bool:
        return True
'''


def test_hello_world_round_trip():
    """Test a spend validator with a record datum transpiles end to end"""
    transpiler = Transpiler()
    parsed = transpiler.parse(HELLO_WORLD, module_name="hello_world")
    assert len(parsed.functions) == 1
    assert parsed.functions[0].contract == "hello_world"

    assert transpile(HELLO_WORLD) == textwrap.dedent("""\
        use cardano/transaction.{OutputReference, Transaction}

        pub type Datum {
          owner: ByteArray,
          deadline: Int,
        }

        validator hello_world {
          spend(datum: Option<Datum>, redeemer: Data, output_reference: OutputReference, transaction: Transaction) {
            True
          }
        }
    """)


def test_canonical_parameters_are_in_order():
    """Test datum, redeemer and the appended context parameters keep their order"""
    aiken = transpile(HELLO_WORLD)
    positions = [
        aiken.index("Option<Datum>"),
        aiken.index("redeemer: Data"),
        aiken.index("output_reference: OutputReference"),
        aiken.index("transaction: Transaction"),
    ]
    assert positions == sorted(positions)


def test_match_number():
    """Test a three-branch numeric dispatch becomes an ordered when"""
    aiken = transpile(textwrap.dedent('''
        def match_number(n: int) -> str:
            # @when n
            if n == 0:
                return "zero"
            elif n > 0:
                return "positive"
            else:
                return "negative"
    '''))
    assert aiken == textwrap.dedent("""\
        pub fn match_number(n: Int) -> ByteArray {
          when n {
            _ if n == 0 => "zero",
            _ if n > 0 => "positive",
            _ => "negative",
          }
        }
    """)


def test_publish_handler_has_no_parameters():
    """Test a publish handler declared with three parameters is emitted bare"""
    aiken = transpile(textwrap.dedent('''
        @contract("registry")
        class Registry:
            @validator("publish")
            def publish(self, certificate, redeemer, transaction):
                return True
    '''))
    assert "validator registry {\n  publish() {\n    True\n  }\n}" in aiken


def test_malformed_alias_still_transpiles():
    """Test an unsupported alias body falls back to Void"""
    assert transpile("Broken: TypeAlias = lambda: 1\n") == "pub type Broken = Void\n"


def test_builtin_use_line_does_not_leak_between_modules():
    """Test builtins used by one module are not imported by the next"""
    transpiler = Transpiler()
    first = transpiler.transpile(textwrap.dedent('''
        def digest(data: bytes) -> bytes:
            return sha256(data)
    '''))
    assert first.startswith("use aiken/builtin.{sha2_256}\n\n")
    assert "sha2_256(data)" in first

    second = transpiler.transpile("def one() -> int:\n    return 1\n")
    assert "aiken/builtin" not in second


def test_transform_returns_a_new_ast():
    """Test transforming leaves the parsed AST unchanged"""
    transpiler = Transpiler()
    parsed = transpiler.parse(HELLO_WORLD)
    transformed = transpiler.transform(parsed)

    assert len(parsed.functions[0].parameters) == 2
    assert len(transformed.functions[0].parameters) == 4
    assert parsed.functions[0] is not transformed.functions[0]


def test_emission_order_and_docs():
    """Test module docs, types, constants, functions, validators and tests order"""
    aiken = transpile(textwrap.dedent('''
        """Vesting contract"""

        FEE = 1


        def test_fee():
            return FEE == 1


        def helper() -> int:
            return FEE


        @contract("vesting")
        class Vesting:
            @validator("spend")
            def spend(self, datum, redeemer):
                return helper() > 0


        class Datum:
            beneficiary: bytes
    '''))
    markers = ["//// Vesting contract", "pub type Datum", "pub const fee: Int = 1",
               "pub fn helper() -> Int", "validator vesting", "test test_fee()"]
    positions = [aiken.index(marker) for marker in markers]
    assert positions == sorted(positions)
    assert aiken.endswith("}\n")
    assert not aiken.endswith("\n\n")


def test_transpile_is_deterministic():
    """Test the same source always gives the same text"""
    transpiler = Transpiler()
    assert transpiler.transpile(HELLO_WORLD) == transpiler.transpile(HELLO_WORLD) == transpile(HELLO_WORLD)


def test_transpile_file(tmp_path):
    """Test transpiling from a path"""
    path = tmp_path / "hello_world.py"
    path.write_text(HELLO_WORLD, encoding="utf-8")
    assert Transpiler().transpile_file(str(path)) == transpile(HELLO_WORLD)


def test_invalid_source_raises():
    """Test syntax errors surface as SourceParseError"""
    with pytest.raises(SourceParseError):
        transpile("class :\n")


def test_untyped_datum_is_void():
    """Test a handler without a datum type or datum property gets datum: Void"""
    aiken = transpile(textwrap.dedent('''
        @contract("always")
        class Always:
            @validator("spend")
            def spend(self, datum, redeemer):
                return True
    '''))
    assert "spend(datum: Void, redeemer: Data, output_reference: OutputReference, transaction: Transaction) {" in aiken
