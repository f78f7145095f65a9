"""
Tests for source parsing: annotations, directives and declarations
"""

import ast
import sys
import textwrap

import pytest

from aikscript.core.errors import SourceParseError
from aikscript.core.models import (
    ConstantDefinition,
    DeclarationRole,
    Directive,
    ImportDeclaration,
    TargetKind,
    ValidatorPurpose,
)
from aikscript.parser import SourceParser
from aikscript.parsers.annotations import collect_annotations
from aikscript.parsers.directives import scan_directives


def parse(source):
    return SourceParser().parse(textwrap.dedent(source), module_name="sample")


CONTRACT_SOURCE = """
    from typing import Annotated

    from aikscript import contract, datum, validator


    @contract("hello_world")
    class HelloWorld:
        \"\"\"Says hello\"\"\"
        state: Annotated[Datum, datum]

        @validator("spend")
        def spend(self, datum, redeemer) -> bool:
            \"\"\"Checks the message\"\"\"
            return self.is_hello(redeemer)

        def is_hello(self, redeemer) -> bool:
            return redeemer.msg == b"Hello"
"""


def test_collect_annotations():
    """Test the annotation table is keyed by qualified name"""
    table = collect_annotations(ast.parse(textwrap.dedent(CONTRACT_SOURCE)))

    assert table["HelloWorld"].role == DeclarationRole.CONTRACT
    assert table["HelloWorld"].argument == "hello_world"
    assert table["HelloWorld"].doc == ["Says hello"]
    assert table["HelloWorld.spend"].role == DeclarationRole.VALIDATOR
    assert table["HelloWorld.spend"].purpose == "spend"
    assert table["HelloWorld.state"].role == DeclarationRole.DATUM
    assert "HelloWorld.is_hello" not in table


def test_validator_purpose_defaults_to_method_name():
    """Test a bare @validator takes its purpose from the method name"""
    table = collect_annotations(ast.parse(textwrap.dedent("""
        @contract
        class Token:
            @validator
            def mint(self, redeemer):
                return True
    """)))
    assert table["Token"].argument == "Token"
    assert table["Token.mint"].purpose == "mint"


def test_scan_directives_binds_to_next_code_line():
    """Test directives attach to the line after them"""
    source = "# @when n\n\nif n == 0:\n    pass\n"
    assert scan_directives(source) == {3: [Directive(kind="when", text="n", line=1)]}


def test_trailing_directive_is_dropped():
    """Test a directive followed by no code binds to nothing"""
    assert scan_directives("x = 1\n# @pipe a |> f\n") == {}


def test_parse_contract():
    """Test contract methods become a validator handler and a private helper"""
    module = parse(CONTRACT_SOURCE)

    assert module.imports == []
    assert len(module.functions) == 2

    handler, helper = module.functions
    assert handler.is_validator
    assert handler.contract == "hello_world"
    assert handler.purpose == ValidatorPurpose.SPEND
    assert handler.purpose_name == "spend"
    assert handler.docs == ["Checks the message"]
    assert [p.name for p in handler.parameters] == ["datum", "redeemer"]
    assert handler.parameters[0].type == "Datum"
    assert handler.return_type == "Bool"

    assert not helper.is_validator
    assert helper.name == "is_hello"
    assert not helper.is_public
    assert [p.name for p in helper.parameters] == ["redeemer"]
    assert helper.body == 'redeemer.msg == #"48656c6c6f"'


def test_inline_datum_becomes_named_type():
    """Test a dict datum annotation declares <Class>Datum"""
    module = parse("""
        @contract("vault")
        class Vault:
            state: Annotated[{"owner": bytes, "deadline": int}, datum]

            @validator("spend")
            def spend(self, datum, redeemer):
                return True
    """)
    assert module.types[0].name == "VaultDatum"
    assert module.types[0].definition == "{ owner: ByteArray, deadline: Int }"
    assert module.functions[0].parameters[0].type == "VaultDatum"


def test_parse_imports():
    """Test import statements become use declarations"""
    module = parse("""
        import aiken.collection.list
        import cardano.assets as assets
        from cardano.transaction import Transaction, OutputReference
        from typing import List
        from aikscript import contract
        from . import helpers
    """)
    assert module.imports == [
        ImportDeclaration(module="aiken/collection/list"),
        ImportDeclaration(module="cardano/assets", alias="assets"),
        ImportDeclaration(module="cardano/transaction", exposing=["Transaction", "OutputReference"]),
    ]


def test_parse_constants():
    """Test module constants and their inferred types"""
    module = parse("""
        MIN_FEE: int = 2_000_000
        _SECRET = b"\\xab"
        LIMIT: Final = 10
        NAMES = [1, 2]
        T = TypeVar("T")
    """)
    assert module.constants == [
        ConstantDefinition(name="min_fee", value="2000000", type_annotation="Int", is_public=True),
        ConstantDefinition(name="secret", value='#"ab"', type_annotation="ByteArray", is_public=False),
        ConstantDefinition(name="limit", value="10", type_annotation="Int", is_public=True),
        ConstantDefinition(name="names", value="[1, 2]", type_annotation="List<Int>", is_public=True),
    ]


def test_constant_docs_from_following_string():
    """Test a string after a constant documents it"""
    module = parse('''
        MAX_SIZE = 10
        """Largest batch"""
    ''')
    assert module.constants[0].docs == ["Largest batch"]


def test_parse_type_aliases_and_records():
    """Test aliases, generic records, enums and opaque classes"""
    module = parse("""
        Lovelace: TypeAlias = int
        Amount = int | None


        class Pair(Generic[A, B]):
            first: A
            second: B


        class Action(Enum):
            CLAIM = 1
            PARTIAL_CLAIM = 2


        @opaque
        class Secret:
            value: bytes
    """)
    types = {t.name: t for t in module.types}

    assert types["Lovelace"].definition == "Int"
    assert types["Amount"].definition == "Int | Void"
    assert types["Pair"].type_params == ["A", "B"]
    assert types["Pair"].definition == "{ first: A, second: B }"
    assert types["Action"].definition == "Claim | PartialClaim"
    assert types["Secret"].is_opaque
    assert types["Secret"].target.kind == TargetKind.RECORD
    assert not types["Pair"].is_opaque


def test_malformed_alias_degrades_to_void():
    """Test an alias with an unsupported body still parses"""
    module = parse("Broken: TypeAlias = lambda: 1")
    assert module.types[0].definition == "Void"


@pytest.mark.skipif(sys.version_info < (3, 12), reason="PEP 695 syntax needs Python 3.12")
def test_parse_pep695_alias():
    """Test `type X[T] = ...` statements"""
    module = parse("type Pair[T] = tuple[T, T]")
    assert module.types[0].name == "Pair"
    assert module.types[0].type_params == ["T"]
    assert module.types[0].definition == "(T, T)"


def test_export_rule():
    """Test __all__ decides visibility when present"""
    module = parse("""
        __all__ = ["visible"]

        def visible() -> int:
            return 1

        def hidden() -> int:
            return 2
    """)
    visibility = {f.name: f.is_public for f in module.functions}
    assert visibility == {"visible": True, "hidden": False}

    module = parse("""
        def visible() -> int:
            return 1

        def _hidden() -> int:
            return 2
    """)
    visibility = {f.name: f.is_public for f in module.functions}
    assert visibility == {"visible": True, "_hidden": False}


def test_parse_function():
    """Test a module function with docs and types"""
    module = parse('''
        def add(a: int, b: int) -> int:
            """Adds two numbers"""
            return a + b
    ''')
    function = module.functions[0]
    assert function.name == "add"
    assert [(p.name, p.type) for p in function.parameters] == [("a", "Int"), ("b", "Int")]
    assert function.return_type == "Int"
    assert function.body == "a + b"
    assert function.docs == ["Adds two numbers"]
    assert not function.is_validator


def test_parse_tests():
    """Test @test and test_* functions become tests"""
    module = parse("""
        @test
        def adds():
            assert add(1, 2) == 3

        def test_subtracts():
            return 3 - 1 == 2
    """)
    assert [t.name for t in module.tests] == ["adds", "test_subtracts"]
    assert module.tests[0].body == "expect add(1, 2) == 3"
    assert module.tests[1].body == "3 - 1 == 2"
    assert module.functions == []


def test_module_docs_and_skipped_statements():
    """Test module docstrings are kept and unknown statements skipped"""
    module = parse('''
        """Vesting contract"""
        print("side effect")

        if __name__ == "__main__":
            main()
    ''')
    assert module.docs == ["Vesting contract"]
    assert module.functions == []
    assert module.constants == []


def test_syntax_error_raises():
    """Test invalid source is reported with its line"""
    with pytest.raises(SourceParseError) as excinfo:
        SourceParser().parse("def broken(:\n", filename="broken.py")
    assert excinfo.value.filename == "broken.py"
    assert excinfo.value.lineno == 1


def test_missing_file_raises(tmp_path):
    """Test unreadable files raise SourceParseError"""
    with pytest.raises(SourceParseError):
        SourceParser().parse_file(str(tmp_path / "missing.py"))
