"""
Tests for the runtime behaviour of the contract decorators
"""

import pytest

from aikscript import contract, datum, expect, opaque, pipe, validator
from aikscript import test as aiken_test


def test_contract_and_validator_metadata():
    """Test decorators attach names and purposes without wrapping"""
    @contract("vault")
    class Vault:
        @validator("spend")
        def spend(self, datum, redeemer):
            return True

        @validator
        def mint(self, redeemer):
            return False

    assert Vault.__aiken_contract__ == "vault"
    assert Vault.spend.__aiken_purpose__ == "spend"
    assert Vault.mint.__aiken_purpose__ == "mint"
    assert Vault().spend(None, None) is True


def test_bare_contract_uses_class_name():
    """Test @contract without arguments"""
    @contract
    class Token:
        pass

    assert Token.__aiken_contract__ == "Token"


def test_markers():
    """Test opaque, test and datum markers"""
    @opaque
    class Secret:
        pass

    @aiken_test
    def adds():
        return 1 + 1 == 2

    assert Secret.__aiken_opaque__
    assert adds.__aiken_test__ and adds()
    assert repr(datum) == "datum"


def test_pipe():
    """Test pipe applies steps left to right"""
    assert pipe(3, lambda x: x * 2, lambda x: x + 1) == 7
    assert pipe(3) == 3


def test_expect():
    """Test expect unwraps values and raises on None"""
    assert expect(0) == 0
    with pytest.raises(ValueError, match="Expected value but found None"):
        expect(None)
    with pytest.raises(ValueError, match="Datum required"):
        expect(None, "Datum required")


def test_pipe_with_curried_step():
    """Test a step written as a call must return a one-argument callable"""
    def add(y):
        return lambda x: x + y

    assert pipe(3, lambda x: x * 2, add(1)) == 7
