"""
Hello world: only the owner may spend, and only when saying hello
"""

from typing import Annotated

from aikscript import contract, datum, validator
import aiken.collection.list
from cardano.transaction import OutputReference, Transaction


class Datum:
    owner: bytes


class Redeemer:
    msg: bytes


@contract("HelloWorld")
class HelloWorld:
    state: Annotated[Datum, datum]

    @validator("spend")
    def spend(self, datum: Datum, redeemer: Redeemer,
              output_reference: OutputReference, transaction: Transaction) -> bool:
        return self.says_hello(redeemer) and datum.owner in transaction.extra_signatories

    def says_hello(self, redeemer: Redeemer) -> bool:
        return redeemer.msg == b"Hello, World!"
