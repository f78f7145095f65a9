"""
Pattern matching on redeemers and numbers
"""

from typing import Optional

from aikscript import contract, validator
from cardano.assets import PolicyId


class Mint:
    amount: int


class Burn:
    amount: int


Action = Mint | Burn


def describe(n: int) -> str:
    # @when n
    if n == 0:
        return "zero"
    elif n > 0:
        return "positive"
    else:
        return "negative"


def amount_of(action: Action) -> int:
    match action:
        case Mint(amount=a) if a > 0:
            return a
        case Burn(amount=a):
            return 0 - a
        case _:
            return 0


def first_or_zero(xs: list[int]) -> int:
    match xs:
        case [x, *rest]:
            return x
        case _:
            return 0


def unwrap_or(value: Optional[int], default: int) -> int:
    match value:
        case Some(v):
            return v
        case None:
            return default


@contract("token")
class Token:
    @validator("mint")
    def mint(self, redeemer: Action, policy_id: PolicyId, transaction) -> bool:
        return amount_of(redeemer) != 0


@test
def describes_zero():
    assert describe(0) == "zero"
