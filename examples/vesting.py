"""
Time-locked vesting with partial claims
"""

from enum import Enum
from typing import Annotated

from aikscript import contract, datum, validator
import aiken.collection.list
import aiken.interval
from cardano.transaction import OutputReference, Transaction

MIN_CLAIM: int = 1_000_000
"""Smallest amount a partial claim may release, in lovelace"""


class Action(Enum):
    CLAIM = 1
    PARTIAL_CLAIM = 2
    CANCEL = 3


@contract("vesting")
class Vesting:
    state: Annotated[{"beneficiary": bytes, "owner": bytes, "lock_until": int}, datum]

    @validator("spend")
    def spend(self, datum, redeemer: Action, ctx, transaction: Transaction) -> bool:
        tx = ctx.transaction
        vested = expect(datum, "Vesting datum required")
        if redeemer == Action.CANCEL:
            return vested.owner in tx.extra_signatories
        unlocked = interval.is_entirely_after(tx.validity_range, vested.lock_until)
        return unlocked and vested.beneficiary in tx.extra_signatories


def claimable(total: int, claimed: int) -> int:
    remaining = total - claimed
    if remaining < MIN_CLAIM:
        return 0
    return remaining


def test_claimable_below_minimum():
    return claimable(MIN_CLAIM, 1) == 0
