"""
Value pipelines and expectations
"""

from typing import Optional

from aikscript import expect, pipe


def double(x: int) -> int:
    return x * 2


def add(x: int, y: int) -> int:
    return x + y


def total(x: int) -> int:
    return pipe(x, double, add(1))


def total_with_directive(x: int) -> int:
    # @pipe x |> double |> add(1)
    result = 0
    return result


def owner_of(maybe_owner: Optional[bytes]) -> bytes:
    # @expect maybe_owner, "Owner required"
    return maybe_owner


def required(value: Optional[int]) -> int:
    return expect(value)


def test_total():
    return total(3) == 7
