"""
Decorators and markers for writing Aiken contracts in Python.

Usage:
    from typing import Annotated
    from aikscript import contract, datum, validator

    @contract("hello_world")
    class HelloWorld:
        state: Annotated[Datum, datum]

        @validator("spend")
        def spend(self, datum: Datum, redeemer: Redeemer) -> bool:
            return redeemer.msg == b"Hello, World!"

The transpiler reads these markers from the syntax tree. At runtime they
only attach metadata, so annotated modules stay importable and testable
with plain Python.
"""

from functools import reduce
from typing import Any, Callable, Optional, TypeVar

from .core.config import DEFAULT_EXPECT_MESSAGE

T = TypeVar("T")


def contract(name: Optional[str] = None) -> Callable:
    """
    Mark a class as a validator contract.

    Args:
        name: Validator block name (defaults to the class name)
    """
    if isinstance(name, type):
        return contract()(name)

    def decorator(cls: type) -> type:
        cls.__aiken_contract__ = name or cls.__name__
        return cls
    return decorator


def validator(purpose: Optional[str] = None) -> Callable:
    """
    Mark a contract method as the handler for a script purpose.

    Args:
        purpose: "spend", "mint", "withdraw", "publish", "vote", "propose"
            or "else" (defaults to the method name)
    """
    if callable(purpose):
        return validator()(purpose)

    def decorator(func: Callable) -> Callable:
        func.__aiken_purpose__ = purpose or func.__name__
        return func
    return decorator


def opaque(cls: type) -> type:
    """Emit the class as a `pub opaque type`"""
    cls.__aiken_opaque__ = True
    return cls


def test(func: Callable) -> Callable:
    """Emit the function as an Aiken `test` block"""
    func.__aiken_test__ = True
    return func


# pytest must not collect the marker itself
test.__test__ = False


class _DatumMarker:
    """`Annotated[T, datum]` marks the contract property holding the datum type"""

    def __repr__(self):
        return "datum"


datum = _DatumMarker()


def pipe(value: Any, *steps: Callable[[Any], Any]) -> Any:
    """
    Apply steps left to right: pipe(x, f, g) == g(f(x)).

    Transpiles to nested calls with the piped value as the leading
    argument, so `pipe(x, f, g(a))` becomes `g(f(x), a)`. At runtime a
    step written as `g(a)` is evaluated first and must return a callable
    taking the piped value.
    """
    return reduce(lambda acc, step: step(acc), steps, value)


def expect(value: Optional[T], message: str = DEFAULT_EXPECT_MESSAGE) -> T:
    """
    Unwrap a value that must be present.

    Raises:
        ValueError: If value is None
    """
    if value is None:
        raise ValueError(message)
    return value
