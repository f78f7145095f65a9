"""
Identifier conversions between Python and Aiken naming rules
"""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """HelloWorld -> hello_world, MAX_FEE -> max_fee"""
    if name.isupper() or "_" in name:
        return name.lower()
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def to_constructor_name(name: str) -> str:
    """PARTIAL_CLAIM -> PartialClaim, claim -> Claim"""
    if "_" in name or name.isupper() or name.islower():
        return "".join(part.capitalize() for part in name.split("_") if part)
    return name[0].upper() + name[1:]


def is_constructor_name(name: str) -> bool:
    """CapWords names are record or variant constructors"""
    return bool(name) and name[0].isupper() and not name.isupper()


def is_constant_name(name: str) -> bool:
    stripped = name.lstrip("_")
    return bool(stripped) and stripped.isupper()


def constant_name(name: str) -> str:
    """Aiken constants are lower snake case and never start with an underscore"""
    return to_snake_case(name.lstrip("_")) or name
