"""
Wire-safe integer representation

GraphQL has no native big integer scalar, so every BigInt field crosses the
wire as a base-10 string. ``WireInt`` marks such strings in type
signatures; only ``to_wire_int`` produces them.
"""

import re
from typing import Any, NewType, Optional, Union

from ..errors import ParseError, ValidationError

WireInt = NewType("WireInt", str)

_INT_PATTERN = re.compile(r"^-?[0-9]+$")
_AMOUNT_PATTERN = re.compile(r"^[0-9]+$")


def is_valid_big_int_string(value: Any) -> bool:
    """Check whether value is a decimal integer literal"""
    return isinstance(value, str) and bool(_INT_PATTERN.match(value))


def to_wire_int(value: int) -> WireInt:
    """Native int -> decimal string"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected int, got {type(value).__name__}")
    return WireInt(str(value))


def parse_wire_int(value: Union[str, int], field: Optional[str] = None) -> int:
    """
    Decimal string -> native int.

    Args:
        value: Wire value. Native ints are accepted as-is
        field: Field name reported in the error

    Returns:
        Parsed integer

    Raises:
        ParseError: value is not an integer literal
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not is_valid_big_int_string(value):
        where = f" for field '{field}'" if field else ""
        raise ParseError(f"Invalid integer literal{where}: {value!r}", field=field, value=value)
    return int(value)


def to_filter_amount(value: Union[int, str]) -> WireInt:
    """
    Normalize a non-negative amount or count used as a filter value.

    Accepts an int or a canonical decimal string. Amounts in this domain are
    never negative.

    Raises:
        ValidationError: negative, boolean, or malformed value
    """
    if isinstance(value, bool):
        raise ValidationError(f"Expected an integer amount, got {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValidationError(f"Amount must be non-negative, got {value}")
        return to_wire_int(value)
    if isinstance(value, str) and _AMOUNT_PATTERN.match(value):
        return to_wire_int(int(value))
    raise ValidationError(f"Expected a non-negative decimal amount, got {value!r}")


def convert_big_ints_to_strings(value: Any) -> Any:
    """Recursively stringify every int in a dict/list/tuple graph (bools are kept)"""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return to_wire_int(value)
    if isinstance(value, dict):
        return {key: convert_big_ints_to_strings(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [convert_big_ints_to_strings(item) for item in value]
    return value
