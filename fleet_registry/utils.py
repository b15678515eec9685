"""Utility functions for parsing request parameters."""

from typing import Optional, Union

from .config import DEFAULT_TRADE_QUANTITY
from .errors import InvalidArgument


def is_blank(value: Optional[str]) -> bool:
    """
    Check whether a string parameter is missing or only whitespace.

    Examples:
        >>> is_blank(None)
        True
        >>> is_blank("   ")
        True
        >>> is_blank("A320")
        False
    """
    return value is None or not value.strip()


def same_icao(left: str, right: str) -> bool:
    """Compare two ICAO identifiers ignoring case."""
    return left.lower() == right.lower()


def parse_quantity(raw: Union[int, str, None], default: int = DEFAULT_TRADE_QUANTITY) -> int:
    """
    Parse a buy/sell quantity.

    Args:
        raw: Quantity as given by the caller (int, digit string, or None)
        default: Value used when no quantity is given

    Returns:
        Non-negative integer quantity

    Raises:
        InvalidArgument: If the quantity is not a non-negative integer

    Examples:
        >>> parse_quantity(None)
        1
        >>> parse_quantity("12")
        12
        >>> parse_quantity("+3")
        3
    """
    if raw is None:
        return default

    if isinstance(raw, bool):
        raise InvalidArgument("Invalid quantity format")

    if isinstance(raw, int):
        value = raw
    else:
        text = raw.strip()
        if not text:
            return default
        # Unsigned: an explicit "+" is accepted, "-" never is
        digits = text[1:] if text.startswith("+") else text
        if not digits.isdecimal():
            raise InvalidArgument("Invalid quantity format", details={"quantity": raw})
        value = int(digits)

    if value < 0:
        raise InvalidArgument("Invalid quantity format", details={"quantity": raw})

    return value
