"""CAS registry number helpers."""

from __future__ import annotations

import re

_CAS_PATTERN = re.compile(r"^(\d{2,7})-(\d{2})-(\d)$")
_DIGITS_ONLY = re.compile(r"^\d{5,10}$")


class InvalidCasNumber(ValueError):
    """Raised when a value is not a well-formed CAS registry number."""


def normalize_cas(value: str) -> str:
    """Normalize user input into a hyphenated CAS registry number.

    Accepts surrounding/internal whitespace and the bare-digit form
    (``"7732185"`` -> ``"7732-18-5"``).

    Args:
        value: Raw user input.

    Returns:
        Hyphenated CAS number.

    Raises:
        InvalidCasNumber: When the shape or the check digit is wrong.
    """

    compact = re.sub(r"\s+", "", value or "")
    if _DIGITS_ONLY.match(compact):
        compact = f"{compact[:-3]}-{compact[-3:-1]}-{compact[-1]}"

    match = _CAS_PATTERN.match(compact)
    if match is None:
        raise InvalidCasNumber(f"Not a CAS registry number: {value!r}.")

    body = match.group(1) + match.group(2)
    check = int(match.group(3))
    if cas_check_digit(body) != check:
        raise InvalidCasNumber(f"CAS registry number {compact!r} has an invalid check digit.")
    return compact


def cas_check_digit(body: str) -> int:
    """Compute the CAS check digit for the digits preceding it."""

    total = sum(position * int(digit) for position, digit in enumerate(reversed(body), start=1))
    return total % 10


def is_valid_cas(value: str) -> bool:
    """Return True when `value` normalizes to a valid CAS registry number."""

    try:
        normalize_cas(value)
    except InvalidCasNumber:
        return False
    return True
