"""A1-style cell address codec.

Column letters use bijective base-26 (A=1 ... Z=26, AA=27), so there is no
zero digit and every positive integer has exactly one spelling.
"""
from __future__ import annotations

import re

from .errors import InvalidAddressError

_ADDRESS_RE = re.compile(r"^\$?([A-Za-z]+)\$?([1-9][0-9]*)$")


def column_to_letters(index: int) -> str:
    if isinstance(index, bool) or not isinstance(index, int) or index < 1:
        raise InvalidAddressError(f"Column index must be a positive integer, got {index!r}")
    letters: list[str] = []
    n = index
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters))


def letters_to_column(letters: str) -> int:
    if not letters or not letters.isascii() or not letters.isalpha():
        raise InvalidAddressError(f"Invalid column letters: {letters!r}")
    result = 0
    for ch in letters.upper():
        result = result * 26 + (ord(ch) - ord("A") + 1)
    return result


def parse_address(address: str) -> tuple[int, int]:
    """Return ``(row, col)``, both 1-indexed, for an address like ``"B12"``."""
    match = _ADDRESS_RE.match(address.strip()) if isinstance(address, str) else None
    if match is None:
        raise InvalidAddressError(f"Invalid cell address: {address!r}")
    return int(match.group(2)), letters_to_column(match.group(1))


def format_address(row: int, col: int) -> str:
    if isinstance(row, bool) or not isinstance(row, int) or row < 1:
        raise InvalidAddressError(f"Row must be a positive integer, got {row!r}")
    return f"{column_to_letters(col)}{row}"
