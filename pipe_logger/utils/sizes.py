"""Parsing of human readable byte sizes."""
from __future__ import annotations

import re

_UNITS = {
    "": 1,
    "K": 1024,
    "M": 1024 ** 2,
    "G": 1024 ** 3,
    "T": 1024 ** 4,
}

_SIZE_RE = re.compile(r"^\s*(\d+)\s*([KMGT]?)(?:I?B)?\s*$", re.IGNORECASE)


def parse_byte_size(value: str) -> int:
    """Parse ``"512"``, ``"64K"``, ``"10MiB"`` or ``"1gb"`` into bytes.

    Suffixes are binary multiples.
    """

    match = _SIZE_RE.match(value)
    if match is None:
        raise ValueError(f"Invalid byte size: {value!r}")
    number, unit = match.groups()
    return int(number) * _UNITS[unit.upper()]
