"""Rotated file naming and recovery of rotations from a directory listing."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, List, Sequence, Tuple

from .config import COMPRESSED_SUFFIXES

# -%Y-%m-%d-%H-%M-%S-mmm
TIMESTAMP_WIDTH = 24
_TIMESTAMP_RE = re.compile(r"^-[12][0-9]{3}(-[0-5][0-9]){5}-[0-9]{3}$")


def split_file_name(file_name: str) -> Tuple[str, str]:
    """Split ``file_name`` at its last dot into ``(stem, ext)``.

    ``ext`` keeps the dot and is empty when the name has none.
    """

    index = file_name.rfind(".")
    if index < 0:
        return file_name, ""
    return file_name[:index], file_name[index:]


def format_timestamp(moment: datetime) -> str:
    return f"{moment:%Y-%m-%d-%H-%M-%S}-{moment.microsecond // 1000:03d}"


def rotated_file_name(stem: str, ext: str, moment: datetime) -> str:
    """Build the fixed-width name whose sort order is the rotation order."""

    return f"{stem}-{format_timestamp(moment)}{ext}"


def recover_rotated_names(
    names: Iterable[str],
    file_name: str,
    compressed_suffixes: Sequence[str] = COMPRESSED_SUFFIXES,
) -> List[str]:
    """Return the rotated siblings of ``file_name`` found in ``names``.

    Compressed entries are reported under their uncompressed name. The
    result is de-duplicated and sorted, which is also chronological order.
    """

    stem, ext = split_file_name(file_name)
    stem_len = len(stem)
    recovered = set()

    for name in names:
        if not name.startswith(stem):
            continue

        point_index = name.rfind(".")
        if point_index < 0:
            point_index = len(name)
        if point_index < stem_len + TIMESTAMP_WIDTH:
            continue

        if not _TIMESTAMP_RE.match(name[stem_len : stem_len + TIMESTAMP_WIDTH]):
            continue

        name_ext = name[point_index:]
        if name_ext == ext:
            recovered.add(name)
        elif name_ext in compressed_suffixes and name[:point_index].endswith(ext):
            recovered.add(name[:point_index])

    return sorted(recovered)


__all__ = [
    "TIMESTAMP_WIDTH",
    "format_timestamp",
    "recover_rotated_names",
    "rotated_file_name",
    "split_file_name",
]
