"""Immutable configuration consumed when a logger is built."""

from __future__ import annotations

import gzip
import lzma
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .errors import RetentionCountTooSmall, RotateThresholdTooSmall

MIN_ROTATE_SIZE = 2
MIN_RETENTION_COUNT = 1


@dataclass(frozen=True)
class ByteSizeThreshold:
    """Rotate once the active file holds at least ``size`` bytes."""

    size: int


RotateMethod = ByteSizeThreshold


class Tee(Enum):
    """Console stream that mirrors everything written to the log."""

    STDOUT = "stdout"
    STDERR = "stderr"


class Compression(Enum):
    """Codec used by the background compressor."""

    XZ = "xz"
    GZIP = "gzip"

    @property
    def suffix(self) -> str:
        return _SUFFIXES[self]

    def open_writer(self, handle: BinaryIO) -> BinaryIO:
        """Wrap ``handle`` in a compressing writer at the strongest level."""

        if self is Compression.XZ:
            return lzma.LZMAFile(handle, mode="wb", preset=9)
        return gzip.GzipFile(fileobj=handle, mode="wb", compresslevel=9)


_SUFFIXES = {
    Compression.XZ: ".xz",
    Compression.GZIP: ".gz",
}

COMPRESSED_SUFFIXES = tuple(_SUFFIXES.values())


@dataclass(frozen=True)
class LoggerConfig:
    """Everything needed to build a :class:`PipeLogger`.

    ``rotate`` is ``None`` for a log that grows forever. ``count`` bounds
    how many rotated files may exist at once; ``None`` keeps them all.
    ``compress`` enables background compression of rotated files with
    ``compression`` as the codec.
    """

    log_path: Union[str, Path]
    rotate: Optional[ByteSizeThreshold] = None
    count: Optional[int] = None
    compress: bool = False
    tee: Optional[Tee] = None
    compression: Compression = Compression.XZ

    def validate(self) -> None:
        if self.rotate is not None and self.rotate.size < MIN_ROTATE_SIZE:
            raise RotateThresholdTooSmall(self.rotate.size)
        if self.count is not None and self.count < MIN_RETENTION_COUNT:
            raise RetentionCountTooSmall(self.count)

    @property
    def compressed_suffix(self) -> str:
        return self.compression.suffix


__all__ = [
    "COMPRESSED_SUFFIXES",
    "ByteSizeThreshold",
    "Compression",
    "LoggerConfig",
    "RotateMethod",
    "Tee",
]
