"""Bounded bookkeeping of rotated files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence

from .config import COMPRESSED_SUFFIXES

LOGGER = logging.getLogger(__name__)


class RetentionManager:
    """Keep at most ``count`` rotated files next to the active log.

    ``names`` is shared with the owning logger's state and is mutated in
    place, oldest first. Deleting a file that is already gone is not an
    error: a background compressor may have replaced it, or a previous
    eviction may have removed it.
    """

    def __init__(
        self,
        folder_path: Path,
        names: List[str],
        count: Optional[int] = None,
        compressed_suffixes: Sequence[str] = COMPRESSED_SUFFIXES,
    ) -> None:
        self.folder_path = Path(folder_path)
        self.names = names
        self.count = count
        self.compressed_suffixes = tuple(compressed_suffixes)

    def push(self, name: str) -> List[str]:
        """Record a new rotation and return the names evicted because of it."""

        self.names.append(name)
        evicted: List[str] = []
        if self.count is None:
            return evicted

        while len(self.names) >= self.count:
            oldest = self.names.pop(0)
            self._remove(oldest)
            for suffix in self.compressed_suffixes:
                self._remove(oldest + suffix)
            evicted.append(oldest)

        if evicted:
            LOGGER.debug("Evicted rotated file(s): %s", ", ".join(evicted))
        return evicted

    def _remove(self, name: str) -> None:
        try:
            os.remove(self.folder_path / name)
        except OSError as exc:
            LOGGER.debug("Unable to remove rotated file %s: %s", name, exc)


__all__ = ["RetentionManager"]
