"""Background compression of rotated log files."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable

from .config import Compression

LOGGER = logging.getLogger(__name__)

BUFFER_SIZE = 4096 * 4


class BackgroundCompressor(threading.Thread):
    """Compress one rotated file into ``source + suffix`` and delete the source.

    The thread is started by the writer and never joined by it. It shares
    nothing with the retention bookkeeping except the file on disk: when the
    source disappears before or while it is compressed, the rotation was
    evicted and the partial destination is removed without reporting an
    error. Other failures go to ``report`` and leave the files as they are.
    """

    def __init__(
        self,
        source: Path,
        compression: Compression,
        report: Callable[[str], None],
    ) -> None:
        super().__init__(name=f"compress-{Path(source).name}", daemon=False)
        self.source = Path(source)
        self.destination = Path(f"{self.source}{compression.suffix}")
        self.compression = compression
        self._report = report

    def run(self) -> None:
        try:
            destination = open(self.destination, "wb")
        except OSError as exc:
            self._fail(exc)
            return

        try:
            with destination:
                with open(self.source, "rb") as source:
                    finished = self._stream(source, destination)
        except FileNotFoundError:
            self._discard_destination()
            return
        except OSError as exc:
            self._fail(exc)
            return

        if not finished:
            return

        try:
            os.remove(self.source)
        except FileNotFoundError:
            # Evicted while being compressed.
            self._discard_destination()
            return
        except OSError as exc:
            self._fail(exc)
            return

        LOGGER.debug("Compressed %s to %s", self.source, self.destination)

    def _stream(self, source, destination) -> bool:
        with self.compression.open_writer(destination) as writer:
            for chunk in iter(lambda: source.read(BUFFER_SIZE), b""):
                written = writer.write(chunk)
                if written != len(chunk):
                    self._report("The space is not enough.")
                    LOGGER.warning(
                        "Short write while compressing %s (%d of %d bytes)",
                        self.source,
                        written,
                        len(chunk),
                    )
                    return False
        return True

    def _discard_destination(self) -> None:
        LOGGER.debug("%s was evicted before compression finished", self.source)
        try:
            os.remove(self.destination)
        except OSError as exc:
            LOGGER.debug("Unable to remove %s: %s", self.destination, exc)

    def _fail(self, exc: OSError) -> None:
        self._report(str(exc))
        LOGGER.warning("Compression of %s failed: %s", self.source, exc)


def start_compression(
    source: Path,
    compression: Compression,
    report: Callable[[str], None],
) -> BackgroundCompressor:
    worker = BackgroundCompressor(source, compression, report)
    worker.start()
    return worker


__all__ = ["BUFFER_SIZE", "BackgroundCompressor", "start_compression"]
