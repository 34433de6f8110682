"""Append-only log writer with size-based rotation."""

from __future__ import annotations

import logging
import os
import shutil
import time
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..utils.console import echo, report_error
from .compressor import start_compression
from .config import ByteSizeThreshold, Compression, LoggerConfig, Tee
from .errors import InsufficientSpaceError
from .naming import rotated_file_name
from .retention import RetentionManager
from .state import LoggerState, initialize, open_append, open_truncate

LOGGER = logging.getLogger(__name__)

FILE_WAIT_SECONDS = 0.03


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PipeLogger:
    """Write text to a log file, rotating it once it reaches a size threshold.

    A logger is meant to be driven by a single caller. Rotation copies the
    active file to ``{stem}-{YYYY-MM-DD-HH-MM-SS}-{mmm}{ext}`` next to it,
    truncates the active file and, when compression is enabled, starts a
    thread that replaces the copy with a compressed one. ``write`` and
    ``write_line`` return the path of the rotated file when the call rotated
    and ``None`` otherwise. With compression the returned path carries the
    codec suffix even though the compressed file may not exist yet.
    """

    def __init__(
        self,
        config: LoggerConfig,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.config = config
        self._clock = clock or _utc_now
        self._sleep = sleep or time.sleep
        self._state: LoggerState = initialize(config)
        self._retention = RetentionManager(
            self._state.folder_path, self._state.rotated_names, config.count
        )

    @classmethod
    def open(
        cls,
        log_path: Union[str, Path],
        *,
        rotate: Optional[int] = None,
        count: Optional[int] = None,
        compress: bool = False,
        tee: Optional[Tee] = None,
        compression: Compression = Compression.XZ,
    ) -> "PipeLogger":
        """Shortcut taking the rotation threshold as a plain byte count."""

        config = LoggerConfig(
            log_path=log_path,
            rotate=ByteSizeThreshold(rotate) if rotate is not None else None,
            count=count,
            compress=compress,
            tee=tee,
            compression=compression,
        )
        return cls(config)

    # ------------------------------------------------------------------
    @property
    def file_path(self) -> Path:
        return self._state.file_path

    @property
    def file_size(self) -> int:
        return self._state.file_size

    @property
    def rotated_names(self) -> List[str]:
        return list(self._state.rotated_names)

    @property
    def closed(self) -> bool:
        return self._state.handle is None

    # ------------------------------------------------------------------
    def write(self, text: Union[str, bytes]) -> Optional[Path]:
        """Append ``text`` and rotate if the threshold has been reached."""

        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        if not text:
            return None

        handle = self._require_handle()
        echo(self.config.tee, text)

        data = text.encode("utf-8")
        written = handle.write(data) or 0
        self._state.file_size += written
        if written != len(data):
            raise InsufficientSpaceError(len(data), written)

        rotate = self.config.rotate
        if rotate is None or self._state.file_size < rotate.size:
            return None
        return self._rotate()

    def write_line(self, text: Union[str, bytes] = "") -> Optional[Path]:
        """Like :meth:`write`, then append a newline unless the call rotated."""

        rotated = self.write(text)
        if rotated is None:
            written = self._require_handle().write(b"\n") or 0
            self._state.file_size += written
            if written != 1:
                raise InsufficientSpaceError(1, written)
            echo(self.config.tee, "\n")
        return rotated

    def flush(self) -> None:
        self._require_handle().flush()

    def close(self) -> None:
        handle = self._state.handle
        if handle is None:
            return
        self._state.handle = None
        handle.close()

    def __enter__(self) -> "PipeLogger":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    def _require_handle(self):
        if self._state.handle is None:
            raise ValueError("I/O operation on closed logger")
        return self._state.handle

    def _rotate(self) -> Path:
        state = self._state
        moment = self._next_rotation_time()

        name = rotated_file_name(state.stem, state.ext, moment)
        rotated_path = state.folder_path / name

        handle = state.handle
        state.handle = None
        try:
            try:
                handle.flush()
                os.fsync(handle.fileno())
            finally:
                handle.close()
            # Copy rather than rename: the active file keeps its name.
            shutil.copy2(state.file_path, rotated_path)
        except OSError:
            state.handle = open_append(state.file_path)
            raise

        if self.config.compress:
            start_compression(
                rotated_path,
                self.config.compression,
                partial(report_error, self.config.tee),
            )

        self._retention.push(name)

        try:
            state.handle = open_truncate(state.file_path)
        except OSError:
            # The rotation stays recorded; the counter still matches the file.
            state.handle = open_append(state.file_path)
            raise
        state.file_size = 0
        LOGGER.info("Rotated %s to %s", state.file_path, rotated_path)

        if self.config.compress:
            return Path(f"{rotated_path}{self.config.compressed_suffix}")
        return rotated_path

    def _next_rotation_time(self) -> datetime:
        """Return a millisecond-resolution time not used by the last rotation."""

        moment = self._truncate(self._clock())
        while moment == self._state.last_rotated_at:
            # Coarse OS clocks can repeat a millisecond.
            self._sleep(FILE_WAIT_SECONDS)
            moment = self._truncate(self._clock())
        self._state.last_rotated_at = moment
        return moment

    @staticmethod
    def _truncate(moment: datetime) -> datetime:
        return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


__all__ = ["FILE_WAIT_SECONDS", "PipeLogger"]
