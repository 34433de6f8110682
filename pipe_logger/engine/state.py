"""Build-time validation and the mutable state owned by one logger."""

from __future__ import annotations

import errno
import logging
import os
import stat
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .config import LoggerConfig
from .errors import FileIsDirectory
from .naming import recover_rotated_names, split_file_name

LOGGER = logging.getLogger(__name__)

_WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


@dataclass
class LoggerState:
    """Mutable bookkeeping for the active file and its rotations."""

    handle: Optional[object]
    file_size: int
    file_path: Path
    folder_path: Path
    file_name: str
    stem: str
    ext: str
    rotated_names: List[str] = field(default_factory=list)
    last_rotated_at: Optional[datetime] = None


def open_append(path: Path):
    return open(path, "ab", buffering=0)


def open_truncate(path: Path):
    return open(path, "wb", buffering=0)


def initialize(config: LoggerConfig) -> LoggerState:
    """Validate ``config`` against the file system and open the active file.

    Nothing is created on disk unless every check passes. Rotated siblings
    left by a previous run are recovered from the parent directory so that
    retention keeps counting them.
    """

    config.validate()

    file_path = Path(os.path.abspath(os.fspath(config.log_path)))
    folder_path = file_path.parent

    try:
        file_stat = os.stat(file_path)
    except FileNotFoundError:
        file_stat = None

    if file_stat is not None:
        if stat.S_ISDIR(file_stat.st_mode):
            raise FileIsDirectory(file_path)
        _ensure_writable(file_path, file_stat)
        file_size = file_stat.st_size
        if config.rotate is not None:
            _ensure_writable(folder_path, os.stat(folder_path))
    else:
        file_size = 0
        if folder_path == file_path:
            raise FileNotFoundError(
                errno.ENOENT, "The log file's parent does not exist", str(file_path)
            )
        folder_stat = os.stat(folder_path)
        if not stat.S_ISDIR(folder_stat.st_mode):
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(folder_path))
        _ensure_writable(folder_path, folder_stat)

    file_name = file_path.name
    stem, ext = split_file_name(file_name)
    with os.scandir(folder_path) as entries:
        names = [entry.name for entry in entries if entry.is_file()]
    rotated_names = recover_rotated_names(names, file_name)
    if rotated_names:
        LOGGER.debug(
            "Recovered %d rotated file(s) for %s", len(rotated_names), file_path
        )

    handle = open_append(file_path)

    return LoggerState(
        handle=handle,
        file_size=file_size,
        file_path=file_path,
        folder_path=folder_path,
        file_name=file_name,
        stem=stem,
        ext=ext,
        rotated_names=rotated_names,
    )


def _ensure_writable(path: Path, path_stat: os.stat_result) -> None:
    # Read-only means no write bit for anyone, whoever the effective user is.
    if not path_stat.st_mode & _WRITE_BITS:
        raise PermissionError(errno.EACCES, "Path is read-only", str(path))


__all__ = ["LoggerState", "initialize", "open_append", "open_truncate"]
