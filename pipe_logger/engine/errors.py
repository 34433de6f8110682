"""Exceptions raised while building or driving a pipe logger."""

from __future__ import annotations

from pathlib import Path


class PipeLoggerError(Exception):
    """Base class for errors raised by the logger itself."""


class ConfigurationError(PipeLoggerError, ValueError):
    """Raised when a :class:`LoggerConfig` holds an unusable value."""


class RotateThresholdTooSmall(ConfigurationError):
    def __init__(self, size: int) -> None:
        super().__init__(f"A rotation threshold must be at least 2 bytes, got {size}")
        self.size = size


class RetentionCountTooSmall(ConfigurationError):
    def __init__(self, count: int) -> None:
        super().__init__(f"A retention count must be at least 1, got {count}")
        self.count = count


class FileIsDirectory(PipeLoggerError):
    """The configured log path points at a directory."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"A log file cannot be a directory: '{path}'")
        self.path = Path(path)


class InsufficientSpaceError(BrokenPipeError):
    """The file system accepted fewer bytes than were handed to it."""

    def __init__(self, requested: int, written: int) -> None:
        super().__init__(
            f"The space is not enough: wrote {written} of {requested} bytes"
        )
        self.requested = requested
        self.written = written


__all__ = [
    "ConfigurationError",
    "FileIsDirectory",
    "InsufficientSpaceError",
    "PipeLoggerError",
    "RetentionCountTooSmall",
    "RotateThresholdTooSmall",
]
