"""Store, rotate and compress logs piped from a process."""

from .engine import (
    ByteSizeThreshold,
    Compression,
    LoggerConfig,
    PipeLogger,
    PipeLoggerError,
    Tee,
)

__version__ = "0.1.0"

__all__ = [
    "ByteSizeThreshold",
    "Compression",
    "LoggerConfig",
    "PipeLogger",
    "PipeLoggerError",
    "Tee",
]
