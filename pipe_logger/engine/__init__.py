"""Rotation engine primitives exposed as a convenience import."""

from .config import ByteSizeThreshold, Compression, LoggerConfig, RotateMethod, Tee
from .errors import (
    ConfigurationError,
    FileIsDirectory,
    InsufficientSpaceError,
    PipeLoggerError,
    RetentionCountTooSmall,
    RotateThresholdTooSmall,
)
from .logger import PipeLogger
from .naming import recover_rotated_names, rotated_file_name

__all__ = [
    "ByteSizeThreshold",
    "Compression",
    "ConfigurationError",
    "FileIsDirectory",
    "InsufficientSpaceError",
    "LoggerConfig",
    "PipeLogger",
    "PipeLoggerError",
    "RetentionCountTooSmall",
    "RotateMethod",
    "RotateThresholdTooSmall",
    "Tee",
    "recover_rotated_names",
    "rotated_file_name",
]
