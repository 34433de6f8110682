"""Command line interface: pipe standard input into a rotating log."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from .engine.config import ByteSizeThreshold, Compression, LoggerConfig, Tee
from .engine.errors import PipeLoggerError
from .engine.logger import PipeLogger
from .utils.sizes import parse_byte_size

LOGGER = logging.getLogger(__name__)


def _byte_size(value: str) -> int:
    try:
        return parse_byte_size(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_config(args: argparse.Namespace) -> LoggerConfig:
    return LoggerConfig(
        log_path=args.log_path,
        rotate=ByteSizeThreshold(args.rotate) if args.rotate is not None else None,
        count=args.count,
        compress=args.compress,
        tee=Tee(args.tee) if args.tee else None,
        compression=Compression(args.codec),
    )


def build_logger(config: LoggerConfig) -> PipeLogger:
    return PipeLogger(config)


def pipe(logger: PipeLogger, stream: TextIO) -> int:
    """Copy ``stream`` into ``logger`` line by line; return the rotation count."""

    rotations = 0
    for line in stream:
        if logger.write(line) is not None:
            rotations += 1
    return rotations


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pipe-logger",
        description="Store, rotate and compress logs read from standard input",
    )
    parser.add_argument("log_path", help="Path of the active log file")
    parser.add_argument(
        "--rotate",
        type=_byte_size,
        help="Rotate once the log reaches this size (e.g. 4096, 64K, 10MiB)",
    )
    parser.add_argument(
        "--count",
        type=int,
        help="Maximum number of log files to keep, the active one included",
    )
    parser.add_argument("--compress", action="store_true", help="Compress rotated files")
    parser.add_argument(
        "--codec",
        choices=[codec.value for codec in Compression],
        default=Compression.XZ.value,
    )
    parser.add_argument(
        "--tee",
        choices=[tee.value for tee in Tee],
        help="Also echo the input to this console stream",
    )
    parser.add_argument("--verbose", action="store_true")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )

    try:
        logger = build_logger(build_config(args))
    except (PipeLoggerError, OSError) as exc:
        parser.exit(2, f"pipe-logger: {exc}\n")

    with logger:
        rotations = pipe(logger, stdin if stdin is not None else sys.stdin)
    LOGGER.info("Finished with %d rotation(s)", rotations)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
