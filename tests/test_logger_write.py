"""Unit tests for writing and size-based rotation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from pipe_logger.engine import (
    ByteSizeThreshold,
    InsufficientSpaceError,
    LoggerConfig,
    PipeLogger,
    Tee,
)


class ShortWriter:
    """Handle stand-in that drops the last byte of every write."""

    def __init__(self, inner) -> None:
        self.inner = inner

    def write(self, data: bytes) -> int:
        return self.inner.write(data[:-1])

    def flush(self) -> None:
        self.inner.flush()

    def fileno(self) -> int:
        return self.inner.fileno()

    def close(self) -> None:
        self.inner.close()


def test_build_creates_empty_file(log_path: Path) -> None:
    with PipeLogger(LoggerConfig(log_path)):
        pass

    assert log_path.is_file()
    assert log_path.read_bytes() == b""


def test_write_and_write_line(log_path: Path) -> None:
    with PipeLogger(LoggerConfig(log_path)) as logger:
        assert logger.write_line("This is a log.") is None
        assert logger.write("Isn't it?") is None
        assert logger.file_size == 24

    assert log_path.read_text("utf-8") == "This is a log.\nIsn't it?"


def test_existing_content_counts_towards_threshold(log_path: Path) -> None:
    log_path.write_text("0123456789", encoding="utf-8")

    with PipeLogger.open(log_path, rotate=12) as logger:
        assert logger.file_size == 10
        rotated = logger.write("ab")

    assert rotated is not None
    assert rotated.read_text("utf-8") == "0123456789ab"


def test_empty_write_is_a_no_op(log_path: Path, capsys) -> None:
    with PipeLogger.open(log_path, rotate=2, tee=Tee.STDOUT) as logger:
        assert logger.write("") is None
        assert logger.write(b"") is None
        assert logger.file_size == 0

    assert capsys.readouterr().out == ""


def test_bytes_are_decoded_leniently(log_path: Path) -> None:
    with PipeLogger(LoggerConfig(log_path)) as logger:
        logger.write(b"caf\xc3\xa9 \xff")

    assert log_path.read_text("utf-8") == "café \ufffd"


@pytest.mark.parametrize("tee, stream", [(Tee.STDOUT, "out"), (Tee.STDERR, "err")])
def test_tee_mirrors_text(log_path: Path, capsys, tee: Tee, stream: str) -> None:
    with PipeLogger(LoggerConfig(log_path, tee=tee)) as logger:
        logger.write_line("This is a log.")
        logger.write_line("Isn't it?")

    captured = capsys.readouterr()
    assert getattr(captured, stream) == "This is a log.\nIsn't it?\n"
    assert log_path.read_text("utf-8") == "This is a log.\nIsn't it?\n"


def test_rotation_at_threshold(log_path: Path) -> None:
    config = LoggerConfig(log_path, rotate=ByteSizeThreshold(24))
    with PipeLogger(config) as logger:
        assert logger.write_line("This is a log.") is None
        rotated = logger.write_line("Isn't it?")
        assert rotated is not None
        assert logger.file_size == 0
        assert log_path.stat().st_size == 0
        assert logger.write_line("New file!!!!") is None

    assert rotated.parent == log_path.parent
    assert rotated.name.startswith("logfile-")
    assert rotated.name.endswith(".log")
    assert rotated.read_text("utf-8") == "This is a log.\nIsn't it?"
    assert log_path.read_text("utf-8") == "New file!!!!\n"


def test_rotated_files_concatenate_to_the_full_stream(log_path: Path) -> None:
    expected = ""
    rotations = 0
    with PipeLogger.open(log_path, rotate=50) as logger:
        for idx in range(40):
            text = f"event number {idx}"
            rotated = logger.write_line(text)
            expected += text
            if rotated is None:
                expected += "\n"
            else:
                rotations += 1

    rotated_files = sorted(p for p in log_path.parent.iterdir() if p != log_path)
    assert len(rotated_files) == rotations
    assert rotations > 5
    content = "".join(p.read_text("utf-8") for p in rotated_files)
    content += log_path.read_text("utf-8")
    assert content == expected


def test_same_millisecond_waits_for_a_new_timestamp(log_path: Path) -> None:
    start = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
    ticks = iter(
        [
            start,
            start + timedelta(microseconds=400),
            start + timedelta(microseconds=900),
            start + timedelta(milliseconds=1),
        ]
    )
    sleeps = []
    logger = PipeLogger(
        LoggerConfig(log_path, rotate=ByteSizeThreshold(2)),
        clock=lambda: next(ticks),
        sleep=sleeps.append,
    )
    with logger:
        first = logger.write("ab")
        second = logger.write("cd")

    assert first.name == "logfile-2024-01-02-03-04-05-678.log"
    assert second.name == "logfile-2024-01-02-03-04-05-679.log"
    assert sleeps == [0.03, 0.03]
    assert first.read_text("utf-8") == "ab"
    assert second.read_text("utf-8") == "cd"


def test_short_write_raises_without_rotating(log_path: Path) -> None:
    logger = PipeLogger.open(log_path, rotate=3)
    logger._state.handle = ShortWriter(logger._state.handle)

    with pytest.raises(InsufficientSpaceError):
        logger.write("abc")

    assert logger.file_size == 2
    assert logger.rotated_names == []
    logger.close()
    assert log_path.read_bytes() == b"ab"


def test_failed_copy_keeps_logger_usable(
    log_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    logger = PipeLogger.open(log_path, rotate=4)

    def _boom(*args, **kwargs):
        raise OSError("disk on fire")

    with monkeypatch.context() as patch:
        patch.setattr("pipe_logger.engine.logger.shutil.copy2", _boom)
        with pytest.raises(OSError, match="disk on fire"):
            logger.write("abcd")

    assert not logger.closed
    assert logger.file_size == 4
    rotated = logger.write("e")
    logger.close()

    assert rotated is not None
    assert rotated.read_text("utf-8") == "abcde"
    assert log_path.read_bytes() == b""


def test_failed_truncate_keeps_logger_usable(
    log_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    logger = PipeLogger.open(log_path, rotate=4)

    def _boom(path):
        raise OSError("too many open files")

    with monkeypatch.context() as patch:
        patch.setattr("pipe_logger.engine.logger.open_truncate", _boom)
        with pytest.raises(OSError, match="too many open files"):
            logger.write("abcd")

    assert not logger.closed
    assert logger.file_size == 4
    assert len(logger.rotated_names) == 1
    first = log_path.parent / logger.rotated_names[0]
    assert first.read_text("utf-8") == "abcd"
    assert log_path.read_text("utf-8") == "abcd"

    rotated = logger.write("e")
    logger.close()

    assert rotated is not None
    assert rotated.read_text("utf-8") == "abcde"
    assert log_path.read_bytes() == b""


def test_closed_logger_rejects_writes(log_path: Path) -> None:
    logger = PipeLogger(LoggerConfig(log_path))
    logger.close()
    logger.close()

    assert logger.closed
    with pytest.raises(ValueError):
        logger.write("late")
