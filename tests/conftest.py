"""Shared fixtures for the pipe logger tests."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

import pytest

LOG_FILE_NAME = "logfile.log"


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / LOG_FILE_NAME


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    """Poll ``predicate`` until it holds; background compression is never joined."""

    def _wait(predicate: Callable[[], bool], timeout: float = 10.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.05)
        return predicate()

    return _wait
