"""Console mirroring for tee mode."""
from __future__ import annotations

import sys
from typing import Optional, TextIO

from ..engine.config import Tee


def tee_stream(tee: Optional[Tee]) -> Optional[TextIO]:
    # Looked up on each call so redirected sys streams are honoured.
    if tee is Tee.STDOUT:
        return sys.stdout
    if tee is Tee.STDERR:
        return sys.stderr
    return None


def echo(tee: Optional[Tee], text: str) -> None:
    stream = tee_stream(tee)
    if stream is not None:
        stream.write(text)


def error_stream(tee: Optional[Tee]) -> TextIO:
    """Return the stream background failures are reported on."""

    return tee_stream(tee) or sys.stderr


def report_error(tee: Optional[Tee], message: str) -> None:
    stream = error_stream(tee)
    stream.write(f"{message}\n")
    stream.flush()
