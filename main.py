"""Application entry point for the pipe logger command."""
from __future__ import annotations

from pipe_logger.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
