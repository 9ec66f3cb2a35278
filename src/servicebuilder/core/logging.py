from __future__ import annotations

import logging
import sys
from typing import IO

from pythonjsonlogger.json import JsonFormatter

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO", *, stream: IO[str] | None = None) -> None:
    """Send all log records to ``stream`` (stdout by default) as JSON lines."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter(LOG_FORMAT))

    # Replace handlers so repeated calls don't duplicate output
    root.handlers = [handler]
