"""Logging configuration for shortkey.

Everything logs under the ``shortkey`` logger hierarchy. Output goes to
stdout, optionally mirrored to a file, either as plain text or as one JSON
object per line.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON line.

    Messages routinely carry user-supplied URLs, so every field goes
    through ``json.dumps`` rather than string interpolation.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ``shortkey`` logger.

    Safe to call more than once; earlier handlers are replaced.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional file that receives the same records as stdout
        json_format: Emit JSON lines instead of text

    Returns:
        The configured ``shortkey`` logger
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    if json_format:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)

    logger = logging.getLogger("shortkey")
    logger.setLevel(numeric_level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    for handler in _build_handlers(log_file):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
