"""
Structured logging setup.

JSON output for deployments, plain text for a console. Registry operations
attach ``student_id``, ``course_id`` and ``error_code`` as extra fields.
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = ("student_id", "course_id", "error_code")


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text") -> logging.Handler:
    """Configure the ``unireg`` logger. Calling it again replaces the previous handler."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))

    logger = logging.getLogger("unireg")
    for existing in [h for h in logger.handlers if getattr(h, "_unireg_handler", False)]:
        logger.removeHandler(existing)
    handler._unireg_handler = True
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
