# jobboard/logging_config.py
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from .config import settings


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data, default=str)


def setup_logging(name: str = "jobboard", level: str | None = None) -> logging.Logger:
    """Attach a single stdout handler to the ``name`` logger."""
    log_level = (level or settings.LOG_LEVEL).upper()

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_JSON:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    logger.addHandler(handler)

    if log_level == "DEBUG":
        logger.debug("Debug logging enabled")

    return logger
