import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional

import structlog

SERVICE_NAME = "authroutes"


class JSONFormatter(logging.Formatter):
    """One JSON object per line; structlog key/values land under "context"."""

    def __init__(self, service: str = SERVICE_NAME):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log_object = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": self.service,
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            "line": record.lineno,
        }

        if hasattr(record, "context"):
            log_object["context"] = record.context

        if record.exc_info:
            log_object["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_object, default=str)


def setup_logger(name: str = SERVICE_NAME, level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Setup logger with JSON formatting"""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Reconfiguring replaces handlers instead of stacking them
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter())
    logger.addHandler(console_handler)

    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5)
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def _context_to_extra(logger, method_name, event_dict):
    event = event_dict.pop("event", "")
    event_dict.pop("logger", None)
    event_dict.pop("level", None)
    return (event,), {"extra": {"context": event_dict}}


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Route structlog through the JSON stdlib logger.

    Every module logs with `structlog.get_logger(__name__)`; event names are
    snake_case and the key/value pairs end up under "context".
    """
    root = setup_logger(SERVICE_NAME, level, log_file)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _context_to_extra,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return root
