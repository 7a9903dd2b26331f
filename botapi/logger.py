"""BotAPILogger -- singleton JSON logger for the ``botapi`` logger tree.

Library modules log through ``logging.getLogger("botapi.<module>")`` and attach
structured context with ``extra={...}``.  Applications that want those records
as single-line JSON call :meth:`BotAPILogger.get_logger` once at startup.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

# Attribute names every LogRecord carries; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord(name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None))
)


class _JsonFormatter(logging.Formatter):
    """Render a record as one JSON object per line.

    The base keys are timestamp, level, logger, message, module and func_name;
    ``extra`` values are merged in after them, so a call such as::

        logger.debug("Response received", extra={"api_endpoint": "getMe", "status_code": 200})

    yields ``{"timestamp": ..., "level": "DEBUG", ..., "api_endpoint": "getMe", "status_code": 200}``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func_name": record.funcName,
        }
        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key not in entry
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class BotAPILogger:
    """Configures the ``botapi`` logger once: stderr output plus an optional rotating file.

    Usage::

        from botapi.logger import BotAPILogger

        logger = BotAPILogger.get_logger(logging.DEBUG, "logs/botapi.log")
    """

    LOGGER_NAME: str = "botapi"
    MAX_BYTES: int = 5 * 1024 * 1024
    BACKUP_COUNT: int = 5

    _instance: Optional["BotAPILogger"] = None

    def __new__(cls, level: int = logging.INFO, log_file: Optional[str] = None) -> "BotAPILogger":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance.logger = instance._configure(level, log_file)
            cls._instance = instance
        return cls._instance

    def _configure(self, level: int, log_file: Optional[str]) -> logging.Logger:
        logger = logging.getLogger(self.LOGGER_NAME)
        logger.setLevel(level)
        if logger.handlers:
            # Already wired, e.g. after a module reload.
            return logger

        handlers: list = [logging.StreamHandler()]
        if log_file:
            directory = os.path.dirname(log_file)
            if directory:
                os.makedirs(directory, exist_ok=True)
            handlers.append(
                RotatingFileHandler(log_file, maxBytes=self.MAX_BYTES, backupCount=self.BACKUP_COUNT, encoding="utf-8")
            )

        formatter = _JsonFormatter()
        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        return logger

    @staticmethod
    def get_logger(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
        """Return the configured ``botapi`` logger.

        Only the first call's *level* and *log_file* take effect.
        """
        return BotAPILogger(level, log_file).logger

    @classmethod
    def reset(cls) -> None:
        """Flush, close and detach every handler, and forget the singleton."""
        instance, cls._instance = cls._instance, None
        if instance is None:
            return
        for handler in list(instance.logger.handlers):
            handler.flush()
            handler.close()
            instance.logger.removeHandler(handler)
