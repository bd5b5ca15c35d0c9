from __future__ import annotations

import copy
import logging
import os
import sys
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "backoffice"
LOG_FORMAT = (
    "%(asctime)s %(levelname)-8s %(name)s "
    "request_id=%(request_id)s src=%(filename)s:%(lineno)d %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

REQUEST_ID: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    """Stamp every record with the id of the HTTP request being served."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.request_id = REQUEST_ID.get("-")
        return True


class LevelColorFormatter(logging.Formatter):
    """Console formatter that colors the level name. Off when NO_COLOR is set or stdout is not a TTY."""

    _RESET = "\x1b[0m"
    _LEVEL_COLORS: dict[int, str] = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[35m",
    }

    def __init__(self, *args, enable_color: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.enable_color = enable_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.enable_color:
            return super().format(record)
        colored = copy.copy(record)
        color = self._LEVEL_COLORS.get(colored.levelno, "")
        colored.levelname = f"{color}{colored.levelname}{self._RESET}"
        return super().format(colored)


def _color_enabled(stream) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _parse_level(level: Optional[str]) -> int:
    value = logging.getLevelName((level or "INFO").upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    *,
    log_dir: str | Path | None = None,
    log_file: str = "backoffice.log",
    level: str | None = None,
) -> logging.Logger:
    """
    Shared back-office logger: rotating file under LOG_DIR plus console.
    Every module calls this at import time; handlers are attached once.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if getattr(logger, "_configured", False):
        return logger

    from api.config import get_settings

    settings = get_settings()
    log_dir = Path(log_dir or settings.log_dir)
    numeric_level = _parse_level(level or settings.log_level)
    logger.setLevel(numeric_level)
    logger.propagate = False
    request_filter = RequestIdFilter()

    # A read-only deployment still gets console logs.
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            filename=str(log_dir / log_file),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
    except OSError:
        fh = None
    if fh is not None:
        fh.setLevel(numeric_level)
        fh.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        fh.addFilter(request_filter)
        logger.addHandler(fh)

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(numeric_level)
    ch.setFormatter(LevelColorFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT, enable_color=_color_enabled(sys.stdout)))
    ch.addFilter(request_filter)
    logger.addHandler(ch)

    logger._configured = True  # type: ignore[attr-defined]
    return logger


def set_request_id(request_id: Optional[str] = None) -> str:
    rid = request_id or uuid.uuid4().hex[:12]
    REQUEST_ID.set(rid)
    return rid


def clear_request_id() -> None:
    REQUEST_ID.set("-")
