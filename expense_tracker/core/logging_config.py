"""Logging setup shared by the API process and the test suite."""
from __future__ import annotations

import logging
import logging.handlers
import time
from pathlib import Path

from expense_tracker.core.config import Settings, settings
from expense_tracker.core.middleware import RequestIdFilter

LOG_FORMAT = "%(asctime)sZ | %(levelname)s | %(name)s | [%(request_id)s] %(message)s"
LOG_FILE_NAME = "app.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _build_handlers(log_dir: Path) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    formatter.converter = time.gmtime
    request_ids = RequestIdFilter()

    log_dir.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        ),
        logging.StreamHandler(),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(request_ids)
    return handlers


def setup_logging(current: Settings | None = None) -> None:
    """Route every logger through a rotating file and stderr, in UTC."""
    current = current or settings
    level = getattr(logging, current.LOG_LEVEL.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = _build_handlers(Path(current.LOG_DIR))

    # SQL statements are only logged when DEBUG is on.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if current.DEBUG else logging.WARNING)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)


__all__ = ["setup_logging"]
