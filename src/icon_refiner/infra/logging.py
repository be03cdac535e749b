"""Logging configuration helpers."""

from __future__ import annotations

import logging
import logging.handlers
from typing import Iterable, Optional

from icon_refiner.config.models import LoggingConfig

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that log every inference call at INFO.
NOISY_LOGGERS = ("ultralytics", "PIL", "matplotlib")


def configure_logging(
    config: LoggingConfig,
    level_override: Optional[str] = None,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Setup root logging: rotating file handler plus optional console handler."""

    level_name = (level_override or config.level).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    logging.captureWarnings(True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = []

    log_path = config.resolved_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handlers.append(file_handler)

    if config.console:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)
    for name in quiet:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
