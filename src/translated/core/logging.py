"""
Logging configuration for applications using translated.

Routes the root logger, this package's loggers and the SQLAlchemy engine
logger through one formatter with millisecond timestamps.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class UnifiedFormatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        ct = datetime.fromtimestamp(record.created)
        return ct.strftime(datefmt or LOG_DATE_FORMAT) + f".{int(record.msecs):03d}"


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    fmt: str = LOG_FORMAT,
    sql_echo: bool = False,
) -> None:
    """
    Configure the root logger.

    Args:
        level: DEBUG, INFO, WARNING, or ERROR
        log_file: Optional file path for persistent logs
        fmt: Log record format
        sql_echo: Log every SQL statement emitted by SQLAlchemy
    """
    formatter = UnifiedFormatter(fmt=fmt, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    sa_logger = logging.getLogger("sqlalchemy.engine")
    sa_logger.handlers.clear()
    sa_logger.propagate = True
    sa_logger.setLevel(logging.INFO if sql_echo else logging.WARNING)


def setup_logging_from_settings() -> None:
    """Configure logging from the loaded settings file."""
    from src.translated.core.config import get_settings

    settings = get_settings()
    setup_logging(
        level=settings.logging.level,
        log_file=settings.logging.file,
        fmt=settings.logging.format,
        sql_echo=settings.database.echo,
    )
