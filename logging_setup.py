# logging_setup.py
from __future__ import annotations
import logging
import logging.config
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, List, Optional

# Chatty loggers kept at WARNING unless asked otherwise
DEFAULT_QUIET_LOGGERS: List[str] = [
    "asyncio",
    "urllib3",
]

FMT_PLAIN = "%(levelname)s | %(asctime)s | %(name)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | str | None = "logs",
    log_file_name: str = "sitemap.log",
    quiet_loggers: Optional[Iterable[str]] = None,
    file_max_bytes: int = 5 * 1024 * 1024,  # 5MB
    file_backup_count: int = 3,
) -> None:
    """
    Configure logging for the sitemap tool:
    - colored console output (colorlog)
    - rotating log file, skipped when log_dir is None
    - noisy third-party loggers silenced
    """
    log_level = log_level.upper()

    formatters = {
        "plain": {
            "format": FMT_PLAIN,
            "datefmt": DATEFMT,
        },
        "color": {
            "()": "colorlog.ColoredFormatter",
            "format": "%(log_color)s%(levelname)-8s%(reset)s | %(asctime)s | %(name)s | %(message)s",
            "datefmt": DATEFMT,
            "log_colors": {
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        },
    }

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "color",
        },
    }

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "()": RotatingFileHandler,
            "level": "INFO",
            "filename": str(log_dir / log_file_name),
            "maxBytes": file_max_bytes,
            "backupCount": file_backup_count,
            "encoding": "utf-8",
            "formatter": "plain",
        }

    loggers = {name: {"level": "WARNING"} for name in (quiet_loggers or DEFAULT_QUIET_LOGGERS)}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": loggers,
        "root": {
            "level": log_level,
            "handlers": list(handlers),
        },
    })

    logging.getLogger("sitemap").debug("Logging configured (level=%s, file=%s)", log_level, "file" in handlers)


def get_app_logger(name: str = "sitemap") -> logging.Logger:
    return logging.getLogger(name)
