"""Logging configuration."""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "apprating"
# sklearn/xgboost warnings raised during search end up here once captured
WARNINGS_LOGGER = "py.warnings"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handlers(
    level: int,
    log_dir: Optional[Path],
    log_file: Optional[str],
    max_bytes: int,
    backup_count: int,
) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    # stdout, so log lines interleave with the printed result tables
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir and log_file:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_dir / log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,  # 5 MB
    backup_count: int = 5,
    capture_warnings: bool = True,
) -> None:
    """Configure the apprating loggers: console plus an optional rotating file.

    With capture_warnings, library warnings (convergence, deprecations) go
    through the same handlers instead of raw stderr.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    handlers = _handlers(level, log_dir, log_file, max_bytes, backup_count)

    names = [ROOT_LOGGER] + ([WARNINGS_LOGGER] if capture_warnings else [])
    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers.clear()
        logger.propagate = False
        for handler in handlers:
            logger.addHandler(handler)
    logging.captureWarnings(capture_warnings)


def get_logger(name: str) -> logging.Logger:
    """Logger under the apprating namespace; module names are kept as-is."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
