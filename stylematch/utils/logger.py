"""Logging setup for StyleMatch.

Each module logger gets a colored console handler (colorlog) and a
shared-format rotating file handler writing ``stylematch.log``. The log
directory is STYLEMATCH_LOG_DIR when set, else ``logs/`` at the project
root; the default level comes from LOG_LEVEL.
"""

import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional, Union

import colorlog

LOG_FILE_NAME = "stylematch.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5
PACKAGE_LOGGER = "stylematch"

_CONSOLE_FORMAT = "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s - %(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

# Levels set with set_package_log_level, by package name
_package_levels: dict[str, int] = {}


def _resolve_level(level: Union[str, int, None]) -> int:
    """Turn a level name (or None for LOG_LEVEL) into a logging constant."""
    if isinstance(level, int):
        return level
    name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def _package_level(name: str) -> Optional[int]:
    for package, level in _package_levels.items():
        if name == package or name.startswith(package + "."):
            return level
    return None


def _default_log_dir() -> Path:
    env_dir = os.environ.get("STYLEMATCH_LOG_DIR")
    if env_dir:
        return Path(env_dir)
    return Path(__file__).resolve().parents[2] / "logs"


def _build_handlers(level: int, log_dir: Path) -> list[logging.Handler]:
    """Create the console and rotating file handlers.

    Args:
        level: Level applied to both handlers
        log_dir: Directory for the log file, created if missing

    Returns:
        [console handler, file handler]
    """
    console = logging.StreamHandler()
    console.setFormatter(
        colorlog.ColoredFormatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT, log_colors=_LEVEL_COLORS)
    )

    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))

    handlers: list[logging.Handler] = [console, file_handler]
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def get_logger(name: str, log_dir: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Return the named logger, attaching handlers on first use.

    Args:
        name: Logger name, usually ``__name__``
        log_dir: Directory for the rotating log file
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (LOG_LEVEL when None)
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    resolved = _resolve_level(level if level is not None else _package_level(name))
    logger.setLevel(resolved)
    for handler in _build_handlers(resolved, log_dir or _default_log_dir()):
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def set_package_log_level(level: str, package: str = PACKAGE_LOGGER) -> None:
    """Apply a level to every existing logger of a package.

    Module loggers do not propagate, so each one is updated directly.
    Loggers of the package created afterwards start at this level too.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        package: Root logger name; its dotted children are included
    """
    resolved = _resolve_level(level)
    _package_levels[package] = resolved

    prefix = package + "."
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if isinstance(logger, logging.Logger) and (name == package or name.startswith(prefix)):
            logger.setLevel(resolved)
            for handler in logger.handlers:
                handler.setLevel(resolved)


def log_performance(logger: logging.Logger, operation: str, duration: float) -> None:
    """Log how long an operation took, in seconds."""
    logger.info(f"Performance: {operation} took {duration:.3f}s")


@contextmanager
def log_execution_time(logger: logging.Logger, operation: str) -> Iterator[None]:
    """Time the enclosed block and log start and end at DEBUG level.

    Usage:
        with log_execution_time(logger, "catalog embedding"):
            await index.ensure_embeddings(client)
    """
    logger.debug(f"Starting: {operation}")
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.debug(f"Finished: {operation} in {time.perf_counter() - start:.3f}s")


def log_exception(logger: logging.Logger, operation: str, exception: BaseException) -> None:
    """Log a failed operation.

    StyleMatch errors are logged with their code and context; anything
    else gets a full traceback.
    """
    details = getattr(exception, "to_dict", None)
    if callable(details):
        logger.error(f"Failed: {operation} - {exception} {details().get('context', {})}")
    else:
        logger.error(f"Failed: {operation}", exc_info=exception)
