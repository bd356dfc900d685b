"""
Logging for siteplan.

All modules log through children of the ``siteplan`` logger. The package
logger owns a single handler, which writes to stderr unless the
``[logging] file`` setting names a log file. Records never propagate to the
root logger, so uvicorn's own log configuration is left alone.

Usage:
    from siteplan.core.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Moved %s under %s", item_id, parent_id)
"""

import logging
import sys
from typing import Any, Mapping, Optional, Union

PACKAGE_NAME = "siteplan"
LOG_FORMAT = "%(levelname)s - %(name)s - %(message)s"
DEFAULT_LEVEL = logging.INFO


def _package_logger() -> logging.Logger:
    return logging.getLogger(PACKAGE_NAME)


def _install_handler(handler: logging.Handler, fmt: str) -> None:
    package_logger = _package_logger()
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()
    handler.setFormatter(logging.Formatter(fmt))
    package_logger.addHandler(handler)
    package_logger.propagate = False


def _make_handler(path: Optional[str]) -> logging.Handler:
    if path:
        return logging.FileHandler(path, encoding="utf-8")
    return logging.StreamHandler(sys.stderr)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger below the package logger.

    The first call installs the stderr handler at INFO level.

    Args:
        name: The module name (typically __name__)
    """
    package_logger = _package_logger()
    if not package_logger.handlers:
        package_logger.setLevel(DEFAULT_LEVEL)
        _install_handler(_make_handler(None), LOG_FORMAT)
    return logging.getLogger(name)


def parse_level(level: Union[int, str, None]) -> int:
    """Turn a level name or number into a logging level; unknown names mean WARNING."""
    if level is None:
        return DEFAULT_LEVEL
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(settings: Optional[Mapping[str, Any]] = None) -> logging.Logger:
    """
    Apply a ``[logging]`` configuration section.

    Recognised keys:
        level: Level name or number (default INFO)
        format: Record format (default LOG_FORMAT)
        file: Append records to this path instead of stderr

    Returns:
        The package logger
    """
    settings = settings or {}
    fmt = settings.get("format") or LOG_FORMAT
    path = settings.get("file")
    package_logger = _package_logger()
    current = package_logger.handlers[0] if package_logger.handlers else None
    if path or current is None or isinstance(current, logging.FileHandler):
        _install_handler(_make_handler(path), fmt)
    else:
        current.setFormatter(logging.Formatter(fmt))
    package_logger.setLevel(parse_level(settings.get("level")))
    return package_logger
