"""
Logging for the 'oscspline' namespace: integrator and spline debug output,
pipeline progress, optional run log next to the artifacts.
"""
import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "oscspline"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'

# font lookup and PNG writing are chatty at DEBUG
NOISY_LOGGERS = ("matplotlib", "PIL")


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level!r}")
    return resolved


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the package logger and returns it.

    Args:
        level: Level number or name ("DEBUG", "INFO", ...), as given to --log_level.
        log_file: Optional path of a run log, rewritten on each call.
    """
    level = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for old in list(logger.handlers):
        old.close()
        logger.removeHandler(old)

    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, mode='w', encoding='utf-8'), level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.debug("logging at %s%s", logging.getLevelName(level),
                 f", run log {log_file}" if log_file else "")
    return logger
