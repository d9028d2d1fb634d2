"""
Logging configuration for pysindex.

All modules log through the standard library ``logging`` package under the
``pysindex`` namespace. The library never configures handlers on import;
applications call ``setup_logging`` when they want output.
"""
import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = 'pysindex'
DEFAULT_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the package namespace.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger instance
    """
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[str] = None,
                  fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Attach a handler to the package logger.

    Calling this more than once replaces the previously installed handler.

    Args:
        level: Logging level (name or number)
        log_file: Optional file to log to instead of stderr
        fmt: Log record format

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()

    if log_file:
        handler = logging.FileHandler(log_file, encoding='utf-8')
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    return logger


def log_solver_failure(logger: logging.Logger, solver: str, curve: int,
                       reason: str, **inputs) -> None:
    """Log a solver that gave up, with the inputs that led there.

    Args:
        logger: Logger to write to
        solver: Solver name (e.g. 'age iterator')
        curve: Curve index being evaluated
        reason: Short description of the failure
        **inputs: Numeric inputs of the call
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    detail = ", ".join(f"{key}={value:.4f}" if isinstance(value, float) else f"{key}={value}"
                       for key, value in inputs.items())
    logger.debug("%s failed for curve %d: %s [%s]", solver, curve, reason, detail)
