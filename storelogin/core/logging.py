"""Logging utilities for storelogin modules."""

import logging
from enum import IntEnum
from typing import Optional

ROOT_LOGGER_NAME = 'storelogin'

TRACE = 5
logging.addLevelName(TRACE, 'TRACE')


class LogLevel(IntEnum):
    """Log levels understood by storelogin, including TRACE."""
    TRACE = TRACE
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


DEFAULT_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'


def logging_configured() -> bool:
    """Whether the root logger or configure_logging() installed a handler."""
    return bool(logging.getLogger().handlers or logging.getLogger(ROOT_LOGGER_NAME).handlers)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.

    This ensures that loggers work with basicConfig() without needing
    explicit configure_logging() calls. The logger will:
    - Live under the 'storelogin' namespace
    - Propagate to root logger (default behavior)
    - Only set a default level if no handler has been configured

    Args:
        name: Logger name relative to the package (e.g. 'api.login')

    Returns:
        Configured logger instance
    """
    if not name or name == ROOT_LOGGER_NAME:
        full_name = ROOT_LOGGER_NAME
    elif name.startswith(ROOT_LOGGER_NAME + '.'):
        full_name = name
    else:
        full_name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(full_name)
    logger.propagate = True

    # Only set default level if neither basicConfig() nor
    # configure_logging() has been called yet
    if not logging_configured() and logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)

    return logger


def configure_logging(level: int = logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Calling it again replaces the handler instead of stacking a second one.
    Package loggers created earlier are reset so they inherit the new level.

    Args:
        level: Logging level (TRACE, DEBUG, INFO, ...)
        fmt: Log record format

    Returns:
        The package root logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, '_storelogin_console', False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler._storelogin_console = True
    logger.addHandler(handler)
    logger.setLevel(level)

    for name in list(logging.Logger.manager.loggerDict):
        if name.startswith(ROOT_LOGGER_NAME + '.'):
            child = logging.getLogger(name)
            child.setLevel(logging.NOTSET)
            child.propagate = True
    return logger


class UserLoggerAdapter(logging.LoggerAdapter):
    """Prefixes every message with the account it belongs to."""

    def process(self, msg, kwargs):
        return f"[user={self.extra['user']}] {msg}", kwargs

    def trace(self, msg, *args, **kwargs):
        self.log(TRACE, msg, *args, **kwargs)


def get_user_logger(name: str, user: str) -> UserLoggerAdapter:
    """Child logger tagged with a user identity."""
    return UserLoggerAdapter(get_logger(name), {'user': user})
