"""
Standard library logging adapter.
Implements the Logger port on top of Python's logging module.
"""

import logging
import sys

from ...core.ports.logger import Logger


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StandardLogger(Logger):
    """Logger implementation writing to the console via the logging module."""

    def __init__(self, name: str = "airquality", level: int = logging.INFO):
        self._logger = logging.getLogger(name)

        # Loggers are process-wide; only attach the console handler once
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self._logger.addHandler(handler)
            self._logger.setLevel(level)
            handler.setLevel(level)

    def _format(self, message: str, kwargs: dict) -> str:
        if not kwargs:
            return message
        extras = " ".join(f"{key}={value}" for key, value in kwargs.items())
        return f"{message} {extras}"

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(self._format(message, kwargs))

    def warn(self, message: str, **kwargs) -> None:
        self._logger.warning(self._format(message, kwargs))

    def error(self, message: str, **kwargs) -> None:
        self._logger.error(self._format(message, kwargs))

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(self._format(message, kwargs))

    def get_logger(self) -> logging.Logger:
        """Return the underlying logging.Logger."""
        return self._logger

    def set_level(self, level: int) -> None:
        """Set the level on the logger and all of its handlers."""
        self._logger.setLevel(level)
        for handler in self._logger.handlers:
            handler.setLevel(level)
