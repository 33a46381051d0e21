"""
Logging setup for the ``fmsim`` logger.

Library modules only create loggers; handlers are attached here, by the
command line or by an application embedding the simulator.
"""

from __future__ import annotations

import logging

import colorlog

LOGGER_NAME = "fmsim"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "white",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


class LogConfig:
    """
    Console (and optional file) logging for the ``fmsim`` package.

    Creating a new LogConfig replaces the handlers installed by the
    previous one, so repeated configuration never duplicates output.
    """

    def __init__(
        self,
        console_level: int = logging.WARNING,
        file_path: str | None = None,
        file_level: int = logging.DEBUG,
    ) -> None:
        self._logger = logging.getLogger(LOGGER_NAME)
        self._clear_existing_handlers()
        self._logger.setLevel(min(console_level, file_level) if file_path else console_level)

        self._console_handler = logging.StreamHandler()
        self._console_handler.setLevel(console_level)
        self._console_handler.setFormatter(
            colorlog.ColoredFormatter(
                "%(log_color)s%(levelname)s:%(name)s:%(message)s",
                log_colors=LOG_COLORS,
            )
        )
        self._logger.addHandler(self._console_handler)

        self._file_handler: logging.FileHandler | None = None
        if file_path:
            self._file_handler = logging.FileHandler(file_path)
            self._file_handler.setLevel(file_level)
            self._file_handler.setFormatter(
                logging.Formatter("%(asctime)s:%(levelname)s:%(name)s:%(message)s")
            )
            self._logger.addHandler(self._file_handler)

    def _clear_existing_handlers(self) -> None:
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def console_level(self) -> int:
        return self._console_handler.level

    @console_level.setter
    def console_level(self, value: int) -> None:
        self._console_handler.setLevel(value)
        if value < self._logger.level:
            self._logger.setLevel(value)
