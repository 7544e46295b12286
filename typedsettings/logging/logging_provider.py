"""
Central creation and configuration of loggers.

Loggers are created with new_logger() at import time and stay silent until init_logging() is called by an entry
point. The log level can be set with the TYPEDSETTINGS_LOG_LEVEL environment variable.
"""

import logging
import os
import sys
from pathlib import Path

LOG_LEVEL_ENV = "TYPEDSETTINGS_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class LoggingProvider:
    """
    Keeps track of the loggers created through it and attaches handlers to them on init_logging().
    """

    def __init__(self) -> None:
        self.console: dict[str, bool] = {}
        self.handlers: dict[str, list[logging.Handler]] = {}
        self.initialized = False
        self.log_dir: Path | None = None
        self.level = logging.INFO

    def new_logger(self, name: str, log_to_console: bool = True) -> logging.Logger:
        """
        Create (or return) the logger with the given name.

        log_to_console: Whether init_logging() should attach a console handler; file logging always happens if a
                        log directory is given.
        """
        logger = logging.getLogger(name)
        if name not in self.console:
            logger.addHandler(logging.NullHandler())
        self.console[name] = log_to_console
        if self.initialized:
            self._configure(logger)
        return logger

    @staticmethod
    def level_from_env(default: str = "INFO") -> int:
        "Read the log level from the environment; unknown names raise ValueError."
        text = os.environ.get(LOG_LEVEL_ENV, default).strip().upper()
        level = logging.getLevelName(text)
        if not isinstance(level, int):
            raise ValueError(f"{LOG_LEVEL_ENV} must be a logging level name, got: {text!r}")
        return level

    def _configure(self, logger: logging.Logger) -> None:
        "Internal: Replace the handlers previously attached to a logger."
        for handler in self.handlers.pop(logger.name, []):
            logger.removeHandler(handler)
            handler.close()
        formatter = logging.Formatter(LOG_FORMAT)
        added: list[logging.Handler] = []
        if self.console.get(logger.name, True):
            added.append(logging.StreamHandler(sys.stderr))
        if self.log_dir is not None:
            added.append(logging.FileHandler(self.log_dir / f"{logger.name}.log", encoding="utf-8"))
        for handler in added:
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.setLevel(self.level)
        self.handlers[logger.name] = added

    def init_logging(self, log_dir: Path | None = None, level: int | str | None = None) -> None:
        """
        Attach handlers to all loggers created so far (and to those created later).

        log_dir: If given, every logger additionally writes to <log_dir>/<name>.log.
        level: Log level. Default: from the environment, INFO if unset.
        """
        if level is None:
            level = self.level_from_env()
        elif isinstance(level, str):
            name = level
            level = logging.getLevelName(name.upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown log level {name!r}")
        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir = log_dir
        self.level = level
        for logger_name in self.console:
            self._configure(logging.getLogger(logger_name))
        self.initialized = True

    def shutdown(self) -> None:
        "Detach and close all handlers attached by init_logging()."
        for name, handlers in self.handlers.items():
            logger = logging.getLogger(name)
            for handler in handlers:
                logger.removeHandler(handler)
                handler.close()
        self.handlers.clear()
        self.initialized = False


LOGGING_PROVIDER = LoggingProvider()
