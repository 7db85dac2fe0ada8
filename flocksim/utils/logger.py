"""
Logger - Central logging system for flocksim

Usage:
    from flocksim.utils.logger import logger

    logger.info("Flock started", component="FLOCK")
    logger.error("Draw callback failed", component="FLOCK", details=str(e))

    # Component shortcuts (debug level)
    logger.flock("Added boid 7")
    logger.sched("Tick thread started")
    logger.config("Params saved", details=path)

Every record goes to the terminal and to LogSignalEmitter.log_message, so a
Qt console can show what the tick thread is doing. File output is opt-in
(flocksim --log-file).
"""

import logging
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Optional, Union

from PyQt5.QtCore import QObject, pyqtSignal

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


class LogLevel(IntEnum):
    """Log levels matching Python logging."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class LogSignalEmitter(QObject):
    """Qt signal emitter for log records."""
    log_message = pyqtSignal(str, int, str)  # message, level, timestamp


class QtSignalHandler(logging.Handler):
    """Forwards records as log_message signals (queued across threads by Qt)."""

    def __init__(self, emitter: LogSignalEmitter):
        super().__init__(level=logging.DEBUG)
        self.emitter = emitter
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord):
        try:
            self.emitter.log_message.emit(
                self.format(record),
                record.levelno,
                datetime.fromtimestamp(record.created).strftime("%H:%M:%S"),
            )
        except Exception:
            self.handleError(record)


def _tag(msg: str, component: Optional[str], details: Optional[str]) -> str:
    """'[COMPONENT] msg - details', with either end optional."""
    text = f"[{component}] {msg}" if component else msg
    return f"{text} - {details}" if details else text


class FlockSimLogger:
    """
    Central logger for flocksim.

    Wraps the stdlib "flocksim" logger. The logger itself passes everything;
    each handler applies its own level.
    """

    def __init__(self):
        self._logger = logging.getLogger("flocksim")
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False

        self.signal_emitter = LogSignalEmitter()

        self._console_handler = logging.StreamHandler(sys.stdout)
        self._console_handler.setLevel(logging.INFO)
        self._console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))

        self._qt_handler = QtSignalHandler(self.signal_emitter)
        self._file_handler: Optional[logging.FileHandler] = None

        for handler in (self._console_handler, self._qt_handler):
            self._logger.addHandler(handler)

    def set_level(self, level: LogLevel):
        """Minimum level printed to the terminal."""
        self._console_handler.setLevel(level)

    def enable_file_logging(self, filepath: Union[str, "os.PathLike[str]"]):
        """Also write every record (DEBUG and up) to filepath."""
        self.disable_file_logging()

        parent = os.path.dirname(os.fspath(filepath))
        if parent:
            os.makedirs(parent, exist_ok=True)

        handler = logging.FileHandler(filepath)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        self._logger.addHandler(handler)
        self._file_handler = handler

    def disable_file_logging(self):
        if self._file_handler is None:
            return
        self._logger.removeHandler(self._file_handler)
        self._file_handler.close()
        self._file_handler = None

    def debug(self, msg: str, component: Optional[str] = None,
              details: Optional[str] = None):
        self._logger.debug(_tag(msg, component, details))

    def info(self, msg: str, component: Optional[str] = None,
             details: Optional[str] = None):
        self._logger.info(_tag(msg, component, details))

    def warning(self, msg: str, component: Optional[str] = None,
                details: Optional[str] = None):
        """Unexpected but recoverable (e.g. bad params file)."""
        self._logger.warning(_tag(msg, component, details))

    def error(self, msg: str, component: Optional[str] = None,
              details: Optional[str] = None):
        """Something failed (draw callback, tick, CLI arguments)."""
        self._logger.error(_tag(msg, component, details))

    # === Component shortcuts ===

    def flock(self, msg: str, details: Optional[str] = None):
        self.debug(msg, component="FLOCK", details=details)

    def sched(self, msg: str, details: Optional[str] = None):
        self.debug(msg, component="SCHED", details=details)

    def config(self, msg: str, details: Optional[str] = None):
        self.debug(msg, component="CONFIG", details=details)


# Global logger instance
logger = FlockSimLogger()


def set_log_level(level: LogLevel):
    """Set the console log level."""
    logger.set_level(level)
