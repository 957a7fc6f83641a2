#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Application logging for Simple Cut

Every module logs through a child of the ``SimpleCut`` logger
(``SimpleCut.SliceStore``, ``SimpleCut.FFmpegExportService``, ...). AppLogger
owns the handlers of that root: a console handler that is always present and
an optional per-day file handler that the entry point switches on. ffmpeg
command lines and stderr tails end up in the file log at DEBUG level.
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional
from PySide6.QtCore import QObject, Signal

ROOT_LOGGER_NAME = 'SimpleCut'
LOG_DIRECTORY = Path.home() / '.simple_cut' / 'logs'
LOG_FILE_PATTERN = 'simple_cut_*.log'

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s'


class _SignalHandler(logging.Handler):
    """Forwards records of the whole SimpleCut tree to AppLogger.log_message"""

    def __init__(self, owner: 'AppLogger'):
        super().__init__(logging.DEBUG)
        self.owner = owner

    def emit(self, record: logging.LogRecord):
        if record.levelno < logging.INFO and not self.owner.debug_enabled:
            return
        self.owner.log_message.emit(record.levelname, record.getMessage())


class AppLogger(QObject):
    """
    Singleton owner of the SimpleCut logging tree

    ``log_message(level, message)`` carries every INFO+ record (DEBUG too
    while debug is enabled) so a log console can follow exports live.
    """

    log_message = Signal(str, str)  # level, message

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        super().__init__()
        self._initialized = True
        self._debug_enabled = False
        self._file_handler: Optional[logging.FileHandler] = None

        self.logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()

        self._console_handler = logging.StreamHandler(sys.stderr)
        self._console_handler.setLevel(logging.INFO)
        self._console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
        self.logger.addHandler(self._console_handler)
        self.logger.addHandler(_SignalHandler(self))

    @property
    def debug_enabled(self) -> bool:
        return self._debug_enabled

    def enable_debug(self, enabled: bool = True):
        """Show DEBUG records on the console and in log_message"""
        self._debug_enabled = enabled
        self._console_handler.setLevel(logging.DEBUG if enabled else logging.INFO)
        self.logger.info(f"Debug logging {'enabled' if enabled else 'disabled'}")

    def setup_file_logging(self, directory: Optional[Path] = None,
                           days_to_keep: int = 30) -> Optional[Path]:
        """
        Start writing the per-day log file

        Log files older than ``days_to_keep`` are removed first. Returns the
        log file path, or None when the directory cannot be created, in
        which case logging stays console-only.
        """
        directory = Path(directory) if directory else LOG_DIRECTORY
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.warning(f"File logging disabled, cannot create {directory}: {e}")
            return None

        self.cleanup_old_logs(directory, days_to_keep)

        self.stop_file_logging()

        log_file = directory / f"simple_cut_{datetime.now().strftime('%Y%m%d')}.log"
        self._file_handler = logging.FileHandler(log_file, encoding='utf-8')
        self._file_handler.setLevel(logging.DEBUG)
        self._file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        self.logger.addHandler(self._file_handler)
        return log_file

    def stop_file_logging(self):
        if self._file_handler is not None:
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def get_log_file_path(self) -> Optional[Path]:
        if self._file_handler is None:
            return None
        return Path(self._file_handler.baseFilename)

    def cleanup_old_logs(self, directory: Path, days_to_keep: int = 30) -> int:
        """Delete log files not modified within ``days_to_keep`` days"""
        cutoff = datetime.now().timestamp() - days_to_keep * 24 * 60 * 60
        removed = 0
        for log_file in Path(directory).glob(LOG_FILE_PATTERN):
            try:
                if log_file.stat().st_mtime < cutoff:
                    log_file.unlink()
                    removed += 1
            except OSError as e:
                self.logger.warning(f"Failed to delete old log {log_file.name}: {e}")
        if removed:
            self.logger.debug(f"Removed {removed} old log file(s)")
        return removed

    def debug(self, message: str):
        self.logger.debug(message)

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str, exc_info: bool = False):
        self.logger.error(message, exc_info=exc_info)


# Global logger instance
logger = AppLogger()
