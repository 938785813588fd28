#!/usr/bin/env python3
"""
log - File-backed diagnostic logging for ghdispatch.

Terminal output is handled by ghdispatch.ui; this logger keeps a record of
every gh invocation, phase change and error in <log_dir>/ghdispatch.log, with
errors also copied to ghdispatch_errors.log.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

LOGGER_NAME = "ghdispatch"


def get_log_dir() -> Path:
    """Log directory: $GHDISPATCH_LOG_DIR, else /var/log if writable, else temp."""
    override = os.environ.get("GHDISPATCH_LOG_DIR")
    if override:
        return Path(override)

    log_dir = Path("/var/log")
    if not log_dir.exists() or not os.access(log_dir, os.W_OK):
        log_dir = Path(tempfile.gettempdir())
    return log_dir


class DispatchLogger:
    """Thin wrapper around a named logging.Logger with file handlers."""

    def __init__(self, name: str = LOGGER_NAME, log_dir: Optional[Path] = None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)
        self.logger.propagate = False

        if self.logger.handlers:
            return

        log_dir = log_dir or get_log_dir()
        formatter = logging.Formatter('%(asctime)s - %(message)s',
                                      datefmt='%Y-%m-%d %H:%M:%S')
        try:
            log_dir.mkdir(parents=True, exist_ok=True)

            fh = logging.FileHandler(log_dir / f"{name}.log")
            fh.setLevel(logging.INFO)

            eh = logging.FileHandler(log_dir / f"{name}_errors.log")
            eh.setLevel(logging.ERROR)

            fh.setFormatter(formatter)
            eh.setFormatter(formatter)

            self.logger.addHandler(fh)
            self.logger.addHandler(eh)
        except OSError:
            # Read-only home / sandbox: keep running without a log file
            self.logger.addHandler(logging.NullHandler())

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)


_logger: Optional[DispatchLogger] = None


def get_logger() -> DispatchLogger:
    """Return the process-wide ghdispatch logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = DispatchLogger()
    return _logger
