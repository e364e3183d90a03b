from __future__ import annotations

"""
Logging Configuration Models.

Immutable settings for the diagnostics sink and the mapping of level names
to logging constants.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings of the logging subsystem.

    Attributes:
        level: Minimum severity level to capture.
        console: Enable stderr output.
        log_file: Optional path of a rotating log file.
        max_bytes: Size of a log segment before rotation.
        backup_count: Number of rotated segments to keep.
        console_fmt: Format of terminal lines.
        file_fmt: Format of file lines.
        datefmt: Timestamp format.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
