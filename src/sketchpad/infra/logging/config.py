from __future__ import annotations

"""
Logging Configuration Model.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

LEVELS: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings applied by configure_logging().

    Attributes:
        level: Level name; unknown names resolve to INFO.
        console: Emit records on stderr.
        log_file: Rotating log file, or None for console only.
        max_bytes: Size that triggers a rollover.
        backup_count: Rolled-over files kept next to the active one.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @property
    def level_value(self) -> int:
        return LEVELS.get(str(self.level or "").strip().upper(), logging.INFO)

    @classmethod
    def from_settings(
            cls,
            settings: Mapping[str, Any],
            *,
            debug: bool = False,
            log_file: Optional[str] = None,
    ) -> LoggingConfig:
        """
        Derive logging settings from the application configuration.

        Args:
            settings: Validated application configuration ('log_level' key).
            debug: Force DEBUG regardless of the configured level.
            log_file: Optional rotating log file.
        """
        level = "DEBUG" if debug else str(settings.get("log_level") or "INFO")
        return cls(level=level, console=True, log_file=log_file)
