"""Configuration for the kilo editor."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

KILO_VERSION = "0.0.1"
WRITE_LOG_ENV = "KILO_WRITE_LOG"
READ_TIMEOUT_ENV = "KILO_READ_TIMEOUT_DS"

# VTIME is a single cc byte; 0 would make every read return at once.
MIN_READ_TIMEOUT_DS = 1
MAX_READ_TIMEOUT_DS = 255


@dataclass
class EditorConfig:
    """Editor configuration.

    ``read_timeout_ds`` is the raw-mode read timeout in tenths of a second
    (the unit termios uses for ``VTIME``).
    """

    version: str = KILO_VERSION
    read_timeout_ds: int = 1
    filler: str = "~"
    quit_key: str = "q"
    write_log: str = field(default_factory=lambda: os.environ.get(WRITE_LOG_ENV, ""))

    @property
    def welcome_message(self) -> str:
        return f"Kilo editor -- version {self.version}"

    @classmethod
    def from_env(cls) -> EditorConfig:
        """Build a config from ``KILO_*`` environment variables.

        An invalid or out-of-range read timeout is logged and ignored.
        """
        config = cls()
        raw = os.environ.get(READ_TIMEOUT_ENV)
        if raw:
            try:
                timeout = int(raw)
            except ValueError:
                logger.warning("Ignoring %s=%r: not an integer", READ_TIMEOUT_ENV, raw)
            else:
                if MIN_READ_TIMEOUT_DS <= timeout <= MAX_READ_TIMEOUT_DS:
                    config.read_timeout_ds = timeout
                else:
                    logger.warning(
                        "Ignoring %s=%d: must be between %d and %d",
                        READ_TIMEOUT_ENV,
                        timeout,
                        MIN_READ_TIMEOUT_DS,
                        MAX_READ_TIMEOUT_DS,
                    )
        return config
