"""
Runtime settings for the transcript command line.

Settings come from environment variables and are overridden by CLI flags:
- TRANSCRIPT_PERMISSIVE: "1"/"true"/"yes" enables permissive evaluation
- TRANSCRIPT_LOG_LEVEL: logging level name (default WARNING)
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Options shared by the CLI subcommands."""
    permissive: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from TRANSCRIPT_* environment variables."""
        if environ is None:
            environ = os.environ
        return cls(
            permissive=environ.get("TRANSCRIPT_PERMISSIVE", "").strip().lower() in _TRUE_VALUES,
            log_level=environ.get("TRANSCRIPT_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
        )


def configure_logging(level: str = "WARNING") -> None:
    """Install a stderr handler at the given level name."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT, force=True)
