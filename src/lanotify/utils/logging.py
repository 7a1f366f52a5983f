from __future__ import annotations

import logging
import os
from typing import Literal, get_args

import coloredlogs  # type: ignore[import]

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DEFAULT_DATE_FORMAT = "%H:%M:%S"

# libraries that log every request or subprocess at INFO/DEBUG
NOISY_LOGGERS = ("asyncio", "httpx", "httpcore")


def resolve_level(level: str | None = None) -> str:
    resolved = (level or os.environ.get("LOGLEVEL", "INFO")).upper()
    if resolved not in get_args(LogLevel):
        raise ValueError(f"Unknown log level: {resolved}")
    return resolved


def setup_logging(level: str | None = None) -> None:
    resolved = resolve_level(level)

    coloredlogs.install(
        level=resolved,
        fmt=DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    # keep library chatter out of the daemon log unless we are debugging
    library_level = logging.DEBUG if resolved == "DEBUG" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
