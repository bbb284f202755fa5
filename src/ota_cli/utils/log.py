from __future__ import annotations
import logging
from typing import Optional

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def resolve_log_level(log_level: Optional[str], verbose: int = 0) -> str:
    """
    An explicit level wins over -v. Otherwise:
    0 -> WARNING, 1 -> INFO, 2+ -> DEBUG
    """
    if log_level:
        level = log_level.strip().upper()
        if level not in LEVELS:
            raise ValueError(f"unknown log level {log_level!r} (expected one of {', '.join(LEVELS)})")
        return level
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return "WARNING"


def setup_logging(level: str) -> None:
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("ota_cli").setLevel(level)
