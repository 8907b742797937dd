# config.py
from __future__ import annotations

import logging
import os

# ======= Search policy =======
MAX_SOLUTIONS          = int(os.getenv("CP_MAX_SOLUTIONS", "10"))
MODE                   = os.getenv("CP_MODE", "capped")
PRUNE_REGIONS          = int(os.getenv("CP_PRUNE_REGIONS", "1")) != 0
CANCEL_CHECK_INTERVAL  = int(os.getenv("CP_CANCEL_CHECK_INTERVAL", "2048"))

# ======= Result cache =======
CACHE_FILE    = os.getenv("CP_CACHE_FILE", "calendar_cache.json")
CACHE_VERSION = os.getenv("CP_CACHE_VERSION", "v2")

# ======= Background worker =======
WORKER_TIMEOUT = float(os.getenv("CP_WORKER_TIMEOUT", "600"))

# ======= Output / logging =======
ALL_RESULTS_FILE = os.getenv("CP_ALL_RESULTS_FILE", "all-solutions.json")
LOG_LEVEL        = os.getenv("CP_LOG_LEVEL", "INFO").upper()


class CFG:
    MAX_SOLUTIONS         = MAX_SOLUTIONS
    MODE                  = MODE
    PRUNE_REGIONS         = PRUNE_REGIONS
    CANCEL_CHECK_INTERVAL = CANCEL_CHECK_INTERVAL

    CACHE_FILE    = CACHE_FILE
    CACHE_VERSION = CACHE_VERSION

    WORKER_TIMEOUT = WORKER_TIMEOUT

    ALL_RESULTS_FILE = ALL_RESULTS_FILE
    LOG_LEVEL        = LOG_LEVEL


def configure_logging(level: str | int | None = None) -> None:
    """Send log records to stderr. Safe to call more than once."""
    if level is None:
        level = CFG.LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    if not any(getattr(h, "_calendar_puzzle", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("{asctime} [{levelname:5}] {name} - {message}", "%H:%M:%S", style="{")
        )
        handler._calendar_puzzle = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level)


__all__ = ["CFG", "configure_logging"]
