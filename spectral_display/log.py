"""Logging setup for the spectral display entrypoints."""

from __future__ import annotations

import logging
import os
import sys

LOG_ENV_VAR = "SPECTRAL_DISPLAY_LOG"


def setup_logging(name: str = "spectral_display") -> logging.Logger:
    lvl_name = os.environ.get(LOG_ENV_VAR, "INFO").upper()
    level = getattr(logging, lvl_name, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
