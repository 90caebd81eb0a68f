"""Package logger setup."""

from __future__ import annotations

import logging
import os
import sys

LOGGER = logging.getLogger("devguard")


def configure_logging() -> None:
    if LOGGER.handlers:
        return
    log_file = os.getenv("DEVGUARD_LOG_FILE")
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    LOGGER.addHandler(handler)
    LOGGER.setLevel(os.getenv("DEVGUARD_LOG_LEVEL", "INFO"))
