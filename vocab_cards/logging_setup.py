from __future__ import annotations

import logging

from vocab_cards.config import log_level

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(module)s: %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a single console handler to the package logger."""
    logger = logging.getLogger("vocab_cards")
    logger.setLevel(getattr(logging, (level or log_level()).upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    return logger
