from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Safe to call repeatedly (every ``create_app`` call does); the handler is
    only installed once.
    """
    logger = logging.getLogger("gateway")
    logger.setLevel(level.upper())
    if not any(getattr(handler, "_gateway_handler", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._gateway_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
