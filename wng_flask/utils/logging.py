"""Package logging helpers.

All loggers live under the ``wng`` namespace. Only the namespace root gets a
stream handler (level from `wng_flask.config.log_level_name()`); child
loggers propagate to it, so host loggers are never reconfigured.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from wng_flask import config as app_config

ROOT_LOGGER_NAME = "wng"

_LOCK = threading.Lock()
_ROOT: Optional[logging.Logger] = None


def _root_logger() -> logging.Logger:
    global _ROOT
    if _ROOT is not None:
        return _ROOT
    with _LOCK:
        if _ROOT is not None:
            return _ROOT
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        level = getattr(logging, app_config.log_level_name(), logging.INFO)
        logger.setLevel(level)
        if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[wng] %(asctime)s %(levelname)s %(name)s %(message)s"))
            logger.addHandler(handler)
        logger.propagate = False
        _ROOT = logger
        return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return ``name`` qualified under the ``wng`` namespace."""
    root = _root_logger()
    if name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


__all__ = ["get_logger", "ROOT_LOGGER_NAME"]
