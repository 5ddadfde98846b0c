"""Package logger namespacing."""
from __future__ import annotations

import logging

from wng_flask.utils.logging import ROOT_LOGGER_NAME, get_logger


def test_loggers_are_namespaced_under_package_root():
    log = get_logger("renderer")

    assert log.name == "wng.renderer"
    assert get_logger("wng.renderer") is log
    assert log.propagate is True
    assert log.handlers == []


def test_host_logger_with_same_short_name_untouched():
    host = logging.getLogger("health")
    host.propagate = True

    get_logger("health")

    assert host.propagate is True


def test_root_configured_once():
    root = get_logger()
    get_logger()

    assert root.name == ROOT_LOGGER_NAME
    assert root.propagate is False
    assert sum(isinstance(h, logging.StreamHandler) for h in root.handlers) == 1
