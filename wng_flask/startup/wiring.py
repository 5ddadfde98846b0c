"""Application initialization / wiring.

Orchestrates hook registration for device-aware document rendering.
"""
from __future__ import annotations
from typing import Any, Optional

from wng_flask.config import summarize_runtime_config
from wng_flask.device.resolution import DeviceResolver
from wng_flask.routes.inject import register_all as register_routes
from wng_flask.services.rendering import DocumentRenderer
from wng_flask.utils.logging import get_logger

LOG = get_logger("wng.startup")


def init_app(
    app: Any,
    renderer: Optional[DocumentRenderer] = None,
    device_resolver: Optional[DeviceResolver] = None,
) -> None:
    LOG.debug("init_app starting")
    register_routes(app, renderer=renderer, device_resolver=device_resolver)
    LOG.info("WNG wiring complete: %s", summarize_runtime_config())

__all__ = ["init_app"]
