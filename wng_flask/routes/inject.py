"""Hook & route registration.

Called from startup to register the request hooks that resolve the device
before the view runs and render the attached document after it.
"""
from __future__ import annotations
from typing import Any, Optional

from .health import register_health
from wng_flask.device.resolution import DeviceResolver, register_device_resolution
from wng_flask.routes.overrides.document_finalizer import register_document_finalizer
from wng_flask.services.rendering import DocumentRenderer


def register_all(
    app: Any,
    renderer: Optional[DocumentRenderer] = None,
    device_resolver: Optional[DeviceResolver] = None,
) -> None:
    register_device_resolution(app, device_resolver)
    register_document_finalizer(app, renderer)
    register_health(app)

__all__ = ["register_all"]
