"""Device descriptors.

Request-time resolution lives in `wng_flask.device.resolution`.
"""
from .model import (
    Device,
    DeviceView,
    GENERIC_PROFILES,
    device_for_profile,
)

__all__ = [
    "Device",
    "DeviceView",
    "GENERIC_PROFILES",
    "device_for_profile",
]
