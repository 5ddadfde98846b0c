"""Configuration accessors.

Centralizes environment variable parsing & defaults so hooks and services
never read ``os.environ`` directly.
"""
from __future__ import annotations

import os
from functools import lru_cache

APP_NAME = "wng_flask"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "Device-aware document rendering for Flask"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_DEVICE_PROFILE = "generic_web_browser"
DEFAULT_DEVICE_PARAM = "device"
DEFAULT_RENDERER_GROUP = "xhtml_advanced"


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def log_level_name() -> str:
    return _raw_env("WNG_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()  # type: ignore[union-attr]


def default_device_profile() -> str:
    """Profile used when the User-Agent matches no known family.

    Environment Variable: WNG_DEFAULT_DEVICE
    """
    value = (os.getenv("WNG_DEFAULT_DEVICE") or "").strip()
    return value or DEFAULT_DEVICE_PROFILE


def device_query_param() -> str:
    """Query parameter that forces a device profile (``?device=generic_wml``)."""
    value = (os.getenv("WNG_DEVICE_PARAM") or "").strip()
    return value or DEFAULT_DEVICE_PARAM


def default_renderer_group() -> str:
    """Renderer group for devices whose preferred markup is unknown.

    Environment Variable: WNG_DEFAULT_RENDERER_GROUP
    """
    value = (os.getenv("WNG_DEFAULT_RENDERER_GROUP") or "").strip().lower()
    return value or DEFAULT_RENDERER_GROUP


@lru_cache(maxsize=1)
def metadata() -> dict:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
    }


def summarize_runtime_config() -> dict:
    return {
        "log_level": log_level_name(),
        "default_device": default_device_profile(),
        "device_param": device_query_param(),
        "default_renderer_group": default_renderer_group(),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "log_level_name",
    "default_device_profile",
    "device_query_param",
    "default_renderer_group",
    "metadata",
    "summarize_runtime_config",
]
