"""Renderer groups and the device → group resolution."""
from __future__ import annotations

from enum import Enum
from typing import Protocol

from wng_flask import config as app_config
from wng_flask.device.model import DeviceView
from wng_flask.utils.logging import get_logger

LOG = get_logger("wng.renderer_groups")


class RendererGroup(str, Enum):
    """Markup families a document can be rendered into."""

    XHTML_ADVANCED = "xhtml_advanced"
    XHTML_SIMPLE = "xhtml_simple"
    CHTML = "chtml"
    WML = "wml"

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @property
    def supports_css(self) -> bool:
        return self in (RendererGroup.XHTML_ADVANCED, RendererGroup.XHTML_SIMPLE)


_CONTENT_TYPES = {
    RendererGroup.XHTML_ADVANCED: "text/html; charset=utf-8",
    RendererGroup.XHTML_SIMPLE: "application/vnd.wap.xhtml+xml; charset=utf-8",
    RendererGroup.CHTML: "text/html; charset=utf-8",
    RendererGroup.WML: "text/vnd.wap.wml; charset=utf-8",
}

# Checked in order; the first prefix of the device's preferred markup wins.
_MARKUP_PREFIXES = (
    ("wml", RendererGroup.WML),
    ("html_wi_imode", RendererGroup.CHTML),
    ("html_wi_oma_xhtmlmp", RendererGroup.XHTML_SIMPLE),
    ("html_wi_w3_xhtmlbasic", RendererGroup.XHTML_SIMPLE),
    ("html_web", RendererGroup.XHTML_ADVANCED),
)


class RendererGroupResolver(Protocol):
    def resolve(self, device: DeviceView) -> RendererGroup:
        ...


def _configured_default() -> RendererGroup:
    name = app_config.default_renderer_group()
    try:
        return RendererGroup(name)
    except ValueError:
        LOG.warning("Unknown WNG_DEFAULT_RENDERER_GROUP %r; using xhtml_advanced", name)
        return RendererGroup.XHTML_ADVANCED


class DefaultRendererGroupResolver:
    def resolve(self, device: DeviceView) -> RendererGroup:
        markup = (device.preferred_markup or "").strip().lower()
        for prefix, group in _MARKUP_PREFIXES:
            if markup.startswith(prefix):
                return group
        group = _configured_default()
        LOG.debug("no renderer group for markup %r; default %s", markup, group.value)
        return group


def content_type_for(group: RendererGroup, device: DeviceView) -> str:
    if group is RendererGroup.XHTML_SIMPLE and device.xhtml_content_type:
        # Bodies are always encoded as UTF-8; any advertised charset is replaced.
        mime = device.xhtml_content_type.split(";", 1)[0].strip()
        return f"{mime}; charset=utf-8"
    return group.content_type


__all__ = [
    "RendererGroup",
    "RendererGroupResolver",
    "DefaultRendererGroupResolver",
    "content_type_for",
]
