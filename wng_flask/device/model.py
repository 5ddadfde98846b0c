"""Device descriptors and the capability view used during rendering."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional

MARKUP_WEB = "html_web_4_0"
MARKUP_XHTML_MP = "html_wi_oma_xhtmlmp_1_0"
MARKUP_CHTML = "html_wi_imode_compact_generic"
MARKUP_WML = "wml_1_1"

XHTML_MP_CONTENT_TYPE = "application/vnd.wap.xhtml+xml"


@dataclass(frozen=True)
class Device:
    """Opaque capability descriptor resolved once per request."""

    id: str
    user_agent: str = ""
    capabilities: Mapping[str, Any] = field(default_factory=dict)

    def capability(self, name: str, default: Any = None) -> Any:
        return self.capabilities.get(name, default)


def _profile(**caps: Any) -> Mapping[str, Any]:
    return MappingProxyType(caps)


# Fallback profiles only. A real deployment plugs in a resolver backed by a
# capability repository; these keep unknown agents renderable.
GENERIC_PROFILES: Mapping[str, Mapping[str, Any]] = MappingProxyType({
    "generic_web_browser": _profile(
        preferred_markup=MARKUP_WEB,
        is_wireless_device=False,
        supports_css=True,
        unsupported_css_properties=(),
        max_image_width=None,
    ),
    "generic_smartphone": _profile(
        preferred_markup=MARKUP_WEB,
        is_wireless_device=True,
        supports_css=True,
        unsupported_css_properties=(),
        max_image_width=320,
    ),
    "generic_xhtml": _profile(
        preferred_markup=MARKUP_XHTML_MP,
        is_wireless_device=True,
        supports_css=True,
        unsupported_css_properties=("position", "float", "background-image", "opacity"),
        max_image_width=176,
        xhtmlmp_preferred_mime_type=XHTML_MP_CONTENT_TYPE,
    ),
    "generic_imode": _profile(
        preferred_markup=MARKUP_CHTML,
        is_wireless_device=True,
        supports_css=False,
        unsupported_css_properties=(),
        max_image_width=120,
    ),
    "generic_wml": _profile(
        preferred_markup=MARKUP_WML,
        is_wireless_device=True,
        supports_css=False,
        unsupported_css_properties=(),
        max_image_width=96,
    ),
})


def device_for_profile(profile_id: str, user_agent: str = "") -> Device:
    try:
        caps = GENERIC_PROFILES[profile_id]
    except KeyError:
        raise KeyError(f"unknown device profile: {profile_id}") from None
    return Device(id=profile_id, user_agent=user_agent, capabilities=caps)


class DeviceView:
    """Typed accessors over a `Device` for the optimizer and renderers."""

    def __init__(self, device: Device):
        self.device = device

    @property
    def id(self) -> str:
        return self.device.id

    @property
    def preferred_markup(self) -> Optional[str]:
        return self.device.capability("preferred_markup")

    @property
    def is_wireless(self) -> bool:
        return bool(self.device.capability("is_wireless_device", False))

    @property
    def supports_css(self) -> bool:
        return bool(self.device.capability("supports_css", True))

    @property
    def unsupported_css_properties(self) -> FrozenSet[str]:
        raw = self.device.capability("unsupported_css_properties") or ()
        return frozenset(str(name).strip().lower() for name in raw)

    @property
    def max_image_width(self) -> Optional[int]:
        raw = self.device.capability("max_image_width")
        if raw is None:
            return None
        try:
            value = int(raw)
        except (TypeError, ValueError):
            return None
        return value if value > 0 else None

    @property
    def xhtml_content_type(self) -> Optional[str]:
        return self.device.capability("xhtmlmp_preferred_mime_type")

    def __repr__(self) -> str:
        return f"<DeviceView {self.id}>"


__all__ = [
    "Device",
    "DeviceView",
    "GENERIC_PROFILES",
    "device_for_profile",
    "MARKUP_WEB",
    "MARKUP_XHTML_MP",
    "MARKUP_CHTML",
    "MARKUP_WML",
    "XHTML_MP_CONTENT_TYPE",
]
