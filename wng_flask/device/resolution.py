"""Per-request device resolution.

Runs as a before_request hook and stores the resolved `Device` on the
request context so the finalizer can target its markup. Matching is a
keyword heuristic over the User-Agent and Accept headers that picks one of
the generic profiles; deployments with a capability repository pass their
own resolver to `register_device_resolution`.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

from flask import Request, request

from wng_flask import config as app_config
from wng_flask.context import get_context
from wng_flask.device.model import GENERIC_PROFILES, Device, device_for_profile
from wng_flask.utils.logging import get_logger

LOG = get_logger("wng.device_resolution")

DeviceResolver = Callable[[Request], Device]

WML_KEYWORDS = ("up.browser", "up.link", "mmp/", "wapbrowser", "wml")
IMODE_KEYWORDS = ("docomo", "i-mode", "imode")
SMARTPHONE_KEYWORDS = ("iphone", "ipod", "android", "windows phone")
MOBILE_KEYWORDS = (
    "mobile", "midp", "cldc", "symbian", "series60", "blackberry",
    "opera mini", "windows ce", "palm", "nokia", "samsung", "sonyericsson",
)
# First four characters of well-known handset agent strings.
MOBILE_PREFIXES = (
    "w3c ", "acs-", "alav", "alca", "amoi", "audi", "avan", "benq", "bird",
    "blac", "blaz", "brew", "cell", "cldc", "cmd-", "dang", "doco", "eric",
    "hipt", "inno", "ipaq", "java", "jigs", "kddi", "keji", "leno", "lg-c",
    "lg-d", "lg-g", "lge-", "maui", "maxo", "midp", "mits", "mmef", "mobi",
    "mot-", "moto", "mwbp", "nec-", "newt", "noki", "palm", "pana", "pant",
    "phil", "play", "port", "prox", "qwap", "sage", "sams", "sany", "sch-",
    "sec-", "send", "seri", "sgh-", "shar", "sie-", "siem", "smal", "smar",
    "sony", "sph-", "symb", "t-mo", "teli", "tim-", "tosh", "tsm-", "upg1",
    "upsi", "vk-v", "voda", "wap-", "wapa", "wapi", "wapp", "wapr", "webc",
    "winw", "xda-", "xda ",
)


def _classify(user_agent: str, accept: str) -> Tuple[Optional[str], str]:
    ua = user_agent.lower()
    accept = accept.lower()
    if "text/vnd.wap.wml" in accept and "text/html" not in accept:
        return "generic_wml", "accept_wml"
    if any(word in ua for word in WML_KEYWORDS):
        return "generic_wml", "ua_wml"
    if any(word in ua for word in IMODE_KEYWORDS):
        return "generic_imode", "ua_imode"
    if any(word in ua for word in SMARTPHONE_KEYWORDS):
        return "generic_smartphone", "ua_smartphone"
    if "application/vnd.wap.xhtml+xml" in accept:
        return "generic_xhtml", "accept_xhtml_mp"
    if ua[:4] in MOBILE_PREFIXES or any(word in ua for word in MOBILE_KEYWORDS):
        return "generic_xhtml", "ua_mobile"
    return None, "no_match"


def resolve_device(flask_request: Request) -> Device:
    user_agent = flask_request.headers.get("User-Agent") or ""
    forced = (flask_request.args.get(app_config.device_query_param()) or "").strip()
    if forced:
        if forced in GENERIC_PROFILES:
            LOG.debug("device forced via query parameter: %s", forced)
            return device_for_profile(forced, user_agent)
        LOG.debug("ignoring unknown forced device profile: %s", forced)
    profile_id, reason = _classify(user_agent, flask_request.headers.get("Accept") or "")
    if profile_id is None:
        profile_id = app_config.default_device_profile()
    LOG.debug("device resolved: %s (%s)", profile_id, reason)
    return device_for_profile(profile_id, user_agent)


def register_device_resolution(app: Any, resolver: Optional[DeviceResolver] = None) -> None:
    if getattr(app, "_wng_device_resolution", False):  # type: ignore[attr-defined]
        return
    resolve = resolver or resolve_device

    @app.before_request  # type: ignore[misc]
    def _resolve_device_before():  # type: ignore[override]
        get_context().device = resolve(request)

    setattr(app, "_wng_device_resolution", True)
    LOG.debug("device resolution hook registered")


__all__ = ["resolve_device", "register_device_resolution", "DeviceResolver"]
