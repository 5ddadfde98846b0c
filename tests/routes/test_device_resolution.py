"""Device resolution before_request hook tests."""
from __future__ import annotations

import pytest
from flask import Flask, jsonify, request

from wng_flask.context import get_context
from wng_flask.device import Device
from wng_flask.device.resolution import register_device_resolution, resolve_device


@pytest.fixture
def device_app():
    app = Flask(__name__)
    register_device_resolution(app)

    @app.route("/device")
    def show_device():
        device = get_context().device
        return jsonify({"id": device.id, "ua": device.user_agent})

    return app


@pytest.mark.parametrize(
    "user_agent, expected",
    [
        ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/120.0", "generic_web_browser"),
        ("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Mobile/15E148", "generic_smartphone"),
        ("Mozilla/5.0 (Linux; Android 14; Pixel 8) Mobile Safari/537.36", "generic_smartphone"),
        ("DoCoMo/2.0 P906i(c100;TB;W24H15)", "generic_imode"),
        ("Nokia3310/1.0 UP.Browser/4.1", "generic_wml"),
        ("SAMSUNG-SGH-E250/1.0 Profile/MIDP-2.0 Configuration/CLDC-1.1", "generic_xhtml"),
        ("sgh-x100 something", "generic_xhtml"),
    ],
)
def test_user_agent_families(device_app, user_agent, expected):
    resp = device_app.test_client().get("/device", headers={"User-Agent": user_agent})

    assert resp.get_json() == {"id": expected, "ua": user_agent}


def test_wml_only_accept_header(device_app):
    resp = device_app.test_client().get(
        "/device",
        headers={"User-Agent": "SomeGateway/1.0", "Accept": "text/vnd.wap.wml, image/vnd.wap.wbmp"},
    )
    assert resp.get_json()["id"] == "generic_wml"


def test_query_parameter_forces_profile(device_app):
    resp = device_app.test_client().get(
        "/device?device=generic_wml",
        headers={"User-Agent": "Mozilla/5.0 (Windows NT 10.0)"},
    )
    assert resp.get_json()["id"] == "generic_wml"


def test_unknown_forced_profile_ignored(device_app):
    resp = device_app.test_client().get("/device?device=toaster", headers={"User-Agent": "DoCoMo/2.0"})
    assert resp.get_json()["id"] == "generic_imode"


def test_query_parameter_name_configurable(monkeypatch, device_app):
    monkeypatch.setenv("WNG_DEVICE_PARAM", "profile")
    resp = device_app.test_client().get("/device?profile=generic_xhtml&device=generic_wml")
    assert resp.get_json()["id"] == "generic_xhtml"


def test_default_profile_configurable(monkeypatch):
    monkeypatch.setenv("WNG_DEFAULT_DEVICE", "generic_xhtml")
    app = Flask(__name__)
    with app.test_request_context("/", headers={"User-Agent": "Mozilla/5.0 (X11; Linux x86_64)"}):
        assert resolve_device(request).id == "generic_xhtml"


def test_custom_resolver_and_idempotent_registration():
    app = Flask(__name__)
    seen = []

    def resolver(flask_request):
        seen.append(flask_request.path)
        return Device(id="lab-phone", capabilities={"preferred_markup": "wml_1_1"})

    register_device_resolution(app, resolver)
    register_device_resolution(app)

    @app.route("/device")
    def show_device():
        return get_context().device.id

    resp = app.test_client().get("/device")

    assert resp.get_data(as_text=True) == "lab-phone"
    assert seen == ["/device"]
    assert len(app.before_request_funcs[None]) == 1
