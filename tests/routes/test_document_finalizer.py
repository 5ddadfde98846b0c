"""Tests for the after_request document finalizer."""
from __future__ import annotations

from typing import Callable, Dict, List

import pytest
from flask import Flask, Response

from wng_flask.components import (
    Document,
    Image,
    Meta,
    Paragraph,
    RenderedDocument,
    StyleContainer,
    StyleRule,
    StyleSheet,
    Text,
    Title,
)
from wng_flask.context import DocumentContext, render_document
from wng_flask.device import device_for_profile
from wng_flask.errors import (
    DeviceNotResolvedError,
    DocumentValidationError,
    ResponseCommittedError,
)
from wng_flask.routes.overrides import document_finalizer
from wng_flask.routes.overrides.document_finalizer import (
    DocumentFinalizer,
    register_document_finalizer,
)
from wng_flask.startup.wiring import init_app


class RecordingRenderer:
    def __init__(self, content_type: str = "application/x-test", markup: str = "<rendered/>"):
        self.calls: List[tuple] = []
        self.result = RenderedDocument(content_type=content_type, markup=markup)

    def render_document(self, document, device):
        self.calls.append((document, device))
        return self.result


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def optimizer_calls(monkeypatch):
    calls: List[Dict[str, object]] = []
    original = document_finalizer.optimize_styles

    def _recording(document, device, style_container):
        calls.append({
            "container": style_container,
            "rules_before": len(style_container.rules),
            "in_head": any(child is style_container for child in document.head.children),
            "device": device,
        })
        original(document, device, style_container)

    monkeypatch.setattr(document_finalizer, "optimize_styles", _recording)
    return calls


@pytest.fixture
def wng_app(renderer):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = "finalizer-test"
    init_app(app, renderer=renderer)
    factories: Dict[str, Callable[[], Document]] = {}
    built: Dict[str, Document] = {}

    @app.route("/plain")
    def plain():
        return "plain body"

    @app.route("/doc")
    def doc_view():
        document = factories["doc"]()
        built["doc"] = document
        return "\n   \n" + render_document(document)

    @app.route("/stream")
    def stream_view():
        render_document(factories["doc"]())
        return Response(iter([b"chunk-1", b"chunk-2"]), mimetype="text/html")

    app.factories = factories  # type: ignore[attr-defined]
    app.built = built  # type: ignore[attr-defined]
    return app


def _simple_document() -> Document:
    document = Document(title="Hello")
    paragraph = document.add_to_body(Paragraph())
    paragraph.add(Text("Welcome"))
    return document


def test_request_without_document_is_untouched(wng_app, renderer, optimizer_calls):
    client = wng_app.test_client()

    resp = client.get("/plain")

    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "plain body"
    assert resp.headers["Content-Type"] == "text/html; charset=utf-8"
    assert renderer.calls == []
    assert optimizer_calls == []


def test_document_without_style_container_gets_new_one(wng_app, renderer, optimizer_calls):
    wng_app.factories["doc"] = _simple_document
    client = wng_app.test_client()

    resp = client.get("/doc")

    document = wng_app.built["doc"]
    containers = [child for child in document.head.children if isinstance(child, StyleContainer)]
    assert len(containers) == 1
    assert document.head.children[-1] is containers[0]
    assert len(optimizer_calls) == 1
    assert optimizer_calls[0]["container"] is containers[0]
    assert optimizer_calls[0]["rules_before"] == 0
    assert optimizer_calls[0]["in_head"] is True
    assert resp.get_data(as_text=True) == "<rendered/>"
    assert resp.headers["Content-Type"] == "application/x-test"


def test_existing_style_container_is_reused(wng_app, renderer, optimizer_calls):
    existing = StyleContainer([StyleRule("p", {"color": "red", "float": "left"})])

    def factory() -> Document:
        document = _simple_document()
        document.add_to_head(Meta("author", "someone"))
        document.add_to_head(StyleSheet("/static/site.css"))
        document.add_to_head(existing)
        return document

    wng_app.factories["doc"] = factory
    client = wng_app.test_client()

    resp = client.get("/doc?device=generic_xhtml")

    document = wng_app.built["doc"]
    containers = [child for child in document.head.children if isinstance(child, StyleContainer)]
    assert containers == [existing]
    assert optimizer_calls[0]["container"] is existing
    assert optimizer_calls[0]["device"].id == "generic_xhtml"
    # generic_xhtml does not support float; the optimizer trimmed it in place
    assert existing.rules == [StyleRule("p", {"color": "red"})]
    assert resp.status_code == 200


def test_first_style_container_wins(wng_app, optimizer_calls):
    first = StyleContainer()
    second = StyleContainer()

    def factory() -> Document:
        document = _simple_document()
        document.add_to_head(Meta("a", "1"))
        document.add_to_head(Meta("b", "2"))
        document.add_to_head(first)
        document.add_to_head(second)
        return document

    wng_app.factories["doc"] = factory
    wng_app.test_client().get("/doc")

    assert optimizer_calls[0]["container"] is first
    assert len(wng_app.built["doc"].head.children) == 5


def test_view_whitespace_is_discarded(wng_app, renderer):
    wng_app.factories["doc"] = _simple_document

    resp = wng_app.test_client().get("/doc")

    assert not resp.get_data(as_text=True).startswith("\n")
    assert resp.headers["Content-Length"] == str(len("<rendered/>"))


def test_renderer_receives_mutated_document_and_device(wng_app, renderer):
    wng_app.factories["doc"] = _simple_document

    wng_app.test_client().get("/doc", headers={"User-Agent": "DoCoMo/2.0 N905i(c100;TB;W24H16)"})

    document, device = renderer.calls[0]
    assert document is wng_app.built["doc"]
    assert document.head.style_container() is not None
    assert device.id == "generic_imode"


def test_validation_failure_propagates_without_render(wng_app, renderer):
    wng_app.testing = True

    def factory() -> Document:
        document = _simple_document()
        document.add_to_body(Title("misplaced"))
        return document

    wng_app.factories["doc"] = factory

    with pytest.raises(DocumentValidationError):
        wng_app.test_client().get("/doc")
    assert renderer.calls == []


def test_validation_failure_becomes_server_error(wng_app, renderer):
    wng_app.testing = False

    def factory() -> Document:
        document = _simple_document()
        document.add_to_body(Image("", alt="broken"))
        return document

    wng_app.factories["doc"] = factory

    resp = wng_app.test_client().get("/doc")

    assert resp.status_code == 500
    assert "<rendered/>" not in resp.get_data(as_text=True)
    assert renderer.calls == []


def test_streamed_response_cannot_be_reset(wng_app, renderer):
    wng_app.testing = True
    wng_app.factories["doc"] = _simple_document

    with pytest.raises(ResponseCommittedError):
        wng_app.test_client().get("/stream")


def test_document_without_device_is_an_error():
    app = Flask(__name__)
    app.testing = True
    register_document_finalizer(app, RecordingRenderer())

    @app.route("/doc")
    def doc_view():
        return render_document(_simple_document())

    with pytest.raises(DeviceNotResolvedError):
        app.test_client().get("/doc")


def test_default_renderer_end_to_end_wml():
    app = Flask(__name__)
    init_app(app)

    @app.route("/doc")
    def doc_view():
        return render_document(_simple_document())

    resp = app.test_client().get("/doc", headers={"User-Agent": "Nokia6230/2.0 UP.Browser/6.2"})

    assert resp.headers["Content-Type"] == "text/vnd.wap.wml; charset=utf-8"
    body = resp.get_data(as_text=True)
    assert '<card id="main" title="Hello">' in body
    assert "<p>Welcome</p>" in body


def test_register_is_idempotent(renderer):
    app = Flask(__name__)

    first = register_document_finalizer(app, renderer)
    second = register_document_finalizer(app)

    assert first is second
    assert first.renderer is renderer
    assert len(app.after_request_funcs[None]) == 1


def test_finalize_direct_without_document_leaves_response():
    finalizer = DocumentFinalizer(RecordingRenderer())
    response = Response("untouched", mimetype="text/plain")
    headers_before = list(response.headers.items())

    result = finalizer.finalize(DocumentContext(device=device_for_profile("generic_wml")), response)

    assert result is response
    assert response.get_data(as_text=True) == "untouched"
    assert list(response.headers.items()) == headers_before


def test_finalize_consumes_document_once():
    renderer = RecordingRenderer()
    finalizer = DocumentFinalizer(renderer)
    context = DocumentContext(document=_simple_document(), device=device_for_profile("generic_web_browser"))

    finalizer.finalize(context, Response("first"))
    second = finalizer.finalize(context, Response("second"))

    assert context.document is None
    assert len(renderer.calls) == 1
    assert second.get_data(as_text=True) == "second"


def test_default_renderer_is_used_when_none_given():
    finalizer = DocumentFinalizer()
    assert isinstance(finalizer.renderer, document_finalizer.DefaultDocumentRenderer)


def test_finalize_direct_without_device_consumes_document():
    renderer = RecordingRenderer()
    context = DocumentContext(document=_simple_document())

    with pytest.raises(DeviceNotResolvedError):
        DocumentFinalizer(renderer).finalize(context, Response("view"))

    assert context.document is None
    assert renderer.calls == []
