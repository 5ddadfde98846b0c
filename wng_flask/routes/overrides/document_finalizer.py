"""Renders the request's document after the view has run.

Views that target devices build a `Document` tree and attach it with
`render_document()` instead of producing markup. This after_request hook
finishes the job: it validates the tree, makes sure the head carries a style
container, optimizes styles for the resolved device, renders the tree and
replaces whatever body the view produced with the device markup.

Requests without an attached document pass through untouched. Failures are
not handled here; Flask's error pipeline turns them into an error response.
"""
from __future__ import annotations

from typing import Any, Optional

from flask import Response

from wng_flask.components import Document, RenderedDocument, StyleContainer
from wng_flask.context import DocumentContext, get_context
from wng_flask.device.model import DeviceView
from wng_flask.errors import DeviceNotResolvedError, ResponseCommittedError
from wng_flask.services.rendering import (
    DefaultDocumentRenderer,
    DefaultRendererGroupResolver,
    DocumentRenderer,
)
from wng_flask.services.style_optimizer import optimize_styles
from wng_flask.services.validation import validate_document
from wng_flask.utils.logging import get_logger

LOG = get_logger("wng.document_finalizer")

EXTENSION_KEY = "wng_document_finalizer"


def ensure_style_container(document: Document) -> StyleContainer:
    """Return the head's first style container, appending an empty one if absent."""
    container = document.head.style_container()
    if container is None:
        container = StyleContainer()
        document.add_to_head(container)
        LOG.debug("style container added to document head")
    return container


def _write_document(rendered: RenderedDocument, response: Response) -> None:
    # Streamed bodies may already be on the wire; they cannot be discarded.
    if response.is_streamed or response.direct_passthrough:
        raise ResponseCommittedError("response body is streamed and cannot be reset")
    # Drop anything the view emitted (typically stray whitespace).
    response.set_data(b"")
    response.headers["Content-Type"] = rendered.content_type
    response.set_data(rendered.markup)


class DocumentFinalizer:
    def __init__(self, renderer: Optional[DocumentRenderer] = None):
        self.renderer: DocumentRenderer = renderer or DefaultDocumentRenderer(DefaultRendererGroupResolver())

    def finalize(self, context: DocumentContext, response: Response) -> Response:
        document = context.take_document()
        if document is None:
            return response
        if context.device is None:
            raise DeviceNotResolvedError("document attached but no device was resolved")
        device = DeviceView(context.device)
        validate_document(document)
        style_container = ensure_style_container(document)
        optimize_styles(document, device, style_container)
        rendered = self.renderer.render_document(document, device)
        _write_document(rendered, response)
        LOG.debug("document rendered for %s as %s", device.id, rendered.content_type)
        return response


def register_document_finalizer(app: Any, renderer: Optional[DocumentRenderer] = None) -> DocumentFinalizer:
    existing = app.extensions.get(EXTENSION_KEY)
    if existing is not None:
        return existing
    finalizer = DocumentFinalizer(renderer)

    @app.after_request  # type: ignore[misc]
    def _finalize_document(response: Response):  # type: ignore[override]
        return finalizer.finalize(get_context(), response)

    app.extensions[EXTENSION_KEY] = finalizer
    LOG.debug("document finalizer registered (renderer=%s)", type(finalizer.renderer).__name__)
    return finalizer


__all__ = [
    "DocumentFinalizer",
    "ensure_style_container",
    "register_document_finalizer",
]
