"""Typed per-request state shared between pipeline stages.

Device resolution writes `device`, the view writes `document`, and the
after_request finalizer consumes both. Stored on `flask.g`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import g

from wng_flask.components import Document
from wng_flask.device.model import Device

_G_ATTR = "wng_context"


@dataclass
class DocumentContext:
    document: Optional[Document] = None
    device: Optional[Device] = None

    def take_document(self) -> Optional[Document]:
        """Return the attached document and clear the slot."""
        document, self.document = self.document, None
        return document


def get_context() -> DocumentContext:
    ctx = getattr(g, _G_ATTR, None)
    if ctx is None:
        ctx = DocumentContext()
        setattr(g, _G_ATTR, ctx)
    return ctx


def render_document(document: Document) -> str:
    """Attach `document` for rendering at request completion.

    Returns an empty placeholder body; the finalizer replaces it.
    """
    get_context().document = document
    return ""


__all__ = ["DocumentContext", "get_context", "render_document"]
