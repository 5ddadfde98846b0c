"""Structural validation of document trees."""
from __future__ import annotations

from typing import Optional, Set

from wng_flask.components import (
    HEAD_KINDS,
    LEAF_KINDS,
    Component,
    Document,
    NodeKind,
    walk,
)
from wng_flask.errors import DocumentValidationError


def _check_root(document: Component) -> None:
    if not isinstance(document, Document):
        raise DocumentValidationError("root is not a document", document)
    kinds = [child.kind for child in document.children]
    if kinds != [NodeKind.HEAD, NodeKind.BODY]:
        raise DocumentValidationError(
            f"document must contain head then body, got {[k.value for k in kinds]}",
            document,
        )


def validate_document(document: Document) -> None:
    """Walk `document` and raise `DocumentValidationError` on the first defect."""
    _check_root(document)
    seen_ids: Set[str] = set()
    titles = 0

    def _visit(node: Component, parent: Optional[Component]) -> None:
        nonlocal titles
        if node is not document and node.kind in (NodeKind.DOCUMENT, NodeKind.HEAD, NodeKind.BODY):
            if parent is not document:
                raise DocumentValidationError(f"nested {node.kind.value} node", node)
        if parent is not None and parent.kind == NodeKind.HEAD and node.kind not in HEAD_KINDS:
            raise DocumentValidationError(f"{node.kind.value} is not allowed in head", node)
        if node.kind in HEAD_KINDS and (parent is None or parent.kind != NodeKind.HEAD):
            raise DocumentValidationError(f"{node.kind.value} is only allowed in head", node)
        if node.kind in LEAF_KINDS and node.children:
            raise DocumentValidationError(f"{node.kind.value} cannot have children", node)
        if node.kind == NodeKind.TITLE:
            titles += 1
            if titles > 1:
                raise DocumentValidationError("document has more than one title", node)
        if node.kind == NodeKind.LINK and not (getattr(node, "href", None) or "").strip():
            raise DocumentValidationError("link without href", node)
        if node.kind == NodeKind.IMAGE:
            if not (getattr(node, "src", None) or "").strip():
                raise DocumentValidationError("image without src", node)
            if getattr(node, "alt", None) is None:
                raise DocumentValidationError("image without alt text", node)
        if node.id:
            if node.id in seen_ids:
                raise DocumentValidationError(f"duplicate component id: {node.id}", node)
            seen_ids.add(node.id)

    walk(document, _visit)


__all__ = ["validate_document"]
