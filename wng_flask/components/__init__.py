"""Component tree exports."""
from .nodes import (
    NodeKind,
    HEAD_KINDS,
    LEAF_KINDS,
    Component,
    Document,
    Head,
    Body,
    Title,
    Meta,
    StyleSheet,
    StyleRule,
    StyleContainer,
    Text,
    Paragraph,
    Block,
    Link,
    Image,
    Break,
    walk,
    iter_nodes,
    RenderedDocument,
)

__all__ = [
    "NodeKind",
    "HEAD_KINDS",
    "LEAF_KINDS",
    "Component",
    "Document",
    "Head",
    "Body",
    "Title",
    "Meta",
    "StyleSheet",
    "StyleRule",
    "StyleContainer",
    "Text",
    "Paragraph",
    "Block",
    "Link",
    "Image",
    "Break",
    "walk",
    "iter_nodes",
    "RenderedDocument",
]
