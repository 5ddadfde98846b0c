"""Rendering exports."""
from .groups import (
    RendererGroup,
    RendererGroupResolver,
    DefaultRendererGroupResolver,
    content_type_for,
)
from .renderer import (
    DocumentRenderer,
    DefaultDocumentRenderer,
    scaled_size,
)

__all__ = [
    "RendererGroup",
    "RendererGroupResolver",
    "DefaultRendererGroupResolver",
    "content_type_for",
    "DocumentRenderer",
    "DefaultDocumentRenderer",
    "scaled_size",
]
