"""Service exports."""

from .validation import validate_document
from .style_optimizer import optimize_styles
from .rendering import (
    DefaultDocumentRenderer,
    DefaultRendererGroupResolver,
    DocumentRenderer,
    RendererGroup,
)

__all__ = [
    "validate_document",
    "optimize_styles",
    "DefaultDocumentRenderer",
    "DefaultRendererGroupResolver",
    "DocumentRenderer",
    "RendererGroup",
]
