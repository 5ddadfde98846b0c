"""Error types raised while finalizing a document.

None of these are handled locally; they propagate to Flask's error pipeline.
"""
from __future__ import annotations

from typing import Any, Optional


class WngError(Exception):
    """Base class for document finalization failures."""


class DocumentValidationError(WngError, ValueError):
    """Raised when a document tree is structurally invalid."""

    def __init__(self, message: str, node: Optional[Any] = None):
        super().__init__(message)
        self.node = node


class RenderingError(WngError):
    """Raised when a document cannot be rendered for the resolved device."""


class DeviceNotResolvedError(WngError):
    """Raised when a document is attached but no device was resolved."""


class ResponseCommittedError(WngError):
    """Raised when the response can no longer be reset (streamed output)."""


__all__ = [
    "WngError",
    "DocumentValidationError",
    "RenderingError",
    "DeviceNotResolvedError",
    "ResponseCommittedError",
]
