"""Helpers for readable, bounded debug labels.

Manifests can be arbitrarily large XML documents.  This module renders
pending requests the way they show up in logs and queue listings while
keeping the output bounded.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from repocoalesce.models.requests import PendingRequest


def truncate(value: str, *, max_length: int = 512) -> str:
    """Return *value* cut down to *max_length* characters."""
    if len(value) > max_length:
        return f"{value[:max_length]}…<truncated>"
    return value


def describe(request: PendingRequest, *, max_manifest: int = 512) -> str:
    """Render ``PendingRequest[rev=<revision>;manifest=<manifest>]``."""
    manifest = truncate(request.manifest, max_length=max_manifest)
    return f"{type(request).__name__}[rev={request.revision};manifest={manifest}]"
