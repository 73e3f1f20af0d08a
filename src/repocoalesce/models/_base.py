"""Base model for repocoalesce value objects.

Every request-side value inherits from :class:`RepoBaseModel`, which is
frozen so that an identity captured at trigger time can never drift while
it sits in the queue.  String fields are deliberately *not* stripped:
identity comparison is exact.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RepoBaseModel(BaseModel):
    """Frozen, strict-keyed base for repocoalesce models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )
