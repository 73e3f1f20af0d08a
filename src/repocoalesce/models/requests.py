"""Attachments carried by queued build items.

A queued item may hold a mix of attachments.  Only :class:`PendingRequest`
takes part in coalescing; everything else (manual triggers, for example)
is ignored by the policy.
"""

from __future__ import annotations

from typing import TypeAlias

from repocoalesce._format import describe
from repocoalesce.models._base import RepoBaseModel
from repocoalesce.models.revision import RevisionIdentity, RevisionState


class PendingRequest(RepoBaseModel):
    """A revision-tagged build request."""

    identity: RevisionIdentity
    combine: bool = False

    @classmethod
    def from_state(cls, state: RevisionState, *, combine: bool = False) -> PendingRequest:
        return cls(identity=RevisionIdentity.from_state(state), combine=combine)

    @property
    def manifest(self) -> str:
        return self.identity.manifest

    @property
    def revision(self) -> str:
        return self.identity.revision

    def label(self, *, max_manifest: int = 512) -> str:
        """Debug label, e.g. ``PendingRequest[rev=abc;manifest=...]``."""
        return describe(self, max_manifest=max_manifest)

    def __str__(self) -> str:
        return self.label()


class ManualCause(RepoBaseModel):
    """A manual or ad-hoc trigger with no revision attached."""

    user: str | None = None
    note: str = ""


Attachment: TypeAlias = PendingRequest | ManualCause
