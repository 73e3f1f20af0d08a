"""Revision state and identity values."""

from __future__ import annotations

from pydantic import Field

from repocoalesce.models._base import RepoBaseModel


class RevisionState(RepoBaseModel):
    """Repository state captured by an external checkout step.

    Treated as an opaque, already-validated pair of strings.
    """

    manifest: str = Field(default="", description="Serialized manifest content")
    manifest_revision: str = Field(..., description="Revision (e.g. SHA) of the manifest")


class RevisionIdentity(RepoBaseModel):
    """What a build would check out: manifest content plus its revision."""

    manifest: str = ""
    revision: str

    @classmethod
    def from_state(cls, state: RevisionState) -> RevisionIdentity:
        return cls(manifest=state.manifest, revision=state.manifest_revision)

    def same_as(self, other: RevisionIdentity) -> bool:
        """Return ``True`` when both fields match exactly.

        No canonicalization is applied: an empty manifest and a manifest
        describing "no overlay" differ if their strings differ.
        """
        return self.manifest == other.manifest and self.revision == other.revision
