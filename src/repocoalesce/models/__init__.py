"""Value models for repocoalesce."""

from repocoalesce.models._base import RepoBaseModel
from repocoalesce.models.requests import Attachment, ManualCause, PendingRequest
from repocoalesce.models.revision import RevisionIdentity, RevisionState

__all__ = [
    "Attachment",
    "ManualCause",
    "PendingRequest",
    "RepoBaseModel",
    "RevisionIdentity",
    "RevisionState",
]
