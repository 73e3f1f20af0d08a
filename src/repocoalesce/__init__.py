"""repocoalesce - Build-request coalescing for repo manifest revisions."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("repocoalesce")
except PackageNotFoundError:
    __version__ = "0+local"
from repocoalesce.config import CoalesceConfig
from repocoalesce.exceptions import (
    CoalesceConfigError,
    QueueError,
    RepoCoalesceError,
    StaleQueueItemError,
    UnknownQueueItemError,
)
from repocoalesce.models import (
    Attachment,
    ManualCause,
    PendingRequest,
    RevisionIdentity,
    RevisionState,
)
from repocoalesce.parameters import RevisionBuildParameters
from repocoalesce.policy import QueueItemHandle, admits, fold, pending_requests
from repocoalesce.queue.events import QueueItemState, TriggerOutcome, TriggerResult
from repocoalesce.queue.item import QueueItem
from repocoalesce.queue.store import BuildQueue

__all__ = [
    "__version__",
    "Attachment",
    "BuildQueue",
    "CoalesceConfig",
    "CoalesceConfigError",
    "ManualCause",
    "PendingRequest",
    "QueueError",
    "QueueItem",
    "QueueItemHandle",
    "QueueItemState",
    "RepoCoalesceError",
    "RevisionBuildParameters",
    "RevisionIdentity",
    "RevisionState",
    "StaleQueueItemError",
    "TriggerOutcome",
    "TriggerResult",
    "UnknownQueueItemError",
    "admits",
    "fold",
    "pending_requests",
]
