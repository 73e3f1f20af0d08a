"""Custom exception hierarchy for repocoalesce."""

from __future__ import annotations


class RepoCoalesceError(Exception):
    """Base exception for all repocoalesce errors."""


class CoalesceConfigError(RepoCoalesceError):
    """Invalid or missing configuration."""


class QueueError(RepoCoalesceError):
    """Host queue operation failed."""

    def __init__(self, message: str, *, item_id: int | None = None) -> None:
        self.item_id = item_id
        super().__init__(message)


class UnknownQueueItemError(QueueError):
    """No queue item exists with the requested id."""


class StaleQueueItemError(QueueError):
    """The queue item has left the pending state.

    Raised when a caller tries to mutate an item that already started
    executing or was cancelled.  Folding into such an item is
    meaningless, so the host discards the attempt.
    """

    def __init__(self, message: str, *, item_id: int | None = None, state: str = "") -> None:
        self.state = state
        super().__init__(message, item_id=item_id)
