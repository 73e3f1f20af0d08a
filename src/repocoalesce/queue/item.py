"""Queued build items."""

from __future__ import annotations

from dataclasses import dataclass, field

from repocoalesce.exceptions import StaleQueueItemError
from repocoalesce.models.requests import Attachment, PendingRequest
from repocoalesce.policy import pending_requests
from repocoalesce.queue.events import QueueItemState


@dataclass
class QueueItem:
    """A queued build carrying a mix of attachments.

    Implements :class:`repocoalesce.policy.QueueItemHandle`.  Every
    mutation is refused once the item has left the pending state.
    """

    item_id: int
    job: str
    attachments: list[Attachment] = field(default_factory=list)
    state: QueueItemState = QueueItemState.PENDING

    @property
    def is_pending(self) -> bool:
        return self.state == QueueItemState.PENDING

    def pending_requests(self) -> list[PendingRequest]:
        return pending_requests(self.attachments)

    def find_pending_request(self) -> PendingRequest | None:
        for attachment in self.attachments:
            if isinstance(attachment, PendingRequest):
                return attachment
        return None

    def replace_pending_request(self, old: PendingRequest, new: PendingRequest) -> None:
        self._ensure_pending()
        # Compare by identity: equal requests may legitimately appear twice.
        for index, attachment in enumerate(self.attachments):
            if attachment is old:
                del self.attachments[index]
                break
        self.attachments.append(new)

    def attach(self, request: PendingRequest) -> None:
        self._ensure_pending()
        self.attachments.append(request)

    def _ensure_pending(self) -> None:
        if not self.is_pending:
            raise StaleQueueItemError(
                f"Queue item {self.item_id} is no longer pending",
                item_id=self.item_id,
                state=str(self.state),
            )
