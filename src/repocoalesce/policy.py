"""Build-request coalescing policy.

This module holds the two decisions a host queue delegates to us:

* :func:`admits` - should a new trigger become a new queue item?
* :func:`fold` - merge a trigger into an existing, not-yet-started item.

Both are synchronous and own no state.  The host is responsible for
calling them under its own queue lock and for choosing the one candidate
item a trigger is compared against.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

from repocoalesce.models.requests import PendingRequest

_logger = logging.getLogger(__name__)


class QueueItemHandle(Protocol):
    """Mutable view of one pending queue item, owned by the host."""

    def find_pending_request(self) -> PendingRequest | None: ...

    def replace_pending_request(self, old: PendingRequest, new: PendingRequest) -> None: ...

    def attach(self, request: PendingRequest) -> None: ...


def pending_requests(attachments: Iterable[object]) -> list[PendingRequest]:
    """Keep only the revision-tagged requests from a mixed attachment list."""
    return [attachment for attachment in attachments if isinstance(attachment, PendingRequest)]


def admits(request: PendingRequest, others: Sequence[PendingRequest]) -> bool:
    """Decide whether *request* warrants a new queue item.

    Policy:
    - combine mode: admit only when the candidate item carries no
      pending request at all (e.g. it was triggered manually).  Identity
      is ignored; the surviving build picks up the newest revision when
      the request is folded in.
    - otherwise: decline only when an exactly matching identity is
      already pending.
    """
    if request.combine:
        admitted = len(others) == 0
        _logger.debug(
            "combine admission for rev=%s against %d pending: %s",
            request.revision,
            len(others),
            admitted,
        )
        return admitted

    for other in others:
        if request.identity.same_as(other.identity):
            _logger.debug("duplicate of pending rev=%s, not admitting", other.revision)
            return False
    return True


def fold(request: PendingRequest, target: QueueItemHandle) -> None:
    """Fold *request* into the pending item behind *target*.

    Does nothing unless *request* asked for combining.  An existing
    pending request on the item is replaced outright (last write wins);
    an item without one gains *request*.
    """
    if not request.combine:
        return

    existing = target.find_pending_request()
    if existing is not None:
        # Identities are immutable, so swap the whole request.
        target.replace_pending_request(existing, request)
        _logger.debug("folded rev=%s over rev=%s", request.revision, existing.revision)
        return

    target.attach(request)
    _logger.debug("attached rev=%s to item without a pending request", request.revision)
