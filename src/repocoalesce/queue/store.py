"""In-memory build queue.

This is the only component allowed to create, fold into, or retire
queue items.  Every decide-then-mutate sequence runs under one lock so
two concurrent triggers cannot both see "nothing pending" and both
enqueue a build.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Iterable

from repocoalesce._format import describe
from repocoalesce.config import CoalesceConfig
from repocoalesce.exceptions import UnknownQueueItemError
from repocoalesce.models.requests import Attachment, ManualCause, PendingRequest
from repocoalesce.models.revision import RevisionState
from repocoalesce.parameters import RevisionBuildParameters
from repocoalesce.policy import admits, fold
from repocoalesce.queue.events import QueueItemState, TriggerOutcome, TriggerResult
from repocoalesce.queue.item import QueueItem

_logger = logging.getLogger(__name__)


class BuildQueue:
    """Host queue that invokes the coalescing policy.

    Only pending items are held.  Items leave the queue through
    :meth:`start` or :meth:`cancel`; the caller keeps the returned item.

    Candidate selection:
    - combine requests are compared against the oldest pending item for
      the job that already carries a pending request, or the oldest
      pending item when none does.
    - other requests are compared against every pending item for the
      job, so an exact duplicate is caught wherever it sits.
    """

    def __init__(self, *, max_label_manifest: int = 512) -> None:
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._items: dict[int, QueueItem] = {}
        self._by_job: dict[str, list[QueueItem]] = {}
        self._max_label_manifest = max_label_manifest

    @classmethod
    def from_config(cls, config: CoalesceConfig) -> BuildQueue:
        return cls(max_label_manifest=config.max_label_manifest)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _label(self, request: PendingRequest) -> str:
        return describe(request, max_manifest=self._max_label_manifest)

    def _combine_candidate(self, job: str) -> QueueItem | None:
        items = self._by_job.get(job, [])
        for item in items:
            if item.find_pending_request() is not None:
                return item
        return items[0] if items else None

    def _enqueue(self, job: str, attachments: list[Attachment]) -> QueueItem:
        item = QueueItem(item_id=next(self._ids), job=job, attachments=attachments)
        self._items[item.item_id] = item
        self._by_job.setdefault(job, []).append(item)
        return item

    def submit(
        self,
        job: str,
        request: PendingRequest,
        *,
        extra: Iterable[Attachment] = (),
    ) -> TriggerResult:
        """Admit, fold, or drop *request* for *job*."""
        with self._lock:
            if request.combine:
                candidate = self._combine_candidate(job)
                if candidate is not None and not admits(request, candidate.pending_requests()):
                    fold(request, candidate)
                    _logger.debug("folded %s into item=%d job=%s", self._label(request), candidate.item_id, job)
                    return TriggerResult(outcome=TriggerOutcome.FOLDED, item_id=candidate.item_id, job=job)
            else:
                for candidate in self._by_job.get(job, []):
                    if not admits(request, candidate.pending_requests()):
                        _logger.debug(
                            "equivalent build already pending item=%d job=%s %s",
                            candidate.item_id,
                            job,
                            self._label(request),
                        )
                        return TriggerResult(
                            outcome=TriggerOutcome.DEDUPLICATED,
                            item_id=candidate.item_id,
                            job=job,
                        )

            item = self._enqueue(job, [request, *extra])
            _logger.debug("scheduled item=%d job=%s %s", item.item_id, job, self._label(request))
            return TriggerResult(outcome=TriggerOutcome.SCHEDULED, item_id=item.item_id, job=job)

    def trigger(
        self,
        job: str,
        parameters: RevisionBuildParameters,
        state: RevisionState | None,
        *,
        extra: Iterable[Attachment] = (),
    ) -> TriggerResult | None:
        """Build a request from *state* and submit it.

        Returns ``None`` when the upstream build has no revision state; the
        policy hooks are not consulted in that case.
        """
        request = parameters.to_request(state)
        if request is None:
            return None
        return self.submit(job, request, extra=extra)

    def schedule_manual(self, job: str, cause: ManualCause | None = None) -> TriggerResult:
        """Enqueue a manually triggered build with no pending request."""
        with self._lock:
            item = self._enqueue(job, [cause or ManualCause()])
            _logger.debug("scheduled manual item=%d job=%s", item.item_id, job)
            return TriggerResult(outcome=TriggerOutcome.SCHEDULED, item_id=item.item_id, job=job)

    def get(self, item_id: int) -> QueueItem:
        """Return the pending item *item_id*."""
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                raise UnknownQueueItemError(f"No pending queue item {item_id}", item_id=item_id)
            return item

    def pending(self, job: str | None = None) -> list[QueueItem]:
        """Pending items in queue order, optionally for one job."""
        with self._lock:
            if job is not None:
                return list(self._by_job.get(job, []))
            return list(self._items.values())

    def start(self, item_id: int) -> QueueItem:
        return self._retire(item_id, QueueItemState.STARTED)

    def cancel(self, item_id: int) -> QueueItem:
        return self._retire(item_id, QueueItemState.CANCELLED)

    def _retire(self, item_id: int, state: QueueItemState) -> QueueItem:
        with self._lock:
            item = self._items.pop(item_id, None)
            if item is None:
                raise UnknownQueueItemError(f"No pending queue item {item_id}", item_id=item_id)
            siblings = self._by_job[item.job]
            siblings.remove(item)
            if not siblings:
                del self._by_job[item.job]
            item.state = state
            _logger.debug("item=%d job=%s -> %s", item_id, item.job, state)
            return item
