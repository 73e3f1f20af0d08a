from __future__ import annotations

import logging
import threading

import pytest

from repocoalesce.config import CoalesceConfig
from repocoalesce.exceptions import StaleQueueItemError, UnknownQueueItemError
from repocoalesce.models import ManualCause, PendingRequest, RevisionIdentity, RevisionState
from repocoalesce.parameters import RevisionBuildParameters
from repocoalesce.queue.events import QueueItemState, TriggerOutcome
from repocoalesce.queue.store import BuildQueue

JOB = "android-nightly"


def _request(revision: str, *, combine: bool = False) -> PendingRequest:
    return PendingRequest(identity=RevisionIdentity(manifest="<manifest/>", revision=revision), combine=combine)


class TestSubmitWithoutCombine:
    def test_first_trigger_is_scheduled(self) -> None:
        queue = BuildQueue()
        result = queue.submit(JOB, _request("r1"))
        assert result.outcome == TriggerOutcome.SCHEDULED
        assert len(queue) == 1

    def test_same_revision_is_deduplicated(self) -> None:
        queue = BuildQueue()
        first = queue.submit(JOB, _request("r1"))
        second = queue.submit(JOB, _request("r1"))
        assert second.outcome == TriggerOutcome.DEDUPLICATED
        assert second.item_id == first.item_id
        assert len(queue) == 1

    def test_new_revision_gets_its_own_item(self) -> None:
        queue = BuildQueue()
        queue.submit(JOB, _request("r1"))
        result = queue.submit(JOB, _request("r2"))
        assert result.outcome == TriggerOutcome.SCHEDULED
        assert [item.pending_requests()[0].revision for item in queue.pending(JOB)] == ["r1", "r2"]

    def test_jobs_are_independent(self) -> None:
        queue = BuildQueue()
        queue.submit(JOB, _request("r1"))
        result = queue.submit("other-job", _request("r1"))
        assert result.outcome == TriggerOutcome.SCHEDULED
        assert len(queue) == 2

    def test_duplicate_of_later_item_is_deduplicated(self) -> None:
        queue = BuildQueue()
        queue.submit(JOB, _request("r1"))
        second = queue.submit(JOB, _request("r2"))

        result = queue.submit(JOB, _request("r2"))

        assert result.outcome == TriggerOutcome.DEDUPLICATED
        assert result.item_id == second.item_id
        assert len(queue.pending(JOB)) == 2

    def test_manual_item_does_not_hide_queued_revision(self) -> None:
        queue = BuildQueue()
        queue.schedule_manual(JOB)
        first = queue.submit(JOB, _request("r1"))

        result = queue.submit(JOB, _request("r1"))

        assert result.outcome == TriggerOutcome.DEDUPLICATED
        assert result.item_id == first.item_id
        assert len(queue.pending(JOB)) == 2


class TestSubmitWithCombine:
    def test_second_trigger_folds(self) -> None:
        queue = BuildQueue()
        first = queue.submit(JOB, _request("r1", combine=True))
        second = queue.submit(JOB, _request("r2", combine=True))

        assert second.outcome == TriggerOutcome.FOLDED
        assert second.item_id == first.item_id
        item = queue.get(first.item_id)
        assert [r.revision for r in item.pending_requests()] == ["r2"]
        assert len(queue) == 1

    def test_manual_item_gets_new_item_alongside(self) -> None:
        queue = BuildQueue()
        manual = queue.schedule_manual(JOB, ManualCause(user="alice"))
        result = queue.submit(JOB, _request("r1", combine=True))

        assert result.outcome == TriggerOutcome.SCHEDULED
        assert result.item_id != manual.item_id
        assert queue.get(manual.item_id).pending_requests() == []

    def test_folds_past_manual_item(self) -> None:
        queue = BuildQueue()
        manual = queue.schedule_manual(JOB)
        first = queue.submit(JOB, _request("r1", combine=True))

        result = queue.submit(JOB, _request("r2", combine=True))

        assert result.outcome == TriggerOutcome.FOLDED
        assert result.item_id == first.item_id
        assert len(queue.pending(JOB)) == 2
        assert queue.get(manual.item_id).pending_requests() == []
        assert [r.revision for r in queue.get(first.item_id).pending_requests()] == ["r2"]

    def test_folds_into_oldest_item_with_request(self) -> None:
        queue = BuildQueue()
        first = queue.submit(JOB, _request("r1"))
        queue.submit(JOB, _request("r2"))

        result = queue.submit(JOB, _request("r3", combine=True))

        assert result.outcome == TriggerOutcome.FOLDED
        assert result.item_id == first.item_id
        assert [r.revision for r in queue.get(first.item_id).pending_requests()] == ["r3"]

    def test_started_item_is_not_a_candidate(self) -> None:
        queue = BuildQueue()
        first = queue.submit(JOB, _request("r1", combine=True))
        started = queue.start(first.item_id)

        result = queue.submit(JOB, _request("r2", combine=True))

        assert result.outcome == TriggerOutcome.SCHEDULED
        assert result.item_id != first.item_id
        assert [r.revision for r in started.pending_requests()] == ["r1"]

    def test_extra_attachments_travel_with_new_item(self) -> None:
        queue = BuildQueue()
        cause = ManualCause(note="upstream #12")
        result = queue.submit(JOB, _request("r1", combine=True), extra=[cause])
        assert queue.get(result.item_id).attachments[1] is cause


class TestTrigger:
    def test_missing_state_skips_hooks(self) -> None:
        queue = BuildQueue()
        assert queue.trigger(JOB, RevisionBuildParameters(), None) is None
        assert len(queue) == 0

    def test_state_is_submitted(self) -> None:
        queue = BuildQueue()
        params = RevisionBuildParameters(combine_queued_commits=True)
        queue.trigger(JOB, params, RevisionState(manifest="m", manifest_revision="r1"))
        result = queue.trigger(JOB, params, RevisionState(manifest="m", manifest_revision="r2"))

        assert result is not None
        assert result.outcome == TriggerOutcome.FOLDED
        assert queue.pending(JOB)[0].pending_requests()[0].revision == "r2"


class TestLifecycle:
    def test_start_and_cancel(self) -> None:
        queue = BuildQueue()
        a = queue.submit(JOB, _request("r1"))
        b = queue.submit(JOB, _request("r2"))

        assert queue.start(a.item_id).state == QueueItemState.STARTED
        assert queue.cancel(b.item_id).state == QueueItemState.CANCELLED
        assert queue.pending() == []

    def test_retiring_twice_is_unknown(self) -> None:
        queue = BuildQueue()
        result = queue.submit(JOB, _request("r1"))
        queue.start(result.item_id)
        with pytest.raises(UnknownQueueItemError) as excinfo:
            queue.cancel(result.item_id)
        assert excinfo.value.item_id == result.item_id

    def test_retired_items_are_dropped(self) -> None:
        queue = BuildQueue()
        a = queue.submit(JOB, _request("r1"))
        b = queue.submit("other-job", _request("r1"))
        queue.start(a.item_id)
        queue.cancel(b.item_id)

        assert len(queue) == 0
        assert queue.pending() == []
        assert queue.pending(JOB) == []
        assert queue._items == {}  # noqa: SLF001
        assert queue._by_job == {}  # noqa: SLF001
        with pytest.raises(UnknownQueueItemError):
            queue.get(a.item_id)

    def test_started_revision_can_be_queued_again(self) -> None:
        queue = BuildQueue()
        first = queue.submit(JOB, _request("r1"))
        queue.start(first.item_id)

        result = queue.submit(JOB, _request("r1"))

        assert result.outcome == TriggerOutcome.SCHEDULED
        assert result.item_id != first.item_id

    def test_unknown_item(self) -> None:
        queue = BuildQueue()
        with pytest.raises(UnknownQueueItemError):
            queue.get(99)

    def test_fold_into_started_item_is_refused(self) -> None:
        queue = BuildQueue()
        result = queue.submit(JOB, _request("r1", combine=True))
        item = queue.start(result.item_id)
        with pytest.raises(StaleQueueItemError):
            item.replace_pending_request(item.pending_requests()[0], _request("r2", combine=True))
        with pytest.raises(StaleQueueItemError):
            item.attach(_request("r3", combine=True))


@pytest.mark.parametrize("combine", [True, False])
def test_concurrent_triggers_create_one_item(combine: bool) -> None:
    queue = BuildQueue()
    barrier = threading.Barrier(8)

    def _fire() -> None:
        barrier.wait()
        queue.submit(JOB, _request("r1", combine=combine))

    threads = [threading.Thread(target=_fire) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(queue) == 1
    assert len(queue.pending(JOB)[0].pending_requests()) == 1


def test_from_config_bounds_log_labels(caplog: pytest.LogCaptureFixture) -> None:
    queue = BuildQueue.from_config(CoalesceConfig(max_label_manifest=8))
    request = PendingRequest(identity=RevisionIdentity(manifest="m" * 100, revision="r1"))

    with caplog.at_level(logging.DEBUG, logger="repocoalesce.queue.store"):
        queue.submit(JOB, request)

    assert "manifest=" + "m" * 8 + "…<truncated>" in caplog.text
    assert "m" * 9 not in caplog.text
