"""Queue item states and trigger outcomes."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from repocoalesce.models._base import RepoBaseModel


class QueueItemState(StrEnum):
    PENDING = "pending"
    STARTED = "started"
    CANCELLED = "cancelled"


class TriggerOutcome(StrEnum):
    SCHEDULED = "scheduled"
    FOLDED = "folded"
    DEDUPLICATED = "deduplicated"


class TriggerResult(RepoBaseModel):
    """What the queue did with one trigger."""

    outcome: TriggerOutcome
    item_id: int = Field(..., description="Item created, folded into, or matched")
    job: str
