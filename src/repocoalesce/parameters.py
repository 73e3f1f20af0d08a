"""Contribute revision-tagged requests to downstream builds.

An upstream build that checked out a repo manifest hands its
:class:`RevisionState` to this object, which turns it into the
:class:`PendingRequest` the host queue schedules.
"""

from __future__ import annotations

import logging

from repocoalesce.config import CoalesceConfig
from repocoalesce.models._base import RepoBaseModel
from repocoalesce.models.requests import PendingRequest
from repocoalesce.models.revision import RevisionState

_logger = logging.getLogger(__name__)

DISPLAY_NAME = "Pass-through repo revision and manifest"


class RevisionBuildParameters(RepoBaseModel):
    """Pass the upstream revision and manifest through to a triggered build."""

    combine_queued_commits: bool = False

    @classmethod
    def from_config(cls, config: CoalesceConfig) -> RevisionBuildParameters:
        return cls(combine_queued_commits=config.combine_queued_commits)

    @property
    def display_name(self) -> str:
        return DISPLAY_NAME

    def to_request(self, state: RevisionState | None) -> PendingRequest | None:
        """Build the request for *state*, or ``None`` without one.

        A missing state means the upstream job does not track manifest
        revisions.  The caller must then skip the admission and fold hooks
        for this trigger.
        """
        if state is None:
            _logger.warning(
                "This project doesn't use repo as SCM. Can't pass the revision/manifest to downstream"
            )
            return None
        return PendingRequest.from_state(state, combine=self.combine_queued_commits)
