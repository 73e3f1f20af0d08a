"""Coalescing configuration for repocoalesce."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from repocoalesce.exceptions import CoalesceConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise CoalesceConfigError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise CoalesceConfigError(f"{name} must be positive, got {parsed}")
    return parsed


@dataclasses.dataclass(frozen=True)
class CoalesceConfig:
    """Coalescing configuration.

    Parameters
    ----------
    combine_queued_commits : bool
        Request commit-combining behaviour.  When enabled, every trigger
        for a job collapses into the one pending build for that job
        instead of queuing per revision.
    max_label_manifest : int
        Maximum number of manifest characters rendered in debug labels
        and log lines.
    """

    combine_queued_commits: bool = False
    max_label_manifest: int = 512

    @classmethod
    def from_env(cls, **overrides: Any) -> CoalesceConfig:
        """Create configuration from environment variables.

        Reads ``REPO_COMBINE_QUEUED_COMMITS`` and
        ``REPO_MAX_LABEL_MANIFEST``.  Explicit keyword arguments override
        environment values.

        Raises
        ------
        CoalesceConfigError
            If ``REPO_MAX_LABEL_MANIFEST`` is not a positive integer.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {
            "combine_queued_commits": _env_bool(env.get("REPO_COMBINE_QUEUED_COMMITS"), False),
            "max_label_manifest": _env_int(
                "REPO_MAX_LABEL_MANIFEST",
                env.get("REPO_MAX_LABEL_MANIFEST"),
                512,
            ),
        }
        config_kwargs.update(overrides)
        return cls(**config_kwargs)
