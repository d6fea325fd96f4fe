"""Configuration management for pathgate."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from pathgate.exceptions import ConfigError


class ChangeSource(str, Enum):
    """Where the changed-file list comes from."""

    HOSTED = "hosted"  # GitHub "compare two commits" API
    LOCAL = "local"  # git diff in a local working copy


class RefPolicy(str, Enum):
    """How explicit base/head overrides combine with the triggering event."""

    EVENT_FIRST = "event-first"  # Overrides only fill what the event leaves empty
    OVERRIDES_FIRST = "overrides-first"  # Both overrides given -> they win


class GlobOptions(BaseModel):
    """Glob dialect switches."""

    dot: bool = False  # Let wildcards match a leading '.'
    match_base: bool = True  # Slash-less patterns match the basename
    nocase: bool = False


class EventContext(BaseModel):
    """The event that triggered the run, loaded once at process start."""

    event_name: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)
    repository: str = ""  # "owner/repo"

    @property
    def owner(self) -> str:
        return self.repository.partition("/")[0]

    @property
    def repo(self) -> str:
        return self.repository.partition("/")[2]


class RunConfig(BaseModel):
    """Everything a single `pathgate check` run needs."""

    paths: str
    base_ref: str | None = None
    head_ref: str | None = None
    source: ChangeSource = ChangeSource.HOSTED
    ref_policy: RefPolicy = RefPolicy.EVENT_FIRST
    token: str | None = None
    repo_path: str = "."
    timeout: float | None = None
    glob: GlobOptions = Field(default_factory=GlobOptions)

    @field_validator("base_ref", "head_ref", "token", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # Actions hands unset inputs over as empty strings
        if isinstance(value, str) and not value.strip():
            return None
        return value


def load_event_context(
    event_name: str | None,
    event_path: str | None,
    repository: str | None,
) -> EventContext:
    """Build the event context from the values GitHub Actions exports.

    A missing payload file yields an empty payload; a payload that exists
    but cannot be read or decoded is a configuration error.
    """
    payload: dict[str, Any] = {}
    if event_path:
        path = Path(event_path)
        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                raise ConfigError(f"Cannot read event payload {event_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Event payload {event_path} is not a JSON object")
            payload = data
    return EventContext(
        event_name=event_name or "",
        payload=payload,
        repository=repository or "",
    )
