"""Resolve the base and head revisions for the triggering event."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pathgate.config import EventContext, RefPolicy
from pathgate.exceptions import ConfigError

logger = logging.getLogger("pathgate.refs")

PULL_REQUEST_EVENTS = ("pull_request", "pull_request_target")
PUSH_EVENTS = ("push",)


@dataclass(frozen=True)
class RefPair:
    """The two revisions bounding the change."""
    base: str
    head: str


def _sha(payload: dict[str, Any], *keys: str) -> str | None:
    node: Any = payload
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, str) and node else None


def refs_from_event(context: EventContext) -> tuple[str | None, str | None] | None:
    """Read (base, head) out of the event payload.

    Returns None for event types that carry no comparison endpoints.
    """
    payload = context.payload
    if context.event_name in PULL_REQUEST_EVENTS:
        return (
            _sha(payload, "pull_request", "base", "sha"),
            _sha(payload, "pull_request", "head", "sha"),
        )
    if context.event_name in PUSH_EVENTS:
        return _sha(payload, "before"), _sha(payload, "after")
    return None


def resolve_refs(
    context: EventContext,
    base: str | None = None,
    head: str | None = None,
    policy: RefPolicy = RefPolicy.EVENT_FIRST,
) -> RefPair:
    """Derive the RefPair for this run.

    With ``EVENT_FIRST`` the event payload wins and an override only fills
    a side the payload left empty. With ``OVERRIDES_FIRST`` a complete pair
    of overrides is used as-is and the event is not consulted.

    Raises:
        ConfigError: If base or head is still empty afterwards.
    """
    base = base or None
    head = head or None

    if policy is RefPolicy.OVERRIDES_FIRST and base and head:
        resolved_base, resolved_head = base, head
    else:
        from_event = refs_from_event(context)
        if from_event is None:
            if not base or not head:
                logger.warning(
                    "Event type '%s' has no base/head; pass baseRef and headRef",
                    context.event_name,
                )
            resolved_base, resolved_head = base, head
        else:
            resolved_base = from_event[0] or base
            resolved_head = from_event[1] or head

    if not resolved_base or not resolved_head:
        raise ConfigError(
            f"Base or head refs are missing for event type '{context.event_name}'"
        )

    logger.info("Event name: %s", context.event_name)
    logger.info("Base ref: %s", resolved_base)
    logger.info("Head ref: %s", resolved_head)

    return RefPair(base=resolved_base, head=resolved_head)
