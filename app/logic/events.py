"""Domain event constants and publisher.

Defines event type constants and a simple publish() callable used by survey
authoring and response submission flows.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

SURVEY_CREATED = "survey.created"
SURVEY_UPDATED = "survey.updated"
SURVEY_CLOSED = "survey.closed"
RESPONSE_SUBMITTED = "response.submitted"

# In-memory buffer for domain events (observable from tests)
EVENT_BUFFER: List[Dict[str, Any]] = []


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event.

    In this minimal implementation, we log the event for observability.
    """
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "SURVEY_CREATED",
    "SURVEY_UPDATED",
    "SURVEY_CLOSED",
    "RESPONSE_SUBMITTED",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
]
