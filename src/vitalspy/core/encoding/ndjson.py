"""NDJSON encoder for timeline events."""

import json
from collections.abc import Iterable
from typing import Any

from vitalspy.core.models import TimelineEvent


def event_to_dict(event: TimelineEvent) -> dict[str, Any]:
    """Convert a timeline event to a JSON-compatible dict."""
    return {
        "category": event.category,
        "messages": list(event.messages),
        "captured_at": event.captured_at,
        "logged_at": event.logged_at,
    }


def encode_timeline(events: Iterable[TimelineEvent]) -> str:
    """Encode timeline events to newline-delimited JSON.

    Args:
        events: An iterable of TimelineEvent objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no events.
    """
    lines = [json.dumps(event_to_dict(event), ensure_ascii=False) for event in events]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
