"""Console group formatting of emitted events."""

from vitalspy.core.models import TimelineEvent


def format_group(label: str, event: TimelineEvent) -> list[str]:
    """Format an event as a console group.

    Args:
        label: Monitor label, e.g. "vitalspy".
        event: Event to format.

    Returns:
        Header line ``"[<label>] <category> at <logged_at>"`` followed by one
        ``"- <message>"`` line per message.
    """
    header = f"[{label}] {event.category} at {event.logged_at}"
    return [header, *(f"- {message}" for message in event.messages)]
