"""Port interfaces for the collaborators around the core.

These protocols define what the core expects from its host: a push-based
observation feed, a session boundary signal, and an optional log sink. The
core depends only on these interfaces, not on any concrete browser API.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from vitalspy.core.models import SignalChannel, TimelineEvent

EntriesCallback = Callable[[Sequence[Any]], None]
VisibilityCallback = Callable[[str], None]


@dataclass(frozen=True)
class SubscribeOptions:
    """Options passed along with a channel subscription.

    Attributes:
        buffered: Deliver entries recorded before the subscription.
        duration_threshold: Minimum duration (ms) for event timing entries.
    """

    buffered: bool = True
    duration_threshold: float | None = None


@runtime_checkable
class ObservationSourcePort(Protocol):
    """Port for a push-based feed of observation entries.

    Adapters implementing this protocol call ``callback`` with every batch
    of entries observed on ``channel``. Examples: InMemoryObservationSource,
    ReplaySource.
    """

    def subscribe(
        self,
        channel: SignalChannel,
        callback: EntriesCallback,
        options: SubscribeOptions,
    ) -> bool:
        """Register ``callback`` for ``channel``.

        Returns:
            False when the host does not support the channel. The callback
            is then never invoked.
        """
        ...


@runtime_checkable
class SessionBoundaryPort(Protocol):
    """Port for page visibility changes (hidden, visible)."""

    def on_visibility_change(self, callback: VisibilityCallback) -> None:
        """Register ``callback`` to receive the new visibility state."""
        ...


@runtime_checkable
class LogSinkPort(Protocol):
    """Port for handing emitted events to a console-like sink."""

    def emit(self, label: str, event: TimelineEvent) -> None:
        """Receive one emitted event. Return value is ignored."""
        ...
