"""In-memory observation source and session boundary.

Entries are pushed by the caller, which makes these adapters the host of
choice for tests and for embedding the monitor in another event loop.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from typing import Any

from vitalspy.core.models import SignalChannel
from vitalspy.core.ports import EntriesCallback, SubscribeOptions, VisibilityCallback

logger = logging.getLogger(__name__)


class InMemoryObservationSource:
    """In-memory implementation of ObservationSourcePort.

    Entries recorded with ``push`` before a subscription are replayed to
    subscribers that ask for buffered delivery.

    Args:
        unsupported: Channels the simulated host does not support.
    """

    def __init__(self, unsupported: Iterable[SignalChannel | str] = ()) -> None:
        self._unsupported = {SignalChannel(channel) for channel in unsupported}
        self._subscribers: dict[SignalChannel, list[EntriesCallback]] = defaultdict(list)
        self._buffer: dict[SignalChannel, list[Any]] = defaultdict(list)
        self.options: dict[SignalChannel, SubscribeOptions] = {}

    def subscribe(
        self,
        channel: SignalChannel,
        callback: EntriesCallback,
        options: SubscribeOptions,
    ) -> bool:
        """Register ``callback``; False for unsupported channels."""
        channel = SignalChannel(channel)
        if channel in self._unsupported:
            return False
        self._subscribers[channel].append(callback)
        self.options[channel] = options
        if options.buffered and self._buffer[channel]:
            callback(list(self._buffer[channel]))
        return True

    def push(self, channel: SignalChannel | str, entries: Sequence[Any]) -> None:
        """Deliver one batch of entries to every subscriber of ``channel``.

        Batches on unsupported channels are dropped.
        """
        channel = SignalChannel(channel)
        if channel in self._unsupported:
            logger.debug("Dropping %d entries on unsupported %s", len(entries), channel.value)
            return
        self._buffer[channel].extend(entries)
        for callback in list(self._subscribers[channel]):
            callback(list(entries))


class InMemorySessionBoundary:
    """In-memory implementation of SessionBoundaryPort."""

    def __init__(self) -> None:
        self._callbacks: list[VisibilityCallback] = []
        self.state = "visible"

    def on_visibility_change(self, callback: VisibilityCallback) -> None:
        """Register ``callback`` for visibility changes."""
        self._callbacks.append(callback)

    def set_visibility(self, state: str) -> None:
        """Change the visibility state and notify every listener."""
        self.state = state
        for callback in list(self._callbacks):
            callback(state)

    def hide(self) -> None:
        """Signal that the page became hidden."""
        self.set_visibility("hidden")

    def show(self) -> None:
        """Signal that the page became visible again."""
        self.set_visibility("visible")
