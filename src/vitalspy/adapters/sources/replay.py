"""Replay of recorded observation traces.

A trace is newline-delimited JSON. Each line is either a batch of entries
observed on one channel or a visibility change::

    {"at": 812.4, "channel": "paint", "entries": [{"name": "first-contentful-paint", "startTime": 812.4}]}
    {"at": 5120.0, "visibility": "hidden"}

``at`` is the monotonic time (ms) the line was recorded at. It is optional;
when present, ``ReplaySource.clock`` reports it so replayed events keep
their recorded timing.
"""

import asyncio
import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vitalspy.adapters.sources.in_memory import (
    InMemoryObservationSource,
    InMemorySessionBoundary,
)
from vitalspy.core.models import SignalChannel
from vitalspy.core.ports import EntriesCallback, SubscribeOptions, VisibilityCallback

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceRecord:
    """One line of a trace.

    Attributes:
        channel: Channel of an entries batch, None for visibility changes.
        entries: Raw entry payloads of the batch.
        visibility: New visibility state, None for entries batches.
        at: Recorded monotonic time in milliseconds, if any.
    """

    channel: SignalChannel | None = None
    entries: tuple[Any, ...] = ()
    visibility: str | None = None
    at: float | None = None


def _safe_json_loads(line: str) -> dict[str, Any] | None:
    """Parse a JSON object, returning None on decode errors or non-objects."""
    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def parse_trace_line(line: str) -> TraceRecord | None:
    """Parse one trace line.

    Returns:
        The record, or None for blank lines, ``#`` comments and lines that
        are not valid trace records.
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None
    data = _safe_json_loads(text)
    if data is None:
        logger.warning("Skipping malformed trace line: %.80s", text)
        return None

    at = data.get("at")
    if isinstance(at, bool) or not isinstance(at, (int, float)):
        at = None

    visibility = data.get("visibility")
    if isinstance(visibility, str):
        return TraceRecord(visibility=visibility, at=at)

    try:
        channel = SignalChannel(data.get("channel"))
    except ValueError:
        logger.warning("Skipping trace line with unknown channel: %r", data.get("channel"))
        return None
    entries = data.get("entries")
    if not isinstance(entries, list):
        entries = [entries] if entries is not None else []
    return TraceRecord(channel=channel, entries=tuple(entries), at=at)


def read_trace(lines: Iterable[str]) -> Iterator[TraceRecord]:
    """Parse trace lines, skipping the ones that are not records."""
    for line in lines:
        record = parse_trace_line(line)
        if record is not None:
            yield record


class ReplaySource:
    """Observation source and session boundary backed by a recorded trace.

    Implements both ObservationSourcePort and SessionBoundaryPort. Nothing
    is delivered until ``play`` or ``play_async`` is called.

    Args:
        records: Trace records, in recorded order.
        unsupported: Channels to treat as unsupported by the host.
    """

    def __init__(
        self,
        records: Iterable[TraceRecord],
        unsupported: Iterable[SignalChannel | str] = (),
    ) -> None:
        self.records: list[TraceRecord] = list(records)
        self._source = InMemoryObservationSource(unsupported)
        self._boundary = InMemorySessionBoundary()
        self._now = 0.0

    @classmethod
    def from_lines(cls, lines: Iterable[str], **kwargs: Any) -> "ReplaySource":
        """Create a source from NDJSON lines."""
        return cls(read_trace(lines), **kwargs)

    @classmethod
    def from_path(cls, path: str | Path, **kwargs: Any) -> "ReplaySource":
        """Create a source from an NDJSON trace file."""
        with Path(path).open(encoding="utf-8") as handle:
            return cls.from_lines(handle, **kwargs)

    def clock(self) -> float:
        """Recorded time (ms) of the record being replayed."""
        return self._now

    def subscribe(
        self,
        channel: SignalChannel,
        callback: EntriesCallback,
        options: SubscribeOptions,
    ) -> bool:
        """Register ``callback`` for ``channel``."""
        return self._source.subscribe(channel, callback, options)

    def on_visibility_change(self, callback: VisibilityCallback) -> None:
        """Register ``callback`` for visibility changes in the trace."""
        self._boundary.on_visibility_change(callback)

    def _dispatch(self, record: TraceRecord) -> None:
        if record.at is not None:
            self._now = float(record.at)
        if record.visibility is not None:
            self._boundary.set_visibility(record.visibility)
        elif record.channel is not None:
            self._source.push(record.channel, list(record.entries))

    def play(self) -> int:
        """Deliver every record synchronously, in order.

        Returns:
            Number of records delivered.
        """
        for record in self.records:
            self._dispatch(record)
        return len(self.records)

    async def play_async(self, speed: float | None = None) -> int:
        """Deliver every record, yielding to the event loop between records.

        Args:
            speed: When set, sleep between records in proportion to their
                recorded ``at`` gap (2.0 replays twice as fast). When None,
                records are delivered as fast as the loop allows.

        Returns:
            Number of records delivered.
        """
        previous: float | None = None
        for record in self.records:
            delay = 0.0
            if speed and record.at is not None and previous is not None:
                delay = max(0.0, (record.at - previous) / 1000 / speed)
            await asyncio.sleep(delay)
            if record.at is not None:
                previous = record.at
            self._dispatch(record)
        return len(self.records)

