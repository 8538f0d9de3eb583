"""Wires an observation source into a session's accumulators.

Every channel is subscribed once. Payloads are decoded at the subscription
boundary and each entry of a batch is processed in delivery order.

Long tasks, long animation frames, slow interactions, the first input delay
and TTFB are reported as soon as they arrive; they are never held back for
the end of the session.
"""

import logging
from collections.abc import Sequence
from typing import Any

from vitalspy.core import messages
from vitalspy.core.entries import (
    EventTimingEntry,
    FirstInputEntry,
    LargestContentfulPaintEntry,
    LayoutShiftEntry,
    LongAnimationFrameEntry,
    LongTaskEntry,
    NavigationEntry,
    PaintEntry,
    RawEntry,
    decode_entry,
)
from vitalspy.core.models import (
    Attribution,
    ElementRef,
    MetricSample,
    SignalChannel,
    SignalKind,
)
from vitalspy.core.ports import (
    EntriesCallback,
    ObservationSourcePort,
    SubscribeOptions,
)
from vitalspy.core.session import Session

logger = logging.getLogger(__name__)

FIRST_CONTENTFUL_PAINT = "first-contentful-paint"


class Collector:
    """Feeds decoded observation entries into a session.

    Args:
        session: Session owning the accumulators and timeline.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.supported: dict[SignalChannel, bool] = {}

    def attach(self, source: ObservationSourcePort) -> dict[SignalChannel, bool]:
        """Subscribe to every channel of ``source``.

        Unsupported channels are recorded and otherwise ignored.

        Returns:
            Whether each channel is supported by the source.
        """
        for channel in SignalChannel:
            options = SubscribeOptions(buffered=True)
            if channel is SignalChannel.EVENT:
                options = SubscribeOptions(
                    buffered=True,
                    duration_threshold=self.session.options.inp_alert_ms,
                )
            supported = bool(
                source.subscribe(channel, self._callback_for(channel), options)
            )
            self.supported[channel] = supported
            if not supported:
                logger.debug("Channel %s is not supported by the host", channel.value)
        return dict(self.supported)

    def _callback_for(self, channel: SignalChannel) -> EntriesCallback:
        def on_entries(entries: Sequence[Any]) -> None:
            self.handle_batch(channel, entries)

        return on_entries

    def handle_batch(self, channel: SignalChannel, entries: Sequence[Any]) -> None:
        """Process every entry of one callback batch, in order."""
        for payload in entries or ():
            try:
                self.handle(decode_entry(channel, payload))
            except Exception:
                logger.warning(
                    "Dropped unprocessable %s entry", channel.value, exc_info=True
                )

    def handle(self, entry: RawEntry) -> None:
        """Route one decoded entry to its accumulator and emitters."""
        if isinstance(entry, LongTaskEntry):
            self._on_long_task(entry)
        elif isinstance(entry, LongAnimationFrameEntry):
            self._on_long_animation_frame(entry)
        elif isinstance(entry, LayoutShiftEntry):
            self._on_layout_shift(entry)
        elif isinstance(entry, PaintEntry):
            self._on_paint(entry)
        elif isinstance(entry, FirstInputEntry):
            self._on_first_input(entry)
        elif isinstance(entry, EventTimingEntry):
            self._on_event(entry)
        elif isinstance(entry, LargestContentfulPaintEntry):
            self._on_largest_contentful_paint(entry)
        elif isinstance(entry, NavigationEntry):
            self._on_navigation(entry)

    def _sample(
        self,
        signal: SignalKind,
        value: float | None,
        attribution: Attribution | None = None,
    ) -> MetricSample:
        # 0 is the sentinel for entries without a usable number.
        return MetricSample(
            signal=signal,
            value=value if value is not None else 0.0,
            captured_at=self.session.clock(),
            attribution=attribution,
        )

    def _on_long_task(self, entry: LongTaskEntry) -> None:
        self.session.collection(SignalKind.LONG_TASK).ingest(
            self._sample(SignalKind.LONG_TASK, entry.duration)
        )
        severity = self.session.options.long_tasks.classify(entry.duration)
        if severity is not None and entry.duration is not None:
            self.session.log(
                messages.LONG_TASK, messages.long_task(entry.duration, severity)
            )

    def _on_long_animation_frame(self, entry: LongAnimationFrameEntry) -> None:
        self.session.collection(SignalKind.LOAF).ingest(
            self._sample(SignalKind.LOAF, entry.duration)
        )
        self.session.log(messages.LOAF, messages.long_animation_frame(entry))

    def _on_layout_shift(self, entry: LayoutShiftEntry) -> None:
        limit = self.session.options.cls_source_limit
        sources: tuple[ElementRef, ...] = tuple(
            source for source in entry.sources[:limit] if source is not None
        )
        self.session.layout_shift.ingest(
            self._sample(
                SignalKind.CLS,
                entry.value,
                Attribution(had_recent_input=entry.had_recent_input, sources=sources),
            )
        )

    def _on_paint(self, entry: PaintEntry) -> None:
        if entry.name != FIRST_CONTENTFUL_PAINT:
            return
        self.session.scalar(SignalKind.FCP).ingest(
            self._sample(SignalKind.FCP, entry.start_time)
        )

    def _on_first_input(self, entry: FirstInputEntry) -> None:
        delay = entry.delay
        if delay is None or delay <= self.session.options.fid_alert_ms:
            return
        self.session.log(
            messages.FID,
            messages.first_input_delay(
                entry, delay, self.session.options.attribution_limit
            ),
        )

    def _on_event(self, entry: EventTimingEntry) -> None:
        self.session.scalar(SignalKind.INP).ingest(
            self._sample(
                SignalKind.INP, entry.duration, Attribution(element=entry.target)
            )
        )
        duration = entry.duration
        if duration is not None and duration > self.session.options.inp_alert_ms:
            self.session.log(
                messages.INP,
                messages.slow_interaction(
                    entry, self.session.options.attribution_limit
                ),
            )

    def _on_largest_contentful_paint(self, entry: LargestContentfulPaintEntry) -> None:
        self.session.scalar(SignalKind.LCP).ingest(
            self._sample(
                SignalKind.LCP,
                entry.resolved_time,
                Attribution(element=entry.element),
            )
        )

    def _on_navigation(self, entry: NavigationEntry) -> None:
        self.session.scalar(SignalKind.TTFB).ingest(
            self._sample(SignalKind.TTFB, entry.response_start)
        )
        self.session.log(messages.TTFB, messages.time_to_first_byte(entry))
