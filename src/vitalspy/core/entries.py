"""Raw observation entries and their decoding.

Observation sources deliver loosely typed payloads (mappings with the host's
camelCase keys, or objects exposing them as attributes). Each payload is
decoded once, at the subscription boundary, into one variant of the
``RawEntry`` tagged union. Decoding is total: missing or malformed fields
become ``None`` and are rendered as placeholders later on, so a bad entry
never stops collection.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from vitalspy.core.models import ElementRef, SignalChannel

logger = logging.getLogger(__name__)


def _field(payload: Any, *names: str) -> Any:
    """Return the first present field among ``names`` (mapping or attribute).

    Host objects may raise from their getters (detached or cross-origin
    nodes); such fields read as missing.
    """
    for name in names:
        try:
            if isinstance(payload, Mapping):
                value = payload.get(name)
            else:
                value = getattr(payload, name, None)
        except Exception:
            logger.debug("Field %s is unreadable", name, exc_info=True)
            continue
        if value is not None:
            return value
    return None


def _number(value: Any) -> float | None:
    """Coerce ``value`` to a finite float, or None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    result = float(value)
    return result if math.isfinite(result) else None


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _element(value: Any) -> ElementRef | None:
    """Decode an element reference.

    Returns None when there is no element at all, and an ElementRef without
    markup when the element is present but unreadable.
    """
    if value is None:
        return None
    if isinstance(value, ElementRef):
        return value
    if isinstance(value, str):
        return ElementRef(outer_html=value)
    return ElementRef(
        tag_name=_text(_field(value, "tagName", "tag_name")),
        outer_html=_text(_field(value, "outerHTML", "outer_html")),
    )


@dataclass(frozen=True)
class LongTaskEntry:
    """Main-thread task longer than 50ms."""

    channel: ClassVar[SignalChannel] = SignalChannel.LONG_TASK

    duration: float | None = None
    start_time: float | None = None
    name: str | None = None


@dataclass(frozen=True)
class LongAnimationFrameEntry:
    """Rendering frame that took longer than 50ms."""

    channel: ClassVar[SignalChannel] = SignalChannel.LONG_ANIMATION_FRAME

    duration: float | None = None
    blocking_duration: float | None = None
    render_time: float | None = None
    style_and_layout_duration: float | None = None
    start_time: float | None = None

    @property
    def has_render_detail(self) -> bool:
        """Whether the host reported render and layout timings."""
        return self.render_time is not None and self.style_and_layout_duration is not None


@dataclass(frozen=True)
class LayoutShiftEntry:
    """Unexpected movement of visible content."""

    channel: ClassVar[SignalChannel] = SignalChannel.LAYOUT_SHIFT

    value: float | None = None
    had_recent_input: bool = False
    sources: tuple[ElementRef | None, ...] = ()
    start_time: float | None = None


@dataclass(frozen=True)
class PaintEntry:
    """Paint milestone (first-paint, first-contentful-paint)."""

    channel: ClassVar[SignalChannel] = SignalChannel.PAINT

    name: str | None = None
    start_time: float | None = None


@dataclass(frozen=True)
class FirstInputEntry:
    """The first discrete user interaction on the page."""

    channel: ClassVar[SignalChannel] = SignalChannel.FIRST_INPUT

    name: str | None = None
    start_time: float | None = None
    processing_start: float | None = None
    target: ElementRef | None = None

    @property
    def delay(self) -> float | None:
        """Input delay, or None when either timestamp is missing or zero."""
        if not self.processing_start or not self.start_time:
            return None
        return self.processing_start - self.start_time


@dataclass(frozen=True)
class EventTimingEntry:
    """Timing of one user interaction event."""

    channel: ClassVar[SignalChannel] = SignalChannel.EVENT

    name: str | None = None
    duration: float | None = None
    start_time: float | None = None
    target: ElementRef | None = None


@dataclass(frozen=True)
class LargestContentfulPaintEntry:
    """Candidate for the largest contentful paint."""

    channel: ClassVar[SignalChannel] = SignalChannel.LARGEST_CONTENTFUL_PAINT

    render_time: float | None = None
    load_time: float | None = None
    start_time: float | None = None
    size: float | None = None
    element: ElementRef | None = None

    @property
    def resolved_time(self) -> float:
        """Paint time, preferring renderTime over loadTime.

        Hosts omit renderTime (or report 0) for cross-origin images without
        Timing-Allow-Origin, in which case loadTime is used.
        """
        for candidate in (self.render_time, self.load_time, self.start_time):
            if candidate:
                return candidate
        return 0.0


@dataclass(frozen=True)
class NavigationEntry:
    """Navigation timing of the current document."""

    channel: ClassVar[SignalChannel] = SignalChannel.NAVIGATION

    response_start: float | None = None
    request_start: float | None = None
    name: str | None = None


RawEntry = Union[
    LongTaskEntry,
    LongAnimationFrameEntry,
    LayoutShiftEntry,
    PaintEntry,
    FirstInputEntry,
    EventTimingEntry,
    LargestContentfulPaintEntry,
    NavigationEntry,
]


def _decode_long_task(payload: Any) -> LongTaskEntry:
    return LongTaskEntry(
        duration=_number(_field(payload, "duration")),
        start_time=_number(_field(payload, "startTime", "start_time")),
        name=_text(_field(payload, "name")),
    )


def _decode_long_animation_frame(payload: Any) -> LongAnimationFrameEntry:
    return LongAnimationFrameEntry(
        duration=_number(_field(payload, "duration")),
        blocking_duration=_number(
            _field(payload, "blockingDuration", "blocking_duration")
        ),
        render_time=_number(_field(payload, "renderTime", "render_time")),
        style_and_layout_duration=_number(
            _field(payload, "styleAndLayoutDuration", "style_and_layout_duration")
        ),
        start_time=_number(_field(payload, "startTime", "start_time")),
    )


def _decode_layout_shift(payload: Any) -> LayoutShiftEntry:
    raw_sources = _field(payload, "sources")
    sources: tuple[ElementRef | None, ...] = ()
    if isinstance(raw_sources, (list, tuple)):
        sources = tuple(_element(_field(source, "node")) for source in raw_sources)
    return LayoutShiftEntry(
        value=_number(_field(payload, "value")),
        had_recent_input=bool(_field(payload, "hadRecentInput", "had_recent_input")),
        sources=sources,
        start_time=_number(_field(payload, "startTime", "start_time")),
    )


def _decode_paint(payload: Any) -> PaintEntry:
    return PaintEntry(
        name=_text(_field(payload, "name")),
        start_time=_number(_field(payload, "startTime", "start_time")),
    )


def _decode_first_input(payload: Any) -> FirstInputEntry:
    return FirstInputEntry(
        name=_text(_field(payload, "name")),
        start_time=_number(_field(payload, "startTime", "start_time")),
        processing_start=_number(
            _field(payload, "processingStart", "processing_start")
        ),
        target=_element(_field(payload, "target")),
    )


def _decode_event(payload: Any) -> EventTimingEntry:
    return EventTimingEntry(
        name=_text(_field(payload, "name")),
        duration=_number(_field(payload, "duration")),
        start_time=_number(_field(payload, "startTime", "start_time")),
        target=_element(_field(payload, "target")),
    )


def _decode_largest_contentful_paint(payload: Any) -> LargestContentfulPaintEntry:
    return LargestContentfulPaintEntry(
        render_time=_number(_field(payload, "renderTime", "render_time")),
        load_time=_number(_field(payload, "loadTime", "load_time")),
        start_time=_number(_field(payload, "startTime", "start_time")),
        size=_number(_field(payload, "size")),
        element=_element(_field(payload, "element")),
    )


def _decode_navigation(payload: Any) -> NavigationEntry:
    return NavigationEntry(
        response_start=_number(_field(payload, "responseStart", "response_start")),
        request_start=_number(_field(payload, "requestStart", "request_start")),
        name=_text(_field(payload, "name")),
    )


_DECODERS = {
    SignalChannel.LONG_TASK: _decode_long_task,
    SignalChannel.LONG_ANIMATION_FRAME: _decode_long_animation_frame,
    SignalChannel.LAYOUT_SHIFT: _decode_layout_shift,
    SignalChannel.PAINT: _decode_paint,
    SignalChannel.FIRST_INPUT: _decode_first_input,
    SignalChannel.EVENT: _decode_event,
    SignalChannel.LARGEST_CONTENTFUL_PAINT: _decode_largest_contentful_paint,
    SignalChannel.NAVIGATION: _decode_navigation,
}


def decode_entry(channel: SignalChannel, payload: Any) -> RawEntry:
    """Decode a raw payload delivered on ``channel``.

    Args:
        channel: Channel the payload arrived on.
        payload: Mapping, attribute object, or an already decoded entry.

    Returns:
        The RawEntry variant for ``channel``. Payloads that are neither a
        mapping nor an object with the expected attributes decode to an
        entry with every field missing.
    """
    decoder = _DECODERS[SignalChannel(channel)]
    if getattr(type(payload), "channel", None) == channel:
        return payload  # type: ignore[no-any-return]
    return decoder(payload)
