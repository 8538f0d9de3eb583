"""Message builders for emitted timeline events.

Attribution strings are truncated here, at emission time. Stored samples
keep the full markup.
"""

import math
from collections.abc import Iterable

from vitalspy.core.entries import (
    EventTimingEntry,
    FirstInputEntry,
    LongAnimationFrameEntry,
    NavigationEntry,
)
from vitalspy.core.models import (
    DEFAULT_ATTRIBUTION_LIMIT,
    MISSING_PLACEHOLDER,
    ElementRef,
    describe_element,
)
from vitalspy.core.triage import Severity

LONG_TASK = "Long Task"
LOAF = "LoAF Detected"
INP = "INP Interaction Issue"
FID = "FID"
TTFB = "TTFB"
LCP = "LCP"
CLS = "CLS"
FCP = "FCP"
TIMELINE_REPORT = "Timeline Report"


def _ms(value: float | None) -> str:
    """Rounded milliseconds (``"350ms"``), or ``N/A`` when missing."""
    if value is None or not math.isfinite(value):
        return MISSING_PLACEHOLDER
    return f"{round(value)}ms"


def long_task(duration: float, severity: Severity) -> list[str]:
    return [
        f"Duration: {_ms(duration)}",
        f"Severity: {severity.value}",
        "→ Consider breaking into smaller tasks or deferring heavy JS",
    ]


def long_animation_frame(entry: LongAnimationFrameEntry) -> list[str]:
    messages = [
        f"Duration: {_ms(entry.duration)}, "
        f"Blocking: {_ms(entry.blocking_duration)}",
        f"Render: {_ms(entry.render_time)}, "
        f"Layout: {_ms(entry.style_and_layout_duration)}",
    ]
    if not entry.has_render_detail:
        messages.append(
            "Note: Browser does not support detailed render/layout metrics "
            "for LoAF entries."
        )
    messages.append("→ Investigate heavy scripts or CSS causing recalculations")
    return messages


def slow_interaction(
    entry: EventTimingEntry, limit: int = DEFAULT_ATTRIBUTION_LIMIT
) -> list[str]:
    messages = [
        f"{entry.name or 'interaction'} delayed interaction response by "
        f"{_ms(entry.duration)}"
    ]
    if entry.target is not None:
        messages.append(f"Element: {entry.target.describe(limit)}")
    messages.append("→ Consider simplifying event handlers or deferring tasks")
    return messages


def first_input_delay(
    entry: FirstInputEntry, delay: float, limit: int = DEFAULT_ATTRIBUTION_LIMIT
) -> list[str]:
    messages = [f"First Input Delay: {_ms(delay)}"]
    if entry.target is not None:
        messages.append(f"Element: {entry.target.describe(limit)}")
    return messages


def time_to_first_byte(entry: NavigationEntry) -> list[str]:
    return [
        f"Time To First Byte: {_ms(entry.response_start)}",
        "→ Consider optimizing backend response times and CDN performance",
    ]


def largest_contentful_paint(
    value: float,
    element: ElementRef | None,
    limit: int = DEFAULT_ATTRIBUTION_LIMIT,
) -> list[str]:
    return [
        f"Largest Contentful Paint: {_ms(value)}",
        f"Element: {describe_element(element, limit)}",
        "→ Optimize images, text, and video content for faster loading",
    ]


def cumulative_layout_shift(
    value: float,
    sources: Iterable[ElementRef],
    limit: int = DEFAULT_ATTRIBUTION_LIMIT,
) -> list[str]:
    messages = [
        f"Cumulative Layout Shift: {value:.2f}",
        "→ Consider adding size attributes to images/videos, reserving space "
        "for ads/embeds, or avoiding dynamic content injection",
    ]
    rendered = [source.describe(limit) for source in sources]
    if rendered:
        messages.append(f"Top layout shift sources: {' | '.join(rendered)}")
    return messages


def first_contentful_paint(value: float) -> list[str]:
    return [
        f"First Contentful Paint: {_ms(value)}",
        "→ Reduce render-blocking resources and inline critical CSS",
    ]
