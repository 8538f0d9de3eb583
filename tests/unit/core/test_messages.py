"""Tests for emitted message builders."""

import pytest

from vitalspy.core import messages
from vitalspy.core.entries import (
    EventTimingEntry,
    FirstInputEntry,
    LongAnimationFrameEntry,
    NavigationEntry,
)
from vitalspy.core.models import ElementRef
from vitalspy.core.triage import Severity

pytestmark = [pytest.mark.core, pytest.mark.tier(0)]


class TestLongTaskMessages:
    """Long task and LoAF messages."""

    def test_long_task(self) -> None:
        """Duration is rounded and severity named."""
        assert messages.long_task(350.4, Severity.SEVERE) == [
            "Duration: 350ms",
            "Severity: Severe",
            "→ Consider breaking into smaller tasks or deferring heavy JS",
        ]

    def test_loaf_with_detail(self) -> None:
        """Hosts with render detail get no note."""
        entry = LongAnimationFrameEntry(
            duration=120, blocking_duration=70, render_time=30, style_and_layout_duration=12
        )
        assert messages.long_animation_frame(entry) == [
            "Duration: 120ms, Blocking: 70ms",
            "Render: 30ms, Layout: 12ms",
            "→ Investigate heavy scripts or CSS causing recalculations",
        ]

    def test_loaf_without_detail(self) -> None:
        """Missing numbers render as N/A and a support note is added."""
        lines = messages.long_animation_frame(LongAnimationFrameEntry(duration=90))
        assert lines[0] == "Duration: 90ms, Blocking: N/A"
        assert lines[1] == "Render: N/A, Layout: N/A"
        assert lines[2].startswith("Note: Browser does not support")
        assert len(lines) == 4


class TestInteractionMessages:
    """INP and FID messages."""

    def test_slow_interaction_with_element(self) -> None:
        """Element markup is truncated to the limit."""
        entry = EventTimingEntry(
            name="click",
            duration=400,
            target=ElementRef(outer_html="<button>" + "x" * 200 + "</button>"),
        )
        lines = messages.slow_interaction(entry, limit=20)
        assert lines[0] == "click delayed interaction response by 400ms"
        assert lines[1] == "Element: <button>xxxxxxxxxxxx"
        assert lines[2].startswith("→ ")

    def test_slow_interaction_without_element(self) -> None:
        """No element line without a target."""
        lines = messages.slow_interaction(EventTimingEntry(duration=301))
        assert lines[0] == "interaction delayed interaction response by 301ms"
        assert len(lines) == 2

    def test_first_input_delay(self) -> None:
        """FID reports the rounded delay."""
        entry = FirstInputEntry(start_time=1000, processing_start=1042.4)
        assert messages.first_input_delay(entry, 42.4) == ["First Input Delay: 42ms"]


class TestPageMessages:
    """TTFB, LCP, CLS and FCP messages."""

    def test_ttfb(self) -> None:
        """TTFB reports responseStart."""
        lines = messages.time_to_first_byte(NavigationEntry(response_start=420.2))
        assert lines[0] == "Time To First Byte: 420ms"

    def test_lcp_with_element(self) -> None:
        """LCP names its element."""
        lines = messages.largest_contentful_paint(
            1800, ElementRef(tag_name="IMG", outer_html="<img src=hero.jpg>")
        )
        assert lines[:2] == [
            "Largest Contentful Paint: 1800ms",
            "Element: <img src=hero.jpg>",
        ]

    def test_lcp_without_element(self) -> None:
        """A missing element renders as N/A."""
        lines = messages.largest_contentful_paint(1800, None)
        assert lines[1] == "Element: N/A"

    def test_cls_with_sources(self) -> None:
        """Sources are joined with a pipe."""
        lines = messages.cumulative_layout_shift(
            0.13,
            [ElementRef(outer_html="<div>ad</div>"), ElementRef(tag_name="P")],
        )
        assert lines[0] == "Cumulative Layout Shift: 0.13"
        assert lines[-1] == "Top layout shift sources: <div>ad</div> | [unreadable]"

    def test_cls_without_sources(self) -> None:
        """No sources line without sources."""
        lines = messages.cumulative_layout_shift(0.0, [])
        assert lines[0] == "Cumulative Layout Shift: 0.00"
        assert len(lines) == 2

    def test_fcp(self) -> None:
        """FCP reports the paint time."""
        assert messages.first_contentful_paint(812.4)[0] == "First Contentful Paint: 812ms"
