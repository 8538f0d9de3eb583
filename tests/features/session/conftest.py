"""BDD step definitions for session lifecycle features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when
from tests.helpers import FakeClock, fixed_wall_clock

from vitalspy import (
    ConfigurationError,
    InMemoryObservationSource,
    InMemorySessionBoundary,
    InMemorySink,
    MonitorConfig,
    PerformanceMonitor,
    Report,
    ScoringTable,
    SignalChannel,
)
from vitalspy.core.scoring import parse_signal


@dataclass
class SessionScenarioContext:
    """State shared between the steps of one scenario."""

    clock: FakeClock = field(default_factory=FakeClock)
    sink: InMemorySink = field(default_factory=InMemorySink)
    source: InMemoryObservationSource = field(default_factory=InMemoryObservationSource)
    boundary: InMemorySessionBoundary = field(default_factory=InMemorySessionBoundary)
    monitor: PerformanceMonitor | None = None
    report: Report | None = None
    error: Exception | None = None

    def current_report(self) -> Report:
        assert self.monitor is not None
        if self.report is None:
            self.report = self.monitor.get_report()
        return self.report


@pytest.fixture
def ctx() -> SessionScenarioContext:
    """Fresh scenario context for each test."""
    return SessionScenarioContext()


# === Background Steps ===
@given("a started performance monitor")
def step_started_monitor(ctx: SessionScenarioContext) -> None:
    ctx.monitor = PerformanceMonitor(
        sink=ctx.sink, clock=ctx.clock, wall_clock=fixed_wall_clock
    )
    ctx.monitor.start(ctx.source, ctx.boundary)


# === Host Steps ===
@when(parsers.parse("the host reports an LCP candidate rendered at {ms:g}ms"))
def step_lcp_candidate(ctx: SessionScenarioContext, ms: float) -> None:
    ctx.clock.advance(100)
    ctx.source.push(SignalChannel.LARGEST_CONTENTFUL_PAINT, [{"renderTime": ms}])


@when(parsers.parse('the host reports an LCP candidate rendered at {ms:g}ms on "{markup}"'))
def step_lcp_candidate_with_element(
    ctx: SessionScenarioContext, ms: float, markup: str
) -> None:
    ctx.clock.advance(100)
    ctx.source.push(
        SignalChannel.LARGEST_CONTENTFUL_PAINT,
        [{"renderTime": ms, "element": {"tagName": "IMG", "outerHTML": markup}}],
    )


@when(parsers.parse("the host reports a layout shift of {value:g}"))
def step_layout_shift(ctx: SessionScenarioContext, value: float) -> None:
    ctx.source.push(SignalChannel.LAYOUT_SHIFT, [{"value": value, "hadRecentInput": False}])


@when(parsers.parse("the host reports a layout shift of {value:g} after recent input"))
def step_layout_shift_after_input(ctx: SessionScenarioContext, value: float) -> None:
    ctx.source.push(SignalChannel.LAYOUT_SHIFT, [{"value": value, "hadRecentInput": True}])


@when(parsers.parse("the host reports a long task of {ms:g}ms"))
def step_long_task(ctx: SessionScenarioContext, ms: float) -> None:
    ctx.clock.advance(50)
    ctx.source.push(SignalChannel.LONG_TASK, [{"duration": ms}])


@when("the page becomes hidden")
def step_page_hidden(ctx: SessionScenarioContext) -> None:
    ctx.clock.advance(1000)
    ctx.boundary.hide()


@when("a report is requested")
def step_request_report(ctx: SessionScenarioContext) -> None:
    ctx.report = ctx.current_report()


@when(
    parsers.parse(
        "a monitor is configured with {signal} thresholds good {good:g} "
        "and needs improvement {needs_improvement:g}"
    )
)
def step_configure_thresholds(
    ctx: SessionScenarioContext, signal: str, good: float, needs_improvement: float
) -> None:
    ctx.monitor = None
    try:
        scoring = ScoringTable.from_mapping(
            {"thresholds": {signal: {"good": good, "needsImprovement": needs_improvement}}}
        )
        ctx.monitor = PerformanceMonitor(MonitorConfig(scoring=scoring))
    except ConfigurationError as exc:
        ctx.error = exc


# === Outcome Steps ===
@then(parsers.parse("the {signal} value is {value:g}"))
def step_check_value(ctx: SessionScenarioContext, signal: str, value: float) -> None:
    assert ctx.current_report().metrics[parse_signal(signal)] == pytest.approx(value)


@then(parsers.parse('the {signal} verdict is "{verdict}"'))
def step_check_verdict(ctx: SessionScenarioContext, signal: str, verdict: str) -> None:
    assert ctx.current_report().verdicts[parse_signal(signal)].value == verdict


@then(parsers.parse("the {signal} sequence contains {value:g}"))
def step_check_sequence(ctx: SessionScenarioContext, signal: str, value: float) -> None:
    assert value in ctx.current_report().metrics[parse_signal(signal)]


@then(parsers.parse('a "{category}" event is emitted with "{message}"'))
def step_check_event(ctx: SessionScenarioContext, category: str, message: str) -> None:
    matching = [event for event in ctx.sink.events if event.category == category]
    assert matching, f"no {category!r} event in {ctx.sink.categories()}"
    assert message in matching[-1].messages


@then(parsers.parse('exactly {count:d} "{category}" event is emitted'))
def step_check_event_count(ctx: SessionScenarioContext, count: int, category: str) -> None:
    assert ctx.sink.categories().count(category) == count


@then("configuration fails with a ConfigurationError")
def step_check_configuration_error(ctx: SessionScenarioContext) -> None:
    assert isinstance(ctx.error, ConfigurationError)
    assert ctx.monitor is None

