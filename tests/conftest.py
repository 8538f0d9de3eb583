"""Shared test fixtures for all test modules."""

import pytest
from tests.helpers import FakeClock, fixed_wall_clock

from vitalspy.adapters.sinks.in_memory import InMemorySink
from vitalspy.adapters.sources.in_memory import (
    InMemoryObservationSource,
    InMemorySessionBoundary,
)
from vitalspy.core.session import Session
from vitalspy.monitor import PerformanceMonitor


@pytest.fixture
def clock() -> FakeClock:
    """Monotonic clock starting at 0ms."""
    return FakeClock()


@pytest.fixture
def sink() -> InMemorySink:
    """Sink collecting every emitted event."""
    return InMemorySink()


@pytest.fixture
def session(clock: FakeClock, sink: InMemorySink) -> Session:
    """Fresh session with default configuration and a fixed wall clock."""
    return Session(sink=sink, clock=clock, wall_clock=fixed_wall_clock)


@pytest.fixture
def source() -> InMemoryObservationSource:
    """Observation source supporting every channel."""
    return InMemoryObservationSource()


@pytest.fixture
def boundary() -> InMemorySessionBoundary:
    """Session boundary in the visible state."""
    return InMemorySessionBoundary()


@pytest.fixture
def monitor(
    source: InMemoryObservationSource,
    boundary: InMemorySessionBoundary,
    sink: InMemorySink,
    clock: FakeClock,
) -> PerformanceMonitor:
    """Monitor started on the in-memory source and boundary."""
    started = PerformanceMonitor(sink=sink, clock=clock, wall_clock=fixed_wall_clock)
    started.start(source, boundary)
    return started
