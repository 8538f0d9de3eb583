"""Observation source and session boundary adapters."""

from vitalspy.adapters.sources.in_memory import (
    InMemoryObservationSource,
    InMemorySessionBoundary,
)
from vitalspy.adapters.sources.replay import ReplaySource, TraceRecord, read_trace

__all__ = [
    "InMemoryObservationSource",
    "InMemorySessionBoundary",
    "ReplaySource",
    "TraceRecord",
    "read_trace",
]
