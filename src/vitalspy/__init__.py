"""vitalspy - page performance telemetry collection and scoring."""

from vitalspy.adapters.logging import LoggingSink, TimelineHandler
from vitalspy.adapters.sinks.in_memory import InMemorySink
from vitalspy.adapters.sources.in_memory import (
    InMemoryObservationSource,
    InMemorySessionBoundary,
)
from vitalspy.adapters.sources.replay import ReplaySource
from vitalspy.config import MonitorConfig, config_from_mapping, load_config
from vitalspy.core.errors import ConfigurationError
from vitalspy.core.models import (
    Report,
    SignalChannel,
    SignalKind,
    ThresholdSpec,
    TimelineEvent,
    Verdict,
    Weight,
)
from vitalspy.core.scoring import ScoringTable
from vitalspy.core.session import Session, SessionOptions
from vitalspy.core.triage import LongTaskTriage, Severity
from vitalspy.monitor import PerformanceMonitor

__all__ = [
    "ConfigurationError",
    "InMemoryObservationSource",
    "InMemorySessionBoundary",
    "InMemorySink",
    "LoggingSink",
    "LongTaskTriage",
    "MonitorConfig",
    "PerformanceMonitor",
    "ReplaySource",
    "Report",
    "ScoringTable",
    "Session",
    "SessionOptions",
    "Severity",
    "SignalChannel",
    "SignalKind",
    "ThresholdSpec",
    "TimelineEvent",
    "TimelineHandler",
    "Verdict",
    "Weight",
    "config_from_mapping",
    "load_config",
]
