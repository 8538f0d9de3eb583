"""Log sink adapters implementing LogSinkPort."""

from vitalspy.adapters.logging import LoggingSink
from vitalspy.adapters.sinks.in_memory import InMemorySink

__all__ = ["InMemorySink", "LoggingSink"]
