"""Encoders for timeline events and reports."""

from vitalspy.core.encoding.console import format_group
from vitalspy.core.encoding.ndjson import encode_timeline, event_to_dict
from vitalspy.core.encoding.report import encode_report, report_to_dict

__all__ = [
    "encode_report",
    "encode_timeline",
    "event_to_dict",
    "format_group",
    "report_to_dict",
]
