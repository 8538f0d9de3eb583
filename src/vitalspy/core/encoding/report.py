"""JSON encoding of reports."""

import json
from typing import Any

from vitalspy.core.encoding.ndjson import event_to_dict
from vitalspy.core.models import Report


def report_to_dict(report: Report) -> dict[str, Any]:
    """Convert a report to a JSON-compatible dict keyed by signal name.

    Collection signals are rendered as lists. The environment descriptor is
    passed through unchanged and must itself be JSON-compatible to encode.
    """
    return {
        "metrics": {
            kind.value: list(value) if isinstance(value, tuple) else value
            for kind, value in report.metrics.items()
        },
        "verdicts": {kind.value: verdict.value for kind, verdict in report.verdicts.items()},
        "composite_score": report.composite_score,
        "issues": list(report.issues),
        "timeline": [event_to_dict(event) for event in report.timeline],
        "environment": report.environment,
    }


def encode_report(report: Report, indent: int | None = 2) -> str:
    """Encode a report as a JSON document."""
    return json.dumps(report_to_dict(report), indent=indent, ensure_ascii=False)
