"""Report builder."""

from types import MappingProxyType
from typing import Any

from vitalspy.core.accumulators import CollectionAccumulator
from vitalspy.core.models import Report, SignalKind, Verdict
from vitalspy.core.session import Session


class ReportBuilder:
    """Builds read-only snapshots of a session.

    Args:
        session: Session to snapshot.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def snapshot(self, environment: Any = None) -> Report:
        """Build a fresh report of the session's current state.

        Unfinalized scalar signals report their running (provisional) value.
        Signals that were never observed report their zero value. Nothing in
        the session is modified.

        Args:
            environment: Opaque descriptor of the host, copied as is.

        Returns:
            A new Report.
        """
        scoring = self.session.scoring
        metrics: dict[SignalKind, float | tuple[float, ...]] = {}
        verdicts: dict[SignalKind, Verdict] = {}

        for kind, accumulator in self.session.accumulators.items():
            metrics[kind] = accumulator.value
            if not scoring.has_threshold(kind):
                continue
            if isinstance(accumulator, CollectionAccumulator):
                # Collections are judged by their worst sample.
                verdicts[kind] = scoring.classify(kind, accumulator.peak)
            else:
                verdicts[kind] = scoring.classify(kind, accumulator.value)

        events = self.session.timeline.events
        issues = tuple(
            f"{event.category}: {message}"
            for event in events
            for message in event.messages
        )
        return Report(
            metrics=MappingProxyType(metrics),
            verdicts=MappingProxyType(verdicts),
            composite_score=scoring.composite(verdicts),
            issues=issues,
            timeline=events,
            environment=environment,
        )
