"""Tests for the report builder."""

import pytest

from vitalspy.adapters.sources.in_memory import InMemoryObservationSource
from vitalspy.core.collector import Collector
from vitalspy.core.lifecycle import SessionLifecycleController
from vitalspy.core.models import SignalChannel, SignalKind, Verdict
from vitalspy.core.report import ReportBuilder
from vitalspy.core.session import Session

pytestmark = [pytest.mark.core, pytest.mark.tier(1)]


@pytest.fixture
def builder(session: Session, source: InMemoryObservationSource) -> ReportBuilder:
    Collector(session).attach(source)
    return ReportBuilder(session)


class TestSnapshot:
    """Tests for ReportBuilder.snapshot()."""

    def test_empty_session(self, builder: ReportBuilder) -> None:
        """Unobserved signals report zero values and Good verdicts."""
        report = builder.snapshot()

        assert report.metrics[SignalKind.LCP] == 0.0
        assert report.metrics[SignalKind.LONG_TASK] == ()
        assert report.verdicts[SignalKind.LCP] is Verdict.GOOD
        assert SignalKind.LOAF not in report.verdicts
        assert report.composite_score == 100
        assert report.issues == ()
        assert report.timeline == ()
        assert report.environment is None

    def test_provisional_values_before_finalization(
        self, builder: ReportBuilder, source: InMemoryObservationSource
    ) -> None:
        """A report taken mid-session uses running values."""
        source.push(SignalChannel.LARGEST_CONTENTFUL_PAINT, [{"renderTime": 4200}])

        report = builder.snapshot()

        assert report.metrics[SignalKind.LCP] == 4200
        assert report.verdicts[SignalKind.LCP] is Verdict.POOR

    def test_cls_needs_improvement(
        self, builder: ReportBuilder, source: InMemoryObservationSource
    ) -> None:
        """CLS 0.13 needs improvement and costs 8 points."""
        source.push(SignalChannel.LAYOUT_SHIFT, [{"value": 0.05}, {"value": 0.08}])

        report = builder.snapshot()

        assert report.metrics[SignalKind.CLS] == pytest.approx(0.13)
        assert report.verdicts[SignalKind.CLS] is Verdict.NEEDS_IMPROVEMENT
        assert report.composite_score == 92

    def test_long_tasks_judged_by_peak(
        self, builder: ReportBuilder, source: InMemoryObservationSource
    ) -> None:
        """The worst long task decides the LongTask verdict."""
        source.push(SignalChannel.LONG_TASK, [{"duration": 60}, {"duration": 350}])

        report = builder.snapshot()

        assert report.metrics[SignalKind.LONG_TASK] == (60, 350)
        assert report.verdicts[SignalKind.LONG_TASK] is Verdict.POOR
        # LongTask is unweighted and leaves the composite alone.
        assert report.composite_score == 100

    def test_issues_flatten_timeline_messages(
        self, builder: ReportBuilder, session: Session
    ) -> None:
        """Each message becomes "<category>: <message>", in append order."""
        session.log("DOM Issues", ["2 images missing dimensions (causes CLS)"])
        session.log("TTFB", ["Time To First Byte: 420ms", "→ hint"])

        report = builder.snapshot()

        assert report.issues == (
            "DOM Issues: 2 images missing dimensions (causes CLS)",
            "TTFB: Time To First Byte: 420ms",
            "TTFB: → hint",
        )

    def test_environment_is_passed_through(self, builder: ReportBuilder) -> None:
        """The environment descriptor is copied as is."""
        environment = {"url": "https://example.com", "connection": "4g"}
        assert builder.snapshot(environment).environment is environment

    @pytest.mark.tra("Report.Snapshot.ReadOnly")
    def test_snapshot_does_not_mutate_session(
        self, builder: ReportBuilder, session: Session, source: InMemoryObservationSource
    ) -> None:
        """Two snapshots without activity in between are equal."""
        source.push(SignalChannel.NAVIGATION, [{"responseStart": 900}])

        first = builder.snapshot()
        second = builder.snapshot()

        assert first == second
        assert not any(a.finalized for a in session.accumulators.values())
        assert len(session.timeline) == 1

    def test_report_mappings_are_read_only(
        self, builder: ReportBuilder, source: InMemoryObservationSource
    ) -> None:
        """Metrics and verdicts cannot be changed after the snapshot."""
        source.push(SignalChannel.LARGEST_CONTENTFUL_PAINT, [{"renderTime": 1800}])
        report = builder.snapshot()

        with pytest.raises(TypeError):
            report.metrics[SignalKind.LCP] = 0.0  # type: ignore[index]
        with pytest.raises(TypeError):
            report.verdicts[SignalKind.LCP] = Verdict.POOR  # type: ignore[index]
        assert builder.snapshot() == report

    def test_snapshot_after_finalization(
        self, builder: ReportBuilder, session: Session, source: InMemoryObservationSource
    ) -> None:
        """Finalized values are reported and late entries do not change them."""
        source.push(SignalChannel.LARGEST_CONTENTFUL_PAINT, [{"renderTime": 1800}])
        SessionLifecycleController(session).finalize()
        source.push(SignalChannel.LARGEST_CONTENTFUL_PAINT, [{"renderTime": 9000}])

        report = builder.snapshot()

        assert report.metrics[SignalKind.LCP] == 1800
        assert [event.category for event in report.timeline] == [
            "LCP",
            "CLS",
            "Timeline Report",
        ]
