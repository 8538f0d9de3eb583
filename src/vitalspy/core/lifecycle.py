"""Session lifecycle: the one-time freeze of end-of-session signals."""

import logging
from enum import Enum

from vitalspy.core import messages
from vitalspy.core.models import ElementRef, SignalKind
from vitalspy.core.ports import SessionBoundaryPort
from vitalspy.core.session import Session

logger = logging.getLogger(__name__)

HIDDEN = "hidden"

# Signals whose final value is only known when the page goes away.
END_OF_SESSION_SIGNALS = (SignalKind.LCP, SignalKind.CLS, SignalKind.FCP)


class LifecycleState(str, Enum):
    """State of a session lifecycle controller."""

    ACTIVE = "active"
    FINALIZED = "finalized"


class SessionLifecycleController:
    """Drives finalization of a session.

    The controller moves from ACTIVE to FINALIZED exactly once, on whichever
    comes first: the page becoming hidden or an explicit ``finalize()``. It
    never returns to ACTIVE; a new session needs a new controller.

    Args:
        session: Session to finalize.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.state = LifecycleState.ACTIVE

    @property
    def finalized(self) -> bool:
        """Whether the session has been finalized."""
        return self.state is LifecycleState.FINALIZED

    def attach(self, boundary: SessionBoundaryPort) -> None:
        """Finalize when ``boundary`` reports the page as hidden."""
        boundary.on_visibility_change(self.on_visibility_change)

    def on_visibility_change(self, visibility_state: str) -> None:
        """Handle a visibility change; only ``hidden`` triggers finalization."""
        if visibility_state == HIDDEN:
            self.finalize()

    def finalize(self) -> bool:
        """Finalize the session if still active.

        Freezes LCP, CLS and FCP, logs their final values, then logs the
        timeline report.

        Returns:
            True when this call performed the transition, False when the
            session was already finalized.
        """
        if self.finalized:
            logger.debug("Session already finalized; ignoring")
            return False
        self.state = LifecycleState.FINALIZED

        for kind in END_OF_SESSION_SIGNALS:
            self.session.scalar(kind).finalize()

        self._log_largest_contentful_paint()
        self._log_layout_shift()
        self._log_first_contentful_paint()
        self.session.log(messages.TIMELINE_REPORT, self.session.timeline.analyze())
        return True

    def _log_largest_contentful_paint(self) -> None:
        accumulator = self.session.scalar(SignalKind.LCP)
        latest = accumulator.latest
        if latest is None:
            return
        element = latest.attribution.element if latest.attribution else None
        self.session.log(
            messages.LCP,
            messages.largest_contentful_paint(
                accumulator.value, element, self.session.options.attribution_limit
            ),
        )

    def _log_layout_shift(self) -> None:
        accumulator = self.session.layout_shift
        sources: list[ElementRef] = []
        for sample in accumulator.counted:
            if sample.attribution is not None:
                sources.extend(sample.attribution.sources)
        self.session.log(
            messages.CLS,
            messages.cumulative_layout_shift(
                accumulator.value, sources, self.session.options.attribution_limit
            ),
        )

    def _log_first_contentful_paint(self) -> None:
        accumulator = self.session.scalar(SignalKind.FCP)
        if not accumulator.observed:
            return
        self.session.log(
            messages.FCP, messages.first_contentful_paint(accumulator.value)
        )
