"""Per-signal metric accumulators.

Each accumulator owns the running state of one signal. Observation callbacks
feed it through ``ingest``; the session lifecycle freezes it through
``finalize``. Entries arriving after finalization are expected (observers
may fire while the page unloads) and are silently ignored.
"""

import logging
from collections.abc import Iterable

from vitalspy.core.models import AccumulatorState, MetricSample, SignalKind

logger = logging.getLogger(__name__)


class ScalarAccumulator:
    """Latest-wins scalar signal (LCP, FCP, INP, TTFB).

    Observers may report provisional or repeated values before the
    canonical one, so every sample overwrites the running value.
    """

    def __init__(self, kind: SignalKind) -> None:
        if kind.is_collection:
            raise ValueError(f"{kind.value} is a collection signal")
        self.kind = kind
        self._running: float = 0.0
        self._final: float | None = None
        self._raw: list[MetricSample] = []

    @property
    def finalized(self) -> bool:
        """Whether the value has been frozen."""
        return self._final is not None

    @property
    def value(self) -> float:
        """Finalized value, or the running value while still collecting."""
        return self._final if self._final is not None else self._running

    @property
    def observed(self) -> bool:
        """Whether at least one sample has been accepted."""
        return bool(self._raw)

    @property
    def latest(self) -> MetricSample | None:
        """Most recently accepted sample."""
        return self._raw[-1] if self._raw else None

    def ingest(self, sample: MetricSample) -> None:
        """Accept ``sample`` unless the accumulator is finalized."""
        if self.finalized:
            logger.debug("Ignoring late %s sample", self.kind.value)
            return
        self._raw.append(sample)
        self._apply(sample)

    def _apply(self, sample: MetricSample) -> None:
        self._running = sample.value

    def finalize(self) -> float:
        """Freeze the running value. Later calls return the same value."""
        if self._final is None:
            self._final = self._running
        return self._final

    def state(self) -> AccumulatorState:
        """Snapshot the accumulator without changing it."""
        return AccumulatorState(
            kind=self.kind,
            current_value=self.value,
            finalized=self.finalized,
            raw_entries=tuple(self._raw),
        )


class LayoutShiftAccumulator(ScalarAccumulator):
    """Cumulative layout shift.

    Shifts that follow recent user input are excluded from the score but
    still recorded as raw entries.
    """

    def __init__(self) -> None:
        super().__init__(SignalKind.CLS)

    def _apply(self, sample: MetricSample) -> None:
        if sample.attribution is not None and sample.attribution.had_recent_input:
            return
        self._running += sample.value

    @property
    def counted(self) -> list[MetricSample]:
        """Samples that contributed to the cumulative score."""
        return [
            sample
            for sample in self._raw
            if sample.attribution is None or not sample.attribution.had_recent_input
        ]


class CollectionAccumulator:
    """Sequence-valued signal (LongTask, LoAF).

    Every sample is appended; the sequence has no length cap.
    """

    def __init__(self, kind: SignalKind) -> None:
        if not kind.is_collection:
            raise ValueError(f"{kind.value} is a scalar signal")
        self.kind = kind
        self._raw: list[MetricSample] = []
        self._final: tuple[float, ...] | None = None

    @property
    def finalized(self) -> bool:
        """Whether the sequence has been frozen."""
        return self._final is not None

    @property
    def value(self) -> tuple[float, ...]:
        """Finalized sequence, or the running sequence while collecting."""
        if self._final is not None:
            return self._final
        return tuple(sample.value for sample in self._raw)

    @property
    def observed(self) -> bool:
        """Whether at least one sample has been accepted."""
        return bool(self._raw)

    @property
    def peak(self) -> float:
        """Largest recorded value, 0 when empty."""
        return max(self.value, default=0.0)

    def ingest(self, sample: MetricSample) -> None:
        """Append ``sample`` unless the accumulator is finalized."""
        if self.finalized:
            logger.debug("Ignoring late %s sample", self.kind.value)
            return
        self._raw.append(sample)

    def finalize(self) -> tuple[float, ...]:
        """Freeze the sequence. Later calls return the same sequence."""
        if self._final is None:
            self._final = tuple(sample.value for sample in self._raw)
        return self._final

    def state(self) -> AccumulatorState:
        """Snapshot the accumulator without changing it."""
        return AccumulatorState(
            kind=self.kind,
            current_value=self.value,
            finalized=self.finalized,
            raw_entries=tuple(self._raw),
        )


Accumulator = ScalarAccumulator | CollectionAccumulator


def create_accumulator(kind: SignalKind) -> Accumulator:
    """Create the accumulator matching ``kind``."""
    if kind is SignalKind.CLS:
        return LayoutShiftAccumulator()
    if kind.is_collection:
        return CollectionAccumulator(kind)
    return ScalarAccumulator(kind)


def create_accumulators(
    kinds: Iterable[SignalKind] = tuple(SignalKind),
) -> dict[SignalKind, Accumulator]:
    """Create one fresh, unfinalized accumulator per signal."""
    return {kind: create_accumulator(kind) for kind in kinds}
