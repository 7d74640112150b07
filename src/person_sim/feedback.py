"""Deferred, atomic commit of externally sourced bio effects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from .state import BioState, Delta, Field, apply_delta, clamp_all


@dataclass(frozen=True, slots=True)
class BioRate:
    """Per-second effect, multiplied by ``dt`` when committed."""

    field: Field
    per_second: float


@dataclass(frozen=True, slots=True)
class BioPulse:
    """One-shot effect, applied as-is and never ``dt``-scaled."""

    field: Field
    amount: float


@dataclass(slots=True)
class FeedbackEnvelope:
    rates: List[BioRate] = field(default_factory=list)
    pulses: List[BioPulse] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.rates and not self.pulses


def apply_feedback(state: BioState, dt: float, envelope: FeedbackEnvelope) -> None:
    """Commit ``envelope`` in one step: all rates scaled by ``dt``, then all pulses, then clamp."""
    dt = max(dt, 0.0)
    for rate in envelope.rates:
        apply_delta(state, Delta(rate.field, rate.per_second * dt))
    for pulse in envelope.pulses:
        apply_delta(state, Delta(pulse.field, pulse.amount))
    clamp_all(state)


class FeedbackBuffer:
    """Accumulates rates and pulses during a tick without touching state.

    Only :meth:`commit_at_tick_end` mutates; it then resets the buffer so the
    same instance can collect the next tick's feedback.
    """

    def __init__(self) -> None:
        self._rates: List[BioRate] = []
        self._pulses: List[BioPulse] = []

    def add_rates(self, rates: Iterable[BioRate]) -> None:
        self._rates.extend(rates)

    def add_pulses(self, pulses: Iterable[BioPulse]) -> None:
        self._pulses.extend(pulses)

    def envelope(self) -> FeedbackEnvelope:
        return FeedbackEnvelope(rates=list(self._rates), pulses=list(self._pulses))

    def __len__(self) -> int:
        return len(self._rates) + len(self._pulses)

    def commit_at_tick_end(self, state: BioState, dt: float) -> None:
        apply_feedback(state, dt, self.envelope())
        self._rates = []
        self._pulses = []
