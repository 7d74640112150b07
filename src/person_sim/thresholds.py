"""Tiered threshold detection and cascading secondary effects.

Every monitored variable has a ladder of severity tiers ordered from most to
least severe. Only the first tier whose condition holds fires, so a ladder
yields at most one event per evaluation. Body temperature carries two
independent ladders (hypothermia and hyperthermia); at most one side can hold.

Stress, energy and hunger cascades are per-second and scale with ``dt``. Body
temperature cascades are absolute shocks applied on any tick that advances
time; a zero-length tick carries none.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, List, Sequence, Tuple

from .config import ThresholdConfig
from .state import BioState, Delta, Field, apply_delta

logger = logging.getLogger(__name__)


class Severity(IntEnum):
    MILD = 0
    WARNING = 1
    CRITICAL = 2

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class ThresholdEvent:
    """A variable that has crossed into a severity tier.

    ``cascade`` holds the bio effects of the crossing; the engine applies them
    after the first clamp and clamps again.
    """

    variable: Field
    severity: Severity
    description: str
    cascade: Tuple[Delta, ...] = ()


@dataclass(frozen=True)
class Tier:
    bound: float
    severity: Severity
    description: str
    cascade: Tuple[Tuple[Field, float], ...]


@dataclass(frozen=True)
class Ladder:
    """Stepped tiers for one variable, most severe first.

    ``compare`` tests ``value`` against each tier bound (``operator.lt`` for
    ladders that descend into danger, ``operator.gt`` for ascending ones).
    """

    variable: Field
    compare: Callable[[float, float], bool]
    tiers: Tuple[Tier, ...]
    dt_scaled: bool = True
    name: str = field(default="")

    def match(self, value: float) -> Tier | None:
        for tier in self.tiers:
            if self.compare(value, tier.bound):
                return tier
        return None


HYPOTHERMIA = Ladder(
    Field.BODY_TEMP,
    operator.lt,
    (
        Tier(33.0, Severity.CRITICAL, "Severe hypothermia, crisis",
             ((Field.STRESS, 0.3), (Field.COGNITIVE_CAPACITY, -0.4))),
        Tier(34.0, Severity.WARNING, "Moderate hypothermia, mental slowing",
             ((Field.PHYSICAL_TENSION, 0.3), (Field.COGNITIVE_CAPACITY, -0.2))),
        Tier(35.0, Severity.MILD, "Mild hypothermia, shivering",
             ((Field.PHYSICAL_TENSION, 0.2),)),
    ),
    dt_scaled=False,
    name="hypothermia",
)

HYPERTHERMIA = Ladder(
    Field.BODY_TEMP,
    operator.gt,
    (
        Tier(40.5, Severity.CRITICAL, "Dangerous hyperthermia",
             ((Field.STRESS, 0.4), (Field.COGNITIVE_CAPACITY, -0.3))),
        Tier(39.5, Severity.WARNING, "Fever, significant impairment",
             ((Field.STRESS, 0.2), (Field.MOOD, -0.2))),
        Tier(38.5, Severity.MILD, "Elevated temperature, discomfort",
             ((Field.STRESS, 0.1), (Field.COGNITIVE_CAPACITY, -0.1))),
    ),
    dt_scaled=False,
    name="hyperthermia",
)

STRESS_LADDER = Ladder(
    Field.STRESS,
    operator.gt,
    (
        Tier(0.95, Severity.CRITICAL, "Crisis state",
             ((Field.MOOD, -0.03), (Field.ENERGY, -0.02))),
        Tier(0.85, Severity.WARNING, "High stress, impaired function",
             ((Field.COGNITIVE_CAPACITY, -0.02), (Field.MOOD, -0.01))),
        Tier(0.7, Severity.MILD, "Elevated stress",
             ((Field.PHYSICAL_TENSION, 0.01),)),
    ),
    name="stress",
)

ENERGY_LADDER = Ladder(
    Field.ENERGY,
    operator.lt,
    (
        Tier(0.05, Severity.CRITICAL, "Near physical collapse",
             ((Field.STRESS, 0.03), (Field.COGNITIVE_CAPACITY, -0.03))),
        Tier(0.15, Severity.WARNING, "Very low energy",
             ((Field.MOOD, -0.01), (Field.STRESS, 0.01))),
        Tier(0.3, Severity.MILD, "Low energy, effort costs more",
             ((Field.COGNITIVE_CAPACITY, -0.01),)),
    ),
    name="energy",
)

HUNGER_LADDER = Ladder(
    Field.HUNGER,
    operator.gt,
    (
        Tier(0.95, Severity.CRITICAL, "Starving",
             ((Field.STRESS, 0.02), (Field.ENERGY, -0.01))),
        Tier(0.85, Severity.WARNING, "Very hungry, difficulty focusing",
             ((Field.COGNITIVE_CAPACITY, -0.01), (Field.STRESS, 0.005))),
        Tier(0.7, Severity.MILD, "Noticeably hungry",
             ((Field.MOOD, -0.005),)),
    ),
    name="hunger",
)

LADDERS: Tuple[Ladder, ...] = (HYPOTHERMIA, HYPERTHERMIA, STRESS_LADDER, ENERGY_LADDER, HUNGER_LADDER)


def evaluate_thresholds(
    state: BioState,
    config: ThresholdConfig,
    dt: float,
    ladders: Sequence[Ladder] = LADDERS,
) -> List[ThresholdEvent]:
    """Return at most one event per ladder for the current ``state``.

    Called on the clamped state. Detection runs even when ``dt <= 0``; the
    cascades of such events carry zero magnitude. ``config.terminal_states_enabled``
    is reserved and does not cap cascades.
    """
    dt = max(dt, 0.0)
    shock = 1.0 if dt > 0 else 0.0
    events: List[ThresholdEvent] = []
    for ladder in ladders:
        tier = ladder.match(state.get(ladder.variable))
        if tier is None:
            continue
        scale = dt if ladder.dt_scaled else shock
        cascade = tuple(Delta(target, amount * scale) for target, amount in tier.cascade)
        events.append(ThresholdEvent(ladder.variable, tier.severity, tier.description, cascade))
        logger.debug("threshold %s [%s]: %s", ladder.name or ladder.variable, tier.severity, tier.description)
    return events


def apply_threshold_cascades(state: BioState, events: Sequence[ThresholdEvent]) -> None:
    """Apply every cascade delta of ``events`` to ``state``. Caller must clamp afterwards."""
    for event in events:
        for delta in event.cascade:
            apply_delta(state, delta)
