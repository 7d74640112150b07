"""Biological state record, variable ranges and the clamp primitive.

The eight variables are motivation-shaped proxies rather than physiological
measurements. Each one feeds at least one drive:

    energy drive:              energy (primary), hunger (secondary)
    social connection drive:   social_deficit
    stimulation drive:         cognitive_capacity (primary), mood (secondary)
    safety drive:              stress, physical_tension, body_temp deviation
    identity coherence drive:  mood (primary), cognitive_capacity (secondary)
"""

from __future__ import annotations

import math
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict


class Field(str, Enum):
    """Closed set of bio variable identifiers."""

    ENERGY = "energy"
    STRESS = "stress"
    COGNITIVE_CAPACITY = "cognitive_capacity"
    MOOD = "mood"
    PHYSICAL_TENSION = "physical_tension"
    HUNGER = "hunger"
    SOCIAL_DEFICIT = "social_deficit"
    BODY_TEMP = "body_temp"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class VarRange:
    min: float
    max: float


RANGES: Dict[Field, VarRange] = {
    Field.ENERGY: VarRange(0.0, 1.0),
    Field.STRESS: VarRange(0.0, 1.0),
    Field.COGNITIVE_CAPACITY: VarRange(0.0, 1.0),
    Field.MOOD: VarRange(0.0, 1.0),
    Field.PHYSICAL_TENSION: VarRange(0.0, 1.0),
    Field.HUNGER: VarRange(0.0, 1.0),
    Field.SOCIAL_DEFICIT: VarRange(0.0, 1.0),
    Field.BODY_TEMP: VarRange(25.0, 43.0),
}

BODY_TEMP_BASELINE = 36.6


@dataclass(slots=True)
class BioState:
    """Mutable biological state owned by one simulation session.

    Attributes:
        energy: 1 = fully rested, 0 = exhausted. Decays toward 0.
        stress: 0 = calm, 1 = overwhelmed. No autonomous decay.
        cognitive_capacity: 1 = fresh, 0 = depleted. Decays toward 0.
        mood: 0 = dysphoric, 0.5 = neutral, 1 = euphoric. Decays toward 0.
        physical_tension: 0 = relaxed, 1 = tense. No autonomous decay.
        hunger: 0 = satiated, 1 = starving. Rises toward 1.
        social_deficit: 0 = connected, 1 = isolated. Rises toward 1.
        body_temp: Degrees Celsius in [25, 43], baseline 36.6. No autonomous decay.
        updated_at: Wall-clock timestamp of the last completed engine tick.
    """

    energy: float = 0.80
    stress: float = 0.10
    cognitive_capacity: float = 1.00
    mood: float = 0.50
    physical_tension: float = 0.05
    hunger: float = 0.10
    social_deficit: float = 0.00
    body_temp: float = BODY_TEMP_BASELINE
    updated_at: float = field(default_factory=time.time)

    def get(self, var: Field) -> float:
        match var:
            case Field.ENERGY:
                return self.energy
            case Field.STRESS:
                return self.stress
            case Field.COGNITIVE_CAPACITY:
                return self.cognitive_capacity
            case Field.MOOD:
                return self.mood
            case Field.PHYSICAL_TENSION:
                return self.physical_tension
            case Field.HUNGER:
                return self.hunger
            case Field.SOCIAL_DEFICIT:
                return self.social_deficit
            case Field.BODY_TEMP:
                return self.body_temp
        raise KeyError(var)

    def add(self, var: Field, amount: float) -> None:
        match var:
            case Field.ENERGY:
                self.energy += amount
            case Field.STRESS:
                self.stress += amount
            case Field.COGNITIVE_CAPACITY:
                self.cognitive_capacity += amount
            case Field.MOOD:
                self.mood += amount
            case Field.PHYSICAL_TENSION:
                self.physical_tension += amount
            case Field.HUNGER:
                self.hunger += amount
            case Field.SOCIAL_DEFICIT:
                self.social_deficit += amount
            case Field.BODY_TEMP:
                self.body_temp += amount
            case _:
                raise KeyError(var)

    def copy(self) -> "BioState":
        return BioState(**asdict(self))

    def values(self) -> Dict[str, float]:
        """Return the eight variables keyed by identifier (timestamp excluded)."""
        return {var.value: self.get(var) for var in Field}

    def in_range(self) -> bool:
        return all(RANGES[var].min <= self.get(var) <= RANGES[var].max for var in Field)


@dataclass(frozen=True, slots=True)
class Delta:
    """Signed change to one bio variable."""

    field: Field
    amount: float


def clamp(value: float, lo: float, hi: float) -> float:
    """Bound ``value`` to [lo, hi]; NaN maps to ``lo``."""
    if math.isnan(value) or value < lo:
        return lo
    if value > hi:
        return hi
    return value


def clamp_all(state: BioState) -> None:
    """Enforce every variable range on ``state`` in place."""
    state.energy = clamp(state.energy, RANGES[Field.ENERGY].min, RANGES[Field.ENERGY].max)
    state.stress = clamp(state.stress, RANGES[Field.STRESS].min, RANGES[Field.STRESS].max)
    state.cognitive_capacity = clamp(
        state.cognitive_capacity,
        RANGES[Field.COGNITIVE_CAPACITY].min,
        RANGES[Field.COGNITIVE_CAPACITY].max,
    )
    state.mood = clamp(state.mood, RANGES[Field.MOOD].min, RANGES[Field.MOOD].max)
    state.physical_tension = clamp(
        state.physical_tension,
        RANGES[Field.PHYSICAL_TENSION].min,
        RANGES[Field.PHYSICAL_TENSION].max,
    )
    state.hunger = clamp(state.hunger, RANGES[Field.HUNGER].min, RANGES[Field.HUNGER].max)
    state.social_deficit = clamp(
        state.social_deficit,
        RANGES[Field.SOCIAL_DEFICIT].min,
        RANGES[Field.SOCIAL_DEFICIT].max,
    )
    state.body_temp = clamp(state.body_temp, RANGES[Field.BODY_TEMP].min, RANGES[Field.BODY_TEMP].max)


def apply_delta(state: BioState, delta: Delta) -> None:
    """Add ``delta`` to the matching variable. Does not clamp."""
    state.add(delta.field, delta.amount)
