"""Snapshot-isolated interaction rules between bio variables.

Each rule is a (predicate, target, magnitude) triple. Predicates and magnitudes
read a frozen copy of the state taken before any rule fires, so one rule's output
can never trigger another rule within the same call. Deltas still land on the
live state in table order and influence the next tick's evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple

from .state import BioState, Delta, Field, apply_delta


@dataclass(frozen=True)
class Rule:
    """One interaction rule.

    Attributes:
        name: Human-readable description used in diagnostics.
        condition: Predicate over the pre-call snapshot.
        target: Variable receiving the delta.
        per_second: Magnitude per second, computed from the snapshot.
    """

    name: str
    condition: Callable[[BioState], bool]
    target: Field
    per_second: Callable[[BioState], float]


INTERACTION_RULES: Tuple[Rule, ...] = (
    # Stress
    Rule(
        "stress->physical_tension: high stress tightens muscles",
        lambda s: s.stress > 0.6,
        Field.PHYSICAL_TENSION,
        lambda s: s.stress * 0.3,
    ),
    Rule(
        "stress->cognitive_capacity: stress depletes mental capacity",
        lambda s: s.stress > 0.5,
        Field.COGNITIVE_CAPACITY,
        lambda s: -s.stress * 0.2,
    ),
    Rule(
        "stress->mood: severe stress dampens mood",
        lambda s: s.stress > 0.7,
        Field.MOOD,
        lambda s: -0.002,
    ),
    # Hunger
    Rule(
        "hunger->stress: severe hunger raises stress",
        lambda s: s.hunger > 0.7,
        Field.STRESS,
        lambda s: 0.001,
    ),
    Rule(
        "hunger->cognitive_capacity: extreme hunger depletes cognition",
        lambda s: s.hunger > 0.8,
        Field.COGNITIVE_CAPACITY,
        lambda s: -0.002,
    ),
    # Energy
    Rule(
        "energy->mood: low energy worsens mood",
        lambda s: s.energy < 0.3,
        Field.MOOD,
        lambda s: -0.001,
    ),
    Rule(
        "energy->stress: very low energy raises stress",
        lambda s: s.energy < 0.2,
        Field.STRESS,
        lambda s: 0.002,
    ),
    Rule(
        "energy->cognitive_capacity: very low energy depletes cognition",
        lambda s: s.energy < 0.2,
        Field.COGNITIVE_CAPACITY,
        lambda s: -0.002,
    ),
    # Physical tension
    Rule(
        "physical_tension->stress: high tension feeds back to stress",
        lambda s: s.physical_tension > 0.7,
        Field.STRESS,
        lambda s: 0.001,
    ),
    Rule(
        "physical_tension->mood: elevated tension dampens mood",
        lambda s: s.physical_tension > 0.6,
        Field.MOOD,
        lambda s: -0.001,
    ),
    # Cognitive capacity (low capacity reads as high load)
    Rule(
        "cognitive_capacity->stress: severe depletion raises stress",
        lambda s: s.cognitive_capacity < 0.2,
        Field.STRESS,
        lambda s: 0.002,
    ),
    Rule(
        "cognitive_capacity->mood: depleted cognition lowers mood",
        lambda s: s.cognitive_capacity < 0.3,
        Field.MOOD,
        lambda s: -0.001,
    ),
    # Mood
    Rule(
        "mood->stress: dysphoria elevates stress",
        lambda s: s.mood < 0.2,
        Field.STRESS,
        lambda s: 0.001,
    ),
    Rule(
        "mood->social_deficit: dysphoria deepens isolation",
        lambda s: s.mood < 0.2,
        Field.SOCIAL_DEFICIT,
        lambda s: 0.001,
    ),
    # Social deficit
    Rule(
        "social_deficit->mood: high isolation lowers mood",
        lambda s: s.social_deficit > 0.7,
        Field.MOOD,
        lambda s: -0.001,
    ),
    Rule(
        "social_deficit->stress: extreme isolation raises stress",
        lambda s: s.social_deficit > 0.8,
        Field.STRESS,
        lambda s: 0.001,
    ),
    # Hypothermia
    Rule(
        "body_temp->stress: hypothermia raises stress",
        lambda s: s.body_temp < 35.5,
        Field.STRESS,
        lambda s: (35.5 - s.body_temp) * 0.01,
    ),
    Rule(
        "body_temp->physical_tension: hypothermia causes shivering",
        lambda s: s.body_temp < 35.5,
        Field.PHYSICAL_TENSION,
        lambda s: (35.5 - s.body_temp) * 0.05,
    ),
    # Hyperthermia
    Rule(
        "body_temp->stress: hyperthermia raises stress",
        lambda s: s.body_temp > 38.5,
        Field.STRESS,
        lambda s: (s.body_temp - 38.5) * 0.01,
    ),
    Rule(
        "body_temp->cognitive_capacity: hyperthermia depletes cognition",
        lambda s: s.body_temp > 38.5,
        Field.COGNITIVE_CAPACITY,
        lambda s: -(s.body_temp - 38.5) * 0.03,
    ),
    # Compound spirals
    Rule(
        "energy+hunger->mood: low energy and high hunger collapse mood faster",
        lambda s: s.energy < 0.4 and s.hunger > 0.6,
        Field.MOOD,
        lambda s: -0.002,
    ),
    Rule(
        "stress+cognitive_capacity->mood: overwhelmed-depleted spiral crushes mood",
        lambda s: s.stress > 0.8 and s.cognitive_capacity < 0.3,
        Field.MOOD,
        lambda s: -0.003,
    ),
)


def fired_rules(state: BioState, rules: Tuple[Rule, ...] = INTERACTION_RULES) -> List[Rule]:
    """Return the rules whose predicate holds for ``state``, in table order."""
    return [rule for rule in rules if rule.condition(state)]


def apply_interactions(
    state: BioState,
    dt: float,
    rules: Tuple[Rule, ...] = INTERACTION_RULES,
) -> List[Delta]:
    """Evaluate ``rules`` against a snapshot of ``state`` and apply their deltas.

    Returns the applied deltas in table order. Magnitudes scale with ``dt``, so at
    ``dt <= 0`` every returned delta is zero while predicates are still evaluated.
    The caller clamps afterwards.
    """
    dt = max(dt, 0.0)
    snapshot = state.copy()
    deltas: List[Delta] = []
    for rule in fired_rules(snapshot, rules):
        delta = Delta(rule.target, rule.per_second(snapshot) * dt)
        apply_delta(state, delta)
        deltas.append(delta)
    return deltas
