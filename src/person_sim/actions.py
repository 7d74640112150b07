"""Action resolution against environment gating and cooldowns, plus bio pulses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

from .feedback import BioPulse
from .mind import ParsedState
from .motivation import Action
from .state import Field, clamp

# Absolute pulses for successful actions, keyed by action identifier.
ACTION_PULSES: Mapping[str, Tuple[BioPulse, ...]] = {
    Action.EAT.value: (
        BioPulse(Field.HUNGER, -0.30),
        BioPulse(Field.ENERGY, 0.08),
        BioPulse(Field.MOOD, 0.04),
    ),
    Action.HYDRATE.value: (
        BioPulse(Field.STRESS, -0.03),
        BioPulse(Field.MOOD, 0.01),
    ),
    Action.REST.value: (
        BioPulse(Field.ENERGY, 0.18),
        BioPulse(Field.STRESS, -0.06),
        BioPulse(Field.PHYSICAL_TENSION, -0.08),
    ),
    Action.REACH_OUT.value: (
        BioPulse(Field.SOCIAL_DEFICIT, -0.20),
        BioPulse(Field.MOOD, 0.06),
    ),
    Action.JOURNAL.value: (
        BioPulse(Field.STRESS, -0.02),
        BioPulse(Field.MOOD, 0.03),
    ),
    Action.BREATHE.value: (
        BioPulse(Field.STRESS, -0.08),
        BioPulse(Field.PHYSICAL_TENSION, -0.10),
    ),
    Action.SCAN_AREA.value: (BioPulse(Field.STRESS, -0.04),),
    Action.SEEK_WARMTH.value: (
        BioPulse(Field.BODY_TEMP, 0.60),
        BioPulse(Field.STRESS, -0.02),
    ),
    Action.SEEK_COOLING.value: (
        BioPulse(Field.BODY_TEMP, -0.60),
        BioPulse(Field.STRESS, -0.02),
    ),
    Action.MICRO_TASK.value: (
        BioPulse(Field.COGNITIVE_CAPACITY, 0.04),
        BioPulse(Field.MOOD, 0.02),
        BioPulse(Field.ENERGY, -0.02),
    ),
}


@dataclass(frozen=True)
class ActionOutcome:
    action: str
    executed: bool
    satisfied: bool


def normalize_action(action: str) -> str:
    return action.strip().lower()


def resolve_action_outcome(action: str, allowed: bool) -> ActionOutcome:
    """Resolve with environment gating only."""
    return ActionOutcome(normalize_action(action), executed=allowed, satisfied=allowed)


def resolve_action_with_cooldown(
    action: str,
    allowed_by_environment: bool,
    now_seconds: int,
    cooldowns: Mapping[str, int],
    prior_state: Mapping[str, int],
) -> Tuple[ActionOutcome, Dict[str, int]]:
    """Resolve ``action`` against the environment gate and its cooldown.

    ``prior_state`` maps action to the wall-clock second its cooldown ends. A
    blocked or still-cooling-down action is unsatisfied and leaves the cooldown
    state unchanged; a satisfied action starts its configured cooldown. Never
    raises, and never mutates ``prior_state``.
    """
    normalized = normalize_action(action)
    next_state = dict(prior_state)
    blocked = ActionOutcome(normalized, executed=False, satisfied=False)

    if not allowed_by_environment:
        return blocked, next_state

    until = next_state.get(normalized)
    if until is not None and now_seconds < until:
        return blocked, next_state

    duration = cooldowns.get(normalized, 0)
    if duration > 0:
        next_state[normalized] = now_seconds + duration

    return ActionOutcome(normalized, executed=True, satisfied=True), next_state


def _signed(value: float) -> float:
    return clamp(value, -1.0, 1.0)


def emotional_pulses(state: ParsedState) -> List[BioPulse]:
    """Turn reported arousal/valence into one-shot pulses (never ``dt``-scaled)."""
    arousal = _signed(state.arousal)
    valence = _signed(state.valence)
    return [
        BioPulse(Field.STRESS, 0.12 * arousal - 0.08 * valence),
        BioPulse(Field.MOOD, 0.16 * valence - 0.05 * arousal),
        BioPulse(Field.PHYSICAL_TENSION, 0.10 * max(arousal, 0.0)),
        BioPulse(Field.COGNITIVE_CAPACITY, -0.06 * max(arousal, 0.0) + 0.04 * max(valence, 0.0)),
    ]


def action_pulses(outcome: ActionOutcome) -> List[BioPulse]:
    """Bio pulses for a satisfied action; blocked or unknown actions emit nothing."""
    if not outcome.executed or not outcome.satisfied:
        return []
    return list(ACTION_PULSES.get(normalize_action(outcome.action), ()))
