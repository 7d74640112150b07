"""Drive urgencies derived from bio state, personality and chronic pressure."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from .state import BODY_TEMP_BASELINE, RANGES, BioState, Field, clamp


class Drive(str, Enum):
    ENERGY = "energy"
    SOCIAL_CONNECTION = "social_connection"
    STIMULATION = "stimulation_novelty"
    SAFETY = "safety"
    IDENTITY_COHERENCE = "identity_coherence"

    def __str__(self) -> str:
        return self.value


class Action(str, Enum):
    REST = "rest"
    EAT = "eat"
    HYDRATE = "hydrate"
    REACH_OUT = "reach_out"
    JOURNAL = "journal"
    BREATHE = "breathe"
    SCAN_AREA = "scan_environment"
    SEEK_WARMTH = "seek_warmth"
    SEEK_COOLING = "seek_cooling"
    MICRO_TASK = "micro_task"

    def __str__(self) -> str:
        return self.value


# Tie-break order when two drives share the same urgency.
DRIVE_PRIORITY: Tuple[Drive, ...] = (
    Drive.SAFETY,
    Drive.ENERGY,
    Drive.SOCIAL_CONNECTION,
    Drive.IDENTITY_COHERENCE,
    Drive.STIMULATION,
)


@dataclass(frozen=True)
class Personality:
    """Seven trait multipliers in [0, 1]; clamped when consumed."""

    stress_sensitivity: float = 0.5
    energy_resilience: float = 0.5
    curiosity: float = 0.5
    self_observation: float = 0.5
    frustration_tolerance: float = 0.5
    risk_aversion: float = 0.5
    social_factor: float = 0.5


@dataclass(frozen=True)
class ChronicState:
    """Long-horizon pressures that bias drives. Optional, default zero."""

    threat_load: float = 0.0
    isolation_load: float = 0.0
    identity_strain: float = 0.0
    fatigue_pressure: float = 0.0


@dataclass(frozen=True)
class ActionConstraints:
    has_food: bool = False
    has_people_nearby: bool = False
    can_rest: bool = False
    can_explore: bool = False
    has_quiet_space: bool = False


@dataclass(frozen=True)
class MotivationState:
    energy_urgency: float = 0.0
    social_urgency: float = 0.0
    stimulation_urgency: float = 0.0
    safety_urgency: float = 0.0
    identity_urgency: float = 0.0
    active_goal: Drive = Drive.SAFETY
    active_goal_urgency: float = 0.0

    def urgency(self, drive: Drive) -> float:
        match drive:
            case Drive.ENERGY:
                return self.energy_urgency
            case Drive.SOCIAL_CONNECTION:
                return self.social_urgency
            case Drive.STIMULATION:
                return self.stimulation_urgency
            case Drive.SAFETY:
                return self.safety_urgency
            case Drive.IDENTITY_COHERENCE:
                return self.identity_urgency
        raise KeyError(drive)

    def urgencies(self) -> Dict[Drive, float]:
        return {drive: self.urgency(drive) for drive in Drive}


def clamp01(value: float) -> float:
    return clamp(value, 0.0, 1.0)


def temp_deviation(body_temp: float) -> float:
    return clamp01(abs(body_temp - BODY_TEMP_BASELINE) / 6.0)


def _energy_multiplier(p: Personality) -> float:
    # Lower resilience and lower tolerance raise perceived urgency.
    return clamp(1 + 0.6 * (0.5 - p.energy_resilience) + 0.3 * (0.5 - p.frustration_tolerance), 0.5, 1.5)


def _social_multiplier(p: Personality) -> float:
    return clamp(1 + 0.8 * (p.social_factor - 0.5), 0.6, 1.4)


def _stimulation_multiplier(p: Personality) -> float:
    return clamp(1 + 0.8 * (p.curiosity - 0.5), 0.6, 1.4)


def _safety_multiplier(p: Personality) -> float:
    return clamp(1 + 0.6 * (p.stress_sensitivity - 0.5) + 0.4 * (p.risk_aversion - 0.5), 0.5, 1.5)


def _identity_multiplier(p: Personality) -> float:
    return clamp(1 + 0.6 * (p.self_observation - 0.5) + 0.3 * (0.5 - p.frustration_tolerance), 0.5, 1.5)


def _clamped_personality(p: Personality) -> Personality:
    return Personality(
        stress_sensitivity=clamp01(p.stress_sensitivity),
        energy_resilience=clamp01(p.energy_resilience),
        curiosity=clamp01(p.curiosity),
        self_observation=clamp01(p.self_observation),
        frustration_tolerance=clamp01(p.frustration_tolerance),
        risk_aversion=clamp01(p.risk_aversion),
        social_factor=clamp01(p.social_factor),
    )


def _clamped_chronic(c: ChronicState) -> ChronicState:
    return ChronicState(
        threat_load=clamp01(c.threat_load),
        isolation_load=clamp01(c.isolation_load),
        identity_strain=clamp01(c.identity_strain),
        fatigue_pressure=clamp01(c.fatigue_pressure),
    )


def rank_drives(urgencies: Dict[Drive, float]) -> List[Tuple[Drive, float]]:
    """Sort drives by clamped urgency, highest first, ties broken by :data:`DRIVE_PRIORITY`."""
    ranked = [(drive, clamp01(urgencies.get(drive, 0.0))) for drive in DRIVE_PRIORITY]
    # Stable sort keeps priority order among equal urgencies.
    return sorted(ranked, key=lambda item: -item[1])


def compute_motivation(
    bio: BioState,
    personality: Personality | None = None,
    chronic: ChronicState | None = None,
) -> MotivationState:
    """Compute drive urgencies and the active goal. Pure and deterministic."""
    p = _clamped_personality(personality or Personality())
    c = _clamped_chronic(chronic or ChronicState())

    energy = clamp01(bio.energy)
    stress = clamp01(bio.stress)
    cognitive = clamp01(bio.cognitive_capacity)
    mood = clamp01(bio.mood)
    tension = clamp01(bio.physical_tension)
    hunger = clamp01(bio.hunger)
    social = clamp01(bio.social_deficit)
    body_temp = clamp(bio.body_temp, RANGES[Field.BODY_TEMP].min, RANGES[Field.BODY_TEMP].max)

    energy_base = clamp01(0.65 * (1 - energy) + 0.35 * hunger + 0.15 * c.fatigue_pressure)
    social_base = clamp01(social + 0.25 * c.isolation_load)
    stim_base = clamp01(0.60 * (1 - cognitive) + 0.40 * (1 - mood))
    safety_base = clamp01(
        0.50 * stress + 0.25 * tension + 0.25 * temp_deviation(body_temp) + 0.20 * c.threat_load
    )
    identity_base = clamp01(0.55 * (1 - mood) + 0.45 * (1 - cognitive) + 0.20 * c.identity_strain)

    urgencies = {
        Drive.ENERGY: clamp01(energy_base * _energy_multiplier(p)),
        Drive.SOCIAL_CONNECTION: clamp01(social_base * _social_multiplier(p)),
        Drive.STIMULATION: clamp01(stim_base * _stimulation_multiplier(p)),
        Drive.SAFETY: clamp01(safety_base * _safety_multiplier(p)),
        Drive.IDENTITY_COHERENCE: clamp01(identity_base * _identity_multiplier(p)),
    }
    goal, goal_urgency = rank_drives(urgencies)[0]
    return MotivationState(
        energy_urgency=urgencies[Drive.ENERGY],
        social_urgency=urgencies[Drive.SOCIAL_CONNECTION],
        stimulation_urgency=urgencies[Drive.STIMULATION],
        safety_urgency=urgencies[Drive.SAFETY],
        identity_urgency=urgencies[Drive.IDENTITY_COHERENCE],
        active_goal=goal,
        active_goal_urgency=goal_urgency,
    )


class MotivationComputer:
    """Default motivation collaborator wrapping :func:`compute_motivation`."""

    def compute(self, bio: BioState, personality: Personality, chronic: ChronicState) -> MotivationState:
        return compute_motivation(bio, personality, chronic)


def action_candidates_for(goal: Drive, constraints: ActionConstraints) -> List[Action]:
    """Deterministic candidate actions for ``goal`` under ``constraints``."""
    if goal is Drive.ENERGY:
        actions = []
        if constraints.has_food:
            actions.append(Action.EAT)
        if constraints.can_rest:
            actions.append(Action.REST)
        actions.append(Action.HYDRATE)
        return actions
    if goal is Drive.SOCIAL_CONNECTION:
        actions = [Action.REACH_OUT] if constraints.has_people_nearby else []
        actions.append(Action.JOURNAL)
        return actions
    if goal is Drive.STIMULATION:
        if constraints.can_explore:
            return [Action.MICRO_TASK, Action.SCAN_AREA]
        return [Action.MICRO_TASK]
    if goal is Drive.SAFETY:
        actions = [Action.BREATHE, Action.SCAN_AREA]
        if constraints.has_quiet_space:
            actions.append(Action.REST)
        return actions
    if goal is Drive.IDENTITY_COHERENCE:
        actions = [Action.JOURNAL]
        if constraints.has_quiet_space:
            actions.append(Action.BREATHE)
        return actions
    return [Action.BREATHE]
