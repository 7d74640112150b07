"""Configuration primitives for the synthetic person simulation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from .motivation import ChronicState, Personality


def get_verbosity() -> int:
    """Get verbosity level from environment: 0=quiet, 1=normal, 2=verbose."""
    return int(os.environ.get("PERSON_VERBOSITY", "1"))


@dataclass(frozen=True)
class DecayConfig:
    """Autonomous decay settings.

    ``multiplier=1.0`` is real-time speed; the default of 5.0 makes degradation
    visible within about a minute of wall-clock time. ``homeostasis_enabled`` is
    reserved and has no effect.
    """

    multiplier: float = 5.0
    homeostasis_enabled: bool = False

    def __post_init__(self) -> None:
        if self.multiplier < 0:
            raise ValueError(f"Decay multiplier must be non-negative, got {self.multiplier}")


@dataclass(frozen=True)
class NoiseConfig:
    """Gaussian noise settings. ``sigma`` is the per-second standard deviation."""

    sigma: float = 0.002

    def __post_init__(self) -> None:
        if self.sigma < 0:
            raise ValueError(f"Noise sigma must be non-negative, got {self.sigma}")


@dataclass(frozen=True)
class ThresholdConfig:
    """Threshold behaviour. ``terminal_states_enabled`` is reserved and never caps cascades."""

    terminal_states_enabled: bool = False


@dataclass(frozen=True)
class EngineConfig:
    """Holds the per-stage configuration used by one :class:`BioEngine`."""

    decay: DecayConfig = field(default_factory=DecayConfig)
    noise: NoiseConfig = field(default_factory=NoiseConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    @classmethod
    def default(cls) -> "EngineConfig":
        return cls()


DEFAULT_COOLDOWNS: Mapping[str, int] = {
    "eat": 120,
    "rest": 60,
    "reach_out": 90,
}


@dataclass(frozen=True)
class SimulationConfig:
    """Settings for a full simulation session.

    **Timing:**
    - tick_seconds: Simulated seconds advanced per tick.

    **Mind layer:**
    - cooldowns: Per-action cooldown in wall-clock seconds (0 or absent = none).
    - continuity_capacity: Narrative lines kept for the next prompt (0 disables).
    - thought_every_ticks: Spontaneous thought schedule (0 disables).

    **Reporting:**
    - drive_change_threshold: Minimum urgency change reported as a DRIVES line.
    """

    tick_seconds: float = 1.0
    cooldowns: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_COOLDOWNS))
    continuity_capacity: int = 5
    thought_every_ticks: int = 10
    drive_change_threshold: float = 0.15
    personality: Personality = field(default_factory=Personality)
    chronic: ChronicState = field(default_factory=ChronicState)
    engine: EngineConfig = field(default_factory=EngineConfig)

    def __post_init__(self) -> None:
        if self.tick_seconds < 0:
            raise ValueError(f"tick_seconds must be non-negative, got {self.tick_seconds}")
        if self.continuity_capacity < 0:
            raise ValueError(
                f"continuity_capacity must be non-negative, got {self.continuity_capacity}"
            )
        negative = sorted(name for name, seconds in self.cooldowns.items() if seconds < 0)
        if negative:
            raise ValueError(f"Cooldowns must be non-negative; invalid for: {', '.join(negative)}")
