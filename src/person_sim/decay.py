"""Autonomous linear decay of the bio state."""

from __future__ import annotations

from .config import DecayConfig
from .state import BioState

# Per-second rates at multiplier 1.0, calibrated for roughly a 20% move from
# baseline within 4-10 minutes.
ENERGY_DECAY_RATE = 0.00067
HUNGER_DECAY_RATE = 0.00083
COGNITIVE_DECAY_RATE = 0.00050
MOOD_DECAY_RATE = 0.00033
SOCIAL_DECAY_RATE = 0.00033

MAX_DECAY_DT = 60.0


def apply_decay(state: BioState, config: DecayConfig, dt: float) -> None:
    """Drift five variables for ``dt`` seconds in place.

    Energy, cognitive capacity and mood fall; hunger and social deficit rise.
    Stress, physical tension and body temperature never move autonomously.
    ``dt`` is capped at 60 s so a long pause cannot trigger a runaway correction,
    and non-positive ``dt`` changes nothing. The caller clamps afterwards.
    """
    dt = min(max(dt, 0.0), MAX_DECAY_DT)
    rate = config.multiplier * dt

    state.energy -= ENERGY_DECAY_RATE * rate
    state.hunger += HUNGER_DECAY_RATE * rate
    state.cognitive_capacity -= COGNITIVE_DECAY_RATE * rate
    state.mood -= MOOD_DECAY_RATE * rate
    state.social_deficit += SOCIAL_DECAY_RATE * rate
