"""Brownian-consistent Gaussian jitter for the bio state."""

from __future__ import annotations

import math

import numpy as np

from .config import NoiseConfig
from .state import BioState

BODY_TEMP_NOISE_SCALE = 0.1


def apply_noise(state: BioState, rng: np.random.Generator, config: NoiseConfig, dt: float) -> None:
    """Add one standard-normal sample per variable, scaled by ``sigma * sqrt(dt)``.

    Scaling with ``sqrt(dt)`` keeps accumulated variance over a wall-clock span
    independent of tick size. Body temperature spans ~18 degrees rather than a unit
    interval, so it receives a tenth of the sigma. Does not clamp; no-op for
    ``dt <= 0`` (no samples are drawn, so the generator does not advance).
    """
    if dt <= 0:
        return

    sigma = config.sigma * math.sqrt(dt)
    samples = rng.standard_normal(8)

    state.energy += float(samples[0]) * sigma
    state.stress += float(samples[1]) * sigma
    state.cognitive_capacity += float(samples[2]) * sigma
    state.mood += float(samples[3]) * sigma
    state.physical_tension += float(samples[4]) * sigma
    state.hunger += float(samples[5]) * sigma
    state.social_deficit += float(samples[6]) * sigma
    state.body_temp += float(samples[7]) * sigma * BODY_TEMP_NOISE_SCALE
