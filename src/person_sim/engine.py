"""Single bio tick: decay, interactions, noise, clamp, thresholds, cascades, clamp."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List

import numpy as np

from .config import EngineConfig
from .decay import apply_decay
from .interactions import apply_interactions
from .noise import apply_noise
from .state import BioState, Delta, clamp_all
from .thresholds import ThresholdEvent, apply_threshold_cascades, evaluate_thresholds

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BioTickResult:
    """Observability output of one :meth:`BioEngine.tick`.

    Attributes:
        deltas: Interaction deltas in rule-table order.
        threshold_events: Events detected on the first-clamped state.
    """

    deltas: List[Delta] = field(default_factory=list)
    threshold_events: List[ThresholdEvent] = field(default_factory=list)


class BioEngine:
    """Runs the bio tick pipeline with an exclusively owned random generator.

    The generator is never shared with other engines; two engines built with the
    same seed and fed the same ``dt`` sequence produce identical trajectories.

    Attributes:
        config: Stage configuration.
        rng: Generator used for noise draws.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def tick(self, state: BioState, dt: float) -> BioTickResult:
        config = self.config

        apply_decay(state, config.decay, dt)
        deltas = apply_interactions(state, dt)
        apply_noise(state, self.rng, config.noise, dt)
        clamp_all(state)

        # Cascades are computed from the settled state and can push values out again.
        events = evaluate_thresholds(state, config.thresholds, dt)
        apply_threshold_cascades(state, events)
        clamp_all(state)

        state.updated_at = time.time()
        if events:
            logger.debug("bio tick dt=%.3f produced %d threshold event(s)", dt, len(events))
        return BioTickResult(deltas=deltas, threshold_events=events)
