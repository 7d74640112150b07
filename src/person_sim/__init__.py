"""Synthetic person simulation package.

A synthetic person is driven by a continuously drifting biological state. Each
tick the state decays, picks up noise, runs its interaction rules against a
snapshot, and checks threshold ladders whose crossings cascade into other
variables. Drives are derived from the settled state, a mind responder reacts
to them, and the emotional and action effects of that reaction are committed
back to the body at the end of the tick.

Main Components:
    - BioState: The eight bounded bio variables
    - BioEngine: One bio tick (decay, interactions, noise, thresholds)
    - FeedbackBuffer: Deferred commit of external rates and pulses
    - compute_motivation: Drive urgencies and the active goal
    - SimulationLoop: Full tick orchestration with input, mind and actions
    - run_session: Run N ticks and record the trajectory

Quick Start:
    >>> from person_sim import BioEngine, BioState, EngineConfig, DecayConfig
    >>>
    >>> engine = BioEngine(EngineConfig(decay=DecayConfig(multiplier=1.0)), seed=7)
    >>> state = BioState()
    >>> for _ in range(600):
    ...     result = engine.tick(state, 1.0)
    >>> state.in_range()
    True
"""

from .analysis import SessionArtifacts, run_session
from .config import DecayConfig, EngineConfig, NoiseConfig, SimulationConfig, ThresholdConfig
from .engine import BioEngine, BioTickResult
from .feedback import BioPulse, BioRate, FeedbackBuffer
from .loop import SimulationLoop, SimulationState
from .motivation import compute_motivation
from .state import BioState, Delta, Field, clamp_all

__all__ = [
    "BioState",
    "Delta",
    "Field",
    "clamp_all",
    "BioEngine",
    "BioTickResult",
    "BioPulse",
    "BioRate",
    "FeedbackBuffer",
    "DecayConfig",
    "EngineConfig",
    "NoiseConfig",
    "SimulationConfig",
    "ThresholdConfig",
    "compute_motivation",
    "SimulationLoop",
    "SimulationState",
    "SessionArtifacts",
    "run_session",
]
