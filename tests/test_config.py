"""Unit tests for config.py module."""

import pytest

from person_sim.config import (
    DEFAULT_COOLDOWNS,
    EngineConfig,
    SimulationConfig,
    ThresholdConfig,
    get_verbosity,
)


class TestSimulationConfig:
    """Test session configuration validation."""

    def test_defaults(self):
        config = SimulationConfig()
        assert config.tick_seconds == 1.0
        assert config.cooldowns == {"eat": 120, "rest": 60, "reach_out": 90}
        assert config.continuity_capacity == 5
        assert config.drive_change_threshold == 0.15
        assert config.engine == EngineConfig.default()

    def test_cooldowns_not_shared(self):
        assert SimulationConfig().cooldowns is not DEFAULT_COOLDOWNS

    def test_negative_cooldown_rejected(self):
        with pytest.raises(ValueError, match="rest"):
            SimulationConfig(cooldowns={"rest": -5})

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError):
            SimulationConfig(continuity_capacity=-1)

    def test_negative_tick_rejected(self):
        with pytest.raises(ValueError):
            SimulationConfig(tick_seconds=-0.5)

    def test_reserved_flags_default_off(self):
        config = EngineConfig()
        assert config.decay.homeostasis_enabled is False
        assert ThresholdConfig().terminal_states_enabled is False


class TestVerbosity:
    """Test environment verbosity."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("PERSON_VERBOSITY", raising=False)
        assert get_verbosity() == 1

    def test_override(self, monkeypatch):
        monkeypatch.setenv("PERSON_VERBOSITY", "2")
        assert get_verbosity() == 2
