"""Unit tests for state.py module."""

import pytest

from person_sim.state import (
    BODY_TEMP_BASELINE,
    RANGES,
    BioState,
    Delta,
    Field,
    apply_delta,
    clamp,
    clamp_all,
)


def create_wild_state():
    """Helper returning a state with every variable outside its range."""
    return BioState(
        energy=1.7,
        stress=-0.4,
        cognitive_capacity=2.0,
        mood=-1.0,
        physical_tension=9.0,
        hunger=-0.2,
        social_deficit=1.01,
        body_temp=50.0,
    )


class TestBioStateDefaults:
    """Test baseline values and ranges."""

    def test_baseline_values(self):
        state = BioState()
        assert state.energy == 0.80
        assert state.stress == 0.10
        assert state.cognitive_capacity == 1.00
        assert state.mood == 0.50
        assert state.physical_tension == 0.05
        assert state.hunger == 0.10
        assert state.social_deficit == 0.00
        assert state.body_temp == BODY_TEMP_BASELINE

    def test_baseline_in_range(self):
        assert BioState().in_range()

    def test_ranges_cover_every_field(self):
        assert set(RANGES) == set(Field)
        assert RANGES[Field.BODY_TEMP].min == 25.0
        assert RANGES[Field.BODY_TEMP].max == 43.0
        for var in Field:
            if var is not Field.BODY_TEMP:
                assert RANGES[var].min == 0.0
                assert RANGES[var].max == 1.0


class TestFieldAccess:
    """Test the closed field mapping."""

    def test_get_matches_attributes(self):
        state = BioState()
        for var in Field:
            assert state.get(var) == getattr(state, var.value)

    def test_apply_delta_targets_single_field(self):
        state = BioState()
        before = state.values()
        apply_delta(state, Delta(Field.HUNGER, 0.25))
        after = state.values()
        assert after["hunger"] == pytest.approx(0.35)
        for name in before:
            if name != "hunger":
                assert after[name] == before[name]

    def test_apply_delta_does_not_clamp(self):
        state = BioState(energy=0.9)
        apply_delta(state, Delta(Field.ENERGY, 0.5))
        assert state.energy == pytest.approx(1.4)

    def test_copy_is_independent(self):
        state = BioState()
        snapshot = state.copy()
        state.stress = 0.9
        assert snapshot.stress == 0.10

    def test_values_excludes_timestamp(self):
        values = BioState().values()
        assert list(values) == [var.value for var in Field]


class TestClamp:
    """Test clamp primitives."""

    def test_clamp_scalar(self):
        assert clamp(-1.0, 0.0, 1.0) == 0.0
        assert clamp(2.0, 0.0, 1.0) == 1.0
        assert clamp(0.3, 0.0, 1.0) == 0.3

    def test_clamp_all_brings_every_field_in_range(self):
        state = create_wild_state()
        clamp_all(state)
        assert state.in_range()
        assert state.energy == 1.0
        assert state.stress == 0.0
        assert state.body_temp == 43.0

    def test_clamp_all_is_idempotent(self):
        state = create_wild_state()
        clamp_all(state)
        once = state.values()
        clamp_all(state)
        assert state.values() == once

    def test_clamp_maps_nan_to_minimum(self):
        assert clamp(float("nan"), 0.0, 1.0) == 0.0

    def test_clamp_all_handles_nan(self):
        state = BioState(mood=float("nan"), body_temp=float("nan"))
        clamp_all(state)
        assert state.in_range()
        assert state.mood == 0.0
        assert state.body_temp == 25.0

    def test_clamp_all_leaves_valid_state_unchanged(self):
        state = BioState(stress=0.42, body_temp=37.1)
        before = state.values()
        clamp_all(state)
        assert state.values() == before
