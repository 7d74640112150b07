"""Unit tests for actions.py module."""

import pytest

from person_sim.actions import (
    ACTION_PULSES,
    ActionOutcome,
    action_pulses,
    emotional_pulses,
    resolve_action_outcome,
    resolve_action_with_cooldown,
)
from person_sim.config import DEFAULT_COOLDOWNS
from person_sim.mind import ParsedState
from person_sim.motivation import Action
from person_sim.state import Field


class TestResolveActionWithCooldown:
    """Test environment gating and cooldowns."""

    def test_allowed_action_starts_cooldown(self):
        outcome, state = resolve_action_with_cooldown("eat", True, 1000, DEFAULT_COOLDOWNS, {})
        assert outcome == ActionOutcome("eat", executed=True, satisfied=True)
        assert state == {"eat": 1120}

    def test_blocked_action_leaves_state(self):
        prior = {"rest": 500}
        outcome, state = resolve_action_with_cooldown("eat", False, 1000, DEFAULT_COOLDOWNS, prior)
        assert not outcome.satisfied
        assert not outcome.executed
        assert state == prior

    def test_cooling_down_action_unsatisfied(self):
        prior = {"eat": 1120}
        outcome, state = resolve_action_with_cooldown("eat", True, 1100, DEFAULT_COOLDOWNS, prior)
        assert not outcome.satisfied
        assert state == {"eat": 1120}

    def test_cooldown_expires(self):
        outcome, state = resolve_action_with_cooldown("eat", True, 1120, DEFAULT_COOLDOWNS, {"eat": 1120})
        assert outcome.satisfied
        assert state["eat"] == 1240

    def test_action_without_cooldown(self):
        outcome, state = resolve_action_with_cooldown("breathe", True, 10, DEFAULT_COOLDOWNS, {})
        assert outcome.satisfied
        assert state == {}

    def test_prior_state_not_mutated(self):
        prior = {}
        resolve_action_with_cooldown("rest", True, 10, DEFAULT_COOLDOWNS, prior)
        assert prior == {}

    def test_action_normalized(self):
        outcome, _ = resolve_action_with_cooldown("  EAT ", True, 0, {}, {})
        assert outcome.action == "eat"

    def test_environment_only_resolution(self):
        assert resolve_action_outcome("rest", False) == ActionOutcome("rest", False, False)


class TestPulses:
    """Test emotional and action pulses."""

    def test_emotional_pulses(self):
        pulses = {p.field: p.amount for p in emotional_pulses(ParsedState(arousal=1.0, valence=-1.0))}
        assert pulses[Field.STRESS] == pytest.approx(0.20)
        assert pulses[Field.MOOD] == pytest.approx(-0.21)
        assert pulses[Field.PHYSICAL_TENSION] == pytest.approx(0.10)
        assert pulses[Field.COGNITIVE_CAPACITY] == pytest.approx(-0.06)

    def test_emotional_inputs_clamped(self):
        wild = emotional_pulses(ParsedState(arousal=5.0, valence=-5.0))
        bounded = emotional_pulses(ParsedState(arousal=1.0, valence=-1.0))
        assert wild == bounded

    def test_every_action_has_pulses(self):
        assert set(ACTION_PULSES) == {action.value for action in Action}

    def test_satisfied_eat(self):
        pulses = action_pulses(ActionOutcome("eat", True, True))
        assert {p.field: p.amount for p in pulses}[Field.HUNGER] == pytest.approx(-0.30)

    def test_blocked_action_no_pulses(self):
        assert action_pulses(ActionOutcome("eat", False, False)) == []

    def test_unknown_action_no_pulses(self):
        assert action_pulses(ActionOutcome("dance", True, True)) == []
