"""Unit tests for mind.py module."""

import pytest

from person_sim.mind import (
    ASSOCIATIVE_DRIFT_TEXT,
    ContinuityBuffer,
    ParsedResponse,
    ParsedState,
    Thought,
    ThoughtCategory,
    apply_drive_overrides,
    build_prompt_context,
    effective_drive,
    felt_experience,
    parse_response,
    select_spontaneous_thought,
    strip_tags,
)
from person_sim.motivation import Drive, MotivationState


def create_prior():
    """Helper returning a trusted previous parse."""
    return ParsedResponse(
        state=ParsedState(arousal=0.2, valence=0.1),
        action="breathe",
        drive_overrides={Drive.SAFETY: 0.4},
        narrative="earlier",
    )


def create_motivation(**urgencies):
    defaults = dict(
        energy_urgency=0.1,
        social_urgency=0.2,
        stimulation_urgency=0.3,
        safety_urgency=0.6,
        identity_urgency=0.4,
        active_goal=Drive.SAFETY,
        active_goal_urgency=0.6,
    )
    defaults.update(urgencies)
    return MotivationState(**defaults)


class TestParseResponse:
    """Test tag parsing and wholesale fallback."""

    def test_full_response(self):
        raw = "[STATE: arousal=0.4, valence=-0.2]\n[ACTION: eat]\n[DRIVE: energy=0.7]\nI am starving."
        parsed = parse_response(raw, create_prior())
        assert parsed.state == ParsedState(0.4, -0.2)
        assert parsed.action == "eat"
        assert parsed.drive_overrides == {Drive.ENERGY: 0.7}
        assert parsed.narrative == "I am starving."
        assert not parsed.fell_back

    def test_absent_drive_tag_gives_empty_overrides(self):
        raw = "[STATE: arousal=0.1, valence=0.1]\n[ACTION: rest]"
        parsed = parse_response(raw, create_prior())
        assert parsed.action == "rest"
        assert parsed.drive_overrides == {}

    def test_missing_action_falls_back_wholesale(self):
        prior = create_prior()
        parsed = parse_response("[STATE: arousal=0.9, valence=-0.9] help", prior)
        assert parsed.fell_back
        assert parsed.state == prior.state
        assert parsed.action == prior.action
        assert parsed.drive_overrides == prior.drive_overrides
        assert parsed.narrative == "help"

    def test_missing_state_falls_back(self):
        parsed = parse_response("[ACTION: eat]", create_prior())
        assert parsed.action == "breathe"

    def test_malformed_drive_falls_back_wholesale(self):
        raw = "[STATE: arousal=0.4, valence=0.4]\n[ACTION: eat]\n[DRIVE: energy=high]"
        parsed = parse_response(raw, create_prior())
        assert parsed.fell_back
        assert parsed.action == "breathe"
        assert parsed.state == ParsedState(0.2, 0.1)

    def test_unknown_drive_falls_back(self):
        raw = "[STATE: arousal=0.4, valence=0.4]\n[ACTION: eat]\n[DRIVE: hunger=0.5]"
        assert parse_response(raw, create_prior()).fell_back

    def test_case_insensitive_tags(self):
        raw = "[state: arousal=0.1, valence=0.2]\n[action: Reach_Out]"
        assert parse_response(raw, ParsedResponse()).action == "reach_out"

    def test_strip_tags(self):
        assert strip_tags("[STATE: arousal=1, valence=1]\n\n  hello  \n[ACTION: eat]\nworld") == "hello\nworld"


class TestDriveOverrides:
    """Test perceived drive overrides."""

    def test_override_floor_is_half_raw(self):
        assert effective_drive(0.8, 0.1) == pytest.approx(0.4)
        assert effective_drive(0.8, 0.9) == pytest.approx(0.9)
        assert effective_drive(0.8, None) == pytest.approx(0.8)

    def test_override_can_change_goal(self):
        raw = create_motivation()
        perceived = apply_drive_overrides(raw, {Drive.SOCIAL_CONNECTION: 0.95})
        assert perceived.active_goal is Drive.SOCIAL_CONNECTION
        assert perceived.safety_urgency == pytest.approx(0.6)


class TestPromptContext:
    """Test prompt context assembly."""

    def test_primary_and_background(self):
        context = build_prompt_context(create_motivation())
        assert [p.drive for p in context.primary] == [Drive.SAFETY, Drive.IDENTITY_COHERENCE]
        assert len(context.background) == 3
        assert "safety" in context.goal_pull

    def test_felt_language_has_no_numbers(self):
        context = build_prompt_context(create_motivation())
        rendered = context.render()
        assert not any(ch.isdigit() for ch in rendered)

    def test_felt_levels(self):
        assert felt_experience(Drive.SAFETY, 0.1) != felt_experience(Drive.SAFETY, 0.9)
        assert felt_experience(Drive.SAFETY, 0.9).startswith("an urgent")

    def test_continuity_lines(self):
        context = build_prompt_context(create_motivation(), [Thought("one"), Thought("  "), Thought("two")])
        assert context.continuity == ("one", "two")
        assert "Recent thoughts:" in context.render()


class TestContinuityBuffer:
    """Test the bounded narrative log."""

    def test_drops_oldest(self):
        buffer = ContinuityBuffer(2)
        for text in ("a", "b", "c"):
            buffer.add(Thought(text))
        assert [t.text for t in buffer.items()] == ["b", "c"]

    def test_zero_capacity_keeps_nothing(self):
        buffer = ContinuityBuffer(0)
        buffer.add(Thought("a"))
        assert len(buffer) == 0


class TestSpontaneousThought:
    """Test scheduled thought selection."""

    def test_off_schedule(self):
        assert select_spontaneous_thought(create_motivation(), 10, 9) is None
        assert select_spontaneous_thought(create_motivation(), 0, 10) is None

    def test_drive_thought(self):
        thought = select_spontaneous_thought(create_motivation(), 10, 20)
        assert thought.category is ThoughtCategory.DRIVE
        assert thought.drive is Drive.SAFETY

    def test_associative_drift_when_calm(self):
        calm = MotivationState()
        thought = select_spontaneous_thought(calm, 5, 5)
        assert thought.category is ThoughtCategory.ASSOCIATIVE_DRIFT
        assert thought.text == ASSOCIATIVE_DRIFT_TEXT
