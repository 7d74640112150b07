"""Unit tests for inputs.py module."""

import threading

import pytest

from person_sim.feedback import BioPulse, BioRate
from person_sim.inputs import (
    ConventionParser,
    InputAdapter,
    InputKind,
    ScenarioInjector,
    TickInput,
)
from person_sim.state import Field


def create_adapter(now=100):
    """Helper building an adapter with a fixed clock."""
    return InputAdapter(ConventionParser(), now_fn=lambda: now)


class StaticDrainer:
    def __init__(self, tick_input):
        self.tick_input = tick_input

    def drain(self):
        return self.tick_input


class TestConventionParser:
    """Test line classification."""

    def test_action(self):
        parsed = ConventionParser().parse("  *offers a snack*  ")
        assert parsed.kind is InputKind.ACTION
        assert parsed.content == "offers a snack"

    def test_environment(self):
        parsed = ConventionParser().parse("~a cold wind")
        assert parsed.kind is InputKind.ENVIRONMENT
        assert parsed.content == "a cold wind"

    def test_speech(self):
        assert ConventionParser().parse("hello there").kind is InputKind.SPEECH

    def test_blank(self):
        assert ConventionParser().parse("   ") is None

    def test_bare_asterisks_are_speech(self):
        assert ConventionParser().parse("**").kind is InputKind.SPEECH


class TestInputAdapter:
    """Test queue draining and keyword heuristics."""

    def test_requires_parser(self):
        with pytest.raises(ValueError):
            InputAdapter(None)

    def test_empty_drain(self):
        drained = create_adapter(now=42).drain()
        assert drained.pre_bio_rates == []
        assert drained.pre_bio_pulses == []
        assert drained.now_seconds == 42
        assert drained.external_text == ""
        assert len(drained.allowed_actions) == 10
        assert all(drained.allowed_actions.values())

    def test_hit_pulses(self):
        adapter = create_adapter()
        adapter.enqueue("*punches the wall*")
        drained = adapter.drain()
        assert BioPulse(Field.STRESS, 0.20) in drained.pre_bio_pulses
        assert drained.external_text == "*punches the wall*"

    def test_environment_rates_and_gating(self):
        adapter = create_adapter()
        adapter.enqueue("~freezing and loud, no food anywhere")
        drained = adapter.drain()
        assert BioRate(Field.BODY_TEMP, -0.03) in drained.pre_bio_rates
        assert BioRate(Field.STRESS, 0.03) in drained.pre_bio_rates
        assert drained.allowed_actions["eat"] is False

    def test_speech_has_no_bio_effect(self):
        adapter = create_adapter()
        adapter.enqueue("how are you")
        drained = adapter.drain()
        assert drained.pre_bio_pulses == []
        assert drained.pre_bio_rates == []
        assert drained.external_text == "how are you"

    def test_drain_clears_queue(self):
        adapter = create_adapter()
        adapter.enqueue("~quiet room")
        assert adapter.pending() == 1
        adapter.drain()
        assert adapter.pending() == 0
        assert adapter.drain().pre_bio_rates == []

    def test_concurrent_enqueue(self):
        adapter = create_adapter()
        threads = [threading.Thread(target=lambda: [adapter.enqueue("hi") for _ in range(50)]) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert adapter.pending() == 200
        assert len(adapter.drain().external_text.split("\n")) == 200


class TestScenarioInjector:
    """Test persistent scenarios."""

    def test_requires_base(self):
        with pytest.raises(ValueError):
            ScenarioInjector(None)

    def test_register_validation(self):
        injector = ScenarioInjector(create_adapter())
        with pytest.raises(ValueError):
            injector.register("  ", ["cold"])
        with pytest.raises(ValueError):
            injector.register("winter", ["  "])

    def test_inactive_passes_through(self):
        injector = ScenarioInjector(create_adapter())
        injector.register("winter", ["cold"])
        drained = injector.drain()
        assert drained.pre_bio_rates == []
        assert drained.external_text == ""

    def test_activate_unknown(self):
        assert ScenarioInjector(create_adapter()).activate("nope") is False

    def test_active_scenario_applies_every_drain(self):
        injector = ScenarioInjector(create_adapter())
        injector.register("winter", ["freezing cold", "no food"])
        assert injector.activate("winter")
        for _ in range(2):
            drained = injector.drain()
            assert BioRate(Field.BODY_TEMP, -0.03) in drained.pre_bio_rates
            assert drained.allowed_actions["eat"] is False
            assert drained.external_text == "@scenario winter: freezing cold; no food"

    def test_latest_activation_wins(self):
        injector = ScenarioInjector(create_adapter())
        injector.register("winter", ["cold"])
        injector.register("summer", ["hot"])
        injector.activate("winter")
        injector.activate("summer")
        assert injector.active == "summer"
        assert injector.drain().pre_bio_rates == [BioRate(Field.BODY_TEMP, 0.03)]

    def test_appends_to_external_text(self):
        adapter = create_adapter()
        adapter.enqueue("hello")
        injector = ScenarioInjector(adapter)
        injector.register("calm", ["quiet"])
        injector.activate("calm")
        assert injector.drain().external_text == "hello\n@scenario calm: quiet"

    def test_empty_allow_table_stays_empty(self):
        injector = ScenarioInjector(StaticDrainer(TickInput(allowed_actions={})))
        injector.register("calm", ["quiet"])
        assert injector.drain().allowed_actions == {}
        injector.activate("calm")
        assert injector.drain().allowed_actions.get("eat", False) is False

    def test_does_not_mutate_base_allow_table(self):
        base_input = TickInput(allowed_actions={"eat": True})
        injector = ScenarioInjector(StaticDrainer(base_input))
        injector.register("famine", ["no food"])
        injector.activate("famine")
        assert injector.drain().allowed_actions["eat"] is False
        assert base_input.allowed_actions["eat"] is True
