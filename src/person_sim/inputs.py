"""Operator input collection and classification.

Lines follow three conventions: ``*text*`` is an action done to the person,
``~text`` describes the environment, anything else is speech. Submissions may
arrive while a tick is running; the queue is guarded by a lock held only for
the enqueue or the drain swap, so anything queued mid-tick shows up on the next
drain.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from .feedback import BioPulse, BioRate
from .motivation import Action
from .state import Field


class InputKind(str, Enum):
    SPEECH = "speech"
    ACTION = "action"
    ENVIRONMENT = "environment"


@dataclass(frozen=True)
class ParsedInput:
    kind: InputKind
    content: str


class InputParser(Protocol):
    def parse(self, raw: str) -> Optional[ParsedInput]: ...


class ConventionParser:
    """Classify one operator line; blank lines yield None."""

    def parse(self, raw: str) -> Optional[ParsedInput]:
        trimmed = raw.strip()
        if not trimmed:
            return None
        if trimmed.startswith("*") and trimmed.endswith("*") and len(trimmed) > 2:
            content = trimmed[1:-1].strip()
            if content:
                return ParsedInput(InputKind.ACTION, content)
        if trimmed.startswith("~"):
            return ParsedInput(InputKind.ENVIRONMENT, trimmed[1:].strip())
        return ParsedInput(InputKind.SPEECH, trimmed)


@dataclass
class TickInput:
    """Everything drained from the outside world for one tick."""

    pre_bio_rates: List[BioRate] = field(default_factory=list)
    pre_bio_pulses: List[BioPulse] = field(default_factory=list)
    allowed_actions: Dict[str, bool] = field(default_factory=dict)
    now_seconds: int = 0
    external_text: str = ""


def default_allowed_actions() -> Dict[str, bool]:
    return {action.value: True for action in Action}


def _contains_any(text: str, *patterns: str) -> bool:
    return any(pattern in text for pattern in patterns)


def apply_action_input(content: str, out: TickInput) -> None:
    lower = content.lower()

    if _contains_any(lower, "punch", "hit", "kick", "slap", "strike", "shove", "attack"):
        out.pre_bio_pulses.extend(
            [
                BioPulse(Field.STRESS, 0.20),
                BioPulse(Field.PHYSICAL_TENSION, 0.15),
                BioPulse(Field.MOOD, -0.08),
            ]
        )

    if _contains_any(lower, "hug", "comfort", "reassure", "support", "care"):
        out.pre_bio_pulses.extend(
            [
                BioPulse(Field.STRESS, -0.12),
                BioPulse(Field.PHYSICAL_TENSION, -0.08),
                BioPulse(Field.MOOD, 0.08),
            ]
        )

    if _contains_any(lower, "feed", "food", "meal", "snack"):
        out.pre_bio_pulses.append(BioPulse(Field.HUNGER, -0.20))
        out.allowed_actions[Action.EAT.value] = True


def apply_environment_input(content: str, out: TickInput) -> None:
    lower = content.lower()

    if _contains_any(lower, "cold", "freezing", "chilly", "frigid"):
        out.pre_bio_rates.append(BioRate(Field.BODY_TEMP, -0.03))
    if _contains_any(lower, "hot", "heat", "scorching", "sweltering"):
        out.pre_bio_rates.append(BioRate(Field.BODY_TEMP, 0.03))
    if _contains_any(lower, "loud", "crowd", "chaos", "sirens"):
        out.pre_bio_rates.append(BioRate(Field.STRESS, 0.03))
    if _contains_any(lower, "quiet", "calm", "safe", "peaceful"):
        out.pre_bio_rates.append(BioRate(Field.STRESS, -0.02))

    if _contains_any(lower, "no food", "without food", "food unavailable"):
        out.allowed_actions[Action.EAT.value] = False
    elif _contains_any(lower, "food available", "food is available", "has food", "meal nearby", "kitchen stocked"):
        out.allowed_actions[Action.EAT.value] = True

    if _contains_any(lower, "no water", "without water", "water unavailable"):
        out.allowed_actions[Action.HYDRATE.value] = False
    elif _contains_any(lower, "water available", "drinkable water"):
        out.allowed_actions[Action.HYDRATE.value] = True

    if _contains_any(lower, "no quiet space", "cannot rest", "rest impossible"):
        out.allowed_actions[Action.REST.value] = False
    elif _contains_any(lower, "quiet space available", "can rest", "safe resting place"):
        out.allowed_actions[Action.REST.value] = True


class InputAdapter:
    """Queues raw operator lines and drains them once per tick.

    Args:
        parser: Line classifier. Required.
        now_fn: Wall-clock source in whole seconds; defaults to ``time.time``.
    """

    def __init__(self, parser: InputParser | None, now_fn: Callable[[], int] | None = None) -> None:
        if parser is None:
            raise ValueError("InputAdapter requires a parser")
        self._parser = parser
        self._now_fn = now_fn or (lambda: int(time.time()))
        self._lock = threading.Lock()
        self._queue: List[str] = []

    def enqueue(self, raw: str) -> None:
        with self._lock:
            self._queue.append(raw)

    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    def drain(self) -> TickInput:
        with self._lock:
            raw_items, self._queue = self._queue, []

        out = TickInput(allowed_actions=default_allowed_actions(), now_seconds=self._now_fn())
        external: List[str] = []
        for raw in raw_items:
            parsed = self._parser.parse(raw)
            if parsed is None:
                continue
            external.append(raw.strip())
            if parsed.kind is InputKind.ACTION:
                apply_action_input(parsed.content, out)
            elif parsed.kind is InputKind.ENVIRONMENT:
                apply_environment_input(parsed.content, out)

        out.external_text = "\n".join(external)
        return out


class InputDrainer(Protocol):
    def drain(self) -> TickInput: ...


class ScenarioInjector:
    """Wraps a drainer and re-applies the active scenario's environment on every drain."""

    def __init__(self, base: InputDrainer | None) -> None:
        if base is None:
            raise ValueError("ScenarioInjector requires an input drainer")
        self._base = base
        self._lock = threading.Lock()
        self._scenarios: Dict[str, List[str]] = {}
        self._active = ""

    def register(self, name: str, descriptors: Sequence[str]) -> None:
        trimmed = name.strip()
        if not trimmed:
            raise ValueError("Scenario name must not be empty")
        clean = [d.strip() for d in descriptors if d.strip()]
        if not clean:
            raise ValueError(f"Scenario {trimmed!r} requires at least one descriptor")
        with self._lock:
            self._scenarios[trimmed] = clean

    def activate(self, name: str) -> bool:
        """Make ``name`` the active scenario; latest activation wins."""
        trimmed = name.strip()
        with self._lock:
            if trimmed not in self._scenarios:
                return False
            self._active = trimmed
            return True

    @property
    def active(self) -> str:
        with self._lock:
            return self._active

    def drain(self) -> TickInput:
        drained = self._base.drain()
        out = replace(
            drained,
            pre_bio_rates=list(drained.pre_bio_rates),
            pre_bio_pulses=list(drained.pre_bio_pulses),
            allowed_actions=dict(drained.allowed_actions),
        )

        with self._lock:
            active = self._active
            descriptors = list(self._scenarios.get(active, ()))
        if not active:
            return out

        for descriptor in descriptors:
            apply_environment_input(descriptor, out)

        scenario_text = f"@scenario {active}: " + "; ".join(descriptors)
        out.external_text = f"{out.external_text}\n{scenario_text}" if out.external_text else scenario_text
        return out
