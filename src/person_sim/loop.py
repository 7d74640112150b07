"""Full tick orchestration: input, biology, motivation, mind, action, feedback.

Phases run strictly in sequence and none re-enters within a tick:

1. Drain pending external input.
2. Commit pre-bio effects (ambient conditions at tick start), if any.
3. Run the bio engine tick.
4. Compute the drive snapshot.
5. Build the prompt context (with continuity).
6. Call the mind responder exactly once.
7. Parse the response, falling back wholesale to the prior parse.
8. Resolve the requested action against the allow table and cooldowns.
9. Commit emotional and action pulses through a fresh feedback buffer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Protocol

from .actions import ActionOutcome, action_pulses, emotional_pulses, resolve_action_with_cooldown
from .config import DEFAULT_COOLDOWNS
from .engine import BioTickResult
from .feedback import FeedbackBuffer, FeedbackEnvelope, apply_feedback
from .inputs import InputDrainer, TickInput
from .mind import (
    ContinuityBuffer,
    ParsedResponse,
    PromptContext,
    Thought,
    build_prompt_context,
    parse_response,
    perceived_motivation,
    select_spontaneous_thought,
)
from .motivation import ChronicState, MotivationState, Personality
from .state import BioState

logger = logging.getLogger(__name__)


class BioTicker(Protocol):
    def tick(self, state: BioState, dt: float) -> BioTickResult: ...


class DriveComputer(Protocol):
    def compute(self, bio: BioState, personality: Personality, chronic: ChronicState) -> MotivationState: ...


@dataclass(frozen=True)
class MindRequest:
    """Everything the mind responder sees for one tick. ``bio`` is a copy."""

    bio: BioState
    motivation: MotivationState
    prompt: PromptContext
    input: TickInput
    prior_parsed: ParsedResponse


class MindResponder(Protocol):
    def respond(self, request: MindRequest) -> str: ...


@dataclass
class SimulationState:
    """State carried from one tick to the next; owned by a single session."""

    bio: BioState = field(default_factory=BioState)
    personality: Personality = field(default_factory=Personality)
    chronic: ChronicState = field(default_factory=ChronicState)
    prior_parsed: ParsedResponse = field(default_factory=ParsedResponse)
    cooldown_state: Dict[str, int] = field(default_factory=dict)
    continuity: Optional[ContinuityBuffer] = None
    tick_count: int = 0


@dataclass(slots=True)
class LoopTickResult:
    input: TickInput
    bio: BioTickResult
    motivation: MotivationState
    perceived: MotivationState
    prompt: PromptContext
    raw: str
    parsed: ParsedResponse
    action_outcome: ActionOutcome
    thought: Optional[Thought] = None


class SimulationLoop:
    """Wires the collaborators into one sequential tick.

    Args:
        input: Drains external input once per tick.
        biology: Advances bio state (normally a :class:`~person_sim.engine.BioEngine`).
        motivation: Computes drives from bio, personality and chronic pressure.
        mind: Returns one raw text response per tick.
        cooldowns: Per-action cooldown seconds; defaults to :data:`DEFAULT_COOLDOWNS`.
        thought_every_ticks: Spontaneous thought schedule fed into continuity (0 disables).

    Raises:
        ValueError: If any collaborator is missing.
    """

    def __init__(
        self,
        input: InputDrainer | None,
        biology: BioTicker | None,
        motivation: DriveComputer | None,
        mind: MindResponder | None,
        cooldowns: Mapping[str, int] | None = None,
        thought_every_ticks: int = 0,
    ) -> None:
        for name, collaborator in (
            ("input drainer", input),
            ("bio engine", biology),
            ("motivation computer", motivation),
            ("mind responder", mind),
        ):
            if collaborator is None:
                raise ValueError(f"SimulationLoop requires a {name}")
        self.input = input
        self.biology = biology
        self.motivation = motivation
        self.mind = mind
        self.cooldowns = dict(DEFAULT_COOLDOWNS if cooldowns is None else cooldowns)
        self.thought_every_ticks = thought_every_ticks

    def tick(self, state: SimulationState | None, dt: float) -> LoopTickResult:
        if state is None:
            raise ValueError("SimulationLoop.tick requires a simulation state")
        state.tick_count += 1

        tick_input = self.input.drain()

        pre_bio = FeedbackEnvelope(rates=list(tick_input.pre_bio_rates), pulses=list(tick_input.pre_bio_pulses))
        if not pre_bio.is_empty():
            apply_feedback(state.bio, dt, pre_bio)

        bio_result = self.biology.tick(state.bio, dt)
        motivation = self.motivation.compute(state.bio, state.personality, state.chronic)

        thought = select_spontaneous_thought(motivation, self.thought_every_ticks, state.tick_count)
        if thought is not None and state.continuity is not None:
            state.continuity.add(thought)

        continuity = state.continuity.items() if state.continuity is not None else ()
        prompt = build_prompt_context(motivation, continuity)

        raw = self.mind.respond(
            MindRequest(
                bio=state.bio.copy(),
                motivation=motivation,
                prompt=prompt,
                input=tick_input,
                prior_parsed=state.prior_parsed,
            )
        )

        parsed = parse_response(raw, state.prior_parsed)
        if parsed.fell_back:
            logger.debug("tick %d: mind response fell back to prior parse", state.tick_count)
        perceived = perceived_motivation(motivation, parsed)

        allowed = tick_input.allowed_actions.get(parsed.action, False)
        outcome, next_cooldowns = resolve_action_with_cooldown(
            parsed.action,
            allowed,
            tick_input.now_seconds,
            self.cooldowns,
            state.cooldown_state,
        )

        feedback = FeedbackBuffer()
        feedback.add_pulses(emotional_pulses(parsed.state))
        feedback.add_pulses(action_pulses(outcome))
        feedback.commit_at_tick_end(state.bio, dt)

        state.prior_parsed = parsed
        state.cooldown_state = next_cooldowns
        if state.continuity is not None and parsed.narrative:
            state.continuity.add(Thought(text=parsed.narrative))

        return LoopTickResult(
            input=tick_input,
            bio=bio_result,
            motivation=motivation,
            perceived=perceived,
            prompt=prompt,
            raw=raw,
            parsed=parsed,
            action_outcome=outcome,
            thought=thought,
        )
