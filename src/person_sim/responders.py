"""Offline mind responders.

:class:`ScriptedMind` answers without any language model: it reads the drive
snapshot and the allow table, picks the first candidate action for the active
goal and reports a state derived from the drives. Runs are reproducible, which
makes it the default responder for sessions and tests.
"""

from __future__ import annotations

from typing import List

from .loop import MindRequest
from .motivation import Action, ActionConstraints, Drive, action_candidates_for
from .state import BODY_TEMP_BASELINE, clamp

# Deviation from baseline (degrees) before temperature regulation overrides the goal.
THERMAL_ACTION_DEVIATION = 1.5


def constraints_from_allowed(allowed: dict) -> ActionConstraints:
    return ActionConstraints(
        has_food=allowed.get(Action.EAT.value, False),
        has_people_nearby=allowed.get(Action.REACH_OUT.value, False),
        can_rest=allowed.get(Action.REST.value, False),
        can_explore=allowed.get(Action.SCAN_AREA.value, False),
        has_quiet_space=allowed.get(Action.REST.value, False),
    )


class ScriptedMind:
    """Deterministic responder emitting ``STATE``/``ACTION`` tags and a short narrative."""

    def __init__(self) -> None:
        self.calls = 0

    def choose_action(self, request: MindRequest) -> Action:
        deviation = request.bio.body_temp - BODY_TEMP_BASELINE
        if request.motivation.active_goal is Drive.SAFETY and abs(deviation) >= THERMAL_ACTION_DEVIATION:
            return Action.SEEK_WARMTH if deviation < 0 else Action.SEEK_COOLING

        constraints = constraints_from_allowed(request.input.allowed_actions)
        candidates = action_candidates_for(request.motivation.active_goal, constraints)
        return candidates[0] if candidates else Action.BREATHE

    def respond(self, request: MindRequest) -> str:
        self.calls += 1
        motivation = request.motivation
        arousal = clamp(2.0 * motivation.safety_urgency - 0.5, -1.0, 1.0)
        valence = clamp(0.5 - motivation.active_goal_urgency, -1.0, 1.0)
        action = self.choose_action(request)

        lines: List[str] = [
            f"[STATE: arousal={arousal:.2f}, valence={valence:.2f}]",
            f"[ACTION: {action.value}]",
        ]
        if request.prompt.goal_pull:
            lines.append(request.prompt.goal_pull)
        return "\n".join(lines)
