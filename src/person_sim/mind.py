"""Mind-layer helpers: response parsing, perceived drives, prompt context.

The mind responder answers in free text carrying three kinds of tags::

    [STATE: arousal=0.4, valence=-0.2]
    [ACTION: eat]
    [DRIVE: energy=0.7]

``STATE`` and ``ACTION`` are required; ``DRIVE`` is optional and may repeat.
A response missing a required tag, or carrying a malformed ``DRIVE`` tag, is
discarded wholesale in favour of the previous trusted parse. The narrative is
always the response text with the tags removed.
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Deque, Dict, List, Mapping, Optional, Sequence, Tuple

from .motivation import Drive, MotivationState, clamp01, rank_drives

_STATE_TAG = re.compile(r"\[STATE:\s*arousal=([-\d.]+),\s*valence=([-\d.]+)\]", re.IGNORECASE)
_ACTION_TAG = re.compile(r"\[ACTION:\s*([a-z_]+)\s*\]", re.IGNORECASE)
_DRIVE_TAG = re.compile(r"\[DRIVE:\s*([a-z_]+)\s*=\s*([-\d.]+)\s*\]", re.IGNORECASE)
_DRIVE_TAG_LOOSE = re.compile(r"\[DRIVE:[^\]]*\]", re.IGNORECASE)
_ANY_TAG = re.compile(r"\[(STATE|ACTION|DRIVE):[^\]]*\]", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedState:
    arousal: float = 0.0
    valence: float = 0.0


@dataclass(frozen=True)
class ParsedResponse:
    state: ParsedState = field(default_factory=ParsedState)
    action: str = ""
    drive_overrides: Mapping[Drive, float] = field(default_factory=dict)
    narrative: str = ""
    fell_back: bool = False


def strip_tags(raw: str) -> str:
    clean = _ANY_TAG.sub("", raw)
    lines = [line.strip() for line in clean.split("\n")]
    return "\n".join(line for line in lines if line).strip()


def _parse_state(raw: str) -> Optional[ParsedState]:
    match = _STATE_TAG.search(raw)
    if match is None:
        return None
    try:
        return ParsedState(arousal=float(match.group(1)), valence=float(match.group(2)))
    except ValueError:
        return None


def _parse_action(raw: str) -> Optional[str]:
    match = _ACTION_TAG.search(raw)
    if match is None:
        return None
    return match.group(1).lower()


def _parse_drive_overrides(raw: str) -> Optional[Dict[Drive, float]]:
    """Return the overrides, ``{}`` when no DRIVE tag is present, or None if any tag is malformed."""
    loose = _DRIVE_TAG_LOOSE.findall(raw)
    if not loose:
        return {}
    strict = _DRIVE_TAG.findall(raw)
    if len(strict) != len(loose):
        return None

    overrides: Dict[Drive, float] = {}
    for name, value in strict:
        try:
            drive = Drive(name.lower())
            overrides[drive] = clamp01(float(value))
        except ValueError:
            return None
    return overrides


def parse_response(raw: str, prior: ParsedResponse) -> ParsedResponse:
    """Parse ``raw`` into state/action/overrides, falling back to ``prior`` wholesale."""
    fallback = ParsedResponse(
        state=prior.state,
        action=prior.action,
        drive_overrides=dict(prior.drive_overrides),
        narrative=strip_tags(raw),
        fell_back=True,
    )

    state = _parse_state(raw)
    action = _parse_action(raw)
    if state is None or action is None:
        return fallback

    overrides = _parse_drive_overrides(raw)
    if overrides is None:
        return fallback

    return ParsedResponse(state=state, action=action, drive_overrides=overrides, narrative=fallback.narrative)


def effective_drive(raw: float, override: Optional[float]) -> float:
    """Perceived urgency: the reported value, but never below half the computed one."""
    raw_clamped = clamp01(raw)
    if override is None:
        return raw_clamped
    return max(clamp01(override), raw_clamped * 0.5)


def apply_drive_overrides(raw: MotivationState, overrides: Mapping[Drive, float]) -> MotivationState:
    perceived = {drive: effective_drive(raw.urgency(drive), overrides.get(drive)) for drive in Drive}
    goal, goal_urgency = rank_drives(perceived)[0]
    return replace(
        raw,
        energy_urgency=perceived[Drive.ENERGY],
        social_urgency=perceived[Drive.SOCIAL_CONNECTION],
        stimulation_urgency=perceived[Drive.STIMULATION],
        safety_urgency=perceived[Drive.SAFETY],
        identity_urgency=perceived[Drive.IDENTITY_COHERENCE],
        active_goal=goal,
        active_goal_urgency=goal_urgency,
    )


def perceived_motivation(raw: MotivationState, parsed: ParsedResponse) -> MotivationState:
    """Drive state as the mind reported it, used as perception for the next tick."""
    return apply_drive_overrides(raw, parsed.drive_overrides)


class ThoughtCategory(str, Enum):
    DRIVE = "drive"
    ASSOCIATIVE_DRIFT = "associative_drift"


@dataclass(frozen=True)
class Thought:
    text: str
    category: ThoughtCategory = ThoughtCategory.DRIVE
    drive: Optional[Drive] = None


class ContinuityBuffer:
    """Bounded log of recent narrative thoughts; oldest entries drop first."""

    def __init__(self, capacity: int) -> None:
        self.capacity = max(capacity, 0)
        self._thoughts: Deque[Thought] = deque(maxlen=self.capacity)

    def add(self, thought: Thought) -> None:
        if self.capacity == 0:
            return
        self._thoughts.append(thought)

    def items(self) -> List[Thought]:
        return list(self._thoughts)

    def __len__(self) -> int:
        return len(self._thoughts)


_FELT = {
    Drive.ENERGY: (
        "a faint pull toward rest and nourishment lingers in the background.",
        "a noticeable fatigue-and-hunger pull is starting to build.",
        "an insistent need for rest and nourishment is pressing into attention.",
        "an urgent depletion is dominating attention and demanding recovery now.",
    ),
    Drive.SOCIAL_CONNECTION: (
        "a light sense of distance from others is present.",
        "a growing wish for contact and response is becoming noticeable.",
        "an insistent loneliness is pressing for connection.",
        "an urgent need to reach someone is dominating focus.",
    ),
    Drive.STIMULATION: (
        "a mild restlessness for novelty hums in the background.",
        "a noticeable urge for engagement and novelty is rising.",
        "an insistent need for stimulation is pushing for action.",
        "an urgent craving for meaningful engagement is taking over attention.",
    ),
    Drive.SAFETY: (
        "a faint vigilance remains in the background.",
        "a noticeable need to check for safety is surfacing.",
        "an insistent threat-sensitivity is narrowing attention.",
        "an urgent need to secure safety is dominating attention.",
    ),
    Drive.IDENTITY_COHERENCE: (
        "a light pull to make sense of experience is present.",
        "a noticeable tension about self-coherence is forming.",
        "an insistent need to regain internal coherence is pressing.",
        "an urgent need to stabilize meaning and identity is overwhelming focus.",
    ),
}

_GOAL_PULL = {
    Drive.ENERGY: "A pull toward food, water, and recovery keeps surfacing.",
    Drive.SOCIAL_CONNECTION: "A pull toward contact and response keeps surfacing.",
    Drive.STIMULATION: "A pull toward something engaging and novel keeps surfacing.",
    Drive.SAFETY: "A pull toward checking safety and reducing threat keeps surfacing.",
    Drive.IDENTITY_COHERENCE: "A pull toward making sense of experience keeps surfacing.",
}

_DRIVE_THOUGHT = {
    Drive.ENERGY: "Food and recovery keep intruding into thought.",
    Drive.SOCIAL_CONNECTION: "The need for contact keeps returning to mind.",
    Drive.STIMULATION: "A search for novelty keeps tugging at attention.",
    Drive.SAFETY: "Threat-checking keeps cycling through awareness.",
    Drive.IDENTITY_COHERENCE: "A need to make sense of self keeps pressing forward.",
}

ASSOCIATIVE_DRIFT_TEXT = "A loose associative thread drifts into awareness."


def urgency_level(value: float) -> int:
    if value >= 0.75:
        return 3
    if value >= 0.50:
        return 2
    if value >= 0.25:
        return 1
    return 0


def felt_experience(drive: Drive, urgency: float) -> str:
    """Describe a drive in felt language; never exposes the raw number."""
    return _FELT[drive][urgency_level(clamp01(urgency))]


@dataclass(frozen=True)
class PromptDrive:
    drive: Drive
    felt: str


@dataclass(frozen=True)
class PromptContext:
    primary: Tuple[PromptDrive, ...] = ()
    background: Tuple[PromptDrive, ...] = ()
    goal_pull: str = ""
    continuity: Tuple[str, ...] = ()

    def render(self) -> str:
        lines = ["Foreground:"]
        lines.extend(f"- {item.felt}" for item in self.primary)
        lines.append("Background:")
        lines.extend(f"- {item.felt}" for item in self.background)
        lines.append(self.goal_pull)
        if self.continuity:
            lines.append("Recent thoughts:")
            lines.extend(f"- {text}" for text in self.continuity)
        return "\n".join(lines)


def build_prompt_context(
    motivation: MotivationState,
    continuity: Sequence[Thought] = (),
    primary_count: int = 2,
) -> PromptContext:
    """Top ``primary_count`` drives go to the foreground, the rest to the background."""
    ordered = rank_drives(motivation.urgencies())
    primary = tuple(PromptDrive(d, felt_experience(d, u)) for d, u in ordered[:primary_count])
    background = tuple(PromptDrive(d, felt_experience(d, u)) for d, u in ordered[primary_count:])
    lines = tuple(text for text in (t.text.strip() for t in continuity) if text)
    return PromptContext(
        primary=primary,
        background=background,
        goal_pull=_GOAL_PULL.get(motivation.active_goal, "A pull toward immediate regulation keeps surfacing."),
        continuity=lines,
    )


def select_spontaneous_thought(motivation: MotivationState, every_ticks: int, tick: int) -> Optional[Thought]:
    """Return a thought on every ``every_ticks``-th tick, else None.

    The most urgent drive shapes the thought; with no urgency at all the mind
    drifts associatively instead.
    """
    if every_ticks <= 0 or tick <= 0 or tick % every_ticks != 0:
        return None

    drive, urgency = rank_drives(motivation.urgencies())[0]
    if urgency <= 0:
        return Thought(text=ASSOCIATIVE_DRIFT_TEXT, category=ThoughtCategory.ASSOCIATIVE_DRIFT)
    return Thought(text=_DRIVE_THOUGHT[drive], category=ThoughtCategory.DRIVE, drive=drive)
