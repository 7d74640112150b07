"""Session runner: drive the loop for a number of ticks and record the trajectory."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

import matplotlib.pyplot as plt
import pandas as pd
from tqdm import tqdm

from .config import SimulationConfig, get_verbosity
from .engine import BioEngine
from .inputs import ConventionParser, InputAdapter, ScenarioInjector
from .loop import LoopTickResult, SimulationLoop, SimulationState
from .mind import ContinuityBuffer
from .motivation import Drive, MotivationComputer, MotivationState
from .reporting import build_tagged_output_lines, summarize_trajectory
from .responders import ScriptedMind
from .state import Field


@dataclass(slots=True)
class SessionArtifacts:
    config: SimulationConfig
    trajectory: pd.DataFrame
    lines: List[str]
    summary: str
    final_state: SimulationState
    csv_path: Optional[Path] = None
    plot_path: Optional[Path] = None
    threshold_counts: Mapping[str, int] = field(default_factory=dict)


class SimulatedClock:
    """Whole-second clock driven by the session's own elapsed time."""

    def __init__(self) -> None:
        self.elapsed = 0.0

    def advance(self, dt: float) -> None:
        self.elapsed += max(dt, 0.0)

    def __call__(self) -> int:
        return int(self.elapsed)


def _record(tick: int, elapsed: float, result: LoopTickResult, state: SimulationState) -> dict:
    row: dict = {"tick": tick, "elapsed": elapsed}
    row.update(state.bio.values())
    for drive in Drive:
        row[f"drive_{drive.value}"] = result.motivation.urgency(drive)
    row["active_goal"] = result.motivation.active_goal.value
    row["action"] = result.action_outcome.action
    row["satisfied"] = result.action_outcome.satisfied
    row["threshold_events"] = len(result.bio.threshold_events)
    return row


def _plot_trajectory(frame: pd.DataFrame, out_path: Path) -> None:
    fig, (ax_bio, ax_drives) = plt.subplots(2, 1, figsize=(9.0, 7.5), sharex=True)
    for var in Field:
        if var is Field.BODY_TEMP:
            continue
        ax_bio.plot(frame["elapsed"], frame[var.value], label=var.value, linewidth=1.5)
    ax_bio.set_ylabel("Level")
    ax_bio.set_title("Bio trajectory")
    ax_bio.grid(True, alpha=0.3)
    ax_bio.legend(fontsize="small", ncol=2)

    for drive in Drive:
        ax_drives.plot(frame["elapsed"], frame[f"drive_{drive.value}"], label=drive.value, linewidth=1.5)
    ax_drives.set_xlabel("Simulated time [s]")
    ax_drives.set_ylabel("Urgency")
    ax_drives.grid(True, alpha=0.3)
    ax_drives.legend(fontsize="small", ncol=2)

    fig.tight_layout()
    fig.savefig(out_path)
    plt.close(fig)


def run_session(
    ticks: int,
    config: SimulationConfig | None = None,
    seed: int | None = None,
    inputs: Iterable[str] = (),
    scenario: tuple[str, Sequence[str]] | None = None,
    output_dir: str | Path | None = None,
    plot: bool = True,
) -> SessionArtifacts:
    """Run ``ticks`` loop ticks with a :class:`ScriptedMind` and record every tick.

    ``inputs`` are operator lines queued before the first tick. ``scenario`` is a
    ``(name, descriptors)`` pair registered and activated for the whole session.
    With ``output_dir`` set, the trajectory is written to ``trajectory.csv`` and,
    if ``plot`` is true, ``trajectory.png``.
    """
    if ticks < 0:
        raise ValueError(f"ticks must be non-negative, got {ticks}")
    config = config or SimulationConfig()

    verbosity = get_verbosity()
    disable_pbar = verbosity == 0

    clock = SimulatedClock()
    adapter = InputAdapter(ConventionParser(), now_fn=clock)
    for line in inputs:
        adapter.enqueue(line)

    drainer = adapter
    if scenario is not None:
        name, descriptors = scenario
        drainer = ScenarioInjector(adapter)
        drainer.register(name, descriptors)
        drainer.activate(name)

    loop = SimulationLoop(
        input=drainer,
        biology=BioEngine(config.engine, seed=seed),
        motivation=MotivationComputer(),
        mind=ScriptedMind(),
        cooldowns=config.cooldowns,
        thought_every_ticks=config.thought_every_ticks,
    )
    state = SimulationState(
        personality=config.personality,
        chronic=config.chronic,
        continuity=ContinuityBuffer(config.continuity_capacity),
    )

    if verbosity >= 1:
        print(f"Running {ticks} ticks (dt={config.tick_seconds}s)...")

    rows: List[dict] = []
    lines: List[str] = []
    threshold_counts: dict = {}
    previous = MotivationState()
    dt = config.tick_seconds
    for tick in tqdm(range(1, ticks + 1), desc="Simulating", disable=disable_pbar, leave=False):
        clock.advance(dt)
        result = loop.tick(state, dt)
        rows.append(_record(tick, clock.elapsed, result, state))
        lines.extend(build_tagged_output_lines(result, previous, config.drive_change_threshold))
        for event in result.bio.threshold_events:
            key = f"{event.variable.value}:{event.severity}"
            threshold_counts[key] = threshold_counts.get(key, 0) + 1
        previous = result.motivation

    frame = pd.DataFrame(rows)
    summary = summarize_trajectory(frame) if not frame.empty else "No ticks recorded"

    csv_path = None
    plot_path = None
    if output_dir is not None:
        artifact_dir = Path(output_dir)
        artifact_dir.mkdir(parents=True, exist_ok=True)
        if verbosity >= 1:
            print(f"Writing artifacts to {artifact_dir}...")
        csv_path = artifact_dir / "trajectory.csv"
        frame.to_csv(csv_path, index=False)
        (artifact_dir / "summary.txt").write_text(summary)
        if plot and not frame.empty:
            plot_path = artifact_dir / "trajectory.png"
            _plot_trajectory(frame, plot_path)

    return SessionArtifacts(
        config=config,
        trajectory=frame,
        lines=lines,
        summary=summary,
        final_state=state,
        csv_path=csv_path,
        plot_path=plot_path,
        threshold_counts=threshold_counts,
    )
