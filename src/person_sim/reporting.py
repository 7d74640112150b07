"""Reporting utilities: tagged per-tick lines and trajectory summaries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

import pandas as pd
from tabulate import tabulate

from .engine import BioTickResult
from .loop import LoopTickResult
from .motivation import Drive, MotivationState
from .state import Field


class SourceTag(str, Enum):
    BIO = "BIO"
    DRIVES = "DRIVES"
    MIND = "MIND"


def format_tagged_line(tag: SourceTag, message: str) -> str:
    return f"[{tag.value}] {message}"


@dataclass(frozen=True)
class DriveChange:
    drive: Drive
    previous: float
    current: float

    @property
    def diff(self) -> float:
        return self.current - self.previous


def significant_drive_changes(
    previous: MotivationState,
    current: MotivationState,
    threshold: float,
) -> List[DriveChange]:
    """Drives whose urgency moved by at least ``threshold`` (negative treated as 0)."""
    threshold = max(threshold, 0.0)
    changes: List[DriveChange] = []
    for drive in Drive:
        before = previous.urgency(drive)
        after = current.urgency(drive)
        if abs(after - before) >= threshold:
            changes.append(DriveChange(drive, before, after))
    return changes


def format_drive_change_lines(changes: List[DriveChange]) -> List[str]:
    return [
        format_tagged_line(
            SourceTag.DRIVES,
            f"{change.drive.value}: {change.previous:.2f} -> {change.current:.2f} ({change.diff:+.2f})",
        )
        for change in changes
    ]


def format_bio_line(bio: BioTickResult) -> str:
    if not bio.deltas and not bio.threshold_events:
        return format_tagged_line(SourceTag.BIO, "no significant biological deltas")
    return format_tagged_line(
        SourceTag.BIO,
        f"deltas={len(bio.deltas)} threshold_events={len(bio.threshold_events)}",
    )


def build_tagged_output_lines(
    result: LoopTickResult,
    previous: MotivationState,
    drive_threshold: float,
) -> List[str]:
    lines = [format_bio_line(result.bio)]
    lines.extend(format_drive_change_lines(significant_drive_changes(previous, result.motivation, drive_threshold)))
    if result.parsed.narrative:
        lines.append(format_tagged_line(SourceTag.MIND, result.parsed.narrative))
    return lines


def summarize_trajectory(frame: pd.DataFrame) -> str:
    """Start/end/min/max table for every bio variable in ``frame``."""
    rows: list[tuple] = []
    for var in Field:
        column = frame[var.value]
        rows.append(
            (
                var.value,
                float(column.iloc[0]),
                float(column.iloc[-1]),
                float(column.min()),
                float(column.max()),
            )
        )
    table = tabulate(rows, headers=["Variable", "Start", "End", "Min", "Max"], tablefmt="github", floatfmt=".3f")
    overall = f"Ticks recorded: {len(frame)}"
    return table + "\n" + overall
