"""Pytest configuration: put the in-repo src package on the path and keep sessions quiet."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parent / "src"
if SRC_PATH.exists():
    sys.path.insert(0, str(SRC_PATH))


@pytest.fixture(autouse=True)
def quiet_sessions(monkeypatch):
    """Silence progress bars and stage headings printed by session runs."""
    monkeypatch.setenv("PERSON_VERBOSITY", "0")
