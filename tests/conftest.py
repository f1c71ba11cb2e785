"""
Shared test setup

Puts the project root on sys.path (the packages live at the top level) and
selects a non-interactive matplotlib backend before anything imports pyplot.
"""

import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from simulator.core.elevator import ElevatorController


@pytest.fixture
def make_controller():
    """Factory for controllers with the trace turned off"""
    def _make(start_floor=10, destination_floors=(9, 11, 13), variant="standard", **kwargs):
        kwargs.setdefault("verbose", False)
        return ElevatorController(start_floor, list(destination_floors), variant, **kwargs)
    return _make
