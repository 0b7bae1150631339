"""
conftest.py — pytest fixtures shared across the test suite.

Provides small planner configurations, a scripted random source that
replays a fixed sequence of frontier picks, and a hand-checkable RRT*
scenario with exactly one rewire.
"""

import math
import sys
from pathlib import Path

import numpy as np
import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lineart_rrt import PlannerConfig, TreeBuilder  # noqa: E402


class ScriptedRandom:
    """Random source replaying a fixed list of ``integers`` results."""

    def __init__(self, picks):
        self.picks = list(picks)
        self.calls = 0

    def integers(self, high):
        value = self.picks[self.calls]
        self.calls += 1
        assert 0 <= value < high, f"scripted pick {value} out of [0, {high})"
        return value


# =========================================================================
# Configuration fixtures
# =========================================================================

@pytest.fixture()
def grid10_config() -> PlannerConfig:
    """10 x 10 region, unit spacing, root at (5, 5), budget 50."""
    return PlannerConfig(
        width=10.0, height=10.0, resolution=1.0, root=(5.0, 5.0),
        step_limit=2.0, neighborhood_radius=1.5, iteration_budget=50,
        algorithm='rrt*', seed=42,
    )


@pytest.fixture()
def scripted():
    """Factory for ScriptedRandom instances."""
    return ScriptedRandom


# =========================================================================
# Hand-checkable RRT* scenario
# =========================================================================

@pytest.fixture()
def rewire_builder() -> TreeBuilder:
    """3 x 2 grid with the root on (0, 0) and a neighbourhood of 1.5.

    Frontier order: (1,0) (2,0) (0,1) (1,1) (2,1).  Picks:
      1. (2,0): no neighbour within 1.5, falls back to the root, cost 2
      2. (2,1): only (2,0) is in range, parent (2,0), cost 3
      3. (1,1): best parent is the root (cost sqrt 2), and (2,1) is
         rewired under it (sqrt 2 + 1 < 3)
    """
    cfg = PlannerConfig(
        width=3.0, height=2.0, resolution=1.0, root=(0.0, 0.0),
        step_limit=10.0, neighborhood_radius=1.5, iteration_budget=10,
        algorithm='rrt*',
    )
    return TreeBuilder(cfg, rng=ScriptedRandom([1, 3, 2]))


def find_point(points, x, y):
    """Return the point with the given coordinates (exactly one expected)."""
    found = [p for p in points if math.isclose(p.x, x) and math.isclose(p.y, y)]
    assert len(found) == 1, f"expected one point at ({x}, {y}), got {found}"
    return found[0]


@pytest.fixture()
def point_at():
    return find_point


@pytest.fixture()
def rng():
    return np.random.default_rng(12345)
