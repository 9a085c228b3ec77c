import numpy as np
import pytest

from evo_foragers.world import Cell, World, WorldConfig


class ScriptedRng:
    """Stands in for np.random.Generator, replaying queued draws in order."""

    def __init__(self, integers=(), floats=()):
        self._ints = list(integers)
        self._floats = list(floats)
        self.int_calls = []

    def integers(self, low, high=None):
        self.int_calls.append((low, high))
        value = self._ints.pop(0)
        assert low <= value < high, f"scripted {value} outside [{low}, {high})"
        return value

    def random(self):
        return self._floats.pop(0)

    def exhausted(self) -> bool:
        return not self._ints and not self._floats


@pytest.fixture
def scripted():
    return ScriptedRng


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def small_cfg():
    return WorldConfig(width=6, height=6, n_rewards=0)


@pytest.fixture
def empty_world(small_cfg):
    return World(small_cfg)


@pytest.fixture
def make_world():
    """Build a world from rows of glyphs, e.g. ["####", "#O_#", ...]."""
    lookup = {"_": Cell.EMPTY, "O": Cell.REWARD, "#": Cell.WALL}

    def build(rows):
        cfg = WorldConfig(width=len(rows[0]), height=len(rows), n_rewards=0)
        world = World(cfg)
        for y, line in enumerate(rows):
            for x, ch in enumerate(line):
                world.cells[y, x] = lookup[ch]
        return world

    return build
