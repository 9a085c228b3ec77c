"""Tests for world generation and neighbourhood sensing."""

import numpy as np
import pytest

from evo_foragers.world import Cell, Signature, World, WorldConfig, random_location


class TestWorldConfig:
    """Configuration validation."""

    def test_defaults(self):
        cfg = WorldConfig()
        assert (cfg.width, cfg.height, cfg.n_rewards) == (15, 15, 90)
        assert cfg.interior_cells == 169

    @pytest.mark.parametrize("width,height", [(3, 10), (10, 3), (2, 2)])
    def test_rejects_tiny_grids(self, width, height):
        with pytest.raises(ValueError, match="at least 4x4"):
            WorldConfig(width=width, height=height, n_rewards=0)

    def test_rejects_too_many_rewards(self):
        with pytest.raises(ValueError, match="does not fit"):
            WorldConfig(width=5, height=5, n_rewards=9)

    def test_rejects_negative_rewards(self):
        with pytest.raises(ValueError):
            WorldConfig(width=5, height=5, n_rewards=-1)

    def test_accepts_one_free_cell(self):
        cfg = WorldConfig(width=5, height=5, n_rewards=8)
        assert cfg.n_rewards == 8


class TestGenerate:
    """World generator invariants."""

    @pytest.mark.parametrize("seed", range(5))
    def test_border_is_wall(self, seed):
        cfg = WorldConfig(width=9, height=7, n_rewards=20)
        world = World.generate(cfg, np.random.default_rng(seed))
        cells = world.cells
        assert (cells[0, :] == Cell.WALL).all()
        assert (cells[-1, :] == Cell.WALL).all()
        assert (cells[:, 0] == Cell.WALL).all()
        assert (cells[:, -1] == Cell.WALL).all()

    @pytest.mark.parametrize("seed", range(5))
    def test_exact_reward_count_inside(self, seed):
        cfg = WorldConfig(width=9, height=7, n_rewards=20)
        world = World.generate(cfg, np.random.default_rng(seed))
        interior = world.cells[1:-1, 1:-1]
        assert (interior == Cell.REWARD).sum() == 20
        assert (interior == Cell.WALL).sum() == 0
        assert world.rewards_left() == 20

    def test_nearly_full_grid(self):
        cfg = WorldConfig(width=6, height=6, n_rewards=15)
        world = World.generate(cfg, np.random.default_rng(0))
        assert world.rewards_left() == 15

    def test_same_seed_same_layout(self):
        cfg = WorldConfig(width=10, height=8, n_rewards=12)
        a = World.generate(cfg, np.random.default_rng(42))
        b = World.generate(cfg, np.random.default_rng(42))
        np.testing.assert_array_equal(a.cells, b.cells)

    def test_collision_is_redrawn(self, scripted):
        cfg = WorldConfig(width=5, height=5, n_rewards=2)
        # second draw hits the first reward and must be resampled
        rng = scripted(integers=[1, 1, 1, 1, 3, 2])
        world = World.generate(cfg, rng)
        assert rng.exhausted()
        assert world[1, 1] == Cell.REWARD
        assert world[3, 2] == Cell.REWARD
        assert world.rewards_left() == 2

    def test_random_location_is_interior(self, rng):
        cfg = WorldConfig(width=4, height=4, n_rewards=0)
        for _ in range(50):
            y, x = random_location(cfg, rng)
            assert 1 <= y <= 2 and 1 <= x <= 2

    def test_random_location_draws_row_then_col(self, scripted):
        cfg = WorldConfig(width=8, height=5, n_rewards=0)
        rng = scripted(integers=[3, 6])
        assert random_location(cfg, rng) == (3, 6)
        assert rng.int_calls == [(1, 4), (1, 7)]


class TestSense:
    """Neighbourhood encoding."""

    def test_reads_neighbours(self, make_world):
        world = make_world([
            "#####",
            "#_O_#",
            "#O__#",
            "#####",
        ])
        assert world.sense((1, 1)) == Signature(
            up=Cell.WALL, down=Cell.REWARD, left=Cell.WALL, right=Cell.REWARD, center=Cell.EMPTY
        )
        assert world.sense((2, 2)) == Signature(
            up=Cell.REWARD, down=Cell.WALL, left=Cell.REWARD, right=Cell.EMPTY, center=Cell.EMPTY
        )

    def test_center_never_wall(self):
        cfg = WorldConfig(width=8, height=8, n_rewards=30)
        world = World.generate(cfg, np.random.default_rng(3))
        for y in range(1, 7):
            for x in range(1, 7):
                assert world.sense((y, x)).center != Cell.WALL

    @pytest.mark.parametrize("loc", [(0, 2), (2, 0), (5, 2), (2, 5)])
    def test_border_location_is_a_fault(self, empty_world, loc):
        with pytest.raises(AssertionError):
            empty_world.sense(loc)

    def test_sense_does_not_mutate(self, make_world):
        world = make_world(["####", "#O_#", "#__#", "####"])
        before = world.snapshot()
        world.sense((1, 1))
        np.testing.assert_array_equal(world.cells, before)


class TestPickUp:
    def test_pick_up_reward_then_empty(self, make_world):
        world = make_world(["####", "#O_#", "#__#", "####"])
        assert world.pick_up((1, 1)) == 1
        assert world[1, 1] == Cell.EMPTY
        assert world.pick_up((1, 1)) == 0
        assert world[1, 1] == Cell.EMPTY

    def test_pick_up_nothing(self, make_world):
        world = make_world(["####", "#O_#", "#__#", "####"])
        assert world.pick_up((2, 2)) == 0
        assert world.rewards_left() == 1
