"""
World: a walled grid with reward objects scattered over the interior.

Cell codes:
  0 empty, 1 reward, 2 wall

The border is always wall; the agent only ever stands on interior cells, so
the 5-cell neighbourhood read by `World.sense` is always defined.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple, Tuple
import numpy as np

Location = Tuple[int, int]


class Cell(IntEnum):
    EMPTY = 0
    REWARD = 1
    WALL = 2

    @property
    def glyph(self) -> str:
        return "_O#"[self.value]


class Signature(NamedTuple):
    """What the agent sees: its four neighbours and the cell under it."""
    up: Cell
    down: Cell
    left: Cell
    right: Cell
    center: Cell


@dataclass
class WorldConfig:
    width: int = 15
    height: int = 15
    n_rewards: int = 90

    def __post_init__(self):
        if self.width <= 3 or self.height <= 3:
            raise ValueError(f"grid must be at least 4x4, got {self.height}x{self.width}")
        if self.n_rewards < 0:
            raise ValueError(f"n_rewards must be non-negative, got {self.n_rewards}")
        if self.n_rewards >= self.interior_cells:
            raise ValueError(
                f"n_rewards={self.n_rewards} does not fit in the "
                f"{self.interior_cells} interior cells of a {self.height}x{self.width} grid"
            )

    @property
    def interior_cells(self) -> int:
        return (self.width - 2) * (self.height - 2)


def random_location(cfg: WorldConfig, rng: np.random.Generator) -> Location:
    """Uniform interior cell; row is drawn before column."""
    row = int(rng.integers(1, cfg.height - 1))
    col = int(rng.integers(1, cfg.width - 1))
    return row, col


class World:
    def __init__(self, cfg: WorldConfig):
        self.cfg = cfg
        self.cells = np.full((cfg.height, cfg.width), Cell.EMPTY, dtype=np.int8)
        self.cells[0, :] = Cell.WALL
        self.cells[-1, :] = Cell.WALL
        self.cells[:, 0] = Cell.WALL
        self.cells[:, -1] = Cell.WALL

    @classmethod
    def generate(cls, cfg: WorldConfig, rng: np.random.Generator) -> "World":
        world = cls(cfg)
        world._scatter_rewards(rng)
        return world

    def _scatter_rewards(self, rng: np.random.Generator) -> None:
        placed = 0
        while placed < self.cfg.n_rewards:
            y, x = random_location(self.cfg, rng)
            # collisions are simply redrawn
            if self.cells[y, x] == Cell.EMPTY:
                self.cells[y, x] = Cell.REWARD
                placed += 1

    # ---------- queries ----------
    def __getitem__(self, loc: Location) -> Cell:
        return Cell(int(self.cells[loc]))

    def is_interior(self, loc: Location) -> bool:
        y, x = loc
        return 0 < y < self.cfg.height - 1 and 0 < x < self.cfg.width - 1

    def sense(self, loc: Location) -> Signature:
        assert self.is_interior(loc), f"location {loc} is not interior"
        y, x = loc
        c = self.cells
        return Signature(
            up=Cell(int(c[y - 1, x])),
            down=Cell(int(c[y + 1, x])),
            left=Cell(int(c[y, x - 1])),
            right=Cell(int(c[y, x + 1])),
            center=Cell(int(c[y, x])),
        )

    def rewards_left(self) -> int:
        return int((self.cells == Cell.REWARD).sum())

    def snapshot(self) -> np.ndarray:
        return self.cells.copy()

    # ---------- mutation ----------
    def pick_up(self, loc: Location) -> int:
        if self.cells[loc] == Cell.REWARD:
            self.cells[loc] = Cell.EMPTY
            return 1
        return 0
