"""
Agents are reactive lookup tables: every signature the agent can possibly
observe maps to one of six actions.

Signatures that cannot occur on an interior cell (standing on a wall, or
walled in on both sides along one axis) are pruned from the table, which
leaves 2 * 8 * 8 = 128 entries.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import product
from typing import Dict, Tuple
import numpy as np

from .world import Cell, Location, Signature, World


class Action(IntEnum):
    MOVE_UP = 0
    MOVE_DOWN = 1
    MOVE_LEFT = 2
    MOVE_RIGHT = 3
    MOVE_RANDOM = 4
    PICK_UP = 5

    @property
    def glyph(self) -> str:
        return "UDLR?P"[self.value]


MOVES = (Action.MOVE_UP, Action.MOVE_DOWN, Action.MOVE_LEFT, Action.MOVE_RIGHT)

# (dy, dx) per directional move
OFFSETS: Dict[Action, Tuple[int, int]] = {
    Action.MOVE_UP: (-1, 0),
    Action.MOVE_DOWN: (1, 0),
    Action.MOVE_LEFT: (0, -1),
    Action.MOVE_RIGHT: (0, 1),
}


def is_reachable(sig: Signature) -> bool:
    if sig.center == Cell.WALL:
        return False
    if sig.up == Cell.WALL and sig.down == Cell.WALL:
        return False
    if sig.left == Cell.WALL and sig.right == Cell.WALL:
        return False
    return True


def _reachable_signatures() -> Tuple[Signature, ...]:
    cells = (Cell.EMPTY, Cell.REWARD, Cell.WALL)
    sigs = (Signature(*combo) for combo in product(cells, repeat=5))
    return tuple(s for s in sigs if is_reachable(s))


# canonical domain order, shared by every policy
REACHABLE_SIGNATURES: Tuple[Signature, ...] = _reachable_signatures()


def random_action(rng: np.random.Generator) -> Action:
    return Action(int(rng.integers(0, len(Action))))


def random_move(rng: np.random.Generator) -> Action:
    return MOVES[int(rng.integers(0, len(MOVES)))]


@dataclass
class Policy:
    id: int
    table: Dict[Signature, Action] = field(default_factory=dict)
    score: float = 0.0

    def act(self, sig: Signature) -> Action:
        try:
            return self.table[sig]
        except KeyError:
            raise LookupError(f"policy {self.id} has no action for {sig}") from None

    def genome(self) -> str:
        """Actions as glyphs, in domain order."""
        return "".join(self.table[s].glyph for s in REACHABLE_SIGNATURES)


def random_policy(rng: np.random.Generator, id: int) -> Policy:
    table = {sig: random_action(rng) for sig in REACHABLE_SIGNATURES}
    return Policy(id=id, table=table)


def constant_policy(action: Action, id: int = 0) -> Policy:
    return Policy(id=id, table={sig: action for sig in REACHABLE_SIGNATURES})


# ---------------------------------------------------------------------

def resolve(action: Action, rng: np.random.Generator) -> Action:
    """Turn MOVE_RANDOM into a concrete move; everything else passes through."""
    if action == Action.MOVE_RANDOM:
        return random_move(rng)
    return action


def apply_action(world: World, loc: Location, action: Action,
                 rng: np.random.Generator) -> Tuple[Location, int]:
    """Perform one action. Returns the new location and the reward earned."""
    action = resolve(action, rng)
    if action == Action.PICK_UP:
        return loc, world.pick_up(loc)

    dy, dx = OFFSETS[action]
    target = (loc[0] + dy, loc[1] + dx)
    if world[target] == Cell.WALL:
        return loc, 0
    return target, 0
