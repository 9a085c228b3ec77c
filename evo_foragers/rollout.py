"""
Rollouts: run a policy in freshly generated worlds and score it.

This is the fitness function of the evolution loop. Given the same generator
state it is fully deterministic; draws happen in this order per trial:
world layout, start location, then one draw per MOVE_RANDOM step.
"""
from dataclasses import dataclass
from typing import Callable, Optional
import numpy as np

from .world import World, WorldConfig, Location, random_location
from .agents import Action, Policy, apply_action


@dataclass(frozen=True)
class StepEvent:
    step: int
    action: Action
    before: Location
    after: Location
    reward: int
    world: World


Observer = Callable[[StepEvent], None]


def run_trial(policy: Policy, world: World, start: Location, n_steps: int,
              rng: np.random.Generator, observer: Optional[Observer] = None) -> int:
    loc = start
    total = 0
    for t in range(n_steps):
        action = policy.act(world.sense(loc))
        new_loc, reward = apply_action(world, loc, action, rng)
        if observer is not None:
            observer(StepEvent(t, action, loc, new_loc, reward, world))
        # stuck: the same step would do nothing forever. Random moves may still
        # land somewhere else next time, so they never stop the trial.
        changed = new_loc != loc or reward != 0
        if action != Action.MOVE_RANDOM and not changed:
            break
        loc = new_loc
        total += reward
    return total


def evaluate(rng: np.random.Generator, policy: Policy, world_cfg: WorldConfig,
             n_trials: int, n_steps: int, observer: Optional[Observer] = None) -> float:
    """Average reward collected over `n_trials` fresh worlds."""
    total = 0
    for _ in range(n_trials):
        world = World.generate(world_cfg, rng)
        start = random_location(world_cfg, rng)
        total += run_trial(policy, world, start, n_steps, rng, observer)
    return total / n_trials
