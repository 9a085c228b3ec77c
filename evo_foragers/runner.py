"""
Runner: headless evolution loop plus single-rollout helpers.
This is the single entrypoint you can call from a script or notebook.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional
import numpy as np
from loguru import logger
from tqdm import trange

from .world import World, random_location
from .agents import Policy
from .rollout import Observer, StepEvent, run_trial
from .evo import Evolution, GenerationReport, RunConfig


@dataclass
class EvolutionResult:
    best: Policy
    final_score: float
    history: List[GenerationReport] = field(default_factory=list)


def evolve(cfg: RunConfig,
           on_generation: Optional[Callable[[GenerationReport], None]] = None) -> EvolutionResult:
    evo = Evolution(cfg)
    logger.info("evolving {} policies for {} generations (seed={})",
                cfg.population_size, cfg.generations, cfg.seed)
    evo.populate()
    history: List[GenerationReport] = []
    bar = trange(cfg.generations, desc="evolve")
    for _ in bar:
        report = evo.step()
        history.append(report)
        bar.set_postfix(best=report.best_score)
        logger.info("generation {} => best score {} (policy {})",
                    report.generation, report.best_score, report.best_id)
        if on_generation is not None:
            on_generation(report)
    best = evo.finalize()
    logger.info("best policy {} final score {}", best.id, best.score)
    return EvolutionResult(best=best, final_score=best.score, history=history)


def simulate(policy: Policy, cfg: RunConfig, seed: int,
             observer: Optional[Observer] = None) -> int:
    """One rollout of `policy` in a world drawn from `seed`, for inspection."""
    rng = np.random.default_rng(seed)
    world = World.generate(cfg.world, rng)
    start = random_location(cfg.world, rng)
    return run_trial(policy, world, start, cfg.n_steps, rng, observer)


def trace_step(event: StepEvent) -> None:
    from .viewer import render
    logger.debug("perform {} at step {}", event.action.name, event.step)
    logger.debug("location {} -> {}\n{}", event.before, event.after,
                 render(event.world, event.after, color=False))
