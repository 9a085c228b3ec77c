"""
Evolution: truncation selection + uniform crossover over lookup-table policies.

One generation is evaluate -> select -> reproduce. Every stochastic decision
draws from the single generator owned by `Evolution`, in population order and
domain order, so a seed reproduces a run exactly.
"""
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional
import numpy as np
from loguru import logger

from .world import WorldConfig
from .agents import Policy, REACHABLE_SIGNATURES, random_action, random_policy
from .rollout import evaluate


@dataclass
class RunConfig:
    world: WorldConfig = field(default_factory=WorldConfig)
    population_size: int = 500
    n_survivors: int = 20
    mutation_probability: float = 0.005
    generations: int = 200
    n_trials: int = 1
    n_steps: int = 150
    seed: int = 0

    def __post_init__(self):
        for name in ("population_size", "n_survivors", "generations", "n_trials", "n_steps"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be a positive integer, got {getattr(self, name)}")
        if self.n_survivors > self.population_size:
            raise ValueError(
                f"n_survivors={self.n_survivors} exceeds population_size={self.population_size}"
            )
        if not 0.0 <= self.mutation_probability <= 1.0:
            raise ValueError(
                f"mutation_probability must be in [0, 1], got {self.mutation_probability}"
            )
        if self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")


# experiment variants; each is just a different set of constants
PRESETS: Dict[str, Callable[[], RunConfig]] = {
    "default": RunConfig,
    "sparse": lambda: RunConfig(world=WorldConfig(width=12, height=12, n_rewards=20),
                                n_steps=200),
    "multi_trial": lambda: RunConfig(world=WorldConfig(width=10, height=10, n_rewards=32),
                                     population_size=200, n_trials=5, n_steps=100),
    "quick": lambda: RunConfig(world=WorldConfig(width=8, height=8, n_rewards=12),
                               population_size=40, n_survivors=8, generations=10,
                               n_steps=50),
}


def preset(name: str, **overrides) -> RunConfig:
    if name not in PRESETS:
        raise ValueError(f"unknown preset {name!r}, choose from {sorted(PRESETS)}")
    cfg = PRESETS[name]()
    return replace(cfg, **overrides) if overrides else cfg


def crossover(rng: np.random.Generator, parent_a: Policy, parent_b: Policy,
              id: int, mutation_probability: float) -> Policy:
    """
    Child takes each entry from A with probability p, drawn once per child,
    otherwise from B; each entry is then independently re-randomised with
    `mutation_probability`.
    """
    p = rng.random()
    table = {}
    for sig, action_a in parent_a.table.items():
        if rng.random() < p:
            table[sig] = action_a
        else:
            table[sig] = parent_b.act(sig)
        if rng.random() < mutation_probability:
            table[sig] = random_action(rng)
    return Policy(id=id, table=table)


@dataclass(frozen=True)
class GenerationReport:
    generation: int
    best_id: int
    best_score: float
    mean_score: float
    population_size: int


class Evolution:
    def __init__(self, cfg: RunConfig, rng: Optional[np.random.Generator] = None):
        self.cfg = cfg
        self.rng = rng if rng is not None else np.random.default_rng(cfg.seed)
        self.population: List[Policy] = []
        self.next_id = 0
        self.generation = 0
        self.best_id: Optional[int] = None

    def _new_id(self) -> int:
        i = self.next_id
        self.next_id += 1
        return i

    def populate(self) -> None:
        logger.debug("creating a population of size {}", self.cfg.population_size)
        self.population = [random_policy(self.rng, self._new_id())
                           for _ in range(self.cfg.population_size)]

    def score(self, policy: Policy) -> float:
        return evaluate(self.rng, policy, self.cfg.world, self.cfg.n_trials, self.cfg.n_steps)

    def evaluate(self) -> None:
        for policy in self.population:
            policy.score = self.score(policy)

    def select(self) -> Policy:
        # list.sort is stable, also with reverse=True
        self.population.sort(key=lambda p: p.score, reverse=True)
        del self.population[self.cfg.n_survivors:]
        best = self.population[0]
        self.best_id = best.id
        return best

    def reproduce(self) -> None:
        survivors = len(self.population)
        while len(self.population) < self.cfg.population_size:
            a = self.population[int(self.rng.integers(0, survivors))]
            b = self.population[int(self.rng.integers(0, survivors))]
            child = crossover(self.rng, a, b, self._new_id(), self.cfg.mutation_probability)
            self.population.append(child)

    def step(self) -> GenerationReport:
        if not self.population:
            self.populate()
        self.evaluate()
        mean = float(np.mean([p.score for p in self.population]))
        best = self.select()
        report = GenerationReport(
            generation=self.generation,
            best_id=best.id,
            best_score=best.score,
            mean_score=mean,
            population_size=self.cfg.population_size,
        )
        self.reproduce()
        self.generation += 1
        return report

    def find(self, policy_id: int) -> Policy:
        for policy in self.population:
            if policy.id == policy_id:
                return policy
        raise LookupError(f"policy {policy_id} is not in the population")

    def finalize(self) -> Policy:
        """Re-score the last generation's best with one more fresh evaluation."""
        if self.best_id is None:
            raise RuntimeError("finalize() called before any generation ran")
        best = self.find(self.best_id)
        best.score = self.score(best)
        return best
