"""
CLI entry: evolve a forager policy and print a short report.
"""
from dataclasses import replace
from typing import Optional

import typer
from loguru import logger
from tqdm import tqdm

from evo_foragers.evo import PRESETS, RunConfig, preset
from evo_foragers.runner import evolve, simulate, trace_step

app = typer.Typer(help="Evolve lookup-table policies that collect rewards on a walled grid")


def setup_logging(level: str) -> None:
    # route through tqdm.write so log lines don't break the progress bar
    logger.remove()
    logger.add(lambda msg: tqdm.write(msg, end=""), level=level.upper(), colorize=True,
               format="<green>{time:HH:mm:ss}</green> | <level>{level}</level> | {message}")


def build_config(name: str, width: Optional[int], height: Optional[int],
                 n_rewards: Optional[int], **fields) -> RunConfig:
    base = preset(name)
    world = base.world
    world_overrides = {k: v for k, v in
                       (("width", width), ("height", height), ("n_rewards", n_rewards))
                       if v is not None}
    if world_overrides:
        world = replace(world, **world_overrides)
    run_overrides = {k: v for k, v in fields.items() if v is not None}
    return replace(base, world=world, **run_overrides)


@app.command()
def main(
    preset_name: str = typer.Option("default", "--preset", help=f"one of {sorted(PRESETS)}"),
    width: Optional[int] = typer.Option(None, help="grid width, walls included"),
    height: Optional[int] = typer.Option(None, help="grid height, walls included"),
    n_rewards: Optional[int] = typer.Option(None, help="rewards placed per world"),
    population_size: Optional[int] = typer.Option(None),
    n_survivors: Optional[int] = typer.Option(None, help="policies kept each generation"),
    mutation_probability: Optional[float] = typer.Option(None),
    generations: Optional[int] = typer.Option(None),
    n_trials: Optional[int] = typer.Option(None, help="rollouts averaged per evaluation"),
    n_steps: Optional[int] = typer.Option(None, help="steps per rollout"),
    seed: Optional[int] = typer.Option(None),
    log_level: str = typer.Option("INFO", help="loguru level"),
    trace: bool = typer.Option(False, help="log every step of one rollout of the best policy"),
    show: bool = typer.Option(False, help="replay the best policy with matplotlib"),
) -> None:
    setup_logging("DEBUG" if trace else log_level)
    try:
        cfg = build_config(preset_name, width, height, n_rewards,
                           population_size=population_size, n_survivors=n_survivors,
                           mutation_probability=mutation_probability, generations=generations,
                           n_trials=n_trials, n_steps=n_steps, seed=seed)
    except ValueError as e:
        raise typer.BadParameter(str(e))

    result = evolve(cfg)
    typer.echo(f"Best policy: {result.best.id}")
    typer.echo(f"Best policy final score: {result.final_score}")
    typer.echo(f"Genome: {result.best.genome()}")

    if trace:
        score = simulate(result.best, cfg, cfg.seed, observer=trace_step)
        logger.debug("traced rollout collected {}", score)
    if show:
        from evo_foragers.viewer import replay
        replay(result.best, cfg, seed=cfg.seed)


if __name__ == "__main__":
    app()
