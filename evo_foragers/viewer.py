"""
Viewer: read-only displays of a world and an agent.

- `render`: terminal glyphs, agent cell red, its neighbourhood (distance < 2) blue
- `replay`: matplotlib playback of one rollout of a policy

Neither touches simulation state; `replay` only consumes step events.
"""
import math
import time
from typing import List, Tuple
import numpy as np
import matplotlib.pyplot as plt
from matplotlib import colors
from matplotlib.ticker import NullLocator

from .world import Cell, Location, World
from .agents import Policy
from .rollout import StepEvent
from .evo import RunConfig
from .runner import simulate

RED = "\x1b[31m"
BLUE = "\x1b[34m"
RESET = "\x1b[0m"

NEAR = 2.0

# empty, reward, wall
CELL_COLORS = ["#2b2b2b", "#ffab00", "#90a4ae"]


def render(world: World, loc: Location, color: bool = True) -> str:
    ay, ax = loc
    lines = []
    H, W = world.cells.shape
    for y in range(H):
        row = []
        for x in range(W):
            glyph = Cell(int(world.cells[y, x])).glyph
            d = math.hypot(y - ay, x - ax)
            if color and d == 0:
                glyph = f"{RED}{glyph}{RESET}"
            elif color and d < NEAR:
                glyph = f"{BLUE}{glyph}{RESET}"
            row.append(glyph)
        lines.append(" ".join(row))
    return "\n".join(lines)


def record(policy: Policy, cfg: RunConfig, seed: int) -> Tuple[List[Tuple[np.ndarray, StepEvent]], int]:
    """Rollout of `policy` as a list of (grid snapshot, event) frames."""
    frames: List[Tuple[np.ndarray, StepEvent]] = []
    score = simulate(policy, cfg, seed, observer=lambda ev: frames.append((ev.world.snapshot(), ev)))
    return frames, score


def replay(policy: Policy, cfg: RunConfig, seed: int = 0, fps: int = 8) -> int:
    frames, score = record(policy, cfg, seed)
    if not frames:
        return score

    cmap = colors.ListedColormap(CELL_COLORS)
    norm = colors.BoundaryNorm([0, 1, 2, 3], cmap.N)
    H, W = cfg.world.height, cfg.world.width
    fig, ax = plt.subplots(figsize=(max(4, W / 2), max(4, H / 2)))
    try: fig.canvas.manager.set_window_title(f"Evo Foragers — policy {policy.id}")
    except Exception: pass
    ax.xaxis.set_major_locator(NullLocator()); ax.yaxis.set_major_locator(NullLocator())

    grid0, ev0 = frames[0]
    img = ax.imshow(grid0, cmap=cmap, norm=norm, interpolation="nearest", origin="upper")
    scat = ax.scatter([ev0.after[1]], [ev0.after[0]], s=120, c="#ec407a")
    hud = ax.text(0, -0.8, "", color="black", fontsize=8)
    plt.tight_layout(); plt.pause(0.001)

    delay = 1.0 / max(1, fps)
    collected = 0
    for grid, ev in frames:
        if not plt.fignum_exists(fig.number):
            break
        collected += ev.reward
        img.set_data(grid)
        scat.set_offsets([[ev.after[1], ev.after[0]]])
        hud.set_text(f"step {ev.step}  {ev.action.name}  collected {collected}")
        plt.pause(0.001); time.sleep(delay)

    plt.close(fig)
    return score
