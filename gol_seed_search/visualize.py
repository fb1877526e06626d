"""Render seed runs to PNG snapshots and animated GIFs."""

import numpy as np
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from .automaton import Grid
from .config import SimulationConfig
from .state import State

DEAD_COLOR = 30
LIVE_COLOR = 255


def render_grid(grid: np.ndarray, cell_size: int = 4) -> np.ndarray:
    """Upscale a (rows, columns) 0/1 grid to an RGB image array."""
    h, w = grid.shape
    img = np.full((h * cell_size, w * cell_size, 3), DEAD_COLOR, dtype=np.uint8)
    upscaled = np.repeat(np.repeat(grid, cell_size, axis=0), cell_size, axis=1)
    img[upscaled == 1] = LIVE_COLOR
    return img


def save_image(grid: np.ndarray, filepath: str, cell_size: int = 4):
    """Save one grid as a PNG."""
    Image.fromarray(render_grid(grid, cell_size)).save(filepath)


def save_animation(
    history: List[np.ndarray],
    filepath: str,
    cell_size: int = 4,
    duration: int = 100,
    loop: int = 0,
):
    """Save a run as an animated GIF."""
    frames = [Image.fromarray(render_grid(grid, cell_size)) for grid in history]
    if frames:
        frames[0].save(
            filepath,
            save_all=True,
            append_images=frames[1:],
            duration=duration,
            loop=loop,
        )


def visualize_state(
    state: State,
    columns: int,
    rows: int,
    output_dir: str = "output",
    name: str = "seed",
    config: Optional[SimulationConfig] = None,
    max_frames: Optional[int] = 500,
    cell_size: int = 8,
) -> Tuple[str, List[str]]:
    """
    Run ``state`` to termination and save its animation and first/final frames.

    Returns:
        Tuple of (gif_path, list of snapshot paths)
    """
    if config is None:
        config = SimulationConfig()
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    grid = Grid(columns, rows, state, cycle_length=config.cycle_length)
    max_age = config.max_age if max_frames is None else min(config.max_age, max_frames)
    grid.run_to_completion(max_age, config.max_repeats, record_history=True)
    history = grid.get_history()

    gif_path = str(output_path / f"{name}.gif")
    save_animation(history, gif_path, cell_size=cell_size)

    snapshot_paths = []
    for label, frame in (("seed", history[0]), ("final", history[-1])):
        path = str(output_path / f"{name}_{label}.png")
        save_image(frame, path, cell_size=cell_size)
        snapshot_paths.append(path)

    return gif_path, snapshot_paths
