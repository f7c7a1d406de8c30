"""
Palette editing.

The board only stores color indices; the palette maps them to color strings.
Adding or removing a palette entry rebuilds the board so that its color_count
matches the palette length.
"""

import random

from .config import PRESET_COLORS
from .grid import GameGrid


def random_new_color(existing: list[str], rng: random.Random | None = None) -> str:
    """Pick a preset color not in the palette yet, else a random #rrggbb."""
    rng = rng or random
    pool = [c for c in PRESET_COLORS if c not in existing]
    if pool:
        return rng.choice(pool)
    return "#" + format(rng.randrange(0x1000000), "06x")


def add_color(
    grid: GameGrid, palette: list[str], rng: random.Random | None = None
) -> tuple[GameGrid, list[str]]:
    """Append a color. Returns the new board and palette."""
    new_palette = palette + [random_new_color(palette, rng)]
    new_grid = GameGrid(grid.vside_rows, grid.cols, len(new_palette), grid.grid)
    return new_grid, new_palette


def remove_color(grid: GameGrid, palette: list[str], index: int) -> tuple[GameGrid, list[str]]:
    """
    Drop palette entry `index` (at least one color always stays).

    Cells of the removed color fall back to color 0; higher indices shift
    down by one.
    """
    if len(palette) <= 1:
        raise ValueError("Palette must keep at least one color")
    if not 0 <= index < len(palette):
        raise ValueError(f"No color at index {index}")

    def remap(v: int) -> int:
        if v == index:
            return 0
        if v > index:
            return v - 1
        return v

    new_palette = [color for i, color in enumerate(palette) if i != index]
    cols = [[remap(v) for v in col] for col in grid.grid]
    return GameGrid(grid.vside_rows, grid.cols, len(new_palette), cols), new_palette
