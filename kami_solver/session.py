"""
Game session: the state a Kami front end works with.

EDIT mode paints single cells and edits the palette; PLAY mode flood-fills
regions and counts steps. Solving snapshots the board so that solution steps
can still be highlighted after the player has moved on.
"""

from dataclasses import dataclass, field

from . import palette as palette_ops
from .config import COLS, DEFAULT_COLORS, DEFAULT_MAX_DEPTH, VSIDE_ROWS
from .grid import Coord, GameGrid
from .solver import Solution, SolvePerformance, solve_grid

EDIT = "EDIT"
PLAY = "PLAY"


@dataclass
class GameSession:
    mode: str = EDIT
    palette: list[str] = field(default_factory=lambda: list(DEFAULT_COLORS))
    grid: GameGrid = field(default_factory=lambda: GameGrid(VSIDE_ROWS, COLS, len(DEFAULT_COLORS)))
    selected_color_index: int = 0
    step_count: int = 0
    solution: Solution | None = None
    solution_grid: GameGrid | None = None  # Board the solution was computed on
    performance: SolvePerformance | None = None

    def init_grid(self, vside_rows: int = VSIDE_ROWS, cols: int = COLS) -> None:
        """Reset to an empty board with the default palette."""
        self.palette = list(DEFAULT_COLORS)
        self.grid = GameGrid(vside_rows, cols, len(self.palette))
        self.selected_color_index = 0
        self._reset_progress()

    def snapshot(self) -> dict:
        """Board snapshot with the palette stored alongside (the saved edit state)."""
        return {**self.grid.to_json(), "colors": list(self.palette)}

    def restore(self, grid: GameGrid, palette: list[str]) -> None:
        """Load a saved board and palette."""
        self.grid = grid
        self.palette = list(palette)
        if self.selected_color_index >= len(self.palette):
            self.selected_color_index = 0
        self._reset_progress()

    def _reset_progress(self) -> None:
        self.step_count = 0
        self.solution = None
        self.solution_grid = None
        self.performance = None

    def set_mode(self, mode: str) -> None:
        if mode not in (EDIT, PLAY):
            raise ValueError(f"Unknown mode {mode!r}")
        self.mode = mode
        self.step_count = 0

    def select_color(self, index: int) -> bool:
        """Select a palette entry; out-of-range indices are ignored."""
        if 0 <= index < len(self.palette):
            self.selected_color_index = index
            return True
        return False

    @property
    def region_count(self) -> int | None:
        """Live region count, only meaningful while playing."""
        if self.mode == EDIT:
            return None
        return self.grid.region_count()

    def paint(self, r: int, c: int, color_index: int | None = None) -> bool:
        """
        Paint at (r, c) with the given (or selected) color.
        EDIT repaints one cell, PLAY floods its region and counts a step.
        Returns True if the board changed.
        """
        color = self.selected_color_index if color_index is None else color_index
        if self.grid.in_bounds(r, c) and self.grid.color_index(r, c) == color:
            return False

        if self.mode == EDIT:
            self.grid = self.grid.with_color(r, c, color)
        else:
            self.grid.flood_fill(r, c, color)
            self.step_count += 1
        return True

    def add_color(self) -> bool:
        if self.mode != EDIT:
            return False
        self.grid, self.palette = palette_ops.add_color(self.grid, self.palette)
        return True

    def remove_color(self, index: int) -> bool:
        """Remove a palette entry (EDIT only, at least one color stays)."""
        if self.mode != EDIT or len(self.palette) <= 1 or not 0 <= index < len(self.palette):
            return False
        self.grid, self.palette = palette_ops.remove_color(self.grid, self.palette, index)
        if self.selected_color_index >= len(self.palette):
            self.selected_color_index = len(self.palette) - 1
        elif self.selected_color_index > index:
            self.selected_color_index -= 1
        return True

    def solve(self, max_depth: int = DEFAULT_MAX_DEPTH, verbose: bool = False) -> Solution | None:
        """Solve the current board and keep a copy of it for step highlighting."""
        self.solution_grid = self.grid.clone()
        self.solution, self.performance = solve_grid(
            self.solution_grid, self.palette, max_depth, verbose=verbose
        )

        if self.solution is not None:
            print("=== Solution ===")
            print(f"Fewest steps: {self.solution.steps}")
            for i, step in enumerate(self.solution.path, 1):
                print(f"{i}. {step.description}")
        else:
            print(f"No solution found within {max_depth} moves")
        return self.solution

    def step_cells(self, index: int) -> list[tuple[Coord, str]]:
        """Cells to highlight for solution step `index`, each with the step color.

        Regions are looked up on the board the solution was computed on, as the
        solution refers to that board's partition.
        """
        if self.solution is None or self.solution_grid is None:
            raise ValueError("No solution to highlight")
        if not 0 <= index < len(self.solution.path):
            raise IndexError(f"No solution step {index}")
        step = self.solution.path[index]
        cells = self.solution_grid.region_cells(step.region.r, step.region.c)
        return [(cell, step.color) for cell in cells]
