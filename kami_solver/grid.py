"""
Kami board model.

Coordinate system:
- r (row) runs top to bottom over 2 * vside_rows + 1 rows
- c (column) runs left to right over cols columns
- colors are stored column-major: grid[c][r] = color index

Adjacency (triangular mesh):
- Every cell touches the cell above (r-1) and below (r+1) in its column
- (r + c) even: the triangle points right and touches its left neighbor (c-1)
- (r + c) odd: the triangle points left and touches its right neighbor (c+1)

The board keeps a Union-Find in step with the colors so the number of
same-color regions is always available without a rescan.
"""

from collections import deque
from dataclasses import dataclass

from .config import FALLBACK_COLOR
from .union_find import UnionFind


@dataclass(frozen=True)
class Coord:
    """A cell position on the board."""
    r: int
    c: int


class GameGrid:
    """Triangular board of color indices (each index < color_count)."""

    def __init__(
        self,
        vside_rows: int,
        cols: int,
        color_count: int,
        grid: list[list[int]] | None = None,
    ):
        self.vside_rows = vside_rows
        self.rows = 2 * vside_rows + 1
        self.cols = cols
        self.color_count = max(1, color_count)
        if grid is None:
            self.grid = [[0] * self.rows for _ in range(cols)]
        else:
            self._check_shape(grid)
            self.grid = [list(col) for col in grid]
        self.uf = self.build_union_find()

    def _check_shape(self, grid: list[list[int]]) -> None:
        if not isinstance(grid, list) or not all(isinstance(col, list) for col in grid):
            raise ValueError("Grid must be a list of columns")
        if len(grid) != self.cols:
            raise ValueError(f"Expected {self.cols} columns, got {len(grid)}")
        for c, col in enumerate(grid):
            if len(col) != self.rows:
                raise ValueError(f"Column {c} has {len(col)} rows, expected {self.rows}")
            for value in col:
                if not isinstance(value, int) or isinstance(value, bool):
                    raise ValueError(f"Color index {value!r} in column {c} is not an integer")
                if not 0 <= value < self.color_count:
                    raise ValueError(
                        f"Color index {value} out of range for {self.color_count} colors"
                    )

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def neighbors(self, r: int, c: int) -> list[Coord]:
        """Cells sharing an edge with (r, c)."""
        result = []
        if r > 0:
            result.append(Coord(r - 1, c))
        if r < self.rows - 1:
            result.append(Coord(r + 1, c))
        points_right = (r + c) % 2 == 0
        if points_right and c > 0:
            result.append(Coord(r, c - 1))
        elif not points_right and c < self.cols - 1:
            result.append(Coord(r, c + 1))
        return result

    def index(self, r: int, c: int) -> int:
        """Flat Union-Find index of a cell."""
        return r * self.cols + c

    def color_index(self, r: int, c: int) -> int:
        """Color index at (r, c), 0 when outside the board."""
        if not self.in_bounds(r, c):
            return 0
        return self.grid[c][r]

    def color_at(self, r: int, c: int, colors: list[str] | tuple[str, ...]) -> str:
        """Color string of a cell looked up in an external palette."""
        idx = self.color_index(r, c)
        if 0 <= idx < len(colors):
            return colors[idx]
        return colors[0] if colors else FALLBACK_COLOR

    def clone(self) -> "GameGrid":
        """Independent copy (Union-Find rebuilt from the copied colors)."""
        return GameGrid(self.vside_rows, self.cols, self.color_count, self.grid)

    def with_color(self, r: int, c: int, color: int) -> "GameGrid":
        """New board with a single cell repainted (used by the editor)."""
        if not self.in_bounds(r, c):
            raise ValueError(f"Cell ({r}, {c}) is outside the board")
        grid = [list(col) for col in self.grid]
        grid[c][r] = color
        return GameGrid(self.vside_rows, self.cols, self.color_count, grid)

    def to_json(self) -> dict:
        """Snapshot without palette: rows, cols, colorCount and grid."""
        return {
            "rows": self.rows,
            "cols": self.cols,
            "colorCount": self.color_count,
            "grid": [list(col) for col in self.grid],
        }

    @classmethod
    def from_json(cls, data: dict) -> "GameGrid":
        """Rebuild a board from a snapshot.

        Accepts the current format (colorCount) and the legacy one that stored
        the palette itself (colors). Raises ValueError on malformed data.
        """
        if not isinstance(data, dict) or not data.get("grid"):
            raise ValueError("Snapshot has no grid")
        try:
            rows = int(data["rows"])
            cols = int(data["cols"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Snapshot is missing its dimensions: {e}") from e

        colors = data.get("colors")
        if colors is not None:
            if not isinstance(colors, list) or not all(isinstance(color, str) for color in colors):
                raise ValueError("Snapshot palette must be a list of colors")
            color_count = len(colors)
        elif data.get("colorCount") is not None:
            try:
                color_count = int(data["colorCount"])
            except (TypeError, ValueError) as e:
                raise ValueError(f"Snapshot has an invalid colorCount: {e}") from e
        else:
            # No palette information: every index must be 0
            color_count = 1

        vside_rows = (rows - 1) // 2
        return cls(vside_rows, cols, color_count, data["grid"])

    def build_union_find(self) -> UnionFind:
        """Union-Find built from scratch over the current colors."""
        uf = UnionFind(self.rows * self.cols)
        for r in range(self.rows):
            for c in range(self.cols):
                color = self.grid[c][r]
                for n in self.neighbors(r, c):
                    if self.grid[n.c][n.r] == color:
                        uf.union(self.index(r, c), self.index(n.r, n.c))
        return uf

    def region_count(self) -> int:
        """Number of same-color connected regions."""
        return self.uf.count

    def flood_fill(self, start_r: int, start_c: int, new_color: int) -> None:
        """Repaint the region of (start_r, start_c) in place, keeping the Union-Find in step."""
        if not self.in_bounds(start_r, start_c):
            raise ValueError(f"Cell ({start_r}, {start_c}) is outside the board")
        if not 0 <= new_color < self.color_count:
            raise ValueError(f"Color index {new_color} out of range for {self.color_count} colors")

        g = self.grid
        old_color = g[start_c][start_r]
        if old_color == new_color:
            return

        start_idx = self.index(start_r, start_c)
        g[start_c][start_r] = new_color
        # Neighbors already holding the new color never enter the queue
        for nb in self.neighbors(start_r, start_c):
            if g[nb.c][nb.r] == new_color:
                self.uf.union(start_idx, self.index(nb.r, nb.c))

        queue = deque([Coord(start_r, start_c)])
        while queue:
            curr = queue.popleft()
            curr_idx = self.index(curr.r, curr.c)
            for n in self.neighbors(curr.r, curr.c):
                if g[n.c][n.r] != old_color:
                    continue
                # Recolored on discovery, so each cell is queued once
                g[n.c][n.r] = new_color
                n_idx = self.index(n.r, n.c)
                self.uf.union(curr_idx, n_idx)
                for nb in self.neighbors(n.r, n.c):
                    if g[nb.c][nb.r] == new_color:
                        self.uf.union(n_idx, self.index(nb.r, nb.c))
                queue.append(n)

    def region_cells(self, start_r: int, start_c: int) -> list[Coord]:
        """All cells in the same-color region as (start_r, start_c)."""
        if not self.in_bounds(start_r, start_c):
            return []
        target = self.color_index(start_r, start_c)
        start = Coord(start_r, start_c)
        cells = [start]
        visited = {start}
        queue = deque([start])
        while queue:
            curr = queue.popleft()
            for n in self.neighbors(curr.r, curr.c):
                if n in visited:
                    continue
                if self.grid[n.c][n.r] == target:
                    visited.add(n)
                    cells.append(n)
                    queue.append(n)
        return cells
