"""
Tests for the triangular board.

Covers adjacency, incremental region counting under flood fill, region
queries and snapshot import/export.
"""

import random
from collections import deque

import pytest

from kami_solver import Coord, GameGrid


def random_grid(rng: random.Random, vside_rows: int, cols: int, color_count: int) -> GameGrid:
    grid = [[rng.randrange(color_count) for _ in range(2 * vside_rows + 1)] for _ in range(cols)]
    return GameGrid(vside_rows, cols, color_count, grid)


def bfs_region_count(grid: GameGrid) -> int:
    """Region count by a plain BFS partition, independent of the Union-Find."""
    seen = set()
    count = 0
    for c in range(grid.cols):
        for r in range(grid.rows):
            if (r, c) in seen:
                continue
            count += 1
            color = grid.grid[c][r]
            seen.add((r, c))
            queue = deque([(r, c)])
            while queue:
                cr, cc = queue.popleft()
                for n in grid.neighbors(cr, cc):
                    if (n.r, n.c) not in seen and grid.grid[n.c][n.r] == color:
                        seen.add((n.r, n.c))
                        queue.append((n.r, n.c))
    return count


def assert_union_find_consistent(grid: GameGrid) -> None:
    """Same-color neighbors share a component and no component mixes colors."""
    uf = grid.uf
    for c in range(grid.cols):
        for r in range(grid.rows):
            for n in grid.neighbors(r, c):
                if grid.grid[c][r] == grid.grid[n.c][n.r]:
                    assert uf.find(grid.index(r, c)) == uf.find(grid.index(n.r, n.c))

    colors_by_root: dict[int, set[int]] = {}
    for c in range(grid.cols):
        for r in range(grid.rows):
            colors_by_root.setdefault(uf.find(grid.index(r, c)), set()).add(grid.grid[c][r])
    assert all(len(colors) == 1 for colors in colors_by_root.values())


class TestAdjacency:

    def test_interior_cell_pointing_left(self):
        grid = GameGrid(2, 3, 1)
        # (2, 1): r + c odd, touches its right neighbor
        assert set(grid.neighbors(2, 1)) == {Coord(1, 1), Coord(3, 1), Coord(2, 2)}

    def test_interior_cell_pointing_right(self):
        grid = GameGrid(2, 3, 1)
        # (1, 1): r + c even, touches its left neighbor
        assert set(grid.neighbors(1, 1)) == {Coord(0, 1), Coord(2, 1), Coord(1, 0)}

    def test_edge_cells(self):
        grid = GameGrid(2, 3, 1)
        assert set(grid.neighbors(0, 1)) == {Coord(1, 1), Coord(0, 2)}
        assert set(grid.neighbors(4, 1)) == {Coord(3, 1), Coord(4, 2)}

    def test_every_interior_cell_has_three_neighbors(self):
        grid = GameGrid(3, 4, 1)
        for r in range(1, grid.rows - 1):
            for c in range(1, grid.cols - 1):
                assert len(grid.neighbors(r, c)) == 3

    def test_adjacency_is_symmetric(self):
        grid = GameGrid(3, 5, 1)
        for r in range(grid.rows):
            for c in range(grid.cols):
                for n in grid.neighbors(r, c):
                    assert Coord(r, c) in grid.neighbors(n.r, n.c)


class TestConstruction:

    def test_zero_filled_board_is_one_region(self):
        grid = GameGrid(14, 10, 3)
        assert grid.rows == 29
        assert len(grid.grid) == 10 and all(len(col) == 29 for col in grid.grid)
        assert grid.region_count() == 1

    def test_color_count_clamped_to_one(self):
        assert GameGrid(1, 1, 0).color_count == 1

    def test_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            GameGrid(1, 2, 2, [[0, 1, 0]])
        with pytest.raises(ValueError):
            GameGrid(1, 1, 2, [[0, 1]])

    def test_rejects_out_of_range_color(self):
        with pytest.raises(ValueError):
            GameGrid(1, 1, 2, [[0, 2, 0]])

    def test_checkerboard_column_counts_every_cell(self, make_grid):
        grid = make_grid([[0], [1], [0], [1], [0]])
        assert grid.region_count() == 5


class TestColorLookup:

    def test_out_of_bounds_reads_zero(self, make_grid):
        grid = make_grid([[1], [2], [1]])
        assert grid.color_index(-1, 0) == 0
        assert grid.color_index(0, 5) == 0
        assert grid.color_index(1, 0) == 2

    def test_color_at_uses_palette(self, make_grid):
        grid = make_grid([[1], [2], [1]])
        assert grid.color_at(1, 0, ["#a", "#b", "#c"]) == "#c"
        # Missing entries fall back to the first color
        assert grid.color_at(1, 0, ["#a"]) == "#a"
        assert grid.color_at(1, 0, []) == "#fff"


class TestFloodFill:

    def test_merges_three_regions(self, make_grid):
        grid = make_grid([[0], [1], [0]])
        assert grid.region_count() == 3
        grid.flood_fill(1, 0, 0)
        assert grid.region_count() == 1
        assert grid.grid == [[0, 0, 0]]

    def test_same_color_is_noop(self, make_grid):
        grid = make_grid([[0, 1], [1, 1], [0, 2]])
        before = [list(col) for col in grid.grid]
        count = grid.region_count()
        grid.flood_fill(1, 1, 1)
        assert grid.grid == before
        assert grid.region_count() == count

    def test_recolors_whole_region_only(self, make_grid):
        grid = make_grid([
            [0, 0, 1],
            [0, 2, 1],
            [2, 2, 0],
        ])
        region = {(cell.r, cell.c) for cell in grid.region_cells(0, 0)}
        grid.flood_fill(0, 0, 1)
        for c in range(grid.cols):
            for r in range(grid.rows):
                if (r, c) in region:
                    assert grid.grid[c][r] == 1
        assert grid.color_index(1, 1) == 2
        assert grid.region_count() == bfs_region_count(grid)

    def test_rejects_outside_cell_and_bad_color(self, make_grid):
        grid = make_grid([[0], [1], [0]])
        with pytest.raises(ValueError):
            grid.flood_fill(3, 0, 1)
        with pytest.raises(ValueError):
            grid.flood_fill(0, 0, 2)

    @pytest.mark.parametrize("seed", range(8))
    def test_incremental_count_matches_rebuild(self, seed):
        rng = random.Random(seed)
        grid = random_grid(rng, vside_rows=rng.randint(1, 4), cols=rng.randint(1, 6), color_count=rng.randint(2, 4))
        assert grid.region_count() == bfs_region_count(grid)
        for _ in range(25):
            r = rng.randrange(grid.rows)
            c = rng.randrange(grid.cols)
            grid.flood_fill(r, c, rng.randrange(grid.color_count))
            assert grid.region_count() == bfs_region_count(grid)
            assert grid.region_count() == grid.build_union_find().count
            assert_union_find_consistent(grid)


class TestRegionCells:

    @pytest.mark.parametrize("seed", range(4))
    def test_region_properties(self, seed):
        rng = random.Random(100 + seed)
        grid = random_grid(rng, 3, 5, 3)
        for r in range(grid.rows):
            for c in range(grid.cols):
                cells = grid.region_cells(r, c)
                assert Coord(r, c) in cells
                assert len(set(cells)) == len(cells)
                assert all(grid.color_index(cell.r, cell.c) == grid.color_index(r, c) for cell in cells)
                roots = {grid.uf.find(grid.index(cell.r, cell.c)) for cell in cells}
                assert len(roots) == 1

    def test_region_does_not_leak_across_colors(self, make_grid):
        grid = make_grid([[0], [1], [0]])
        assert grid.region_cells(0, 0) == [Coord(0, 0)]

    def test_outside_cell_has_no_region(self, make_grid):
        grid = make_grid([[0], [1], [0]])
        assert grid.region_cells(7, 7) == []


class TestCopies:

    def test_clone_is_independent(self, make_grid):
        grid = make_grid([[0, 1], [1, 0], [0, 1]])
        copy = grid.clone()
        copy.flood_fill(0, 0, 1)
        assert grid.color_index(0, 0) == 0
        assert grid.region_count() == bfs_region_count(grid)
        assert copy.region_count() == bfs_region_count(copy)

    def test_with_color_returns_new_board(self, make_grid):
        grid = make_grid([[0], [1], [0]])
        edited = grid.with_color(1, 0, 0)
        assert grid.region_count() == 3
        assert edited.region_count() == 1
        with pytest.raises(ValueError):
            grid.with_color(5, 0, 0)


class TestSnapshot:

    def test_round_trip(self):
        rng = random.Random(7)
        grid = random_grid(rng, 2, 4, 3)
        restored = GameGrid.from_json(grid.to_json())
        assert restored.grid == grid.grid
        assert restored.region_count() == grid.region_count()
        assert restored.vside_rows == grid.vside_rows
        assert restored.color_count == 3

    def test_export_has_no_palette(self):
        data = GameGrid(1, 2, 3).to_json()
        assert set(data) == {"rows", "cols", "colorCount", "grid"}
        assert data["rows"] == 3

    def test_legacy_palette_sets_color_count(self):
        data = {"rows": 3, "cols": 1, "colors": ["#a", "#b", "#c", "#d"], "grid": [[0, 3, 0]]}
        grid = GameGrid.from_json(data)
        assert grid.color_count == 4

    def test_color_count_defaults_to_one(self):
        grid = GameGrid.from_json({"rows": 3, "cols": 1, "grid": [[0, 0, 0]]})
        assert grid.color_count == 1

    @pytest.mark.parametrize("data", [
        {"rows": 3, "cols": 1},
        {"rows": 3, "cols": 1, "grid": []},
        {"cols": 1, "grid": [[0, 0, 0]]},
        {"rows": 3, "cols": 2, "grid": [[0, 0, 0]]},
        [],
        {"rows": 3, "cols": 1, "colorCount": 2, "grid": [[0, None, 0]]},
        {"rows": 3, "cols": 1, "colorCount": 2, "grid": [[0, "1", 0]]},
        {"rows": 3, "cols": 1, "colors": 5, "grid": [[0, 1, 0]]},
        {"rows": 3, "cols": 1, "colorCount": [2], "grid": [[0, 1, 0]]},
        {"rows": 3, "cols": 1, "colorCount": 2, "grid": [7]},
        {"rows": 3, "cols": 1, "colorCount": 2, "grid": "010"},
        {"rows": 3, "cols": 1, "grid": [[0, 1, 0]]},
    ])
    def test_malformed_snapshot_raises(self, data):
        with pytest.raises(ValueError):
            GameGrid.from_json(data)
