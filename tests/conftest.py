"""
Shared test setup.

The server initializes its database on import, so the database location is
pointed at a temporary directory before any test module imports it.
"""
import os
import tempfile
from pathlib import Path

os.environ.setdefault("KAMI_DB_PATH", str(Path(tempfile.mkdtemp()) / "kami_test.db"))

import pytest

from kami_solver import GameGrid


@pytest.fixture
def make_grid():
    """Build a board from rows of color indices (rows[r][c])."""
    def _make(rows: list[list[int]], color_count: int | None = None) -> GameGrid:
        n_rows = len(rows)
        assert n_rows % 2 == 1, "boards have an odd number of rows"
        cols = len(rows[0])
        grid = [[rows[r][c] for r in range(n_rows)] for c in range(cols)]
        if color_count is None:
            color_count = max(max(row) for row in rows) + 1
        return GameGrid((n_rows - 1) // 2, cols, color_count, grid)
    return _make
