"""
Kami - Database module for the saved edit state
"""

import json
import sqlite3
from typing import Optional

from kami_solver import GameGrid
from kami_solver.config import DB_PATH, DEFAULT_COLORS

EDIT_STATE_KEY = "kami2-edit-grid"


def get_connection():
    """Get a database connection."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    """Initialize the database with required tables."""
    conn = get_connection()
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS edit_state (
            name TEXT PRIMARY KEY,
            payload TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    conn.commit()
    conn.close()
    print(f"Database initialized at {DB_PATH}")


def save_edit_state(snapshot: dict, name: str = EDIT_STATE_KEY) -> None:
    """Save a board snapshot that carries its palette (see GameSession.snapshot)."""
    payload = json.dumps(snapshot)

    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("""
        INSERT INTO edit_state (name, payload, updated_at)
        VALUES (?, ?, CURRENT_TIMESTAMP)
        ON CONFLICT(name) DO UPDATE SET
            payload = excluded.payload,
            updated_at = excluded.updated_at
    """, (name, payload))
    conn.commit()
    conn.close()


def load_edit_state(name: str = EDIT_STATE_KEY) -> Optional[tuple[GameGrid, list[str]]]:
    """
    Load the saved board and palette.
    Returns None if nothing is saved or the saved snapshot is not usable.
    """
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT payload FROM edit_state WHERE name = ?", (name,))
    row = cursor.fetchone()
    conn.close()

    if row is None:
        return None

    try:
        data = json.loads(row["payload"])
        grid = GameGrid.from_json(data)
        colors = data.get("colors") or list(DEFAULT_COLORS)
        if grid.color_count != len(colors):
            # The palette decides how many colors the board may use
            grid = GameGrid(grid.vside_rows, grid.cols, len(colors), grid.grid)
    except (json.JSONDecodeError, ValueError) as e:
        print(f"[DEBUG] Ignoring saved edit state: {e}")
        return None

    return grid, colors


def clear_edit_state(name: str = EDIT_STATE_KEY) -> bool:
    """Delete a saved state. Returns True if one existed."""
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("DELETE FROM edit_state WHERE name = ?", (name,))
    deleted = cursor.rowcount > 0
    conn.commit()
    conn.close()
    return deleted
