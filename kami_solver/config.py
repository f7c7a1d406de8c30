"""
Configuration for the Kami puzzle engine and its server.
"""
import os
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"

# sqlite file holding the saved edit state (override with KAMI_DB_PATH)
DB_PATH = Path(os.getenv("KAMI_DB_PATH", str(DATA_DIR / "kami.db")))

# Default board size: 2 * VSIDE_ROWS + 1 triangle rows, COLS columns
VSIDE_ROWS = 14
COLS = 10

# Palette used when a board is created in edit mode (at least 1 color)
DEFAULT_COLORS = ("#FF6B6B", "#4ECDC4", "#FFE66D")

# Pool drawn from when the editor adds a color
PRESET_COLORS = (
    "#FF6B6B", "#4ECDC4", "#FFE66D", "#1A535C", "#F7FFF7",
    "#95E1D3", "#F38181", "#AA96DA", "#FCBAD3", "#A8D8EA",
)

# Color string used when a palette lookup misses entirely
FALLBACK_COLOR = "#fff"

# Deepest iterative-deepening limit tried by the solver
DEFAULT_MAX_DEPTH = 15
