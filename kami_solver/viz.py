"""
Text display of a Kami board.
"""

from .grid import GameGrid


def display_grid(grid: GameGrid, colors: list[str] | tuple[str, ...] | None = None) -> None:
    """
    Print the board row by row.
    Each cell shows its color index followed by the triangle direction
    ('>' points right, '<' points left).
    """
    print("\nKami Board:")
    print("=" * (grid.cols * 4 + 6))

    for r in range(grid.rows):
        row_str = []
        for c in range(grid.cols):
            arrow = ">" if (r + c) % 2 == 0 else "<"
            row_str.append(f"{grid.color_index(r, c):2d}{arrow}")
        print(f"r={r:2d}: {' '.join(row_str)}")

    print("=" * (grid.cols * 4 + 6))
    if colors:
        for i, color in enumerate(colors):
            print(f"  {i}: {color}")
    print(f"Total cells: {grid.rows * grid.cols}")
    print(f"Colors: {grid.color_count}")
    print(f"Regions: {grid.region_count()}")
