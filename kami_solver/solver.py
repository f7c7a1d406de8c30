"""
Kami solver using iterative deepening A* (IDA*) on the region graph.

A move recolors one region to the color of one of its neighbors, which merges
the region with every neighbor of that color. The goal is a single region.

Strategy:
- Heuristic: number of distinct colors left minus one. Each move removes at
  most one color from the board, so this never overestimates.
- Depth limits 0, 1, 2, ... are searched in turn; the first limit that reaches
  the goal gives a minimum-length solution.
- Moves are applied in place on one graph and rolled back from an undo record,
  so every branch sees exactly the graph its parent left.
"""

import argparse
import json
import time
from collections import Counter
from dataclasses import dataclass, field

from .config import DEFAULT_COLORS, DEFAULT_MAX_DEPTH, FALLBACK_COLOR
from .grid import Coord, GameGrid
from .region_graph import RegionNode, build_region_graph


@dataclass(frozen=True)
class Move:
    """Recolor region `region_id` to color index `color`."""
    region_id: int
    color: int


@dataclass
class GraphResult:
    steps: int
    path: list[Move]


@dataclass
class SolutionStep:
    region: Coord
    color: str
    description: str


@dataclass
class Solution:
    """Fewest paint operations and the paint order."""
    steps: int
    path: list[SolutionStep] = field(default_factory=list)


@dataclass
class SolvePerformance:
    """Search statistics of one solve call."""
    elapsed_ms: float
    states_visited: int
    max_depth: int            # deepest recursion reached
    initial_region_count: int
    found: bool


@dataclass
class MoveUndo:
    """Everything needed to roll one move back."""
    target_id: int
    old_color: int
    old_size: int
    absorbed: list[RegionNode] = field(default_factory=list)
    # Neighbor sets as they were before the move, per touched node
    saved_neighbors: dict[int, set[int]] = field(default_factory=dict)


def heuristic(nodes: dict[int, RegionNode]) -> int:
    """Lower bound on the moves left: distinct colors minus one."""
    colors = {node.color for node in nodes.values()}
    return max(0, len(colors) - 1)


def possible_moves(nodes: dict[int, RegionNode]) -> list[Move]:
    """All (region, neighbor color) moves, biggest merges first.

    Repainting a region to a color none of its neighbors has merges nothing,
    so those moves are never generated.
    """
    scored: list[tuple[int, Move]] = []
    for node_id in sorted(nodes):
        node = nodes[node_id]
        neighbor_colors = Counter(nodes[n_id].color for n_id in node.neighbors if n_id in nodes)
        for color in sorted(neighbor_colors):
            scored.append((neighbor_colors[color], Move(node_id, color)))
    scored.sort(key=lambda item: -item[0])
    return [move for _, move in scored]


def apply_move(nodes: dict[int, RegionNode], target_id: int, new_color: int) -> MoveUndo:
    """Recolor a region in place and absorb the neighbors that now match it."""
    target = nodes[target_id]
    undo = MoveUndo(target_id, target.color, target.size)

    def touch(node: RegionNode) -> None:
        if node.id not in undo.saved_neighbors:
            undo.saved_neighbors[node.id] = set(node.neighbors)

    touch(target)
    target.color = new_color

    to_merge = [n_id for n_id in target.neighbors if n_id in nodes and nodes[n_id].color == new_color]
    merge_ids = set(to_merge)

    for merge_id in to_merge:
        merge_node = nodes.pop(merge_id)
        undo.absorbed.append(merge_node)
        target.size += merge_node.size
        target.neighbors.discard(merge_id)

        # Hand the absorbed region's neighbors over to the target
        for deep_id in merge_node.neighbors:
            if deep_id == target_id or deep_id in merge_ids:
                continue
            deep = nodes[deep_id]
            touch(deep)
            deep.neighbors.discard(merge_id)
            deep.neighbors.add(target_id)
            target.neighbors.add(deep_id)

    target.neighbors.discard(target_id)
    assert all(target_id in nodes[n_id].neighbors for n_id in target.neighbors), "asymmetric region graph"
    return undo


def undo_move(nodes: dict[int, RegionNode], undo: MoveUndo) -> None:
    """Restore the graph exactly as it was before `apply_move`."""
    for node in undo.absorbed:
        nodes[node.id] = node
    for node_id, saved in undo.saved_neighbors.items():
        nodes[node_id].neighbors = saved
    target = nodes[undo.target_id]
    target.color = undo.old_color
    target.size = undo.old_size


class GraphSolver:
    """IDA* search over the region graph of one board."""

    def __init__(self, grid: GameGrid):
        self.grid = grid
        graph = build_region_graph(grid)
        assert graph.is_symmetric(), "asymmetric region graph"
        self.nodes = graph.nodes
        self.id_to_coord = graph.id_to_coord
        self.initial_region_count = len(self.nodes)
        assert self.initial_region_count == grid.region_count(), "Union-Find out of step with colors"
        self.performance: SolvePerformance | None = None
        self._states_visited = 0
        self._deepest = 0

    def solve(self, max_depth: int = DEFAULT_MAX_DEPTH, verbose: bool = False) -> GraphResult | None:
        """Minimum-length move list, or None if none exists within max_depth moves."""
        start = time.perf_counter()
        self._states_visited = 0
        self._deepest = 0
        result = None

        for limit in range(max_depth + 1):
            path = self._dfs(0, limit, [])
            if verbose:
                print(f"limit {limit}: {self._states_visited} states visited")
            if path is not None:
                result = GraphResult(steps=len(path), path=path)
                break

        self.performance = SolvePerformance(
            elapsed_ms=(time.perf_counter() - start) * 1000,
            states_visited=self._states_visited,
            max_depth=self._deepest,
            initial_region_count=self.initial_region_count,
            found=result is not None,
        )
        if verbose:
            p = self.performance
            print(
                f"Solved={p.found} in {p.elapsed_ms:.1f} ms, "
                f"{p.states_visited} states, depth {p.max_depth}, "
                f"{p.initial_region_count} regions"
            )
        return result

    def _dfs(self, depth: int, limit: int, path: list[Move]) -> list[Move] | None:
        self._states_visited += 1
        self._deepest = max(self._deepest, depth)

        if len(self.nodes) == 1:
            return list(path)

        if depth + heuristic(self.nodes) > limit:
            return None

        for move in possible_moves(self.nodes):
            undo = apply_move(self.nodes, move.region_id, move.color)
            path.append(move)
            try:
                found = self._dfs(depth + 1, limit, path)
            finally:
                path.pop()
                undo_move(self.nodes, undo)
            if found is not None:
                return found

        return None

    def to_solution(self, path: list[Move], colors: list[str] | tuple[str, ...]) -> Solution:
        """Translate moves to board coordinates and palette colors.

        Coordinates come from the partition the solver started from, even when
        a region has been absorbed by an earlier move.
        """
        steps = []
        for move in path:
            region = self.id_to_coord.get(move.region_id, Coord(0, 0))
            if 0 <= move.color < len(colors):
                color = colors[move.color]
            else:
                color = colors[0] if colors else FALLBACK_COLOR
            steps.append(SolutionStep(
                region=region,
                color=color,
                description=f"Paint the region at ({region.r}, {region.c}) {color}",
            ))
        return Solution(steps=len(steps), path=steps)


def solve_grid(
    grid: GameGrid,
    colors: list[str] | tuple[str, ...],
    max_depth: int = DEFAULT_MAX_DEPTH,
    verbose: bool = False,
) -> tuple[Solution | None, SolvePerformance | None]:
    """
    Main entry point. Solves a board and translates the moves.

    Returns (solution, performance). The solution is None when no solution
    exists within max_depth moves; performance is None when the board was
    already a single region and no search ran.
    """
    if grid.region_count() <= 1:
        return Solution(steps=0, path=[]), None

    solver = GraphSolver(grid)
    result = solver.solve(max_depth, verbose=verbose)
    if result is None:
        return None, solver.performance
    return solver.to_solution(result.path, colors), solver.performance


if __name__ == "__main__":
    from .viz import display_grid

    parser = argparse.ArgumentParser(description="Solve a saved Kami board")
    parser.add_argument("snapshot", help="Path to a board snapshot JSON file")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    with open(args.snapshot, "r") as f:
        data = json.load(f)
    board = GameGrid.from_json(data)
    palette = data.get("colors") or list(DEFAULT_COLORS)
    display_grid(board, palette)

    solution, _ = solve_grid(board, palette, args.max_depth, verbose=args.verbose)
    if solution is None:
        print(f"\nNo solution found within {args.max_depth} moves")
    else:
        print(f"\nFewest moves: {solution.steps}")
        for i, step in enumerate(solution.path, 1):
            print(f"{i}. {step.description}")
