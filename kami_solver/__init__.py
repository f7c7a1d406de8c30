"""
kami_solver - triangular flood-fill puzzle engine

Core components:
- GameGrid: the triangular board with incremental region counting
- build_region_graph: regions and their color boundaries
- GraphSolver / solve_grid: fewest-moves solver (IDA*)
- GameSession: edit/play state used by the server
"""

from .grid import Coord, GameGrid
from .union_find import UnionFind
from .region_graph import RegionGraph, RegionNode, build_region_graph
from .solver import GraphSolver, Move, Solution, SolutionStep, SolvePerformance, solve_grid
from .session import GameSession
from .viz import display_grid
