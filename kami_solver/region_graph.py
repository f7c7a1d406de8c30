"""
Region adjacency graph.

Collapses a board into its maximal same-color regions (nodes) and the color
boundaries between them (edges). Searching over regions instead of cells
shrinks the solver's state space by orders of magnitude.
"""

from collections import deque
from dataclasses import dataclass, field

from .grid import Coord, GameGrid


@dataclass
class RegionNode:
    """A maximal same-color region."""
    id: int
    color: int
    size: int = 0  # Cell count
    neighbors: set[int] = field(default_factory=set)


@dataclass
class RegionGraph:
    nodes: dict[int, RegionNode]
    # Representative cell of every region, frozen at build time
    id_to_coord: dict[int, Coord]

    def is_symmetric(self) -> bool:
        """True if every edge is stored on both ends and there are no self-loops."""
        for node_id, node in self.nodes.items():
            if node_id in node.neighbors:
                return False
            for n_id in node.neighbors:
                other = self.nodes.get(n_id)
                if other is None or node_id not in other.neighbors:
                    return False
        return True


def build_region_graph(grid: GameGrid) -> RegionGraph:
    """Label every region of the board and connect regions that touch.

    Cells are scanned column by column; the first cell reached in a region
    becomes its representative coordinate.
    """
    rows, cols = grid.rows, grid.cols
    colors = grid.grid
    region_map = [-1] * (rows * cols)

    def get_idx(r: int, c: int) -> int:
        return c * rows + r

    nodes: dict[int, RegionNode] = {}
    id_to_coord: dict[int, Coord] = {}
    next_id = 0

    # 1. BFS labelling of every region
    for c in range(cols):
        for r in range(rows):
            if region_map[get_idx(r, c)] != -1:
                continue

            color = colors[c][r]
            node = RegionNode(id=next_id, color=color)
            nodes[next_id] = node
            id_to_coord[next_id] = Coord(r, c)

            region_map[get_idx(r, c)] = next_id
            node.size += 1
            queue = deque([Coord(r, c)])
            while queue:
                curr = queue.popleft()
                for n in grid.neighbors(curr.r, curr.c):
                    n_idx = get_idx(n.r, n.c)
                    if colors[n.c][n.r] == color and region_map[n_idx] == -1:
                        region_map[n_idx] = next_id
                        node.size += 1
                        queue.append(n)
            next_id += 1

    # 2. Edges between touching regions
    for c in range(cols):
        for r in range(rows):
            current_id = region_map[get_idx(r, c)]
            for n in grid.neighbors(r, c):
                neighbor_id = region_map[get_idx(n.r, n.c)]
                if neighbor_id != current_id:
                    nodes[current_id].neighbors.add(neighbor_id)
                    nodes[neighbor_id].neighbors.add(current_id)

    return RegionGraph(nodes=nodes, id_to_coord=id_to_coord)
