"""
Union-Find over a flat cell index space.

Cells are numbered 0..size-1 by the grid (r * cols + c). The structure keeps a
live count of components so the grid can report its region count without
rescanning the board.
"""


class UnionFind:
    """Disjoint sets with path compression and union by size."""

    def __init__(self, size: int):
        self.parent = list(range(size))
        self.size = [1] * size
        self.count = size  # Number of live roots

    def find(self, i: int) -> int:
        """Return the root of the set containing i (compresses the path)."""
        root = i
        while self.parent[root] != root:
            root = self.parent[root]

        while self.parent[i] != root:
            self.parent[i], i = root, self.parent[i]

        return root

    def union(self, i: int, j: int) -> bool:
        """Merge the sets of i and j. Returns False if they were already merged."""
        root_i = self.find(i)
        root_j = self.find(j)
        if root_i == root_j:
            return False

        # Attach the smaller tree under the larger one
        if self.size[root_i] < self.size[root_j]:
            root_i, root_j = root_j, root_i
        self.parent[root_j] = root_i
        self.size[root_i] += self.size[root_j]
        self.count -= 1
        return True
