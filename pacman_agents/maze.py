# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Maze graph and shortest-path queries.

A maze is built from a text layout and turned into a graph of nodes (one per
walkable cell). Shortest-path distances between every pair of nodes are
precomputed once, so distance queries during search are table lookups.

Layout characters:
    'W' = wall, ' ' = empty, '.' = pill, 'O' = power pill,
    'P' = Pac-Man start, 'G' = ghost lair (both walkable)
"""

from collections import deque
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .models import DIRECTIONS, Move

WALL = "W"
PILL = "."
POWER_PILL = "O"
PACMAN_START = "P"
GHOST_LAIR = "G"

# Direction vectors
DELTAS = {
    Move.UP: (-1, 0),
    Move.RIGHT: (0, 1),
    Move.DOWN: (1, 0),
    Move.LEFT: (0, -1),
}


class Maze:
    """
    Immutable node graph of a Pac-Man maze.

    Args:
        layout: Rows of the maze, one string (or list of characters) per row.

    Example:
        >>> maze = Maze(["WWWWW", "WP.OW", "WWWWW"])
        >>> maze.shortest_path_distance(maze.pacman_start, maze.power_pill_indices[0])
        2
    """

    def __init__(self, layout: Sequence[Sequence[str]]):
        self.layout: List[str] = ["".join(row) for row in layout]
        if not self.layout or not self.layout[0]:
            raise ValueError("Maze layout must not be empty")

        self.rows = len(self.layout)
        self.cols = max(len(row) for row in self.layout)

        self._coords: List[Tuple[int, int]] = []
        self._index: Dict[Tuple[int, int], int] = {}
        pills: List[int] = []
        power_pills: List[int] = []
        pacman_start: Optional[int] = None
        ghost_lair: Optional[int] = None

        for i, row in enumerate(self.layout):
            for j, cell in enumerate(row):
                if cell == WALL:
                    continue
                node = len(self._coords)
                self._coords.append((i, j))
                self._index[(i, j)] = node
                if cell == PILL:
                    pills.append(node)
                elif cell == POWER_PILL:
                    power_pills.append(node)
                elif cell == PACMAN_START and pacman_start is None:
                    pacman_start = node
                elif cell == GHOST_LAIR and ghost_lair is None:
                    ghost_lair = node

        if not self._coords:
            raise ValueError("Maze layout has no walkable cells")

        self.pill_indices: Tuple[int, ...] = tuple(pills)
        self.power_pill_indices: Tuple[int, ...] = tuple(power_pills)
        self._pill_lookup = {node: i for i, node in enumerate(pills)}
        self._power_pill_lookup = {node: i for i, node in enumerate(power_pills)}
        self.pacman_start: int = pacman_start if pacman_start is not None else 0
        self.ghost_lair: int = ghost_lair if ghost_lair is not None else self._nearest_to_center()

        self._neighbours: List[Dict[Move, int]] = []
        for (i, j) in self._coords:
            links = {}
            for move in DIRECTIONS:
                dr, dc = DELTAS[move]
                other = self._index.get((i + dr, j + dc))
                if other is not None:
                    links[move] = other
            self._neighbours.append(links)

        self._distances = self._all_pairs_distances()

    @property
    def num_nodes(self) -> int:
        return len(self._coords)

    def coords(self, node: int) -> Tuple[int, int]:
        """Get the (row, col) cell of a node."""
        self._check(node)
        return self._coords[node]

    def node_at(self, row: int, col: int) -> int:
        """Get the node at a cell, or -1 for walls and out-of-bounds cells."""
        return self._index.get((row, col), -1)

    def pill_index(self, node: int) -> int:
        """Position of a node in pill_indices, or -1 if it holds no pill."""
        return self._pill_lookup.get(node, -1)

    def power_pill_index(self, node: int) -> int:
        return self._power_pill_lookup.get(node, -1)

    def neighbour(self, node: int, move: Move) -> int:
        """Get the node reached by one step, or -1 if the move is blocked."""
        self._check(node)
        return self._neighbours[node].get(move, -1)

    def possible_moves(self, node: int, last_move: Optional[Move] = None) -> List[Move]:
        """
        Get legal moves from a node.

        Args:
            node: Current node index.
            last_move: Move that brought the mover here. When given, reversing
                it is excluded unless it is the only way out.

        Returns:
            Legal moves in enumeration order.
        """
        self._check(node)
        moves = list(self._neighbours[node])
        if last_move is None or last_move is Move.NEUTRAL:
            return moves
        reverse = last_move.opposite()
        forward = [m for m in moves if m is not reverse]
        return forward if forward else moves

    def shortest_path_distance(self, source: int, target: int) -> int:
        """Path distance between two nodes (-1 if unreachable)."""
        self._check(source)
        self._check(target)
        return int(self._distances[source, target])

    def next_move_towards(self, source: int, target: int,
                          last_move: Optional[Move] = None) -> Move:
        """Legal move whose next node is closest to the target."""
        return self._best_move(source, target, last_move, towards=True)

    def next_move_away(self, source: int, target: int,
                       last_move: Optional[Move] = None) -> Move:
        """Legal move whose next node is farthest from the target."""
        return self._best_move(source, target, last_move, towards=False)

    def line_of_sight(self, a: int, b: int) -> bool:
        """Whether two nodes share a row or column with no wall between them."""
        (r1, c1), (r2, c2) = self.coords(a), self.coords(b)
        if r1 == r2:
            lo, hi = sorted((c1, c2))
            return all((r1, c) in self._index for c in range(lo, hi + 1))
        if c1 == c2:
            lo, hi = sorted((r1, r2))
            return all((r, c1) in self._index for r in range(lo, hi + 1))
        return False

    def _best_move(self, source: int, target: int, last_move: Optional[Move],
                   towards: bool) -> Move:
        self._check(target)
        best_move = Move.NEUTRAL
        best_distance = None
        for move in self.possible_moves(source, last_move):
            distance = int(self._distances[self._neighbours[source][move], target])
            if distance < 0:
                continue
            if (best_distance is None
                    or (towards and distance < best_distance)
                    or (not towards and distance > best_distance)):
                best_distance = distance
                best_move = move
        return best_move

    def _check(self, node: int) -> None:
        # Negative ids must not wrap around in the numpy table.
        if not 0 <= node < len(self._coords):
            raise IndexError(f"Node index {node} out of range [0, {len(self._coords)})")

    def _nearest_to_center(self) -> int:
        center = (self.rows // 2, self.cols // 2)
        return min(
            range(len(self._coords)),
            key=lambda n: abs(self._coords[n][0] - center[0]) + abs(self._coords[n][1] - center[1]),
        )

    def _all_pairs_distances(self) -> np.ndarray:
        """Breadth-first search from every node."""
        n = len(self._coords)
        distances = np.full((n, n), -1, dtype=np.int32)
        for source in range(n):
            distances[source, source] = 0
            queue = deque([source])
            while queue:
                node = queue.popleft()
                for other in self._neighbours[node].values():
                    if distances[source, other] < 0:
                        distances[source, other] = distances[source, node] + 1
                        queue.append(other)
        return distances
