# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Maze layout generation for the episode runner.
"""

import random
from collections import deque
from typing import List, Optional

from .maze import GHOST_LAIR, PACMAN_START, PILL, POWER_PILL, WALL


class MazeGenerator:
    """
    Generator for Pac-Man style maze layouts.

    Creates a symmetric corridor grid with a ghost lair in the middle, pills
    in every corridor and a power pill near each corner. Cells that cannot
    be reached from Pac-Man's start are walled off, so the resulting node
    graph is always connected.
    """

    def __init__(self, rows: int = 15, cols: int = 15, seed: Optional[int] = None):
        if rows < 7 or cols < 7:
            raise ValueError(f"Maze must be at least 7x7, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self._rng = random.Random(seed)

    def generate(self) -> List[str]:
        """
        Generate a layout.

        Returns:
            Rows of the maze using the characters understood by Maze.
        """
        maze = [[WALL for _ in range(self.cols)] for _ in range(self.rows)]

        self._carve_corridors(maze)
        self._add_ghost_lair(maze)
        self._place_pacman(maze)
        self._wall_off_unreachable(maze)
        self._place_pills(maze)
        self._place_power_pills(maze)

        return ["".join(row) for row in maze]

    def _carve_corridors(self, maze: List[List[str]]) -> None:
        for i in range(1, self.rows - 1):
            for j in range(1, self.cols - 1):
                if i % 2 == 1 and j % 2 == 1:
                    maze[i][j] = " "
                elif i % 4 == 0 and j % 2 == 1:
                    maze[i][j] = " "
                elif j % 4 == 0 and i % 2 == 1:
                    maze[i][j] = " "

        # Main horizontal corridor and two vertical ones
        mid_row = self.rows // 2
        for j in range(1, self.cols - 1):
            maze[mid_row][j] = " "
        for i in range(1, self.rows - 1):
            maze[i][self.cols // 4] = " "
            maze[i][3 * self.cols // 4] = " "

        # A few random shortcuts so generated mazes differ
        for _ in range((self.rows * self.cols) // 20):
            i = self._rng.randrange(1, self.rows - 1)
            j = self._rng.randrange(1, self.cols - 1)
            maze[i][j] = " "

    def _add_ghost_lair(self, maze: List[List[str]]) -> None:
        center_row = self.rows // 2
        center_col = self.cols // 2

        for i in (center_row - 1, center_row + 1):
            for j in range(max(1, center_col - 2), min(self.cols - 1, center_col + 3)):
                if j != center_col:
                    maze[i][j] = WALL
        for j in range(max(1, center_col - 2), min(self.cols - 1, center_col + 3)):
            maze[center_row][j] = " "
        maze[center_row][center_col] = GHOST_LAIR

    def _place_pacman(self, maze: List[List[str]]) -> None:
        """Put Pac-Man on the open cell nearest the bottom middle."""
        target = (self.rows - 2, self.cols // 2)
        candidates = [
            (i, j)
            for i in range(self.rows)
            for j in range(self.cols)
            if maze[i][j] == " "
        ]
        i, j = min(candidates, key=lambda c: abs(c[0] - target[0]) + abs(c[1] - target[1]))
        maze[i][j] = PACMAN_START

    def _wall_off_unreachable(self, maze: List[List[str]]) -> None:
        start = next(
            (i, j)
            for i in range(self.rows)
            for j in range(self.cols)
            if maze[i][j] == PACMAN_START
        )
        seen = {start}
        queue = deque([start])
        while queue:
            i, j = queue.popleft()
            for ni, nj in ((i - 1, j), (i + 1, j), (i, j - 1), (i, j + 1)):
                if (ni, nj) in seen or not (0 <= ni < self.rows and 0 <= nj < self.cols):
                    continue
                if maze[ni][nj] != WALL:
                    seen.add((ni, nj))
                    queue.append((ni, nj))

        for i in range(self.rows):
            for j in range(self.cols):
                if maze[i][j] != WALL and (i, j) not in seen:
                    maze[i][j] = WALL

        if not any(GHOST_LAIR in row for row in maze):
            # Lair was cut off; drop it on the reachable cell nearest the center.
            center = (self.rows // 2, self.cols // 2)
            i, j = min(
                (c for c in seen if maze[c[0]][c[1]] == " "),
                key=lambda c: abs(c[0] - center[0]) + abs(c[1] - center[1]),
            )
            maze[i][j] = GHOST_LAIR

    def _place_pills(self, maze: List[List[str]]) -> None:
        """Place regular pills in all empty cells outside the lair row."""
        center_row = self.rows // 2
        center_col = self.cols // 2
        for i in range(self.rows):
            for j in range(self.cols):
                in_lair = i == center_row and abs(j - center_col) <= 2
                if maze[i][j] == " " and not in_lair:
                    maze[i][j] = PILL

    def _place_power_pills(self, maze: List[List[str]]) -> None:
        """Turn the pill closest to each corner into a power pill."""
        corners = [
            (1, 1),
            (1, self.cols - 2),
            (self.rows - 2, 1),
            (self.rows - 2, self.cols - 2),
        ]
        pills = [
            (i, j)
            for i in range(self.rows)
            for j in range(self.cols)
            if maze[i][j] == PILL
        ]
        for corner in corners:
            remaining = [p for p in pills if maze[p[0]][p[1]] == PILL]
            if not remaining:
                return
            i, j = min(remaining, key=lambda p: abs(p[0] - corner[0]) + abs(p[1] - corner[1]))
            maze[i][j] = POWER_PILL
