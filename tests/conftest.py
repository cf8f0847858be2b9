"""Shared mazes and helpers for the test suite."""

import pytest

from pacman_agents.game import PacManGame
from pacman_agents.maze import Maze
from pacman_agents.models import Move

# Plus-shaped maze. Node ids (row-major):
#   0 = (1,3), 1 = (2,3), 2..6 = (3,1)..(3,5), 7 = (4,3), 8 = (5,3)
# Node 4 = (3,3) is the junction.
CROSS = [
    "WWWWWWW",
    "WWW WWW",
    "WWW WWW",
    "W     W",
    "WWW WWW",
    "WWW WWW",
    "WWWWWWW",
]

# Straight corridor, nodes 0..6 from left to right.
CORRIDOR = [
    "WWWWWWWWW",
    "W       W",
    "WWWWWWWWW",
]


@pytest.fixture
def cross_maze():
    return Maze(CROSS)


@pytest.fixture
def corridor_maze():
    return Maze(CORRIDOR)


@pytest.fixture
def advance_clock():
    """Move the level clock forward without moving anybody."""

    def advance(game: PacManGame, ticks: int) -> None:
        saved = {
            g: (game.ghost_node(g), game.ghost_last_move(g),
                game.ghost_edible_time(g), game.ghost_lair_time(g))
            for g in game.ghost_ids
        }
        for g, (node, _, _, _) in saved.items():
            game.place_ghost(g, node, lair_time=10 ** 6)
        for _ in range(ticks):
            game.advance(Move.NEUTRAL)
        for g, (node, last_move, edible, lair) in saved.items():
            game.place_ghost(g, node, last_move, edible, lair)

    return advance
