import pytest

from pacman_agents.maze import Maze
from pacman_agents.maze_generator import MazeGenerator
from pacman_agents.models import Move


def test_nodes_are_numbered_row_major(cross_maze):
    assert cross_maze.num_nodes == 9
    assert cross_maze.coords(0) == (1, 3)
    assert cross_maze.coords(4) == (3, 3)
    assert cross_maze.node_at(5, 3) == 8
    assert cross_maze.node_at(0, 0) == -1


def test_shortest_path_distance_follows_corridors(cross_maze):
    assert cross_maze.shortest_path_distance(0, 8) == 4
    assert cross_maze.shortest_path_distance(2, 6) == 4
    assert cross_maze.shortest_path_distance(0, 2) == 4
    assert cross_maze.shortest_path_distance(5, 5) == 0


def test_possible_moves_exclude_reversal(cross_maze):
    assert cross_maze.possible_moves(4) == [Move.UP, Move.RIGHT, Move.DOWN, Move.LEFT]
    assert cross_maze.possible_moves(4, Move.UP) == [Move.UP, Move.RIGHT, Move.LEFT]
    assert cross_maze.possible_moves(4, Move.NEUTRAL) == cross_maze.possible_moves(4)


def test_dead_end_allows_reversal(cross_maze):
    assert cross_maze.possible_moves(0, Move.UP) == [Move.DOWN]


def test_neighbour(cross_maze):
    assert cross_maze.neighbour(4, Move.LEFT) == 3
    assert cross_maze.neighbour(0, Move.LEFT) == -1


def test_next_move_towards_and_away(cross_maze):
    assert cross_maze.next_move_towards(4, 2) == Move.LEFT
    assert cross_maze.next_move_towards(0, 8) == Move.DOWN
    assert cross_maze.next_move_away(3, 2) == Move.RIGHT
    # Moving left already, turning back is not allowed
    assert cross_maze.next_move_away(3, 2, Move.LEFT) == Move.LEFT


def test_next_move_away_prefers_first_move_on_ties(cross_maze):
    # UP, RIGHT and DOWN all end up three steps from node 2
    assert cross_maze.next_move_away(4, 2) == Move.UP


def test_invalid_node_raises_index_error(cross_maze):
    with pytest.raises(IndexError):
        cross_maze.shortest_path_distance(-1, 0)
    with pytest.raises(IndexError):
        cross_maze.neighbour(99, Move.UP)
    with pytest.raises(IndexError):
        cross_maze.next_move_towards(4, -1)


def test_line_of_sight(cross_maze):
    assert cross_maze.line_of_sight(1, 8)
    assert cross_maze.line_of_sight(2, 6)
    assert not cross_maze.line_of_sight(0, 2)


def test_layout_markers():
    maze = Maze(["WWWWWW", "WP.OGW", "WWWWWW"])
    assert maze.pacman_start == 0
    assert maze.pill_indices == (1,)
    assert maze.power_pill_indices == (2,)
    assert maze.ghost_lair == 3
    assert maze.pill_index(1) == 0
    assert maze.pill_index(0) == -1
    assert maze.power_pill_index(2) == 0


def test_lair_defaults_to_center(cross_maze):
    assert cross_maze.ghost_lair == 4


def test_empty_layouts_are_rejected():
    with pytest.raises(ValueError):
        Maze([])
    with pytest.raises(ValueError):
        Maze(["WWW", "WWW"])


@pytest.mark.parametrize("seed", [0, 1, 7])
def test_generated_mazes_are_connected(seed):
    layout = MazeGenerator(15, 15, seed=seed).generate()
    maze = Maze(layout)

    assert len(layout) == 15
    assert all(len(row) == 15 for row in layout)
    assert sum(row.count("P") for row in layout) == 1
    assert sum(row.count("G") for row in layout) == 1
    assert maze.pill_indices
    assert 1 <= len(maze.power_pill_indices) <= 4
    assert all(maze.shortest_path_distance(maze.pacman_start, n) >= 0 for n in range(maze.num_nodes))


def test_generator_is_reproducible():
    assert MazeGenerator(11, 13, seed=3).generate() == MazeGenerator(11, 13, seed=3).generate()


def test_generator_rejects_tiny_mazes():
    with pytest.raises(ValueError):
        MazeGenerator(5, 15)
