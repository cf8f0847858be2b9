import math

import pytest

from pacman_agents.game import PacManGame
from pacman_agents.maze import Maze
from pacman_agents.models import GhostId, Move
from pacman_agents.search import ROOT, MinMaxStats, MonteCarloTreeSearch, SearchTree


def constant_rollout(game, path):
    return 1.0


def prefers_left(game, path):
    return 10.0 if path and path[0] == Move.LEFT else 0.0


@pytest.fixture
def game(cross_maze):
    game = PacManGame(cross_maze, ghosts=[GhostId.BLINKY], partial_observability=False, seed=0)
    game.place_ghost(GhostId.BLINKY, 4)
    game.place_pacman(8)
    return game


def test_zero_budget_returns_neutral(game):
    mcts = MonteCarloTreeSearch(GhostId.BLINKY, num_simulations=0, rollout=constant_rollout)

    tree = mcts.build_tree(game, 8)

    assert len(tree) == 1
    assert tree.root.visits == 0
    assert mcts.search(game, 8) == Move.NEUTRAL


@pytest.mark.parametrize("budget", [1, 7, 40])
def test_root_is_visited_once_per_simulation(game, budget):
    mcts = MonteCarloTreeSearch(GhostId.BLINKY, num_simulations=budget, rollout=constant_rollout)

    tree = mcts.build_tree(game, 8)

    assert tree.root.visits == budget
    assert sum(tree[c].visits for c in tree.root.children) == budget - 1


def test_root_children_follow_legal_moves(game):
    mcts = MonteCarloTreeSearch(GhostId.BLINKY, num_simulations=1, rollout=constant_rollout)

    tree = mcts.build_tree(game, 8)

    children = [tree[c] for c in tree.root.children]
    assert [c.move for c in children] == [Move.UP, Move.RIGHT, Move.DOWN, Move.LEFT]
    assert [c.ghost_node for c in children] == [1, 5, 7, 3]
    # Pac-Man is pushed along the same move, or stays put at a wall
    assert [c.pacman_node for c in children] == [7, 8, 8, 8]


def test_terminal_nodes_are_not_expanded(cross_maze):
    game = PacManGame(cross_maze, ghosts=[GhostId.BLINKY], partial_observability=False, seed=0)
    game.place_ghost(GhostId.BLINKY, 4)
    game.place_pacman(4)
    mcts = MonteCarloTreeSearch(GhostId.BLINKY, num_simulations=5, rollout=constant_rollout)

    tree = mcts.build_tree(game, 4)

    assert tree.root.terminal
    assert len(tree) == 1
    assert mcts.search(game, 4) == Move.NEUTRAL


def test_ucb_finds_the_rewarding_move(game):
    mcts = MonteCarloTreeSearch(GhostId.BLINKY, num_simulations=100, rollout=prefers_left)
    assert mcts.search(game, 8) == Move.LEFT


def test_more_simulations_never_lower_the_chosen_visits(game):
    visits = []
    for budget in (20, 40, 80):
        mcts = MonteCarloTreeSearch(GhostId.BLINKY, num_simulations=budget, rollout=prefers_left)
        tree = mcts.build_tree(game, 8)
        best = tree.most_visited_child(ROOT)
        assert tree[best].move == Move.LEFT
        visits.append(tree[best].visits)
    assert visits == sorted(visits)


def test_zero_exploration_follows_visit_counts(game):
    # Greedy on visits keeps descending into the first child
    mcts = MonteCarloTreeSearch(GhostId.BLINKY, num_simulations=50,
                                exploration_constant=0.0, rollout=prefers_left)
    assert mcts.search(game, 8) == Move.UP


def test_tree_paths(game):
    mcts = MonteCarloTreeSearch(GhostId.BLINKY, num_simulations=10,
                                exploration_constant=0.0, rollout=constant_rollout)
    tree = mcts.build_tree(game, 8)

    deepest = max(range(len(tree)), key=lambda i: len(tree.path(i)))
    path = tree.path(deepest)
    assert path[0] == ROOT
    assert tree.moves_to(deepest) == [tree[i].move for i in path[1:]]
    assert tree.moves_to(ROOT) == []


def test_most_visited_child_prefers_first_on_ties():
    tree = SearchTree(4, 8)
    first = tree.add_child(ROOT, Move.UP, 1, 7)
    tree.add_child(ROOT, Move.DOWN, 7, 8)
    assert tree.most_visited_child(ROOT) == first
    assert tree.most_visited_child(first) is None


def test_random_rollout_loses_edible_ghost():
    maze = Maze(["WWWWW", "WP  W", "WWWWW"])
    game = PacManGame(maze, ghosts=[GhostId.BLINKY], seed=0)
    game.place_ghost(GhostId.BLINKY, 1, edible_time=10)
    mcts = MonteCarloTreeSearch(GhostId.BLINKY, rollout_depth=5)

    assert mcts.random_rollout(game, []) == -math.inf


def test_random_rollout_rewards_capture():
    maze = Maze(["WWWWW", "WP  W", "WWWWW"])
    game = PacManGame(maze, ghosts=[GhostId.BLINKY], seed=0)
    game.place_ghost(GhostId.BLINKY, 1)
    mcts = MonteCarloTreeSearch(GhostId.BLINKY, rollout_depth=5)

    assert mcts.random_rollout(game, [Move.LEFT]) == math.inf


def test_random_rollout_places_hidden_pacman_at_target(cross_maze):
    game = PacManGame(cross_maze, ghosts=[GhostId.BLINKY], seed=0)
    game.place_ghost(GhostId.BLINKY, 1)
    game.place_pacman(2)
    view = game.observe(GhostId.BLINKY)
    assert view.pacman_node == -1

    mcts = MonteCarloTreeSearch(GhostId.BLINKY, num_simulations=3, rollout_depth=4, rng=None)
    tree = mcts.build_tree(view, 2)

    assert tree.root.pacman_node == 2
    assert tree.root.visits == 3


def test_min_max_stats():
    stats = MinMaxStats()
    assert stats.normalize(3.0) == 0.5
    assert stats.normalize(math.inf) == 1.0
    assert stats.normalize(-math.inf) == 0.0

    stats.update(math.inf)
    stats.update(0.0)
    stats.update(20.0)
    assert stats.normalize(5.0) == pytest.approx(0.25)
    assert stats.normalize(40.0) == 1.0
