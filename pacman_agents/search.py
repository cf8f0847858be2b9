# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Monte Carlo Tree Search over ghost and Pac-Man positions.

The tree is stored in an arena: nodes live in one list and refer to their
parent and children by index, so a whole tree is dropped in one go after
each decision.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .game import PacManGame
from .models import GhostId, Move

logger = logging.getLogger(__name__)

ROOT = 0

# (live game, moves from the root to the node being evaluated) -> score
Rollout = Callable[[PacManGame, Sequence[Move]], float]


@dataclass
class SearchNode:
    """
    A node of the search tree.

    Attributes:
        parent: Index of the parent node, -1 for the root.
        move: Move that led here (for the root, the ghost's last move).
        ghost_node: Simulated ghost position.
        pacman_node: Simulated Pac-Man position.
        visits: Number of simulations that passed through this node.
        score: Sum of raw rollout scores (may be infinite).
        value_sum: Sum of rollout scores normalized to [0, 1].
        children: Indices of child nodes, in move enumeration order.
    """
    parent: int
    move: Move
    ghost_node: int
    pacman_node: int
    visits: int = 0
    score: float = 0.0
    value_sum: float = 0.0
    children: List[int] = field(default_factory=list)

    @property
    def terminal(self) -> bool:
        return self.ghost_node == self.pacman_node


class SearchTree:
    """Arena of SearchNodes; index 0 is the root."""

    def __init__(self, ghost_node: int, pacman_node: int, last_move: Move = Move.NEUTRAL):
        self.nodes: List[SearchNode] = [SearchNode(-1, last_move, ghost_node, pacman_node)]

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> SearchNode:
        return self.nodes[index]

    @property
    def root(self) -> SearchNode:
        return self.nodes[ROOT]

    def add_child(self, parent: int, move: Move, ghost_node: int, pacman_node: int) -> int:
        index = len(self.nodes)
        self.nodes.append(SearchNode(parent, move, ghost_node, pacman_node))
        self.nodes[parent].children.append(index)
        return index

    def path(self, index: int) -> List[int]:
        """Node indices from the root down to index."""
        path = []
        while index != -1:
            path.append(index)
            index = self.nodes[index].parent
        path.reverse()
        return path

    def moves_to(self, index: int) -> List[Move]:
        """Moves played from the root to reach index."""
        return [self.nodes[i].move for i in self.path(index)[1:]]

    def most_visited_child(self, index: int) -> Optional[int]:
        """Child with the most visits, first in enumeration order on ties."""
        best = None
        for child in self.nodes[index].children:
            if best is None or self.nodes[child].visits > self.nodes[best].visits:
                best = child
        return best


class MinMaxStats:
    """Running bounds used to squash rollout scores into [0, 1]."""

    def __init__(self):
        self.maximum = -float('inf')
        self.minimum = float('inf')

    def update(self, value: float):
        if math.isfinite(value):
            self.maximum = max(self.maximum, value)
            self.minimum = min(self.minimum, value)

    def normalize(self, value: float) -> float:
        if value == float('inf'):
            return 1.0
        if value == -float('inf'):
            return 0.0
        if self.maximum > self.minimum:
            return max(0.0, min(1.0, (value - self.minimum) / (self.maximum - self.minimum)))
        # Neutral value until a range is established
        return 0.5


class MonteCarloTreeSearch:
    """
    Fixed-budget tree search for one ghost chasing Pac-Man.

    Each simulation selects a leaf, expands it with one child per legal
    ghost move (Pac-Man is advanced along the same move), scores it with a
    rollout from the live game and adds the score to every node on the path
    back to the root.

    Args:
        ghost: The searching ghost.
        num_simulations: Simulations per search.
        rollout_depth: Maximum ticks in a random rollout.
        exploration_constant: 0 descends by visit count alone; a positive
            value tries unvisited children first, then uses UCB1.
        rollout: Replaces the default random rollout, e.g. with a
            deterministic scorer.
        rng: Random source for rollouts.
    """

    def __init__(
        self,
        ghost: GhostId,
        num_simulations: int = 100,
        rollout_depth: int = 20,
        exploration_constant: float = math.sqrt(2),
        rollout: Optional[Rollout] = None,
        rng: Optional[random.Random] = None,
    ):
        self.ghost = ghost
        self.num_simulations = num_simulations
        self.rollout_depth = rollout_depth
        self.exploration_constant = exploration_constant
        self.rollout = rollout or self.random_rollout
        self.rng = rng or random.Random()
        self.target_node = -1

    def search(self, game: PacManGame, target_node: int) -> Move:
        """
        Pick a move for the ghost.

        Returns:
            The move of the root's most visited child, NEUTRAL if the root
            was never expanded.
        """
        tree = self.build_tree(game, target_node)
        best = tree.most_visited_child(ROOT)
        if best is None:
            return Move.NEUTRAL
        logger.debug("%s: %d simulations, %d nodes, best %s (%d visits)",
                     self.ghost.value, self.num_simulations, len(tree),
                     tree[best].move.value, tree[best].visits)
        return tree[best].move

    def build_tree(self, game: PacManGame, target_node: int) -> SearchTree:
        self.target_node = target_node
        tree = SearchTree(game.ghost_node(self.ghost), target_node, game.ghost_last_move(self.ghost))
        stats = MinMaxStats()

        for _ in range(self.num_simulations):
            leaf = self._select(tree)
            self._expand(tree, leaf, game)
            score = self.rollout(game, tree.moves_to(leaf))
            self._backpropagate(tree, leaf, score, stats)

        return tree

    def random_rollout(self, game: PacManGame, path: Sequence[Move]) -> float:
        """
        Play random moves on a copy of the live game.

        The searching ghost first replays the tree path, then moves at
        random; Pac-Man moves at random throughout. If Pac-Man is hidden in
        the copy he is placed at the remembered target node.

        Returns:
            -inf if the ghost is eaten, +inf if Pac-Man is eaten or the game
            ends, otherwise the game score at the end of the rollout.
        """
        sim = game.copy()
        if sim.pacman_node == -1:
            sim.place_pacman(self.target_node)

        score = float(sim.score)
        for depth in range(self.rollout_depth):
            if depth < len(path):
                ghost_move = path[depth]
            else:
                ghost_move = self._random_move(
                    sim.possible_moves(sim.ghost_node(self.ghost), sim.ghost_last_move(self.ghost))
                )
            pacman_move = self._random_move(
                sim.possible_moves(sim.pacman_node, sim.pacman_last_move)
            )

            sim.advance(pacman_move, {self.ghost: ghost_move})

            if sim.was_ghost_eaten(self.ghost):
                return -float('inf')
            if sim.was_pacman_eaten() or sim.game_over():
                return float('inf')
            score = float(sim.score)

        return score

    def _random_move(self, moves: Sequence[Move]) -> Move:
        return self.rng.choice(moves) if moves else Move.NEUTRAL

    def _select(self, tree: SearchTree) -> int:
        index = ROOT
        while tree[index].children and not tree[index].terminal:
            index = self._best_child(tree, index)
        return index

    def _best_child(self, tree: SearchTree, index: int) -> int:
        if self.exploration_constant <= 0:
            return tree.most_visited_child(index)

        node = tree[index]
        for child in node.children:
            if tree[child].visits == 0:
                return child

        log_visits = math.log(max(node.visits, 1))
        best, best_ucb = node.children[0], -float('inf')
        for child in node.children:
            c = tree[child]
            ucb = c.value_sum / c.visits + self.exploration_constant * math.sqrt(log_visits / c.visits)
            if ucb > best_ucb:
                best, best_ucb = child, ucb
        return best

    def _expand(self, tree: SearchTree, index: int, game: PacManGame) -> None:
        node = tree[index]
        if node.children or node.terminal:
            return
        for move in game.possible_moves(node.ghost_node, node.move):
            ghost_node = game.neighbour(node.ghost_node, move)
            pacman_node = game.neighbour(node.pacman_node, move)
            if pacman_node == -1:
                pacman_node = node.pacman_node
            tree.add_child(index, move, ghost_node, pacman_node)

    def _backpropagate(self, tree: SearchTree, index: int, score: float, stats: MinMaxStats) -> None:
        stats.update(score)
        value = stats.normalize(score)
        while index != -1:
            node = tree[index]
            node.visits += 1
            node.score += score
            node.value_sum += value
            index = node.parent
