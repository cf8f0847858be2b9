# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Ghost controllers.

GhostSearchPolicy is the communicating tree-search ghost. GhostAI holds the
simple scripted policies used as opponents when training Pac-Man.
"""

import logging
import random
from typing import Optional

from .comms import Messenger
from .config import GhostSearchConfig
from .game import PacManGame
from .models import GhostId, MessageType, Move, TargetMemory
from .search import MonteCarloTreeSearch, Rollout

logger = logging.getLogger(__name__)


class GhostSearchPolicy:
    """
    Ghost that shares Pac-Man sightings and chases him with MCTS.

    Per tick the ghost refreshes its memory of Pac-Man (own sighting, or the
    newest sighting received from another ghost), then:

    - with no idea where Pac-Man is, moves at random;
    - when edible, or when Pac-Man is near an available power pill, backs
      away from him;
    - otherwise runs a fixed-budget tree search.

    Args:
        ghost: Which ghost this controller drives.
        messenger: Message bus shared with the other ghosts (optional).
        config: Search and memory settings.
        rollout: Replaces the random rollout scorer of the search.
        seed: Seed for random moves and rollouts.
    """

    def __init__(
        self,
        ghost: GhostId,
        messenger: Optional[Messenger] = None,
        config: Optional[GhostSearchConfig] = None,
        rollout: Optional[Rollout] = None,
        seed: Optional[int] = None,
    ):
        self.ghost = ghost
        self.messenger = messenger
        self.config = config or GhostSearchConfig()
        self.memory = TargetMemory()
        self.rng = random.Random(seed)
        self.search = MonteCarloTreeSearch(
            ghost,
            num_simulations=self.config.num_simulations,
            rollout_depth=self.config.rollout_depth,
            exploration_constant=self.config.exploration_constant,
            rollout=rollout,
            rng=self.rng,
        )

    def reset(self) -> None:
        """Forget Pac-Man at an episode boundary."""
        self.memory.forget()

    def decide(self, game: PacManGame) -> Move:
        """
        Choose this tick's move.

        Args:
            game: The game as observed by this ghost (Pac-Man's node is -1
                when he is out of sight).

        Returns:
            The move to make, or NEUTRAL for "no decision".
        """
        now = game.level_time
        self._housekeeping(now)
        target = self._refresh_memory(game, now)

        if not game.ghost_requires_action(self.ghost):
            return Move.NEUTRAL

        node = game.ghost_node(self.ghost)
        last_move = game.ghost_last_move(self.ghost)

        if target == -1:
            moves = game.possible_moves(node, last_move)
            return self.rng.choice(moves) if moves else Move.NEUTRAL

        try:
            if game.ghost_edible_time(self.ghost) > 0 or self._close_to_power(game, target):
                return game.next_move_away(node, target, last_move)
        except IndexError:
            logger.exception("%s: retreat failed (pacman=%d, ghost=%d)",
                             self.ghost.value, target, node)
            return Move.NEUTRAL

        try:
            return self.search.search(game, target)
        except IndexError:
            logger.exception("%s: search failed (pacman=%d, ghost=%d)",
                             self.ghost.value, target, node)
            return Move.NEUTRAL

    def _housekeeping(self, now: int) -> None:
        """Throw out stale information."""
        if now <= 2 or now - self.memory.tick_observed >= self.config.tick_threshold:
            self.memory.forget()

    def _refresh_memory(self, game: PacManGame, now: int) -> int:
        pacman = game.pacman_node
        if pacman != -1:
            self.memory.update(pacman, now)
            if self.messenger is not None:
                self.messenger.publish(self.ghost, MessageType.PACMAN_SEEN, pacman, now)
            return pacman

        if self.messenger is not None:
            for message in self.messenger.poll(self.ghost, now):
                if message.type is not MessageType.PACMAN_SEEN:
                    continue
                # Only newer information from the past
                if self.memory.tick_observed < message.tick < now:
                    self.memory.update(message.data, message.tick)

        return self.memory.last_known_node

    def _close_to_power(self, game: PacManGame, target: int) -> bool:
        """Whether Pac-Man is near a power pill that is still available."""
        for i, pill in enumerate(game.power_pill_indices):
            available = game.is_power_pill_available(i)
            if available is None:
                return False
            if available and game.shortest_path_distance(pill, target) < self.config.pill_proximity:
                return True
        return False


class GhostAI:
    """
    Scripted ghost policies.

    Each policy takes the game as observed by the ghost and returns a move;
    when Pac-Man is out of sight the chasing policies fall back to random.
    """

    @staticmethod
    def random_policy(game: PacManGame, ghost: GhostId, rng: random.Random = random) -> Move:
        """Random legal move, never reversing unless forced."""
        moves = game.possible_moves(game.ghost_node(ghost), game.ghost_last_move(ghost))
        return rng.choice(moves) if moves else Move.NEUTRAL

    @staticmethod
    def chase_policy(game: PacManGame, ghost: GhostId, rng: random.Random = random) -> Move:
        """Follow the shortest path toward Pac-Man."""
        if game.pacman_node == -1:
            return GhostAI.random_policy(game, ghost, rng)
        return game.next_move_towards(game.ghost_node(ghost), game.pacman_node,
                                      game.ghost_last_move(ghost))

    @staticmethod
    def frightened_policy(game: PacManGame, ghost: GhostId, rng: random.Random = random) -> Move:
        """Run from Pac-Man while edible."""
        if game.pacman_node == -1:
            return GhostAI.random_policy(game, ghost, rng)
        return game.next_move_away(game.ghost_node(ghost), game.pacman_node,
                                   game.ghost_last_move(ghost))

    @staticmethod
    def heuristic_policy(game: PacManGame, ghost: GhostId, rng: random.Random = random) -> Move:
        """Chase normally, flee while edible; INKY and CLYDE mix in randomness."""
        if game.ghost_edible_time(ghost) > 0:
            return GhostAI.frightened_policy(game, ghost, rng)
        if ghost in (GhostId.INKY, GhostId.CLYDE) and rng.random() < 0.5:
            return GhostAI.random_policy(game, ghost, rng)
        return GhostAI.chase_policy(game, ghost, rng)
