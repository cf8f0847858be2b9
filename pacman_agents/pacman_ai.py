# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Q-learning Pac-Man controller.

Strategies, first match wins:
1. Evade a visible ghost that is neither edible nor in the lair and too close.
2. Go after the first visible pill, then the first visible power pill.
3. Hunt the nearest visible edible ghost.
4. Explore at random or exploit the best known Q-value, learning online.
"""

import logging
import random
from typing import Optional

from .config import PacmanLearningConfig
from .game import PacManGame
from .models import Move
from .qlearning import CumulativeReward, LearnerState, RewardFunction

logger = logging.getLogger(__name__)


class PacmanLearningPolicy:
    """
    Heuristic Pac-Man with a tabular Q-learning fallback.

    Args:
        config: Learning and heuristic settings.
        reward_function: Maps the game to a scalar reward every tick
            (default: CumulativeReward with the config's weights).
        state: Learner state to own; a fresh one by default.
        seed: Seed for exploration.

    Example:
        >>> policy = PacmanLearningPolicy(seed=0)
        >>> move = policy.decide(game.observe())
        >>> policy.state.rewards.summary()
    """

    def __init__(
        self,
        config: Optional[PacmanLearningConfig] = None,
        reward_function: Optional[RewardFunction] = None,
        state: Optional[LearnerState] = None,
        seed: Optional[int] = None,
    ):
        self.config = config or PacmanLearningConfig()
        self.reward_function = reward_function or CumulativeReward(self.config.reward_weights)
        self.state = state if state is not None else LearnerState()
        self.rng = random.Random(seed)

    def decide(self, game: PacManGame, state: Optional[LearnerState] = None) -> Move:
        """
        Choose Pac-Man's move for this tick.

        Args:
            game: The game as observed by Pac-Man.
            state: Learner state to use instead of the owned one.

        Returns:
            The move to make.
        """
        state = state if state is not None else self.state
        current = game.pacman_node

        reward = self.reward_function(game)
        state.rewards.append(reward)

        move = self._evade(game, current)
        if move is None:
            move = self._seek_pills(game, current)
        if move is None:
            move = self._hunt(game, current)
        if move is None:
            move = self._learned_move(game, current, reward, state)
        return move

    def end_episode(self) -> None:
        """Drop the pending transition; the Q-table is kept."""
        self.state.end_episode()
        if hasattr(self.reward_function, "reset"):
            self.reward_function.reset()

    def reset(self) -> None:
        """Forget everything learned."""
        self.end_episode()
        self.state.reset()

    def _evade(self, game: PacManGame, current: int) -> Optional[Move]:
        for ghost in game.ghost_ids:
            if game.ghost_edible_time(ghost) > 0 or game.ghost_lair_time(ghost) > 0:
                continue
            location = game.ghost_node(ghost)
            if location == -1:
                continue
            distance = game.shortest_path_distance(current, location)
            if 0 <= distance < self.config.evade_distance:
                logger.debug("Evading %s at distance %d", ghost.value, distance)
                return game.next_move_away(current, location)
        return None

    def _seek_pills(self, game: PacManGame, current: int) -> Optional[Move]:
        for i, pill in enumerate(game.pill_indices):
            if game.is_pill_available(i):
                return game.next_move_towards(current, pill)
        for i, pill in enumerate(game.power_pill_indices):
            if game.is_power_pill_available(i):
                return game.next_move_towards(current, pill)
        return None

    def _hunt(self, game: PacManGame, current: int) -> Optional[Move]:
        nearest, min_distance = -1, None
        for ghost in game.ghost_ids:
            if game.ghost_edible_time(ghost) <= 0:
                continue
            location = game.ghost_node(ghost)
            if location == -1:
                continue
            distance = game.shortest_path_distance(current, location)
            if min_distance is None or distance < min_distance:
                nearest, min_distance = location, distance
        if nearest == -1:
            return None
        return game.next_move_towards(current, nearest)

    def _learned_move(self, game: PacManGame, current: int, reward: float,
                      state: LearnerState) -> Move:
        moves = game.possible_moves(current, state.last_move)
        if not moves:
            # Must be possible to turn around
            return game.pacman_last_move.opposite()

        if self.rng.random() < self.config.exploration_probability:
            move = self.rng.choice(moves)
        else:
            move = state.q_table.best_action(current, moves)

        if state.last_move is not None and state.last_state is not None:
            next_max = state.q_table.max_value(current, moves)
            updated = state.q_table.update(
                state.last_state, state.last_move, reward, next_max,
                self.config.learning_rate, self.config.discount_factor,
            )
            logger.debug("Q(%s, %s) -> %.3f (r=%.2f)", state.last_state,
                         state.last_move.value, updated, reward)

        state.last_state = current
        state.last_move = move
        return move
