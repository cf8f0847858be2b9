# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Reference Pac-Man game engine.

This module implements the game snapshot the controllers decide on: agent
positions, pill availability, edible and lair timers, score/lives/level
counters, the level clock, path queries and a forward-simulation primitive
(copy + advance) used by tree-search rollouts.
"""

import copy
import logging
import random
from dataclasses import replace
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from .maze import Maze
from .models import GhostId, GhostState, Move

logger = logging.getLogger(__name__)


class PacManGame:
    """
    Mutable Pac-Man game state with a partially observable view.

    Args:
        maze: The maze graph.
        ghosts: Which ghosts take part (default: all four).
        lives: Lives at the start of the game.
        level_limit: Level time after which the next level starts anyway.
        partial_observability: When set, observe() hides agents and pills
            outside the observer's line of sight.
        seed: Seed for the engine's own random choices.

    Example:
        >>> game = PacManGame(Maze(layout), seed=0)
        >>> game.advance(Move.LEFT, {GhostId.BLINKY: Move.UP})
        >>> print(game.score, game.lives)
    """

    # Score values
    PILL_SCORE = 10
    POWER_PILL_SCORE = 50
    GHOST_EAT_SCORE = 200

    # Game constants
    EDIBLE_TIME = 40
    COMMON_LAIR_TIME = 20
    INITIAL_LIVES = 3
    LEVEL_LIMIT = 2000
    INITIAL_LAIR_TIMES = {
        GhostId.BLINKY: 0,
        GhostId.PINKY: 5,
        GhostId.INKY: 10,
        GhostId.CLYDE: 15,
    }

    def __init__(
        self,
        maze: Maze,
        ghosts: Iterable[GhostId] = tuple(GhostId),
        lives: int = INITIAL_LIVES,
        level_limit: int = LEVEL_LIMIT,
        partial_observability: bool = True,
        seed: Optional[int] = None,
    ):
        self.maze = maze
        self.partial_observability = partial_observability
        self._ghost_ids = tuple(ghosts)
        self._level_limit = level_limit
        self._rng = random.Random(seed)

        self._score = 0
        self._lives = lives
        self._level = 0
        self._level_time = 0
        self._total_time = 0
        self._num_ghosts_eaten = 0
        self._ghost_multiplier = 1
        self._game_over = False

        # Events of the last advance()
        self._pacman_eaten = False
        self._eaten_ghosts: set = set()

        # Observation masks, set only on observe() copies
        self._hidden_ghosts: FrozenSet[GhostId] = frozenset()
        self._hidden_pills: FrozenSet[int] = frozenset()
        self._hidden_power_pills: FrozenSet[int] = frozenset()

        self._pacman_node = maze.pacman_start
        self._pacman_last_move = Move.NEUTRAL
        self._ghosts: Dict[GhostId, GhostState] = {}
        self._pills: List[bool] = []
        self._power_pills: List[bool] = []
        self._new_level_state()

    # ------------------------------------------------------------------
    # Forward simulation
    # ------------------------------------------------------------------

    def copy(self) -> "PacManGame":
        """Independent copy sharing only the immutable maze."""
        clone = copy.copy(self)
        clone._ghosts = {g: replace(state) for g, state in self._ghosts.items()}
        clone._pills = list(self._pills)
        clone._power_pills = list(self._power_pills)
        clone._eaten_ghosts = set(self._eaten_ghosts)
        clone._rng = random.Random()
        clone._rng.setstate(self._rng.getstate())
        return clone

    def observe(self, observer: Optional[GhostId] = None) -> "PacManGame":
        """
        Copy of the game as seen by one agent.

        Args:
            observer: The observing ghost, or None for Pac-Man.

        Returns:
            A copy where, under partial observability, Pac-Man's node is -1
            for a ghost that cannot see him, and ghosts/pills outside
            Pac-Man's line of sight read as -1/None for Pac-Man.
        """
        view = self.copy()
        if not self.partial_observability:
            return view

        if observer is not None:
            own_node = self._ghosts[observer].node
            if self._pacman_node != -1 and not self.maze.line_of_sight(own_node, self._pacman_node):
                view._pacman_node = -1
            return view

        pacman = self._pacman_node
        view._hidden_ghosts = frozenset(
            g for g, state in self._ghosts.items()
            if not self.maze.line_of_sight(pacman, state.node)
        )
        view._hidden_pills = frozenset(
            i for i, node in enumerate(self.maze.pill_indices)
            if not self.maze.line_of_sight(pacman, node)
        )
        view._hidden_power_pills = frozenset(
            i for i, node in enumerate(self.maze.power_pill_indices)
            if not self.maze.line_of_sight(pacman, node)
        )
        return view

    def advance(self, pacman_move: Move, ghost_moves: Optional[Mapping[GhostId, Move]] = None) -> None:
        """
        Play one tick.

        Ghosts missing from ghost_moves (or given an illegal move) keep going
        in their last direction when they can, else take a random legal move.
        Advancing a finished game does nothing.
        """
        if self._game_over:
            return

        self._pacman_eaten = False
        self._eaten_ghosts = set()
        self._hidden_ghosts = frozenset()
        self._hidden_pills = frozenset()
        self._hidden_power_pills = frozenset()
        self._level_time += 1
        self._total_time += 1

        self._update_pacman(pacman_move)
        self._eat_pills()
        self._feast()
        if not self._pacman_eaten:
            self._update_ghosts(ghost_moves or {})
            self._feast()
        self._update_timers()
        self._check_level_state()

    def place_pacman(self, node: int, last_move: Move = Move.NEUTRAL) -> None:
        self.maze.coords(node)
        self._pacman_node = node
        self._pacman_last_move = last_move

    def place_ghost(self, ghost: GhostId, node: int, last_move: Move = Move.NEUTRAL,
                    edible_time: int = 0, lair_time: int = 0) -> None:
        self.maze.coords(node)
        self._ghosts[ghost] = GhostState(node, last_move, edible_time, lair_time)

    def eat_pill(self, index: int) -> None:
        """Mark a pill as eaten without moving Pac-Man."""
        self._pills[index] = False

    def eat_power_pill(self, index: int) -> None:
        self._power_pills[index] = False

    # ------------------------------------------------------------------
    # Snapshot queries
    # ------------------------------------------------------------------

    @property
    def ghost_ids(self) -> tuple:
        return self._ghost_ids

    @property
    def pacman_node(self) -> int:
        return self._pacman_node

    @property
    def pacman_last_move(self) -> Move:
        return self._pacman_last_move

    @property
    def score(self) -> int:
        return self._score

    @property
    def lives(self) -> int:
        return self._lives

    @property
    def level(self) -> int:
        return self._level

    @property
    def level_time(self) -> int:
        return self._level_time

    @property
    def total_time(self) -> int:
        return self._total_time

    @property
    def pill_indices(self) -> tuple:
        return self.maze.pill_indices

    @property
    def power_pill_indices(self) -> tuple:
        return self.maze.power_pill_indices

    @property
    def num_pills(self) -> int:
        return len(self._pills)

    @property
    def num_active_pills(self) -> int:
        return sum(self._pills)

    @property
    def num_ghosts_eaten(self) -> int:
        """Ghosts eaten during the current level."""
        return self._num_ghosts_eaten

    def ghost_node(self, ghost: GhostId) -> int:
        if ghost in self._hidden_ghosts:
            return -1
        return self._ghosts[ghost].node

    def ghost_last_move(self, ghost: GhostId) -> Move:
        return self._ghosts[ghost].last_move

    def ghost_edible_time(self, ghost: GhostId) -> int:
        return self._ghosts[ghost].edible_time

    def ghost_lair_time(self, ghost: GhostId) -> int:
        return self._ghosts[ghost].lair_time

    def ghost_requires_action(self, ghost: GhostId) -> bool:
        """Whether the ghost is out of the lair and has a real choice to make."""
        state = self._ghosts[ghost]
        if state.lair_time > 0:
            return False
        return len(self.maze.possible_moves(state.node, state.last_move)) > 1

    def is_pill_available(self, index: int) -> Optional[bool]:
        """Availability of a pill, or None if the observer cannot see it."""
        if index in self._hidden_pills:
            return None
        return self._pills[index]

    def is_power_pill_available(self, index: int) -> Optional[bool]:
        if index in self._hidden_power_pills:
            return None
        return self._power_pills[index]

    def was_pacman_eaten(self) -> bool:
        return self._pacman_eaten

    def was_ghost_eaten(self, ghost: GhostId) -> bool:
        return ghost in self._eaten_ghosts

    def game_over(self) -> bool:
        return self._game_over

    # ------------------------------------------------------------------
    # Path queries
    # ------------------------------------------------------------------

    def possible_moves(self, node: int, last_move: Optional[Move] = None) -> List[Move]:
        return self.maze.possible_moves(node, last_move)

    def neighbour(self, node: int, move: Move) -> int:
        return self.maze.neighbour(node, move)

    def shortest_path_distance(self, source: int, target: int) -> int:
        return self.maze.shortest_path_distance(source, target)

    def next_move_towards(self, source: int, target: int,
                          last_move: Optional[Move] = None) -> Move:
        return self.maze.next_move_towards(source, target, last_move)

    def next_move_away(self, source: int, target: int,
                       last_move: Optional[Move] = None) -> Move:
        return self.maze.next_move_away(source, target, last_move)

    # ------------------------------------------------------------------
    # Game rules
    # ------------------------------------------------------------------

    def _new_level_state(self) -> None:
        self._pills = [True] * len(self.maze.pill_indices)
        self._power_pills = [True] * len(self.maze.power_pill_indices)
        self._level_time = 0
        self._num_ghosts_eaten = 0
        self._reset_positions()

    def _reset_positions(self) -> None:
        self._pacman_node = self.maze.pacman_start
        self._pacman_last_move = Move.NEUTRAL
        self._ghosts = {
            g: GhostState(self.maze.ghost_lair, lair_time=self.INITIAL_LAIR_TIMES[g])
            for g in self._ghost_ids
        }
        self._ghost_multiplier = 1

    def _update_pacman(self, move: Move) -> None:
        node = self._pacman_node
        if node == -1:
            return
        possible = self.maze.possible_moves(node)
        if move not in possible:
            # Keep going the way we were, or stop at a wall.
            if self._pacman_last_move not in possible:
                return
            move = self._pacman_last_move
        self._pacman_node = self.maze.neighbour(node, move)
        self._pacman_last_move = move

    def _eat_pills(self) -> None:
        node = self._pacman_node
        if node == -1:
            return

        index = self.maze.pill_index(node)
        if index != -1 and self._pills[index]:
            self._pills[index] = False
            self._score += self.PILL_SCORE

        index = self.maze.power_pill_index(node)
        if index != -1 and self._power_pills[index]:
            self._power_pills[index] = False
            self._score += self.POWER_PILL_SCORE
            self._ghost_multiplier = 1
            for state in self._ghosts.values():
                if state.lair_time == 0:
                    state.edible_time = self.EDIBLE_TIME

    def _feast(self) -> None:
        """Resolve Pac-Man/ghost collisions."""
        node = self._pacman_node
        if node == -1:
            return

        for ghost, state in self._ghosts.items():
            if state.lair_time > 0 or state.node != node:
                continue
            if state.edible_time > 0:
                self._score += self.GHOST_EAT_SCORE * self._ghost_multiplier
                self._ghost_multiplier *= 2
                self._num_ghosts_eaten += 1
                self._eaten_ghosts.add(ghost)
                state.node = self.maze.ghost_lair
                state.last_move = Move.NEUTRAL
                state.edible_time = 0
                state.lair_time = self.COMMON_LAIR_TIME
            else:
                self._lose_life()
                return

    def _lose_life(self) -> None:
        self._lives -= 1
        self._pacman_eaten = True
        if self._lives <= 0:
            self._game_over = True
            logger.debug("Game over at tick %d with score %d", self._total_time, self._score)
        else:
            self._reset_positions()

    def _update_ghosts(self, moves: Mapping[GhostId, Move]) -> None:
        for ghost, state in self._ghosts.items():
            if state.lair_time > 0:
                continue
            possible = self.maze.possible_moves(state.node, state.last_move)
            if not possible:
                continue
            move = moves.get(ghost)
            if move not in possible:
                move = state.last_move if state.last_move in possible else self._rng.choice(possible)
            state.node = self.maze.neighbour(state.node, move)
            state.last_move = move

    def _update_timers(self) -> None:
        for state in self._ghosts.values():
            if state.edible_time > 0:
                state.edible_time -= 1
            if state.lair_time > 0:
                state.lair_time -= 1

    def _check_level_state(self) -> None:
        if self._game_over:
            return
        has_pills = bool(self._pills or self._power_pills)
        cleared = has_pills and not any(self._pills) and not any(self._power_pills)
        if cleared or self._level_time >= self._level_limit:
            self._level += 1
            logger.debug("Level %d starts at tick %d", self._level, self._total_time)
            self._new_level_state()
