# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Tabular Q-learning pieces for the Pac-Man controller.

Q-value update:
    Q(s, a) <- Q(s, a) + alpha * (r + gamma * max_a' Q(s', a') - Q(s, a))

The reward is a pluggable strategy. CumulativeReward scores the whole game
state so far (pills, ghosts, level, time, lost lives) rather than the last
transition, so its magnitude drifts over an episode; DifferentialReward
turns it into a per-tick delta for anyone tuning the learner.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, List, Optional, Sequence, Tuple

import numpy as np

from .config import RewardWeights
from .game import PacManGame
from .models import Move

logger = logging.getLogger(__name__)

StateKey = Hashable
RewardFunction = Callable[[PacManGame], float]


class QTable:
    """
    Sparse Q-value table keyed by (state, action).

    Missing entries read as 0.0; an entry only exists once it is written.
    """

    def __init__(self, default: float = 0.0):
        self.default = default
        self._values: Dict[Tuple[StateKey, Move], float] = {}

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: Tuple[StateKey, Move]) -> bool:
        return key in self._values

    def get(self, state: StateKey, action: Move) -> float:
        return self._values.get((state, action), self.default)

    def set(self, state: StateKey, action: Move, value: float) -> None:
        self._values[(state, action)] = value

    def best_action(self, state: StateKey, actions: Sequence[Move]) -> Move:
        """Highest-valued action, first in the given order on ties."""
        best = actions[0]
        best_value = -float('inf')
        for action in actions:
            value = self.get(state, action)
            if value > best_value:
                best, best_value = action, value
        return best

    def max_value(self, state: StateKey, actions: Sequence[Move]) -> float:
        """Largest Q-value over actions, 0.0 when there are none."""
        if not actions:
            return 0.0
        return max(self.get(state, a) for a in actions)

    def update(self, state: StateKey, action: Move, reward: float, next_max: float,
               learning_rate: float, discount_factor: float) -> float:
        """Apply one Q-learning step and return the new value."""
        current = self.get(state, action)
        updated = current + learning_rate * (reward + discount_factor * next_max - current)
        self.set(state, action, updated)
        return updated

    def clear(self) -> None:
        self._values.clear()


class RewardTrace:
    """Append-only record of the reward seen at each decision tick."""

    def __init__(self):
        self._values: List[float] = []

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def __getitem__(self, index):
        return self._values[index]

    def append(self, value: float) -> None:
        self._values.append(float(value))

    def as_array(self) -> np.ndarray:
        return np.asarray(self._values, dtype=np.float64)

    def summary(self) -> Dict[str, float]:
        if not self._values:
            return {"count": 0, "mean": 0.0, "min": 0.0, "max": 0.0, "last": 0.0}
        values = self.as_array()
        return {
            "count": int(values.size),
            "mean": float(values.mean()),
            "min": float(values.min()),
            "max": float(values.max()),
            "last": float(values[-1]),
        }


class CumulativeReward:
    """
    Reward computed from the whole game state, not the last step.

    reward = pills_eaten * w.pill + ghosts_eaten * w.ghost + level * w.level_up
             + level_time * w.tick + (w.initial_lives - lives) * w.life_lost
    """

    def __init__(self, weights: Optional[RewardWeights] = None):
        self.weights = weights or RewardWeights()

    def __call__(self, game: PacManGame) -> float:
        w = self.weights
        pills_eaten = game.num_pills - game.num_active_pills
        return (
            pills_eaten * w.pill
            + game.num_ghosts_eaten * w.ghost
            + game.level * w.level_up
            + game.level_time * w.tick
            + (w.initial_lives - game.lives) * w.life_lost
        )


class DifferentialReward:
    """Change of a base reward since the previous call."""

    def __init__(self, base: Optional[RewardFunction] = None):
        self.base = base or CumulativeReward()
        self._previous: Optional[float] = None

    def __call__(self, game: PacManGame) -> float:
        current = self.base(game)
        delta = 0.0 if self._previous is None else current - self._previous
        self._previous = current
        return delta

    def reset(self) -> None:
        self._previous = None


@dataclass
class LearnerState:
    """
    Everything the Pac-Man learner carries between ticks.

    Attributes:
        q_table: Learned action values.
        last_state: State in which last_move was chosen by the learner.
        last_move: Last move chosen by the learned fallback.
        rewards: Reward observed at each decision tick.
    """
    q_table: QTable = field(default_factory=QTable)
    last_state: Optional[StateKey] = None
    last_move: Optional[Move] = None
    rewards: RewardTrace = field(default_factory=RewardTrace)

    def end_episode(self) -> None:
        self.last_state = None
        self.last_move = None

    def reset(self) -> None:
        self.end_episode()
        self.q_table.clear()
        self.rewards = RewardTrace()
