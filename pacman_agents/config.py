# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Controller configuration.

Every tunable constant of the two controllers lives here as a frozen
dataclass. Each config can also be built from environment variables:

    PACMAN_TICK_THRESHOLD: Ticks before a sighting goes stale (default: "5")
    PACMAN_PILL_PROXIMITY: Power-pill danger radius for ghosts (default: "15")
    PACMAN_NUM_SIMULATIONS: Tree search budget per decision (default: "100")
    PACMAN_ROLLOUT_DEPTH: Random rollout length in ticks (default: "20")
    PACMAN_EXPLORATION_CONSTANT: UCB1 constant, 0 for visit greedy (default: sqrt 2)
    PACMAN_LEARNING_RATE: Q-learning alpha (default: "0.1")
    PACMAN_DISCOUNT_FACTOR: Q-learning gamma (default: "0.9")
    PACMAN_EXPLORATION_PROBABILITY: Epsilon for random moves (default: "0.1")
    PACMAN_EVADE_DISTANCE: Ghost distance that triggers evasion (default: "25")
"""

import logging
import math
import os
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _env(name: str, default: T, parse: Callable[[str], T]) -> T:
    """Read an override from the environment, falling back on bad values."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return parse(raw)
    except ValueError:
        logger.warning("Invalid %s '%s', using default %s", name, raw, default)
        return default


@dataclass(frozen=True)
class GhostSearchConfig:
    """
    Settings for the MCTS ghost.

    Attributes:
        tick_threshold: A sighting older than this many ticks is forgotten.
        pill_proximity: Retreat when Pac-Man is closer than this (path steps)
            to an available power pill.
        num_simulations: Simulations run per decision.
        rollout_depth: Maximum ticks per random rollout.
        exploration_constant: UCB1 exploration weight. 0 selects children by
            visit count alone.
    """
    tick_threshold: int = 5
    pill_proximity: int = 15
    num_simulations: int = 100
    rollout_depth: int = 20
    exploration_constant: float = math.sqrt(2)

    def __post_init__(self):
        if self.tick_threshold <= 0:
            raise ValueError(f"tick_threshold must be positive, got {self.tick_threshold}")
        if self.pill_proximity < 0:
            raise ValueError(f"pill_proximity must be non-negative, got {self.pill_proximity}")
        if self.num_simulations < 0:
            raise ValueError(f"num_simulations must be non-negative, got {self.num_simulations}")
        if self.rollout_depth < 0:
            raise ValueError(f"rollout_depth must be non-negative, got {self.rollout_depth}")
        if self.exploration_constant < 0:
            raise ValueError(
                f"exploration_constant must be non-negative, got {self.exploration_constant}"
            )

    @classmethod
    def from_env(cls) -> "GhostSearchConfig":
        defaults = cls()
        return cls(
            tick_threshold=_env("PACMAN_TICK_THRESHOLD", defaults.tick_threshold, int),
            pill_proximity=_env("PACMAN_PILL_PROXIMITY", defaults.pill_proximity, int),
            num_simulations=_env("PACMAN_NUM_SIMULATIONS", defaults.num_simulations, int),
            rollout_depth=_env("PACMAN_ROLLOUT_DEPTH", defaults.rollout_depth, int),
            exploration_constant=_env(
                "PACMAN_EXPLORATION_CONSTANT", defaults.exploration_constant, float
            ),
        )


@dataclass(frozen=True)
class RewardWeights:
    """
    Weights of the cumulative Pac-Man reward.

    reward = pills_eaten * pill
           + ghosts_eaten * ghost
           + level * level_up
           + level_time * tick
           + (initial_lives - lives) * life_lost
    """
    pill: float = 1.0
    ghost: float = 50.0
    level_up: float = 50.0
    tick: float = -0.05
    life_lost: float = -25.0
    initial_lives: int = 3


@dataclass(frozen=True)
class PacmanLearningConfig:
    """
    Settings for the Q-learning Pac-Man.

    Attributes:
        learning_rate: Alpha in the Q update.
        discount_factor: Gamma in the Q update.
        exploration_probability: Chance of a uniformly random fallback move.
        evade_distance: Non-edible ghosts closer than this are evaded.
        reward_weights: Weights of the default cumulative reward.
    """
    learning_rate: float = 0.1
    discount_factor: float = 0.9
    exploration_probability: float = 0.1
    evade_distance: int = 25
    reward_weights: RewardWeights = field(default_factory=RewardWeights)

    def __post_init__(self):
        for name in ("learning_rate", "discount_factor", "exploration_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.evade_distance < 0:
            raise ValueError(f"evade_distance must be non-negative, got {self.evade_distance}")

    @classmethod
    def from_env(cls, reward_weights: Optional[RewardWeights] = None) -> "PacmanLearningConfig":
        defaults = cls()
        return cls(
            learning_rate=_env("PACMAN_LEARNING_RATE", defaults.learning_rate, float),
            discount_factor=_env("PACMAN_DISCOUNT_FACTOR", defaults.discount_factor, float),
            exploration_probability=_env(
                "PACMAN_EXPLORATION_PROBABILITY", defaults.exploration_probability, float
            ),
            evade_distance=_env("PACMAN_EVADE_DISTANCE", defaults.evade_distance, int),
            reward_weights=reward_weights or defaults.reward_weights,
        )
