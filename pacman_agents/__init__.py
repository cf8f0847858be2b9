# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Pac-Man agents: an MCTS ghost and a Q-learning Pac-Man."""

__version__ = "0.1.0"

from .comms import Messenger
from .config import GhostSearchConfig, PacmanLearningConfig, RewardWeights
from .game import PacManGame
from .ghost_ai import GhostAI, GhostSearchPolicy
from .maze import Maze
from .maze_generator import MazeGenerator
from .models import GhostId, Message, MessageType, Move, TargetMemory
from .pacman_ai import PacmanLearningPolicy
from .qlearning import CumulativeReward, DifferentialReward, LearnerState, QTable, RewardTrace
from .search import MonteCarloTreeSearch, SearchNode, SearchTree

__all__ = [
    "CumulativeReward",
    "DifferentialReward",
    "GhostAI",
    "GhostId",
    "GhostSearchConfig",
    "GhostSearchPolicy",
    "LearnerState",
    "Maze",
    "MazeGenerator",
    "Message",
    "MessageType",
    "MonteCarloTreeSearch",
    "Move",
    "PacManGame",
    "PacmanLearningConfig",
    "PacmanLearningPolicy",
    "QTable",
    "RewardTrace",
    "RewardWeights",
    "SearchNode",
    "SearchTree",
    "TargetMemory",
]
