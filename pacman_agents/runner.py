#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Play episodes with the learning Pac-Man and the search ghosts.

Usage:
    pacman-agents --episodes 20 --ghosts heuristic
    python -m pacman_agents.runner --ghosts mcts --pacman random --max-ticks 300

Controller settings are read from PACMAN_* environment variables (see
pacman_agents.config).
"""

import argparse
import logging
import random
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .comms import Messenger
from .config import GhostSearchConfig, PacmanLearningConfig
from .game import PacManGame
from .ghost_ai import GhostAI, GhostSearchPolicy
from .maze import Maze
from .maze_generator import MazeGenerator
from .models import GhostId, Move
from .pacman_ai import PacmanLearningPolicy

logger = logging.getLogger(__name__)

GhostController = Callable[[PacManGame], Move]
PacmanController = Callable[[PacManGame], Move]


@dataclass
class EpisodeResult:
    episode: int
    score: int
    level: int
    lives: int
    ticks: int
    game_over: bool


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)-24s - %(levelname)-8s - %(message)s",
    )


def parse_maze_size(value: str) -> Tuple[int, int]:
    try:
        rows, cols = map(int, value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid maze size '{value}', expected ROWSxCOLS")
    if rows < 7 or cols < 7:
        raise argparse.ArgumentTypeError(f"Maze must be at least 7x7, got {value}")
    return rows, cols


def build_ghosts(kind: str, messenger: Messenger, config: GhostSearchConfig,
                 rng: random.Random) -> Tuple[Dict[GhostId, GhostController], List[GhostSearchPolicy]]:
    """Create one controller per ghost; also returns the search policies for resetting."""
    controllers: Dict[GhostId, GhostController] = {}
    policies: List[GhostSearchPolicy] = []
    for ghost in GhostId:
        if kind == "mcts":
            policy = GhostSearchPolicy(ghost, messenger, config, seed=rng.randrange(2 ** 32))
            policies.append(policy)
            controllers[ghost] = policy.decide
        elif kind == "heuristic":
            controllers[ghost] = lambda view, g=ghost: GhostAI.heuristic_policy(view, g, rng)
        else:
            controllers[ghost] = lambda view, g=ghost: GhostAI.random_policy(view, g, rng)
    return controllers, policies


def random_pacman(rng: random.Random) -> PacmanController:
    def decide(view: PacManGame) -> Move:
        moves = view.possible_moves(view.pacman_node, view.pacman_last_move)
        return rng.choice(moves) if moves else Move.NEUTRAL
    return decide


def run_episode(
    game: PacManGame,
    pacman: PacmanController,
    ghosts: Dict[GhostId, GhostController],
    max_ticks: int,
    episode: int = 0,
) -> EpisodeResult:
    """Play one game until game over or max_ticks."""
    ticks = 0
    while not game.game_over() and ticks < max_ticks:
        pacman_move = pacman(game.observe())
        ghost_moves = {}
        for ghost, controller in ghosts.items():
            move = controller(game.observe(ghost))
            if move is not Move.NEUTRAL:
                ghost_moves[ghost] = move
        game.advance(pacman_move, ghost_moves)
        ticks += 1

    return EpisodeResult(
        episode=episode,
        score=game.score,
        level=game.level,
        lives=game.lives,
        ticks=ticks,
        game_over=game.game_over(),
    )


def train(
    episodes: int = 10,
    max_ticks: int = 1000,
    maze_size: Tuple[int, int] = (15, 15),
    ghost_kind: str = "heuristic",
    pacman_kind: str = "qlearning",
    seed: Optional[int] = None,
    ghost_config: Optional[GhostSearchConfig] = None,
    pacman_config: Optional[PacmanLearningConfig] = None,
) -> Tuple[List[EpisodeResult], Optional[PacmanLearningPolicy]]:
    """
    Run several episodes on one maze, keeping Pac-Man's Q-table across them.

    Returns:
        Per-episode results and the learning policy (None for a random Pac-Man).
    """
    rng = random.Random(seed)
    maze = Maze(MazeGenerator(*maze_size, seed=seed).generate())
    logger.info("Maze %dx%d with %d nodes, %d pills, %d power pills",
                maze.rows, maze.cols, maze.num_nodes,
                len(maze.pill_indices), len(maze.power_pill_indices))

    messenger = Messenger()
    ghosts, search_policies = build_ghosts(
        ghost_kind, messenger, ghost_config or GhostSearchConfig(), rng
    )

    learner: Optional[PacmanLearningPolicy] = None
    if pacman_kind == "qlearning":
        learner = PacmanLearningPolicy(pacman_config, seed=rng.randrange(2 ** 32))
        pacman = learner.decide
    else:
        pacman = random_pacman(rng)

    results = []
    for episode in range(1, episodes + 1):
        game = PacManGame(maze, seed=rng.randrange(2 ** 32))
        messenger.clear()
        for policy in search_policies:
            policy.reset()

        result = run_episode(game, pacman, ghosts, max_ticks, episode)
        results.append(result)

        if learner is not None:
            learner.end_episode()
        logger.info("Episode %d: score=%d level=%d lives=%d ticks=%d",
                    episode, result.score, result.level, result.lives, result.ticks)

    return results, learner


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Play Pac-Man with learning and search agents")
    parser.add_argument("--episodes", type=int, default=10, help="Number of episodes")
    parser.add_argument("--max-ticks", type=int, default=1000, help="Tick limit per episode")
    parser.add_argument("--maze-size", type=parse_maze_size, default=(15, 15),
                        help="Maze dimensions as ROWSxCOLS")
    parser.add_argument("--ghosts", choices=["mcts", "heuristic", "random"], default="heuristic")
    parser.add_argument("--pacman", choices=["qlearning", "random"], default="qlearning")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    if args.episodes <= 0 or args.max_ticks <= 0:
        parser.error("--episodes and --max-ticks must be positive")

    setup_logging(args.log_level)

    results, learner = train(
        episodes=args.episodes,
        max_ticks=args.max_ticks,
        maze_size=args.maze_size,
        ghost_kind=args.ghosts,
        pacman_kind=args.pacman,
        seed=args.seed,
        ghost_config=GhostSearchConfig.from_env(),
        pacman_config=PacmanLearningConfig.from_env(),
    )

    print(f"\n{'=' * 60}")
    print(f"PAC-MAN ({args.pacman}) vs GHOSTS ({args.ghosts})")
    print(f"{'=' * 60}")
    for r in results:
        print(f"Episode {r.episode:4d}: score={r.score:6d} level={r.level} "
              f"lives={r.lives} ticks={r.ticks}{' (game over)' if r.game_over else ''}")
    best = max(results, key=lambda r: r.score)
    print(f"\nBest score: {best.score} (episode {best.episode})")

    if learner is not None:
        summary = learner.state.rewards.summary()
        print(f"Q-table entries: {len(learner.state.q_table)}")
        print(f"Rewards: n={summary['count']} mean={summary['mean']:.2f} "
              f"min={summary['min']:.2f} max={summary['max']:.2f}")
    print(f"{'=' * 60}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
