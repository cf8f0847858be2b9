# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Data models shared by the Pac-Man and ghost controllers.

This module defines the move and ghost enumerations, the sighting messages
exchanged between ghosts, and the small pieces of per-agent state the
controllers carry from tick to tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Move(str, Enum):
    """
    A discrete action for any mover in the maze.

    Enumeration order (UP, RIGHT, DOWN, LEFT) is the order in which legal
    moves are reported, and therefore the tie-break order everywhere.
    NEUTRAL means "no move / no decision".
    """
    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"
    NEUTRAL = "neutral"

    def opposite(self) -> "Move":
        """Get the reverse of this move."""
        return _OPPOSITES[self]


_OPPOSITES = {
    Move.UP: Move.DOWN,
    Move.DOWN: Move.UP,
    Move.LEFT: Move.RIGHT,
    Move.RIGHT: Move.LEFT,
    Move.NEUTRAL: Move.NEUTRAL,
}

DIRECTIONS = (Move.UP, Move.RIGHT, Move.DOWN, Move.LEFT)


class GhostId(str, Enum):
    """Ghost identities, in the order ghosts are enumerated."""
    BLINKY = "blinky"
    PINKY = "pinky"
    INKY = "inky"
    CLYDE = "clyde"


class MessageType(str, Enum):
    PACMAN_SEEN = "pacman_seen"


@dataclass(frozen=True)
class Message:
    """
    A message on the ghost message bus.

    Attributes:
        sender: Ghost that published the message.
        recipient: Target ghost, or None for a broadcast to every other ghost.
        type: Kind of message.
        data: Payload; for PACMAN_SEEN, the node Pac-Man was seen at.
        tick: Level time at which the observation was made.
    """
    sender: GhostId
    recipient: Optional[GhostId]
    type: MessageType
    data: int
    tick: int


@dataclass
class TargetMemory:
    """
    Last known location of Pac-Man as remembered by one ghost.

    Attributes:
        last_known_node: Node index, or -1 when unknown.
        tick_observed: Level time of the sighting, or -1 when unknown.
    """
    last_known_node: int = -1
    tick_observed: int = -1

    @property
    def known(self) -> bool:
        return self.last_known_node != -1

    def update(self, node: int, tick: int) -> None:
        self.last_known_node = node
        self.tick_observed = tick

    def forget(self) -> None:
        self.last_known_node = -1
        self.tick_observed = -1


@dataclass
class GhostState:
    """
    Engine-side state of a single ghost.

    Attributes:
        node: Current node index.
        last_move: Last move made (NEUTRAL while in the lair).
        edible_time: Ticks left in the edible (frightened) state.
        lair_time: Ticks left before the ghost may leave the lair.
    """
    node: int
    last_move: Move = Move.NEUTRAL
    edible_time: int = 0
    lair_time: int = 0
