# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
In-memory message bus shared by cooperating ghosts.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from .models import GhostId, Message, MessageType

logger = logging.getLogger(__name__)


class Messenger:
    """
    Publish/poll message bus.

    A message with a recipient is queued for that ghost only; a broadcast
    (recipient None) is queued for every ghost except its sender. Polling
    with the current tick delivers with a one-tick delay, so a sighting
    published early in a tick reaches every other ghost on the next one.
    There is no ordering guarantee between senders beyond insertion order.

    Example:
        >>> bus = Messenger()
        >>> bus.publish(GhostId.BLINKY, MessageType.PACMAN_SEEN, 42, tick=7)
        >>> bus.poll(GhostId.PINKY, now=7)
        []
        >>> [m.data for m in bus.poll(GhostId.PINKY, now=8)]
        [42]
    """

    def __init__(self):
        self._queues: Dict[GhostId, List[Message]] = defaultdict(list)

    def add_message(self, message: Message) -> None:
        if message.recipient is not None:
            recipients = [message.recipient]
        else:
            recipients = [g for g in GhostId if g is not message.sender]
        for ghost in recipients:
            self._queues[ghost].append(message)
        logger.debug("%s -> %s: %s=%s @%d", message.sender.value,
                     message.recipient.value if message.recipient else "all",
                     message.type.value, message.data, message.tick)

    def publish(self, sender: GhostId, type: MessageType, data: int, tick: int,
                recipient: Optional[GhostId] = None) -> None:
        self.add_message(Message(sender, recipient, type, data, tick))

    def poll(self, recipient: GhostId, now: Optional[int] = None) -> List[Message]:
        """
        Remove and return the messages queued for a ghost.

        Args:
            recipient: The polling ghost.
            now: Current level time. When given, only messages stamped
                before it are delivered; messages from this tick stay queued
                for the next poll and messages from later ticks (left over
                from a previous level) are dropped.
        """
        queue = self._queues.pop(recipient, [])
        if now is None:
            return queue
        delivered = [m for m in queue if m.tick < now]
        waiting = [m for m in queue if m.tick == now]
        if waiting:
            self._queues[recipient] = waiting
        return delivered

    def pending(self, recipient: GhostId) -> int:
        return len(self._queues.get(recipient, ()))

    def clear(self) -> None:
        self._queues.clear()
