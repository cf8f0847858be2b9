from pacman_agents.comms import Messenger
from pacman_agents.models import GhostId, Message, MessageType


def test_broadcast_reaches_everyone_but_the_sender():
    bus = Messenger()
    bus.publish(GhostId.BLINKY, MessageType.PACMAN_SEEN, 42, tick=7)

    assert bus.pending(GhostId.BLINKY) == 0
    for ghost in (GhostId.PINKY, GhostId.INKY, GhostId.CLYDE):
        messages = bus.poll(ghost)
        assert len(messages) == 1
        assert messages[0].data == 42
        assert messages[0].tick == 7
        assert messages[0].sender is GhostId.BLINKY


def test_targeted_message_reaches_only_its_recipient():
    bus = Messenger()
    bus.add_message(Message(GhostId.INKY, GhostId.CLYDE, MessageType.PACMAN_SEEN, 3, 1))

    assert bus.pending(GhostId.CLYDE) == 1
    assert bus.pending(GhostId.PINKY) == 0
    assert bus.pending(GhostId.BLINKY) == 0


def test_poll_drains_the_queue_in_insertion_order():
    bus = Messenger()
    bus.publish(GhostId.BLINKY, MessageType.PACMAN_SEEN, 1, tick=1)
    bus.publish(GhostId.INKY, MessageType.PACMAN_SEEN, 2, tick=2)

    assert [m.data for m in bus.poll(GhostId.PINKY)] == [1, 2]
    assert bus.poll(GhostId.PINKY) == []


def test_poll_with_tick_delivers_one_tick_later():
    bus = Messenger()
    bus.publish(GhostId.BLINKY, MessageType.PACMAN_SEEN, 5, tick=10)

    assert bus.poll(GhostId.PINKY, now=10) == []
    assert bus.pending(GhostId.PINKY) == 1
    assert [m.data for m in bus.poll(GhostId.PINKY, now=11)] == [5]
    assert bus.pending(GhostId.PINKY) == 0


def test_poll_with_tick_drops_messages_from_later_ticks():
    bus = Messenger()
    bus.publish(GhostId.BLINKY, MessageType.PACMAN_SEEN, 5, tick=300)

    assert bus.poll(GhostId.PINKY, now=3) == []
    assert bus.pending(GhostId.PINKY) == 0


def test_clear_drops_everything():
    bus = Messenger()
    bus.publish(GhostId.BLINKY, MessageType.PACMAN_SEEN, 1, tick=1)
    bus.clear()
    assert all(bus.pending(g) == 0 for g in GhostId)
