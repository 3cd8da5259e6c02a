"""Event dispatch through the message bus."""

from dataclasses import dataclass

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class SomethingHappened(DomainEvent):
    value: int = 0


def test_handlers_receive_published_events():
    bus = MessageBus()
    received = []

    def handler(event):
        received.append(event.value)

    bus.register_event_handler(SomethingHappened, handler)
    bus.publish_events([SomethingHappened(value=1), SomethingHappened(value=2)])

    assert received == [1, 2]


def test_registering_twice_keeps_one_subscription():
    bus = MessageBus()

    def handler(event):
        pass

    bus.register_event_handler(SomethingHappened, handler)
    bus.register_event_handler(SomethingHappened, handler)

    assert bus.handlers_for(SomethingHappened) == [handler]


def test_failing_handler_does_not_stop_the_others():
    bus = MessageBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    def working(event):
        received.append(event.event_type)

    bus.register_event_handler(SomethingHappened, broken)
    bus.register_event_handler(SomethingHappened, working)
    bus.publish_events([SomethingHappened()])

    assert received == ["SomethingHappened"]
