"""
Message Bus

Routes domain events to the handlers other bounded contexts register for
them. Handlers are registered from ``AppConfig.ready()``.
"""

from typing import Callable, Dict, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    In-process event dispatcher

    Several handlers may subscribe to one event type. A failing handler is
    logged and does not prevent the remaining handlers from running.
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        handlers = self._event_handlers.setdefault(event_type, [])
        # ready() can run more than once in some test setups
        if handler not in handlers:
            handlers.append(handler)
            logger.debug("Registered event handler %s for %s", handler.__name__, event_type.__name__)

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        return list(self._event_handlers.get(event_type, []))

    def publish_events(self, events: List[DomainEvent]):
        for event in events:
            handlers = self.handlers_for(type(event))

            if not handlers:
                logger.debug("No handlers registered for event %s", event.event_type)
                continue

            logger.info("Publishing event: %s (ID: %s)", event.event_type, event.event_id)

            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        "Error in event handler %s for event %s: %s",
                        handler.__name__, event.event_type, e,
                        exc_info=True,
                    )


# Global message bus instance
message_bus = MessageBus()
