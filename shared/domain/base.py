"""
Base Domain Classes

Building blocks shared by every bounded context:
- Entity: object with identity
- ValueObject: immutable object compared by value
- Aggregate: consistency boundary that records domain events
- DomainEvent: something that happened and other contexts may react to
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(kw_only=True)
class Entity(ABC):
    """
    Base class for entities

    Two entities are equal if their identities are equal. The identity is
    whatever the persistence layer uses (a database primary key for ORM
    backed aggregates), so it is typed loosely.
    """
    id: object = field(default_factory=uuid4)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Immutable, no identity, equal when all attributes are equal.
    """
    pass


@dataclass(kw_only=True, eq=False)
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Events are buffered on the aggregate and handed to the unit of work,
    which publishes them only after the surrounding transaction commits.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Copy of the buffered events"""
        return self._events.copy()


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Concrete events add their payload as keyword-only fields.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)
    aggregate_id: object = None

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

