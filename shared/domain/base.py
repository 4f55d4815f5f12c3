"""
Base Domain Classes

Building blocks shared by every bounded context:
- Entity: Objects with identity assigned by the record store
- ValueObject: Immutable objects compared by value
- Aggregate: Consistency boundaries that collect domain events
- DomainEvent: Something that happened and was committed
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID, uuid4


@dataclass
class Entity(ABC):
    """
    Base class for all entities

    The identifier and timestamps are owned by the record store, so a
    freshly built entity has none of them until it has been inserted.
    Two entities are equal if they are persisted and their IDs are equal.
    """
    id: int | None = field(default=None, kw_only=True)
    created_at: datetime | None = field(default=None, kw_only=True)
    updated_at: datetime | None = field(default=None, kw_only=True)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self):
        return hash((self.__class__.__name__, self.id)) if self.id is not None else id(self)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    """
    pass


@dataclass(eq=False)
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Events added here are handed to the unit of work and published
    only after the surrounding transaction commits.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False, compare=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Copy of the collected events"""
        return self._events.copy()


@dataclass
class DomainEvent:
    """
    Base class for domain events
    """
    event_id: UUID = field(default_factory=uuid4, kw_only=True)
    occurred_at: datetime = field(default_factory=datetime.now, kw_only=True)
    aggregate_id: int | None = field(default=None, kw_only=True)

    def to_dict(self) -> dict:
        """Convert event to a JSON friendly dictionary"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': self.aggregate_id,
        }
