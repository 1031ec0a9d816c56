"""
Base Domain Classes

Foundational building blocks shared by the engine apps:
- ValueObject: Immutable objects compared by value
- DomainEvent: Something that happened to a booking or payment session
- EventRecorderMixin: Lets a persisted aggregate collect events until commit
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from django.utils import timezone


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    They are published through the message bus once the surrounding
    transaction has committed.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=timezone.now)
    aggregate_id: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert event to dictionary for serialization"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': self.aggregate_id,
        }


class EventRecorderMixin:
    """
    Mixin for aggregate roots backed by Django models

    Events are kept on the instance (never persisted) and drained by the
    unit of work when it collects them.
    """

    def _event_buffer(self) -> List[DomainEvent]:
        buffer = self.__dict__.get('_pending_events')
        if buffer is None:
            buffer = []
            self.__dict__['_pending_events'] = buffer
        return buffer

    def add_event(self, event: DomainEvent):
        """Add a domain event to be published"""
        if event.aggregate_id is None:
            event.aggregate_id = getattr(self, 'pk', None)
        self._event_buffer().append(event)

    def clear_events(self):
        """Clear all collected events (called after publishing)"""
        self._event_buffer().clear()

    @property
    def events(self) -> List[DomainEvent]:
        """Get copy of collected events"""
        return list(self._event_buffer())
