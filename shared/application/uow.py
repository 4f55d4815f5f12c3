"""
Unit of Work Pattern

Wraps one database transaction. Domain events collected while it is open
are published only after the transaction commits, and store failures that
are safe to retry surface as TransientStoreError.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import OperationalError, transaction

from shared.domain.base import DomainEvent
from shared.domain.exceptions import TransientStoreError

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""

    def collect_events(self, aggregate):
        """
        Collect events from aggregate root

        Moves the aggregate's pending events into this unit of work.
        """
        new_events = aggregate.events
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                f"Collected {len(new_events)} events from "
                f"{aggregate.__class__.__name__} (ID: {aggregate.id})"
            )

    def _drain_events(self) -> List[DomainEvent]:
        events = self._events.copy()
        self._events.clear()
        return events


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            spot = spot_directory.get(spot_id, lock=True)
            booking = booking_repo.insert(booking)
            uow.collect_events(booking)
        # Transaction committed, events published

    OperationalError raised by the block or by the commit itself (lock
    timeouts, serialization failures, "database is locked") is re-raised
    as TransientStoreError after the rollback.
    """

    def __init__(self, using=None):
        super().__init__()
        self._using = using
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic(using=self._using)
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
            self._transaction.__exit__(exc_type, exc_val, exc_tb)
        except OperationalError as exc:
            logger.warning(f"Commit failed with a transient store error: {exc}")
            raise TransientStoreError(str(exc)) from exc

        if exc_type is not None and issubclass(exc_type, OperationalError):
            logger.warning(f"Transaction aborted by a transient store error: {exc_val}")
            raise TransientStoreError(str(exc_val)) from exc_val
        return False

    def commit(self):
        """
        Schedule event publishing

        The surrounding atomic block performs the actual commit on exit;
        transaction.on_commit() drops the callback if that commit fails.
        """
        events = self._drain_events()
        logger.debug(f"Committing transaction with {len(events)} events")

        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self._using)

    def rollback(self):
        """Discard events; the atomic block rolls the transaction back"""
        discarded = self._drain_events()
        logger.info(f"Rolling back transaction, discarding {len(discarded)} events")

    def _publish_events(self, events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")
        message_bus.publish_events(events)
