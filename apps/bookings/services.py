"""Wiring for the booking workflows."""

from __future__ import annotations

import structlog

from shared.domain.base import DomainEvent

from .application.reservation_manager import ReservationManager
from .conf import ReservationSettings
from .infrastructure.repositories import DjangoBookingRepository, DjangoSpotDirectory

audit_logger = structlog.get_logger("apps.bookings.audit")


def get_reservation_manager() -> ReservationManager:
    """Reservation manager backed by the Django ORM and the current settings."""

    return ReservationManager(
        bookings=DjangoBookingRepository(),
        spots=DjangoSpotDirectory(),
        settings=ReservationSettings.from_django_settings(),
    )


def log_booking_event(event: DomainEvent) -> None:
    """Audit trail of committed booking changes."""

    payload = event.to_dict()
    event_type = payload.pop("event_type")
    audit_logger.info("booking.audit", event_type=event_type, **payload)
