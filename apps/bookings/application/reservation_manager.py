"""
Reservation Manager

Use cases for booking a spot. Each mutating operation runs in one unit of
work that first locks the spot row, so the overlap check and the write it
guards are atomic with respect to every other writer of that spot.

Operations:
- create_booking: reserve a spot for a date range
- update_booking: move a booking to new dates
- delete_booking: cancel a booking that has not started yet
- list_bookings_for_spot: full records for the owner, dates only for others
- list_bookings_for_user: every booking the requester made
"""

from datetime import date
from typing import Callable, List, Optional, Tuple
import time

import structlog
from django.utils import timezone

from shared.application.uow import AbstractUnitOfWork, DjangoUnitOfWork
from shared.domain.exceptions import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    TransientStoreError,
)
from shared.domain.value_objects import DateRange
from apps.bookings.conf import ReservationSettings
from apps.bookings.domain.entities import Booking, SpotBookings, SpotRef
from apps.bookings.domain.events import BookingCreated, BookingDeleted, BookingRescheduled
from apps.bookings.domain.exceptions import BookingConflictError
from apps.bookings.domain.repository import BookingRepository, SpotDirectory

logger = structlog.get_logger(__name__)

PAST_START_MESSAGE = 'Start date cannot be in the past.'


class ReservationManager:
    """
    Owns the no-overlap invariant for bookings.

    For every spot, bookings are pairwise non-overlapping under the
    half-open rule of DateRange.overlaps_with.

    TransientStoreError is retried up to `transient_retry_attempts` times,
    re-running the whole operation; every other error propagates at once.
    """

    def __init__(
        self,
        bookings: BookingRepository,
        spots: SpotDirectory,
        settings: Optional[ReservationSettings] = None,
        unit_of_work: Callable[[], AbstractUnitOfWork] = DjangoUnitOfWork,
        today: Callable[[], date] = timezone.localdate,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.bookings = bookings
        self.spots = spots
        self.settings = settings or ReservationSettings()
        self._unit_of_work = unit_of_work
        self._today = today
        self._sleep = sleep

    # ===== Commands =====

    def create_booking(self, spot_id: int, requester_id: int, start_date: date, end_date: date) -> Booking:
        """
        Reserve a spot

        Raises:
            NotFoundError: spot does not exist
            ForbiddenError: requester owns the spot
            InvalidInputError: start_date >= end_date or start_date in the past
            BookingConflictError: another booking of the spot overlaps
        """
        return self._with_retries(
            'create_booking', self._create_booking, spot_id, requester_id, start_date, end_date
        )

    def update_booking(self, booking_id: int, requester_id: int, start_date: date, end_date: date) -> Booking:
        """
        Move a booking to new dates

        Raises:
            NotFoundError: booking does not exist
            ForbiddenError: requester is not the guest
            InvalidInputError: the stay already ended, or the new range is invalid
                or moves the check-in day into the past
            BookingConflictError: the new range overlaps another booking
        """
        return self._with_retries(
            'update_booking', self._update_booking, booking_id, requester_id, start_date, end_date
        )

    def delete_booking(self, booking_id: int, requester_id: int) -> None:
        """
        Cancel a booking before it starts

        Raises:
            NotFoundError: booking does not exist
            ForbiddenError: requester is neither the guest nor the spot owner
            InvalidInputError: the stay starts today or has already started
        """
        self._with_retries('delete_booking', self._delete_booking, booking_id, requester_id)

    # ===== Queries =====

    def list_bookings_for_spot(self, spot_id: int, requester_id: int) -> SpotBookings:
        """Full bookings for the spot owner, BookingWindow projections for everyone else"""
        return self._with_retries('list_bookings_for_spot', self._list_bookings_for_spot, spot_id, requester_id)

    def list_bookings_for_user(self, requester_id: int) -> List[Booking]:
        return self._with_retries('list_bookings_for_user', self._list_bookings_for_user, requester_id)

    # ===== Implementation =====

    def _create_booking(self, spot_id, requester_id, start_date, end_date) -> Booking:
        today = self._today()

        with self._unit_of_work() as uow:
            spot = self._lock_spot(spot_id)
            if spot.is_owned_by(requester_id):
                raise ForbiddenError("Spot owners cannot book their own spot")

            dates = self._requested_dates(start_date, end_date, today)
            self._ensure_available(spot.id, dates)

            booking = self.bookings.insert(Booking(spot_id=spot.id, user_id=requester_id, dates=dates))
            booking.add_event(BookingCreated(
                aggregate_id=booking.id,
                booking_id=booking.id,
                spot_id=booking.spot_id,
                user_id=booking.user_id,
                dates=booking.dates,
            ))
            uow.collect_events(booking)

        logger.info(
            "booking.created",
            booking_id=booking.id,
            spot_id=booking.spot_id,
            user_id=booking.user_id,
            start_date=booking.start_date.isoformat(),
            end_date=booking.end_date.isoformat(),
        )
        return booking

    def _update_booking(self, booking_id, requester_id, start_date, end_date) -> Booking:
        today = self._today()

        with self._unit_of_work() as uow:
            booking, _spot = self._load_for_change(booking_id)
            if not booking.is_booked_by(requester_id):
                raise ForbiddenError("Not authorized to edit this booking")
            if booking.has_ended(today):
                raise InvalidInputError("Past bookings can't be modified")

            dates = self._requested_dates(start_date, end_date, today, current_start=booking.start_date)
            self._ensure_available(booking.spot_id, dates, exclude_booking_id=booking.id)

            old_dates = booking.dates
            updated = self.bookings.update_range(booking.id, dates)
            updated.add_event(BookingRescheduled(
                aggregate_id=updated.id,
                booking_id=updated.id,
                spot_id=updated.spot_id,
                old_dates=old_dates,
                new_dates=updated.dates,
            ))
            uow.collect_events(updated)

        logger.info(
            "booking.rescheduled",
            booking_id=updated.id,
            spot_id=updated.spot_id,
            start_date=updated.start_date.isoformat(),
            end_date=updated.end_date.isoformat(),
        )
        return updated

    def _delete_booking(self, booking_id, requester_id) -> None:
        today = self._today()

        with self._unit_of_work() as uow:
            booking, spot = self._load_for_change(booking_id)
            if not (booking.is_booked_by(requester_id) or spot.is_owned_by(requester_id)):
                raise ForbiddenError("Not authorized to delete this booking")
            if booking.has_started(today):
                raise InvalidInputError("Can't delete current or past bookings")

            self.bookings.delete(booking.id)
            booking.add_event(BookingDeleted(
                aggregate_id=booking.id,
                booking_id=booking.id,
                spot_id=booking.spot_id,
                deleted_by=requester_id,
                dates=booking.dates,
            ))
            uow.collect_events(booking)

        logger.info("booking.deleted", booking_id=booking_id, spot_id=booking.spot_id, deleted_by=requester_id)

    def _list_bookings_for_spot(self, spot_id, requester_id) -> SpotBookings:
        with self._unit_of_work():
            spot = self.spots.get(spot_id)
            if spot is None:
                raise NotFoundError(f"Spot {spot_id} not found")
            bookings = self.bookings.list_for_spot(spot.id)

        if spot.is_owned_by(requester_id):
            return SpotBookings(spot_id=spot.id, is_owner=True, bookings=list(bookings))
        return SpotBookings(spot_id=spot.id, is_owner=False, bookings=[b.window() for b in bookings])

    def _list_bookings_for_user(self, requester_id) -> List[Booking]:
        with self._unit_of_work():
            return self.bookings.list_for_user(requester_id)

    def _lock_spot(self, spot_id: int) -> SpotRef:
        spot = self.spots.get(spot_id, lock=True)
        if spot is None:
            raise NotFoundError(f"Spot {spot_id} not found")
        return spot

    def _load_for_change(self, booking_id: int) -> Tuple[Booking, SpotRef]:
        """
        Lock the booking's spot, then read the booking

        The first read only finds the spot; the second one happens under the
        spot lock, so the booking cannot change underneath us.
        """
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")

        spot = self._lock_spot(booking.spot_id)
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking, spot

    def _ensure_available(self, spot_id: int, dates: DateRange, exclude_booking_id: Optional[int] = None):
        overlapping = self.bookings.find_overlapping(spot_id, dates, exclude_booking_id=exclude_booking_id)
        if overlapping:
            logger.info(
                "booking.conflict",
                spot_id=spot_id,
                start_date=dates.start_date.isoformat(),
                end_date=dates.end_date.isoformat(),
                conflicting_ids=[b.id for b in overlapping],
            )
            raise BookingConflictError(spot_id, dates, [b.id for b in overlapping])

    @staticmethod
    def _requested_dates(start_date, end_date, today: date, current_start: Optional[date] = None) -> DateRange:
        """
        Validate a requested stay, reporting every bad field at once

        A start before today is accepted only when it is the booking's
        current check-in day, so a guest in the middle of a stay can move
        the checkout day.
        """
        keeps_check_in = current_start is not None and start_date == current_start
        try:
            dates = DateRange(start_date, end_date)
        except InvalidInputError as exc:
            errors = {field: list(messages) for field, messages in exc.errors.items()}
            if 'start_date' not in errors and not keeps_check_in and start_date < today:
                errors['start_date'] = [PAST_START_MESSAGE]
            raise InvalidInputError(exc.message, errors=errors) from exc

        if not keeps_check_in and dates.starts_before(today):
            raise InvalidInputError(PAST_START_MESSAGE, errors={'start_date': [PAST_START_MESSAGE]})
        return dates

    def _with_retries(self, operation: str, func, *args):
        attempts = self.settings.transient_retry_attempts
        for attempt in range(1, attempts + 1):
            try:
                return func(*args)
            except TransientStoreError as exc:
                if attempt == attempts:
                    logger.error(
                        "booking.transient_exhausted",
                        operation=operation,
                        attempts=attempts,
                        error=str(exc),
                    )
                    raise
                delay = self.settings.transient_retry_backoff_seconds * attempt
                logger.warning(
                    "booking.transient_retry",
                    operation=operation,
                    attempt=attempt,
                    delay=delay,
                    error=str(exc),
                )
                self._sleep(delay)
