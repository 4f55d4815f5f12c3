"""Django ORM adapters for the reservation repository ports."""

from __future__ import annotations

from typing import List, Optional

from django.db import IntegrityError, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.bookings.domain.entities import Booking, SpotRef
from apps.bookings.domain.exceptions import BookingConflictError
from apps.bookings.domain.repository import BookingRepository, SpotDirectory
from apps.bookings.models import OVERLAP_CONSTRAINT_NAME, Booking as BookingModel
from apps.spots.models import Spot
from shared.domain.exceptions import NotFoundError
from shared.domain.value_objects import DateRange


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection(queryset.db).in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def to_entity(row: BookingModel) -> Booking:
    return Booking(
        id=row.pk,
        spot_id=row.spot_id,
        user_id=row.user_id,
        dates=DateRange(row.start_date, row.end_date),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class DjangoSpotDirectory(SpotDirectory):
    """Spot lookups; lock=True takes a row lock on the spot (SELECT ... FOR UPDATE)."""

    def get(self, spot_id: int, lock: bool = False) -> Optional[SpotRef]:
        queryset = Spot.objects.filter(pk=spot_id)
        if lock:
            queryset = _lock_queryset_if_possible(queryset)
        row = queryset.values("id", "owner_id").first()
        if row is None:
            return None
        return SpotRef(id=row["id"], owner_id=row["owner_id"])


class DjangoBookingRepository(BookingRepository):

    def get(self, booking_id: int) -> Optional[Booking]:
        row = BookingModel.objects.filter(pk=booking_id).first()
        return to_entity(row) if row is not None else None

    def find_overlapping(
        self,
        spot_id: int,
        dates: DateRange,
        exclude_booking_id: Optional[int] = None,
    ) -> List[Booking]:
        queryset = BookingModel.objects.filter(
            spot_id=spot_id,
            start_date__lt=dates.end_date,
            end_date__gt=dates.start_date,
        )
        if exclude_booking_id is not None:
            queryset = queryset.exclude(pk=exclude_booking_id)
        return [to_entity(row) for row in queryset.order_by("start_date", "id")]

    def insert(self, booking: Booking) -> Booking:
        try:
            with transaction.atomic():
                row = BookingModel.objects.create(
                    spot_id=booking.spot_id,
                    user_id=booking.user_id,
                    start_date=booking.start_date,
                    end_date=booking.end_date,
                )
        except IntegrityError as exc:
            self._raise_if_overlap(exc, booking.spot_id, booking.dates)
            raise
        return to_entity(row)

    def update_range(self, booking_id: int, dates: DateRange) -> Booking:
        try:
            row = BookingModel.objects.get(pk=booking_id)
        except BookingModel.DoesNotExist:
            raise NotFoundError(f"Booking {booking_id} not found")

        row.start_date = dates.start_date
        row.end_date = dates.end_date
        try:
            with transaction.atomic():
                row.save(update_fields=["start_date", "end_date", "updated_at"])
        except IntegrityError as exc:
            self._raise_if_overlap(exc, row.spot_id, dates)
            raise
        return to_entity(row)

    def delete(self, booking_id: int) -> None:
        deleted, _ = BookingModel.objects.filter(pk=booking_id).delete()
        if not deleted:
            raise NotFoundError(f"Booking {booking_id} not found")

    def list_for_spot(self, spot_id: int) -> List[Booking]:
        queryset = BookingModel.objects.filter(spot_id=spot_id).order_by("start_date", "id")
        return [to_entity(row) for row in queryset]

    def list_for_user(self, user_id: int) -> List[Booking]:
        queryset = BookingModel.objects.filter(user_id=user_id).order_by("start_date", "id")
        return [to_entity(row) for row in queryset]

    @staticmethod
    def _raise_if_overlap(exc: IntegrityError, spot_id: int, dates: DateRange) -> None:
        """The PostgreSQL exclusion constraint reports overlaps as IntegrityError"""
        if OVERLAP_CONSTRAINT_NAME in str(exc):
            raise BookingConflictError(spot_id, dates) from exc
