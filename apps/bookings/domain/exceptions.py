"""Booking specific errors."""

from typing import Iterable, Optional

from shared.domain.exceptions import ConflictError
from shared.domain.value_objects import DateRange


class BookingConflictError(ConflictError):
    """Raised when the requested dates overlap existing bookings of the spot."""

    default_message = 'A booking already exists for these dates'

    def __init__(
        self,
        spot_id: int,
        dates: DateRange,
        conflicting_ids: Optional[Iterable[int]] = None,
    ):
        self.spot_id = spot_id
        self.dates = dates
        self.conflicting_ids = sorted(i for i in (conflicting_ids or ()) if i is not None)
        super().__init__(f"Spot {spot_id} is already booked for some of the dates {dates}")
