"""
Booking Domain Entities

- Booking: aggregate root for one guest's reservation of a spot
- BookingWindow: what anyone but the spot owner may see of a booking
- SpotRef: the slice of a spot the reservation rules need
- SpotBookings: bookings of one spot as seen by a given requester
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Union

from shared.domain.base import Aggregate
from shared.domain.value_objects import DateRange


@dataclass(frozen=True)
class SpotRef:
    """Spot identity and ownership, as supplied by the spot directory"""
    id: int
    owner_id: int

    def is_owned_by(self, user_id: int) -> bool:
        return self.owner_id == user_id


@dataclass(eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Key invariants:
    - dates is a valid half-open range (start_date < end_date)
    - Only the guest may change the dates, and only while the stay has not ended
    - The guest or the spot owner may remove it, and only before the stay starts
    - No two bookings of one spot overlap (enforced by the reservation
      manager, since it spans many aggregates)
    """

    spot_id: int
    user_id: int
    dates: DateRange

    @property
    def start_date(self) -> date:
        return self.dates.start_date

    @property
    def end_date(self) -> date:
        return self.dates.end_date

    @property
    def nights(self) -> int:
        return len(self.dates)

    def is_booked_by(self, user_id: int) -> bool:
        return self.user_id == user_id

    def has_ended(self, today: date) -> bool:
        """A stay whose checkout day is today or earlier can no longer change"""
        return self.end_date <= today

    def has_started(self, today: date) -> bool:
        """Current and past stays cannot be cancelled"""
        return self.start_date <= today

    def overlaps_with(self, dates: DateRange) -> bool:
        return self.dates.overlaps_with(dates)

    def window(self) -> 'BookingWindow':
        return BookingWindow(spot_id=self.spot_id, start_date=self.start_date, end_date=self.end_date)

    def __str__(self):
        return f"Booking {self.id} (spot {self.spot_id}, {self.dates})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, spot_id={self.spot_id}, "
            f"user_id={self.user_id}, dates={self.dates!r})"
        )


@dataclass(frozen=True)
class BookingWindow:
    """Occupied dates of a spot with the guest's identity stripped out"""
    spot_id: int
    start_date: date
    end_date: date


@dataclass
class SpotBookings:
    """
    Result of listing a spot's bookings

    `bookings` holds full Booking aggregates when `is_owner` is True and
    BookingWindow projections otherwise.
    """
    spot_id: int
    is_owner: bool
    bookings: List[Union[Booking, BookingWindow]] = field(default_factory=list)
