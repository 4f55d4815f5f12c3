"""
Repository ports for the reservation manager.

The manager talks to storage only through these interfaces. Adapters must
run their queries inside the caller's unit of work, and
`SpotDirectory.get(..., lock=True)` must block every other writer that
locks the same spot until that unit of work ends.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from shared.domain.value_objects import DateRange

from .entities import Booking, SpotRef


class SpotDirectory(ABC):
    """Spot existence and ownership lookups"""

    @abstractmethod
    def get(self, spot_id: int, lock: bool = False) -> Optional[SpotRef]:
        """Return the spot or None; lock=True serializes writers of this spot"""


class BookingRepository(ABC):
    """Booking storage"""

    @abstractmethod
    def get(self, booking_id: int) -> Optional[Booking]:
        """
        Return the booking or None

        Writers serialize on the spot lock, so a booking read after locking
        its spot stays current until the unit of work ends.
        """

    @abstractmethod
    def find_overlapping(
        self,
        spot_id: int,
        dates: DateRange,
        exclude_booking_id: Optional[int] = None,
    ) -> List[Booking]:
        """
        Bookings of the spot sharing at least one night with `dates`

        Must agree with DateRange.overlaps_with:
        existing.start_date < dates.end_date AND existing.end_date > dates.start_date
        """

    @abstractmethod
    def insert(self, booking: Booking) -> Booking:
        """Persist a new booking and return it with id and timestamps assigned"""

    @abstractmethod
    def update_range(self, booking_id: int, dates: DateRange) -> Booking:
        """Store new dates and return the booking with a fresh updated_at"""

    @abstractmethod
    def delete(self, booking_id: int) -> None:
        """Remove the booking permanently"""

    @abstractmethod
    def list_for_spot(self, spot_id: int) -> List[Booking]:
        """All bookings of a spot ordered by start_date"""

    @abstractmethod
    def list_for_user(self, user_id: int) -> List[Booking]:
        """All bookings made by a guest ordered by start_date"""
