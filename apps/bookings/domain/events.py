"""
Booking Domain Events

Published by the unit of work after the transaction that produced them
has committed.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange


@dataclass
class BookingCreated(DomainEvent):
    """A guest reserved a spot"""
    booking_id: int
    spot_id: int
    user_id: int
    dates: DateRange

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': self.booking_id,
            'spot_id': self.spot_id,
            'user_id': self.user_id,
            'start_date': self.dates.start_date.isoformat(),
            'end_date': self.dates.end_date.isoformat(),
        })
        return data


@dataclass
class BookingRescheduled(DomainEvent):
    """The guest moved a booking to new dates"""
    booking_id: int
    spot_id: int
    old_dates: DateRange
    new_dates: DateRange

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': self.booking_id,
            'spot_id': self.spot_id,
            'old_start_date': self.old_dates.start_date.isoformat(),
            'old_end_date': self.old_dates.end_date.isoformat(),
            'start_date': self.new_dates.start_date.isoformat(),
            'end_date': self.new_dates.end_date.isoformat(),
        })
        return data


@dataclass
class BookingDeleted(DomainEvent):
    """
    A booking was removed before the stay started

    deleted_by is either the guest or the spot owner.
    """
    booking_id: int
    spot_id: int
    deleted_by: int
    dates: DateRange

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': self.booking_id,
            'spot_id': self.spot_id,
            'deleted_by': self.deleted_by,
            'start_date': self.dates.start_date.isoformat(),
            'end_date': self.dates.end_date.isoformat(),
        })
        return data
