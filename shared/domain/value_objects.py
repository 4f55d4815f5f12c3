"""
Common Value Objects

- DateRange: a stay from start_date (first night) to end_date (checkout day)
"""

from dataclasses import dataclass
from datetime import date, datetime

from shared.domain.base import ValueObject
from shared.domain.exceptions import InvalidInputError


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents the half-open range [start_date, end_date): the guest holds
    every night from start_date up to, but not including, end_date. The
    checkout day is free for the next guest.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        errors = {
            name: ['Must be a calendar date without a time component.']
            for name in ('start_date', 'end_date')
            if isinstance(getattr(self, name), datetime) or not isinstance(getattr(self, name), date)
        }
        if errors:
            raise InvalidInputError("Start and end dates must be calendar dates", errors=errors)

        if self.start_date >= self.end_date:
            raise InvalidInputError(
                f"Start date ({self.start_date}) must be before end date ({self.end_date})",
                errors={'end_date': ['End date must be after start date.']},
            )

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range shares at least one night with another

        Overlap formula: start1 < end2 AND end1 > start2

        Examples:
            - [1, 10) overlaps with [9, 15) -> True
            - [1, 10) overlaps with [10, 15) -> False (same-day turnover)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return (self.start_date < other.end_date and
                self.end_date > other.start_date)

    def contains(self, check_date: date) -> bool:
        """Start date is inclusive, end date is exclusive"""
        return self.start_date <= check_date < self.end_date

    def starts_before(self, check_date: date) -> bool:
        return self.start_date < check_date

    def __len__(self) -> int:
        """Number of nights in this range"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
