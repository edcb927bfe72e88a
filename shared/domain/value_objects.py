"""
Common Value Objects

Value objects used across multiple apps:
- DateSpan: An inclusive range of calendar days (closures, booking windows)
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class DateSpan(ValueObject):
    """
    Inclusive date span value object

    Represents every calendar day from start_date to end_date, both included.
    A single day is a span whose start and end are the same date.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise ValueError(f"End date ({self.end_date}) must not be before start date ({self.start_date})")

    @classmethod
    def from_bounds(cls, start_date: date, end_date: Optional[date]) -> 'DateSpan':
        """Build a span from a start and an optional end (missing end means one day)."""
        return cls(start_date, end_date or start_date)

    def contains(self, check_date: date) -> bool:
        """
        Check if a date is within this span

        Note: both endpoints are inclusive
        """
        return self.start_date <= check_date <= self.end_date

    def __str__(self):
        if self.start_date == self.end_date:
            return self.start_date.isoformat()
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateSpan({self.start_date}, {self.end_date})"
