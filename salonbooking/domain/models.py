"""
Domain models for availability windows, time ranges and reservations.
"""

from dataclasses import dataclass, replace
from datetime import date, time, timedelta
from enum import IntEnum
from typing import Optional, Union

import pendulum
from pendulum import DateTime

from .exceptions import InvalidWindowError


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration(self) -> timedelta:
        return self.end - self.start

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int(self.duration().total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ends do not overlap."""
        return self.start < other.end and self.end > other.start

    def contains(self, other: "TimeRange") -> bool:
        """Check if another range lies completely inside this one."""
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.start.format('HH:mm')} - {self.end.format('HH:mm')}"


class DayOfWeek(IntEnum):
    """Weekday keys for recurring availability (0=Monday, 6=Sunday)."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, day: date) -> "DayOfWeek":
        return cls(day.weekday())

    @classmethod
    def parse(cls, value: Union[str, int, "DayOfWeek"]) -> "DayOfWeek":
        """Accept a weekday name (any case) or its 0-6 index."""
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown day of week: '{value}'") from None
        return cls(value)


@dataclass(frozen=True)
class AvailabilityWindow:
    """
    An employee's recurring open hours for one day of the week.
    """
    employee_id: int
    day_of_week: DayOfWeek
    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidWindowError(
                f"Opening time {self.start} must be before closing time {self.end} "
                f"for {self.day_of_week.name}"
            )

    def on(self, day: date, tz: str) -> TimeRange:
        """Anchor the window on a concrete calendar date."""
        start = pendulum.datetime(
            day.year, day.month, day.day,
            self.start.hour, self.start.minute, self.start.second,
            tz=tz
        )
        end = pendulum.datetime(
            day.year, day.month, day.day,
            self.end.hour, self.end.minute, self.end.second,
            tz=tz
        )
        return TimeRange(start=start, end=end)


@dataclass(frozen=True)
class Offer:
    """A bookable service offered by a salon."""
    id: int
    salon_id: int
    name: str
    duration: timedelta
    price: float = 0.0


@dataclass(frozen=True)
class Reservation:
    """
    Snapshot of a booked appointment.

    The effective interval is ``[date_time, date_time + duration)`` where
    ``duration`` is taken from the offer when the reservation is created.
    """
    salon_id: int
    employee_id: int
    user_id: int
    offer_id: int
    date_time: DateTime
    duration: timedelta
    id: Optional[int] = None

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.date_time, end=self.date_time + self.duration)

    def is_owned_by(self, user_id: int) -> bool:
        """Ownership is decided by the user identifier, never by object identity."""
        return self.user_id == user_id

    def rescheduled(self, new_date_time: DateTime) -> "Reservation":
        return replace(self, date_time=new_date_time)
