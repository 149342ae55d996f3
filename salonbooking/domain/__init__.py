"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import AvailabilityWindow, DayOfWeek, Offer, Reservation, TimeRange
from .slot_calculator import SlotCalculator

__all__ = [
    "AvailabilityWindow",
    "DayOfWeek",
    "Offer",
    "Reservation",
    "TimeRange",
    "SlotCalculator",
]
