"""
Application service for finding bookable slots for an employee.

The service resolves the employee's recurring availability window via a
provider protocol and delegates the slot arithmetic to the domain-level
``SlotCalculator``. Busy intervals come either from the caller or, for
``get_available_slots``, from the reservation ledger.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional, Protocol

import pendulum

from ..domain.models import AvailabilityWindow, DayOfWeek, TimeRange
from ..domain.slot_calculator import SlotCalculator
from .reservation_ledger import OfferDurationProvider, ReservationLedger

logger = logging.getLogger(__name__)


class AvailabilityConfigProvider(Protocol):
    """Protocol describing where weekly availability windows come from."""

    def window_for(self, employee_id: int, day_of_week: DayOfWeek) -> AvailabilityWindow:
        """Return the window or raise NotConfiguredError."""


class AvailabilityFinderService:
    """
    Orchestrates availability lookup and slot calculation.

    Requests for dates before today yield no slots. Requests for today are
    not trimmed to the current time of day.
    """

    def __init__(
        self,
        availability_provider: AvailabilityConfigProvider,
        slot_calculator: SlotCalculator,
        timezone: str = "Europe/Warsaw",
        today: Optional[Callable[[], date]] = None,
        ledger: Optional[ReservationLedger] = None,
        offers: Optional[OfferDurationProvider] = None,
    ) -> None:
        self._availability_provider = availability_provider
        self._slot_calculator = slot_calculator
        self._timezone = timezone
        self._today = today or (lambda: pendulum.today(timezone).date())
        self._ledger = ledger
        self._offers = offers

    def find_availability(
        self,
        employee_id: int,
        day: date,
        duration: timedelta,
        busy_intervals: Iterable[TimeRange],
    ) -> List[TimeRange]:
        """
        Compute free slots for an employee on a date.

        Raises:
            NotConfiguredError: If the employee does not work on that weekday
        """
        logger.info("Finding availability for employee %s on %s", employee_id, day)

        if day < self._today():
            logger.warning("Requested availability for past date: %s", day)
            return []

        window = self._availability_provider.window_for(employee_id, DayOfWeek.of(day))
        window_range = window.on(day, self._timezone)

        candidates = self._slot_calculator.generate_candidates(window_range, duration)
        logger.debug("Generated %d raw candidates before filtering", len(candidates))

        slots = self._slot_calculator.remove_conflicts(candidates, busy_intervals)
        logger.debug("%d candidates left after removing conflicts", len(slots))
        return slots

    def get_available_slots(
        self,
        employee_id: int,
        day: date,
        *,
        offer_id: Optional[int] = None,
        duration: Optional[timedelta] = None,
    ) -> List[TimeRange]:
        """
        Compute free slots using the ledger's bookings as busy intervals.

        An explicit ``duration`` wins over the offer's duration.
        """
        if self._ledger is None:
            raise RuntimeError("A reservation ledger is required to look up busy intervals")

        if duration is None and offer_id is None:
            raise ValueError("Either offer_id or duration must be provided")

        if day < self._today():
            logger.warning("Requested availability for past date: %s", day)
            return []

        if duration is None:
            if self._offers is None:
                raise RuntimeError("An offer duration provider is required to resolve offer_id")
            duration = self._offers.duration_for(offer_id)

        busy = self._ledger.list_busy_intervals(employee_id, day)
        return self.find_availability(employee_id, day, duration, busy)
