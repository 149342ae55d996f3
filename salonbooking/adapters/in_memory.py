"""
In-memory collaborator implementations for running without a database.

They satisfy the service protocols and can be seeded from ``AppConfig``
for the CLI or built by hand in tests.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import time, timedelta
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Set, Tuple

import pendulum
from pendulum import DateTime

from ..domain.exceptions import (
    DuplicateAssignmentError,
    NotConfiguredError,
    OfferNotFoundError,
)
from ..domain.models import AvailabilityWindow, DayOfWeek, Offer, Reservation

if TYPE_CHECKING:
    from ..config import AppConfig

logger = logging.getLogger(__name__)


class InMemoryAvailabilityProvider:
    """
    Weekly availability keyed by employee and weekday.

    Only one window is kept per (employee, weekday); setting another replaces it.
    """

    def __init__(self, windows: Iterable[AvailabilityWindow] = ()):
        self._windows: Dict[Tuple[int, DayOfWeek], AvailabilityWindow] = {}
        for window in windows:
            self._windows[(window.employee_id, window.day_of_week)] = window

    @classmethod
    def from_config(cls, config: "AppConfig") -> "InMemoryAvailabilityProvider":
        return cls(
            window
            for employee in config.employees
            for window in employee.windows()
        )

    def set_window(
        self,
        employee_id: int,
        day_of_week: DayOfWeek,
        start: time,
        end: time,
    ) -> AvailabilityWindow:
        """
        Store a window for one weekday.

        Raises:
            InvalidWindowError: If start is not before end
        """
        window = AvailabilityWindow(
            employee_id=employee_id,
            day_of_week=day_of_week,
            start=start,
            end=end,
        )
        self._windows[(employee_id, day_of_week)] = window
        return window

    def replace_schedule(
        self,
        employee_id: int,
        windows: Iterable[AvailabilityWindow],
    ) -> List[AvailabilityWindow]:
        """Drop the employee's whole weekly schedule and store the new one."""
        new_windows = list(windows)
        for window in new_windows:
            if window.employee_id != employee_id:
                raise ValueError(
                    f"Window for employee {window.employee_id} passed to schedule of {employee_id}"
                )

        for key in [key for key in self._windows if key[0] == employee_id]:
            del self._windows[key]

        for window in new_windows:
            self._windows[(employee_id, window.day_of_week)] = window

        logger.info("Saved %d availability windows for employee %s", len(new_windows), employee_id)
        return new_windows

    def window_for(self, employee_id: int, day_of_week: DayOfWeek) -> AvailabilityWindow:
        window = self._windows.get((employee_id, day_of_week))
        if window is None:
            raise NotConfiguredError(
                f"Employee {employee_id} has no availability on {day_of_week.name}"
            )
        return window

    def schedule_for(self, employee_id: int) -> List[AvailabilityWindow]:
        """Return the employee's windows ordered Monday to Sunday."""
        return sorted(
            (window for (owner, _), window in self._windows.items() if owner == employee_id),
            key=lambda w: w.day_of_week,
        )


class InMemoryOfferCatalog:
    """Offer lookup plus the employee-to-offer assignment."""

    def __init__(self, offers: Iterable[Offer] = ()):
        self._offers: Dict[int, Offer] = {offer.id: offer for offer in offers}
        self._assignments: Dict[int, Set[int]] = {}

    @classmethod
    def from_config(cls, config: "AppConfig") -> "InMemoryOfferCatalog":
        catalog = cls(offer.to_offer() for offer in config.offers)
        for employee in config.employees:
            for offer_id in employee.offers:
                catalog.assign_offer(employee.id, offer_id)
        return catalog

    def add_offer(self, offer: Offer) -> Offer:
        self._offers[offer.id] = offer
        return offer

    def get_offer(self, offer_id: int) -> Offer:
        offer = self._offers.get(offer_id)
        if offer is None:
            logger.error("Offer not found with id: %s", offer_id)
            raise OfferNotFoundError(f"Not found offer with id: {offer_id}")
        return offer

    def duration_for(self, offer_id: int) -> timedelta:
        return self.get_offer(offer_id).duration

    def offers_for_salon(self, salon_id: int) -> List[Offer]:
        return [offer for offer in self._offers.values() if offer.salon_id == salon_id]

    def assign_offer(self, employee_id: int, offer_id: int) -> None:
        """
        Link an offer to an employee.

        Raises:
            OfferNotFoundError: If the offer is unknown
            DuplicateAssignmentError: If the employee already provides the offer
        """
        self.get_offer(offer_id)
        assigned = self._assignments.setdefault(employee_id, set())
        if offer_id in assigned:
            raise DuplicateAssignmentError(
                f"Employee {employee_id} already provides offer {offer_id}"
            )
        assigned.add(offer_id)

    def offers_for_employee(self, employee_id: int) -> List[Offer]:
        return [self._offers[offer_id] for offer_id in sorted(self._assignments.get(employee_id, ()))]

    def employees_for_offer(self, offer_id: int) -> List[int]:
        return sorted(
            employee_id for employee_id, offer_ids in self._assignments.items()
            if offer_id in offer_ids
        )


class InMemoryReservationStore:
    """Dictionary-backed reservation storage with sequential ids."""

    def __init__(self, reservations: Iterable[Reservation] = ()):
        self._reservations: Dict[int, Reservation] = {}
        self._next_id = 1
        for reservation in reservations:
            self.save(reservation)

    @classmethod
    def from_config(
        cls,
        config: "AppConfig",
        offers: Optional[InMemoryOfferCatalog] = None,
    ) -> "InMemoryReservationStore":
        catalog = offers or InMemoryOfferCatalog.from_config(config)
        return cls(
            Reservation(
                salon_id=seed.salon_id,
                employee_id=seed.employee_id,
                user_id=seed.user_id,
                offer_id=seed.offer_id,
                date_time=pendulum.instance(seed.date_time, tz=config.timezone),
                duration=catalog.duration_for(seed.offer_id),
            )
            for seed in config.reservations
        )

    def save(self, reservation: Reservation) -> Reservation:
        if reservation.id is None:
            reservation = replace(reservation, id=self._next_id)
        # New ids must never collide with explicitly saved ones
        self._next_id = max(self._next_id, reservation.id + 1)
        self._reservations[reservation.id] = reservation
        return reservation

    def find_by_id(self, reservation_id: int) -> Optional[Reservation]:
        return self._reservations.get(reservation_id)

    def find_all(self) -> List[Reservation]:
        return list(self._reservations.values())

    def find_all_by_user(self, user_id: int) -> List[Reservation]:
        return [r for r in self._reservations.values() if r.user_id == user_id]

    def find_all_by_salon_id(self, salon_id: int) -> List[Reservation]:
        return [r for r in self._reservations.values() if r.salon_id == salon_id]

    def find_all_in_date_range(self, start: DateTime, end: DateTime) -> List[Reservation]:
        return [r for r in self._reservations.values() if start <= r.date_time <= end]

    def delete(self, reservation: Reservation) -> None:
        self._reservations.pop(reservation.id, None)
