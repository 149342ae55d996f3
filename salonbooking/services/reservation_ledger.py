"""
Reservation lifecycle: create, cancel, reschedule and read projections.

The ledger owns the rules for reservation transitions while storage stays
behind the ``ReservationStore`` protocol. Cancellation and rescheduling are
only allowed for the user who made the booking.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Protocol, Sequence

import pendulum
from pendulum import DateTime

from ..domain.exceptions import NotOwnerError, ReservationNotFoundError
from ..domain.models import Reservation, TimeRange

logger = logging.getLogger(__name__)


class ReservationStore(Protocol):
    """Protocol describing the persistence operations needed by the ledger."""

    def save(self, reservation: Reservation) -> Reservation:
        """Insert or update a reservation and return the stored snapshot."""

    def find_by_id(self, reservation_id: int) -> Optional[Reservation]:
        """Return the reservation or None."""

    def find_all(self) -> Sequence[Reservation]:
        """Return every stored reservation."""

    def find_all_by_user(self, user_id: int) -> Sequence[Reservation]:
        """Return reservations booked by a user."""

    def find_all_by_salon_id(self, salon_id: int) -> Sequence[Reservation]:
        """Return reservations made at a salon."""

    def find_all_in_date_range(self, start: DateTime, end: DateTime) -> Sequence[Reservation]:
        """Return reservations whose date_time lies within ``[start, end]``."""

    def delete(self, reservation: Reservation) -> None:
        """Remove a reservation."""


class OfferDurationProvider(Protocol):
    """Protocol resolving how long a booked offer takes."""

    def duration_for(self, offer_id: int) -> timedelta:
        """Return the offer duration or raise OfferNotFoundError."""


class ReservationLedger:
    """
    Governs the reservation lifecycle on top of an external store.

    Creating a reservation does not check for overlaps with existing
    bookings. Callers are expected to consult ``find_conflicts`` or the
    availability finder before booking.
    """

    def __init__(
        self,
        store: ReservationStore,
        offers: OfferDurationProvider,
        timezone: str = "Europe/Warsaw",
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self._store = store
        self._offers = offers
        self._timezone = timezone
        self._today = today or (lambda: pendulum.today(timezone).date())

    @property
    def timezone(self) -> str:
        return self._timezone

    def create_reservation(
        self,
        *,
        salon_id: int,
        employee_id: int,
        user_id: int,
        offer_id: int,
        date_time: DateTime,
    ) -> int:
        """
        Book an offer with an employee and return the new reservation id.

        Raises:
            OfferNotFoundError: If the offer duration cannot be resolved
        """
        logger.info(
            "Adding new reservation for user %s with employee %s at %s",
            user_id, employee_id, date_time,
        )
        reservation = Reservation(
            salon_id=salon_id,
            employee_id=employee_id,
            user_id=user_id,
            offer_id=offer_id,
            date_time=date_time,
            duration=self._offers.duration_for(offer_id),
        )
        saved = self._store.save(reservation)
        logger.info("Reservation %s saved for user %s at %s", saved.id, user_id, date_time)
        return saved.id

    def get_reservation(self, reservation_id: int) -> Reservation:
        """Fetch a reservation or raise ReservationNotFoundError."""
        reservation = self._store.find_by_id(reservation_id)
        if reservation is None:
            logger.error("Reservation not found with id: %s", reservation_id)
            raise ReservationNotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    def cancel_reservation(self, reservation_id: int, requesting_user_id: int) -> bool:
        """
        Delete a reservation on behalf of its owner.

        Raises:
            ReservationNotFoundError: If the reservation does not exist
            NotOwnerError: If the requesting user did not book it
        """
        logger.info(
            "Attempting to delete reservation %s for user %s",
            reservation_id, requesting_user_id,
        )
        reservation = self._get_owned(reservation_id, requesting_user_id)
        self._store.delete(reservation)
        logger.info("Reservation %s deleted for user %s", reservation_id, requesting_user_id)
        return True

    def reschedule_reservation(
        self,
        reservation_id: int,
        requesting_user_id: int,
        new_date_time: DateTime,
    ) -> Reservation:
        """
        Move a reservation to a new start and return the stored snapshot.

        The new start is not checked against availability or conflicts.
        """
        logger.info(
            "Updating reservation %s by user %s to %s",
            reservation_id, requesting_user_id, new_date_time,
        )
        reservation = self._get_owned(reservation_id, requesting_user_id)
        saved = self._store.save(reservation.rescheduled(new_date_time))
        logger.info("Reservation %s moved to %s", reservation_id, new_date_time)
        return saved

    def list_busy_intervals(self, employee_id: int, day: date) -> List[TimeRange]:
        """Return the intervals an employee is already booked for on a date."""
        logger.debug("Fetching busy intervals for employee %s on %s", employee_id, day)
        reservations = [
            reservation for reservation in self._store.find_all()
            if reservation.employee_id == employee_id
            and self._local_date(reservation) == day
        ]

        if not reservations:
            logger.info("No reservations found for employee %s on %s", employee_id, day)
            return []

        logger.info(
            "Found %d reservations for employee %s on %s",
            len(reservations), employee_id, day,
        )
        return sorted(
            (reservation.time_range for reservation in reservations),
            key=lambda r: r.start,
        )

    def find_conflicts(
        self,
        employee_id: int,
        date_time: DateTime,
        duration: timedelta,
    ) -> List[Reservation]:
        """Return the employee's reservations that overlap a prospective booking."""
        requested = TimeRange(start=date_time, end=date_time + duration)
        return [
            reservation for reservation in self._store.find_all()
            if reservation.employee_id == employee_id
            and reservation.time_range.overlaps(requested)
        ]

    def list_for_user(self, user_id: int) -> List[Reservation]:
        reservations = sorted(self._store.find_all_by_user(user_id), key=lambda r: r.date_time)
        logger.info("Found %d reservations for user %s", len(reservations), user_id)
        return reservations

    def list_for_tomorrow(self) -> List[Reservation]:
        """Return all reservations starting tomorrow, e.g. for reminders."""
        tomorrow = self._today() + timedelta(days=1)
        start = pendulum.datetime(tomorrow.year, tomorrow.month, tomorrow.day, tz=self._timezone)
        end = start.end_of("day")

        reservations = sorted(
            self._store.find_all_in_date_range(start, end),
            key=lambda r: r.date_time,
        )
        logger.info("Found %d reservations for %s", len(reservations), tomorrow)
        return reservations

    def list_by_salon_grouped_by_date(self, salon_id: int) -> Dict[date, List[Reservation]]:
        """Group a salon's reservations by local calendar date, in date order."""
        reservations = self._store.find_all_by_salon_id(salon_id)
        logger.info("Found %d reservations for salon %s", len(reservations), salon_id)

        grouped: Dict[date, List[Reservation]] = {}
        for reservation in sorted(reservations, key=lambda r: r.date_time):
            grouped.setdefault(self._local_date(reservation), []).append(reservation)

        return grouped

    def _get_owned(self, reservation_id: int, requesting_user_id: int) -> Reservation:
        reservation = self.get_reservation(reservation_id)

        if not reservation.is_owned_by(requesting_user_id):
            logger.warning(
                "User %s is not the owner of reservation %s",
                requesting_user_id, reservation_id,
            )
            raise NotOwnerError(
                f"Reservation {reservation_id} does not belong to user {requesting_user_id}"
            )

        return reservation

    def _local_date(self, reservation: Reservation) -> date:
        return reservation.date_time.in_timezone(self._timezone).date()
