"""
Domain-specific exception hierarchy for the booking engine.
"""


class BookingError(Exception):
    """Base class for all application-level errors."""


class NotConfiguredError(BookingError):
    """Raised when an employee has no availability window for a weekday."""


class NotFoundError(BookingError):
    """Raised when a requested entity does not exist."""


class ReservationNotFoundError(NotFoundError):
    """Raised when a reservation id is unknown to the store."""


class OfferNotFoundError(NotFoundError):
    """Raised when an offer id is unknown to the catalog."""


class NotOwnerError(BookingError):
    """Raised when a user tries to mutate a reservation they do not own."""


class DuplicateAssignmentError(BookingError):
    """Raised when an offer is already assigned to an employee."""


class InvalidWindowError(BookingError, ValueError):
    """Raised when an availability window does not open before it closes."""
