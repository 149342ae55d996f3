"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_finder import AvailabilityConfigProvider, AvailabilityFinderService
from .reservation_ledger import OfferDurationProvider, ReservationLedger, ReservationStore

__all__ = [
    "AvailabilityConfigProvider",
    "AvailabilityFinderService",
    "OfferDurationProvider",
    "ReservationLedger",
    "ReservationStore",
]
