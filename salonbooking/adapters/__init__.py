"""
Adapters layer - In-memory collaborator implementations.
"""

from .in_memory import (
    InMemoryAvailabilityProvider,
    InMemoryOfferCatalog,
    InMemoryReservationStore,
)

__all__ = [
    "InMemoryAvailabilityProvider",
    "InMemoryOfferCatalog",
    "InMemoryReservationStore",
]
