"""
salonbooking - availability and reservation scheduling for salon bookings.
"""

__version__ = "0.1.0"
