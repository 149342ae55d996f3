"""
Core business logic for calculating bookable appointment slots.

Pure domain logic without any external dependencies (no store lookups,
no configuration access, no I/O).
"""

from datetime import timedelta
from typing import Iterable, List, Optional, Sequence

import pendulum

from .models import TimeRange

DEFAULT_GRID_STEP = pendulum.duration(minutes=15)


class SlotCalculator:
    """
    Calculates bookable slots inside an availability window.

    Algorithm:
    1. Walk a cursor from the window start in grid-step increments
    2. Emit a candidate ``[cursor, cursor + duration)`` while it still fits
    3. Drop every candidate that overlaps an already booked interval

    Candidates are stepped on the grid, not by the service duration, so
    consecutive candidates overlap and every grid-aligned start is offered.
    """

    def __init__(self, grid_step: timedelta = DEFAULT_GRID_STEP):
        if grid_step <= timedelta(0):
            raise ValueError(f"Grid step must be positive, got {grid_step}")
        self.grid_step = grid_step

    def find_available_slots(
        self,
        window: TimeRange,
        duration: timedelta,
        busy: Iterable[TimeRange]
    ) -> List[TimeRange]:
        """
        Find all free slots of the given duration inside a window.

        Args:
            window: Availability window anchored on the requested date
            duration: Length of the requested service
            busy: Intervals already taken by existing reservations

        Returns:
            Free slots ordered by start time
        """
        candidates = self.generate_candidates(window, duration)
        return self.remove_conflicts(candidates, busy)

    def generate_candidates(
        self,
        window: TimeRange,
        duration: timedelta,
        grid_step: Optional[timedelta] = None
    ) -> List[TimeRange]:
        """
        Produce every grid-aligned candidate that fits inside the window.

        A duration longer than the window yields an empty list.
        """
        step = grid_step if grid_step is not None else self.grid_step

        if duration <= timedelta(0):
            raise ValueError(f"Duration must be positive, got {duration}")
        if step <= timedelta(0):
            raise ValueError(f"Grid step must be positive, got {step}")

        candidates: List[TimeRange] = []
        cursor = window.start

        while cursor + duration <= window.end:
            candidates.append(TimeRange(start=cursor, end=cursor + duration))
            cursor = cursor + step

        return candidates

    def remove_conflicts(
        self,
        candidates: Sequence[TimeRange],
        busy: Iterable[TimeRange]
    ) -> List[TimeRange]:
        """
        Keep only candidates that overlap none of the busy intervals.

        Input order is preserved and neither argument is modified.
        """
        busy_ranges = list(busy)

        return [
            candidate for candidate in candidates
            if not any(candidate.overlaps(taken) for taken in busy_ranges)
        ]
