"""
Tests for slot calculator.
"""

import pendulum
import pytest

from salonbooking.domain.models import TimeRange
from salonbooking.domain.slot_calculator import SlotCalculator

TZ = "Europe/Warsaw"


def _at(hhmm: str):
    return pendulum.parse(f"2024-11-25 {hhmm}", tz=TZ)


def _span(start: str, end: str) -> TimeRange:
    return TimeRange(start=_at(start), end=_at(end))


def _labels(ranges):
    return [(r.start.format("HH:mm"), r.end.format("HH:mm")) for r in ranges]


def _minutes(value: int):
    return pendulum.duration(minutes=value)


class TestGenerateCandidates:
    """Tests for grid-stepped candidate generation."""

    def test_one_hour_window_thirty_minute_service(self):
        """Candidates start every 15 minutes and overlap each other."""
        calculator = SlotCalculator()

        candidates = calculator.generate_candidates(_span("09:00", "10:00"), _minutes(30))

        assert _labels(candidates) == [
            ("09:00", "09:30"),
            ("09:15", "09:45"),
            ("09:30", "10:00"),
        ]

    def test_duration_equal_to_window(self):
        """Exactly one candidate fills the whole window."""
        calculator = SlotCalculator()

        candidates = calculator.generate_candidates(_span("09:00", "10:00"), _minutes(60))

        assert _labels(candidates) == [("09:00", "10:00")]

    def test_duration_longer_than_window(self):
        """A service that cannot fit yields no candidates rather than an error."""
        calculator = SlotCalculator()

        candidates = calculator.generate_candidates(_span("09:00", "10:00"), _minutes(61))

        assert candidates == []

    def test_window_not_aligned_to_grid(self):
        """The last candidate must still end inside the window."""
        calculator = SlotCalculator()

        candidates = calculator.generate_candidates(_span("09:00", "09:50"), _minutes(30))

        assert _labels(candidates) == [("09:00", "09:30"), ("09:15", "09:45")]

    def test_custom_grid_step(self):
        calculator = SlotCalculator(grid_step=_minutes(30))

        candidates = calculator.generate_candidates(_span("09:00", "11:00"), _minutes(60))

        assert _labels(candidates) == [
            ("09:00", "10:00"),
            ("09:30", "10:30"),
            ("10:00", "11:00"),
        ]

    def test_grid_step_override_per_call(self):
        calculator = SlotCalculator()

        candidates = calculator.generate_candidates(
            _span("09:00", "10:00"), _minutes(15), grid_step=_minutes(20)
        )

        assert _labels(candidates) == [
            ("09:00", "09:15"),
            ("09:20", "09:35"),
            ("09:40", "09:55"),
        ]

    @pytest.mark.parametrize("duration", [15, 30, 45, 60, 90, 120, 480])
    def test_candidates_stay_inside_window(self, duration):
        calculator = SlotCalculator()
        window = _span("09:00", "17:00")

        candidates = calculator.generate_candidates(window, _minutes(duration))

        assert candidates
        assert all(window.contains(candidate) for candidate in candidates)
        assert all(candidate.duration() == _minutes(duration) for candidate in candidates)
        starts = [candidate.start for candidate in candidates]
        assert starts == sorted(starts)

    def test_invalid_duration(self):
        with pytest.raises(ValueError, match="Duration must be positive"):
            SlotCalculator().generate_candidates(_span("09:00", "10:00"), _minutes(0))

    def test_invalid_grid_step(self):
        with pytest.raises(ValueError, match="Grid step must be positive"):
            SlotCalculator(grid_step=_minutes(0))


class TestRemoveConflicts:
    """Tests for pruning candidates against booked intervals."""

    def test_busy_interval_excludes_overlapping_candidates(self):
        calculator = SlotCalculator()
        candidates = calculator.generate_candidates(_span("09:00", "12:00"), _minutes(30))
        busy = [_span("09:30", "10:00")]

        free = calculator.remove_conflicts(candidates, busy)
        labels = _labels(free)

        assert ("09:15", "09:45") not in labels
        assert ("09:30", "10:00") not in labels
        assert ("09:45", "10:15") not in labels
        assert ("09:00", "09:30") in labels
        assert ("10:00", "10:30") in labels
        assert len(free) == len(candidates) - 3

    def test_retained_candidates_overlap_nothing(self):
        calculator = SlotCalculator()
        candidates = calculator.generate_candidates(_span("09:00", "17:00"), _minutes(45))
        busy = [_span("10:10", "10:40"), _span("13:00", "14:30"), _span("16:50", "17:00")]

        free = calculator.remove_conflicts(candidates, busy)

        assert free
        for candidate in free:
            assert not any(candidate.overlaps(taken) for taken in busy)

    def test_filter_is_idempotent(self):
        calculator = SlotCalculator()
        candidates = calculator.generate_candidates(_span("09:00", "17:00"), _minutes(30))
        busy = [_span("11:00", "12:15")]

        once = calculator.remove_conflicts(candidates, busy)
        twice = calculator.remove_conflicts(once, busy)

        assert twice == once

    def test_retained_starts_stay_on_grid(self):
        """Gaps between retained starts are whole multiples of the grid step."""
        calculator = SlotCalculator()
        candidates = calculator.generate_candidates(_span("09:00", "13:00"), _minutes(30))
        busy = [_span("10:00", "10:45")]

        free = calculator.remove_conflicts(candidates, busy)
        step_seconds = _minutes(15).total_seconds()

        for previous, current in zip(free, free[1:]):
            gap = (current.start - previous.start).total_seconds()
            assert gap > 0
            assert gap % step_seconds == 0

    def test_inputs_are_not_mutated(self):
        calculator = SlotCalculator()
        candidates = calculator.generate_candidates(_span("09:00", "10:00"), _minutes(30))
        busy = [_span("09:00", "09:30")]
        candidates_before = list(candidates)
        busy_before = list(busy)

        calculator.remove_conflicts(candidates, busy)

        assert candidates == candidates_before
        assert busy == busy_before

    def test_fully_booked_day_returns_empty_list(self):
        calculator = SlotCalculator()

        free = calculator.find_available_slots(
            _span("09:00", "12:00"), _minutes(30), [_span("08:00", "13:00")]
        )

        assert free == []

    def test_find_available_slots_without_busy_times(self):
        calculator = SlotCalculator()

        free = calculator.find_available_slots(_span("09:00", "10:00"), _minutes(30), [])

        assert len(free) == 3
