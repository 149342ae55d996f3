"""
Tests for YAML configuration loading.
"""

from datetime import time

import pendulum
import pytest
from pydantic import ValidationError

from salonbooking.adapters.in_memory import (
    InMemoryAvailabilityProvider,
    InMemoryOfferCatalog,
    InMemoryReservationStore,
)
from salonbooking.config import AppConfig
from salonbooking.domain.models import DayOfWeek

CONFIG_YAML = """
timezone: Europe/Warsaw
scheduling:
  grid_step_minutes: 30
offers:
  - {id: 1, name: Haircut, duration_minutes: 30}
  - {id: 2, name: Colouring, duration_minutes: 90, price: 250}
employees:
  - id: 1
    name: Anna
    offers: [1, 2]
    availability:
      - {day: MONDAY, start: "09:00", end: "17:00"}
      - day: friday
        start: 10:30
        end: 14:00
reservations:
  - {employee_id: 1, user_id: 7, offer_id: 2, date_time: "2024-11-25T10:00:00"}
"""


def _write(tmp_path, content: str):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestAppConfig:
    """Tests for AppConfig."""

    def test_load_from_yaml(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, CONFIG_YAML))

        assert config.timezone == "Europe/Warsaw"
        assert config.scheduling.grid_step() == pendulum.duration(minutes=30)
        assert config.scheduling.default_duration_minutes == 30
        assert config.find_offer(2).name == "Colouring"
        assert config.find_employee(1).name == "Anna"
        assert config.find_employee(9) is None

    def test_unquoted_times_are_read_as_clock_times(self):
        """YAML turns 10:30 into 630; it must still mean half past ten."""
        config = AppConfig(employees=[{
            "id": 1,
            "name": "Anna",
            "availability": [{"day": "FRIDAY", "start": 630, "end": 840}],
        }])

        window = config.employees[0].availability[0]
        assert (window.start, window.end) == (time(10, 30), time(14, 0))

    def test_bare_hour_is_rejected(self):
        """A plain 9 is not an HH:MM value and must not become 00:09."""
        with pytest.raises(ValidationError, match="Ambiguous time 9"):
            AppConfig(employees=[{
                "id": 1,
                "name": "Anna",
                "availability": [{"day": "MONDAY", "start": 9, "end": "17:00"}],
            }])

    def test_window_must_open_before_closing(self):
        with pytest.raises(ValidationError, match="must be before closing"):
            AppConfig(employees=[{
                "id": 1,
                "name": "Anna",
                "availability": [{"day": "MONDAY", "start": "17:00", "end": "09:00"}],
            }])

    def test_one_window_per_day(self):
        with pytest.raises(ValidationError, match="Duplicate availability"):
            AppConfig(employees=[{
                "id": 1,
                "name": "Anna",
                "availability": [
                    {"day": "MONDAY", "start": "09:00", "end": "12:00"},
                    {"day": "monday", "start": "13:00", "end": "17:00"},
                ],
            }])

    def test_duplicate_offer_ids(self):
        with pytest.raises(ValidationError, match="Duplicate offer"):
            AppConfig(offers=[
                {"id": 1, "name": "A", "duration_minutes": 30},
                {"id": 1, "name": "B", "duration_minutes": 45},
            ])

    def test_non_positive_grid_step(self):
        with pytest.raises(ValidationError):
            AppConfig(scheduling={"grid_step_minutes": 0})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write(tmp_path, "employees: [unclosed"))

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(_write(tmp_path, "- just\n- a list\n"))


class TestAdaptersFromConfig:
    """Seeding the in-memory collaborators."""

    def test_build_collaborators(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, CONFIG_YAML))

        provider = InMemoryAvailabilityProvider.from_config(config)
        catalog = InMemoryOfferCatalog.from_config(config)
        store = InMemoryReservationStore.from_config(config, offers=catalog)

        assert provider.window_for(1, DayOfWeek.FRIDAY).start == time(10, 30)
        assert catalog.employees_for_offer(2) == [1]

        [reservation] = store.find_all()
        assert reservation.date_time == pendulum.datetime(2024, 11, 25, 10, 0, tz="Europe/Warsaw")
        assert reservation.duration == pendulum.duration(minutes=90)
