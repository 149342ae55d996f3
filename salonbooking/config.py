"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import datetime, time, timedelta
from pathlib import Path
from typing import List

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import AvailabilityWindow, DayOfWeek, Offer


class SchedulingDefaults(BaseModel):
    """Default settings for slot generation."""
    grid_step_minutes: int = 15
    default_duration_minutes: int = 30

    @field_validator("grid_step_minutes", "default_duration_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure minute values are positive."""
        if value <= 0:
            raise ValueError(f"Minutes must be greater than zero, got {value}")
        return value

    def grid_step(self) -> timedelta:
        return pendulum.duration(minutes=self.grid_step_minutes)

    def default_duration(self) -> timedelta:
        return pendulum.duration(minutes=self.default_duration_minutes)


class WindowConfig(BaseModel):
    """Opening hours for one weekday."""
    day: DayOfWeek
    start: time
    end: time

    @field_validator("day", mode="before")
    @classmethod
    def parse_day(cls, value) -> DayOfWeek:
        """Accept weekday names such as MONDAY as well as indexes."""
        return DayOfWeek.parse(value)

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_sexagesimal(cls, value):
        """YAML 1.1 loads an unquoted 10:30 as the base-60 integer 630."""
        if isinstance(value, int) and not isinstance(value, bool):
            if value < 60:
                raise ValueError(f"Ambiguous time {value}; write it as HH:MM, e.g. \"09:00\"")
            hours, minutes = divmod(value, 60)
            return time(hour=hours, minute=minutes)
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "WindowConfig":
        """Ensure the window opens before it closes."""
        if self.start >= self.end:
            raise ValueError(
                f"Opening time {self.start} must be before closing time {self.end} for {self.day.name}"
            )
        return self


class EmployeeConfig(BaseModel):
    """Employee with weekly availability and assigned offers."""
    id: int
    name: str
    availability: List[WindowConfig] = Field(default_factory=list)
    offers: List[int] = Field(default_factory=list)

    @field_validator("availability")
    @classmethod
    def validate_one_window_per_day(cls, value: List[WindowConfig]) -> List[WindowConfig]:
        """At most one window may be configured per weekday."""
        seen: set[DayOfWeek] = set()
        for window in value:
            if window.day in seen:
                raise ValueError(f"Duplicate availability for {window.day.name}")
            seen.add(window.day)
        return value

    def windows(self) -> List[AvailabilityWindow]:
        return [
            AvailabilityWindow(
                employee_id=self.id,
                day_of_week=window.day,
                start=window.start,
                end=window.end,
            )
            for window in self.availability
        ]


class OfferConfig(BaseModel):
    """Bookable service."""
    id: int
    name: str
    duration_minutes: int
    salon_id: int = 1
    price: float = 0.0

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure offer duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    def to_offer(self) -> Offer:
        return Offer(
            id=self.id,
            salon_id=self.salon_id,
            name=self.name,
            duration=pendulum.duration(minutes=self.duration_minutes),
            price=self.price,
        )


class ReservationConfig(BaseModel):
    """Seed reservation, interpreted in the configured timezone."""
    employee_id: int
    user_id: int
    offer_id: int
    date_time: datetime
    salon_id: int = 1


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Warsaw"
    scheduling: SchedulingDefaults = Field(default_factory=SchedulingDefaults)
    employees: List[EmployeeConfig] = Field(default_factory=list)
    offers: List[OfferConfig] = Field(default_factory=list)
    reservations: List[ReservationConfig] = Field(default_factory=list)

    @field_validator("employees")
    @classmethod
    def validate_employees(cls, value: List[EmployeeConfig]) -> List[EmployeeConfig]:
        """Ensure employee ids are unique."""
        ids = [employee.id for employee in value]
        duplicates = sorted({employee_id for employee_id in ids if ids.count(employee_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate employee id(s) detected: {duplicates}")
        return value

    @field_validator("offers")
    @classmethod
    def validate_offers(cls, value: List[OfferConfig]) -> List[OfferConfig]:
        """Ensure offer ids are unique."""
        ids = [offer.id for offer in value]
        duplicates = sorted({offer_id for offer_id in ids if ids.count(offer_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate offer id(s) detected: {duplicates}")
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def find_employee(self, employee_id: int) -> EmployeeConfig | None:
        for employee in self.employees:
            if employee.id == employee_id:
                return employee
        return None

    def find_offer(self, offer_id: int) -> OfferConfig | None:
        for offer in self.offers:
            if offer.id == offer_id:
                return offer
        return None


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
