"""Availability records and the set-availability request body."""

from datetime import datetime
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tartrack_schedule.utils import parse_date_key


def _normalize_slots(value) -> list[str]:
    """Validate hourly ``HH:00`` slots, drop duplicates, order by hour."""
    if value is None:
        return []
    seen: dict[int, str] = {}
    for raw in value:
        slot = str(raw).strip()
        hours, _, minutes = slot.partition(":")
        if not hours.isdigit() or minutes[:2] != "00" or not 0 <= int(hours) <= 23:
            raise ValueError(f"Time slot must be an hourly 'HH:00' value, got {raw!r}")
        seen.setdefault(int(hours), f"{int(hours):02d}:00")
    return [seen[hour] for hour in sorted(seen)]


class AvailabilityRecord(BaseModel):
    """A driver's declared availability for one date."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    owner_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("driver_id", "owner_id")
    )
    date: str
    is_available: bool = True
    unavailable_times: list[str] = Field(default_factory=list)
    notes: str = ""
    updated_at: Optional[datetime] = None

    @field_validator("owner_id", mode="before")
    @classmethod
    def _stringify_owner(cls, value):
        return None if value is None else str(value)

    @field_validator("date")
    @classmethod
    def _check_date_key(cls, value: str) -> str:
        parse_date_key(value)
        return value.strip()

    @field_validator("unavailable_times", mode="before")
    @classmethod
    def _check_slots(cls, value):
        return _normalize_slots(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _none_notes(cls, value):
        return value or ""

    @property
    def day(self):
        return parse_date_key(self.date)

    @property
    def is_partial(self) -> bool:
        return self.is_available and bool(self.unavailable_times)


class AvailabilityUpdate(BaseModel):
    """Body of ``POST /driver-schedule/set-availability/``."""

    driver_id: Union[int, str]
    date: str
    is_available: bool
    unavailable_times: list[str] = Field(default_factory=list)
    notes: str = ""

    @field_validator("date")
    @classmethod
    def _check_date_key(cls, value: str) -> str:
        parse_date_key(value)
        return value

    @field_validator("unavailable_times", mode="before")
    @classmethod
    def _check_slots(cls, value):
        return _normalize_slots(value)
