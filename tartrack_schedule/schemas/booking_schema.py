"""Booking records as consumed by the calendar.

Bookings are created by the booking flow; the calendar only reads them.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tartrack_schedule.utils import parse_date_key, to_date_key


class BookingStatus(str, Enum):
    PENDING = "pending"
    WAITING_FOR_DRIVER = "waiting_for_driver"
    WAITING_DRIVER_ACCEPTANCE = "waiting_driver_acceptance"
    DRIVER_ASSIGNED = "driver_assigned"
    CONFIRMED = "confirmed"
    PAID = "paid"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BookingRecord(BaseModel):
    """A reservation on a driver's calendar, keyed by its date string."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    booking_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("booking_id", "id")
    )
    date: str = Field(validation_alias=AliasChoices("booking_date", "date"))
    time: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("booking_time", "time")
    )
    # Unknown statuses are kept as plain strings; the booking still counts.
    status: Union[BookingStatus, str] = Field(
        default=BookingStatus.CONFIRMED, union_mode="left_to_right"
    )
    customer_ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("customer_name", "customer_ref")
    )
    package_ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("package_name", "package_ref")
    )

    @field_validator("booking_id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return None if value is None else str(value)

    @field_validator("date")
    @classmethod
    def _check_date_key(cls, value: str) -> str:
        parse_date_key(value)
        return value.strip()

    @property
    def day(self):
        return parse_date_key(self.date)

    def occurs_on(self, day) -> bool:
        return self.date == to_date_key(day)


class AvailabilityCheck(BaseModel):
    """Result of the booking flow's pre-acceptance availability check."""

    available: bool = True
    conflict_reason: Optional[str] = None
