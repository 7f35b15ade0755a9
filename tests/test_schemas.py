"""Tests for booking and availability schemas."""

import pytest
from pydantic import ValidationError

from tartrack_schedule.schemas.availability_schema import AvailabilityRecord, AvailabilityUpdate
from tartrack_schedule.schemas.booking_schema import BookingRecord, BookingStatus


class TestBookingRecord:
    def test_backend_field_names(self):
        booking = BookingRecord.model_validate({
            "booking_id": 12, "booking_date": "2025-03-10", "booking_time": "14:00",
            "status": "completed",
        })
        assert booking.booking_id == "12"
        assert booking.date == "2025-03-10"
        assert booking.status == BookingStatus.COMPLETED

    def test_status_defaults_to_confirmed(self):
        assert BookingRecord(date="2025-03-10").status == BookingStatus.CONFIRMED

    def test_unpadded_date_rejected(self):
        with pytest.raises(ValidationError):
            BookingRecord(date="2025-3-10")

    def test_occurs_on(self):
        from datetime import date

        booking = BookingRecord(date="2025-03-10")
        assert booking.occurs_on(date(2025, 3, 10))
        assert not booking.occurs_on("2025-03-11")

    def test_unknown_fields_ignored(self):
        booking = BookingRecord.model_validate({"date": "2025-03-10", "pickup": "Plaza"})
        assert not hasattr(booking, "pickup")


class TestAvailabilityRecord:
    def test_slots_sorted_and_deduplicated(self):
        record = AvailabilityRecord(
            date="2025-03-10", unavailable_times=["13:00", "09:00", "13:00", "9:00"]
        )
        assert record.unavailable_times == ["09:00", "13:00"]

    def test_non_hourly_slot_rejected(self):
        with pytest.raises(ValidationError):
            AvailabilityRecord(date="2025-03-10", unavailable_times=["09:15"])

    def test_null_fields_normalized(self):
        record = AvailabilityRecord.model_validate(
            {"driver_id": 5, "date": "2025-03-10", "unavailable_times": None, "notes": None}
        )
        assert record.owner_id == "5"
        assert record.unavailable_times == []
        assert record.notes == ""

    def test_is_partial(self):
        assert AvailabilityRecord(date="2025-03-10", unavailable_times=["06:00"]).is_partial
        assert not AvailabilityRecord(date="2025-03-10").is_partial
        assert not AvailabilityRecord(
            date="2025-03-10", is_available=False, unavailable_times=["06:00"]
        ).is_partial


class TestAvailabilityUpdate:
    def test_keeps_driver_id_type(self):
        update = AvailabilityUpdate(driver_id=42, date="2025-03-10", is_available=False)
        assert update.model_dump()["driver_id"] == 42

    def test_invalid_date_rejected(self):
        with pytest.raises(ValidationError):
            AvailabilityUpdate(driver_id=42, date="10/03/2025", is_available=True)


class TestBookingStatusValues:
    def test_lifecycle_status_parsed(self):
        booking = BookingRecord.model_validate(
            {"booking_date": "2025-03-10", "status": "driver_assigned"}
        )
        assert booking.status == BookingStatus.DRIVER_ASSIGNED
        assert isinstance(booking.status, BookingStatus)

    def test_unknown_status_kept_as_string(self):
        booking = BookingRecord.model_validate(
            {"booking_date": "2025-03-10", "status": "awaiting_weather_check"}
        )
        assert booking.status == "awaiting_weather_check"
