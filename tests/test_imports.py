"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_booking_schema(self):
        from tartrack_schedule.schemas.booking_schema import BookingRecord, BookingStatus
        assert BookingStatus.CONFIRMED == "confirmed"
        assert BookingRecord is not None

    def test_import_availability_schema(self):
        from tartrack_schedule.schemas.availability_schema import (
            AvailabilityRecord, AvailabilityUpdate,
        )
        assert AvailabilityRecord(date="2025-03-10").is_available
        assert AvailabilityUpdate is not None


class TestCalendarImports:
    def test_import_calendar_package(self):
        from tartrack_schedule.calendar import (
            AvailabilityEditor, AvailabilityResolver, DayStatus, SaveFlow,
            ScheduleSession, STANDARD_SLOTS, TemporalGuard,
        )
        assert len(DayStatus) == 7
        assert STANDARD_SLOTS.first == "06:00"
        assert SaveFlow().current_state.value == "editing"

    def test_all_exports_resolve(self):
        import tartrack_schedule.calendar as calendar_pkg
        for name in calendar_pkg.__all__:
            assert hasattr(calendar_pkg, name), name


class TestStoreImports:
    def test_import_client(self):
        from tartrack_schedule.store.client import (
            NetworkError, RequestTimeoutError, ScheduleStore, StoreResponseError,
        )
        assert issubclass(RequestTimeoutError, NetworkError)
        assert issubclass(StoreResponseError, NetworkError)

    def test_import_memory_store(self):
        from tartrack_schedule.store.memory import InMemoryScheduleStore
        store = InMemoryScheduleStore()
        assert store.writes == []


class TestConfigImport:
    def test_import_config(self):
        from tartrack_schedule.config import settings
        assert settings.calendar.slot_catalog is not None
        assert settings.api.request_timeout_sec > 0


class TestConsoleDemo:
    def test_console_calendar_imports(self):
        from console_demo import ConsoleCalendar
        demo = ConsoleCalendar()
        assert demo.clock.now().hour == 15
        assert demo.session.active

    def test_main_month_argument(self):
        from main import _parse_month
        assert _parse_month("2025-03") == (2025, 2)
