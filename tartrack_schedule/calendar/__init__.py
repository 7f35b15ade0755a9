from tartrack_schedule.calendar.clock import FixedClock, SystemClock
from tartrack_schedule.calendar.editor import (
    AvailabilityDraft,
    AvailabilityEditor,
    CustomMode,
    RangeMode,
    decode_mode,
    encode_mode,
)
from tartrack_schedule.calendar.grid import build_month_grid, month_bounds, shift_month
from tartrack_schedule.calendar.resolver import AvailabilityResolver, CalendarDate, DayStatus
from tartrack_schedule.calendar.save_flow import SaveFlow, SaveState, SaveTrigger
from tartrack_schedule.calendar.session import (
    MonthView,
    PartialDataError,
    SaveInProgressError,
    SaveOutcome,
    ScheduleSession,
)
from tartrack_schedule.calendar.temporal_guard import (
    TemporalError,
    TemporalGuard,
    is_date_in_past,
    is_time_in_past,
)
from tartrack_schedule.calendar.time_slots import (
    COMPACT_SLOTS,
    STANDARD_SLOTS,
    TimeSlotCatalog,
    format_slot,
)

__all__ = [
    "AvailabilityDraft", "AvailabilityEditor", "CustomMode", "RangeMode",
    "decode_mode", "encode_mode",
    "AvailabilityResolver", "CalendarDate", "DayStatus",
    "build_month_grid", "month_bounds", "shift_month",
    "TemporalGuard", "TemporalError", "is_date_in_past", "is_time_in_past",
    "TimeSlotCatalog", "STANDARD_SLOTS", "COMPACT_SLOTS", "format_slot",
    "SaveFlow", "SaveState", "SaveTrigger",
    "ScheduleSession", "MonthView", "SaveOutcome", "PartialDataError", "SaveInProgressError",
    "FixedClock", "SystemClock",
]
