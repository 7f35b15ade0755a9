"""Tests for Range/Custom canonicalization and editor state."""

import pytest

from tartrack_schedule.calendar.editor import (
    MARKED_UNAVAILABLE_NOTE,
    AvailabilityEditor,
    CustomMode,
    RangeMode,
    available_window,
    decode_mode,
    encode_mode,
    is_contiguous,
    mark_unavailable_draft,
)
from tests.conftest import make_availability


def record_from(mode, catalog, date="2025-03-10"):
    draft = encode_mode(mode, catalog)
    return make_availability(
        date,
        is_available=draft.is_available,
        unavailable_times=draft.unavailable_times,
        notes=draft.notes,
    )


class TestEncodeRange:
    def test_business_hours_on_standard_catalog(self, catalog):
        draft = encode_mode(RangeMode("08:00", "18:00"), catalog)
        assert draft.is_available is True
        assert draft.unavailable_times == ["06:00", "07:00", "18:00", "19:00", "20:00"]
        assert draft.notes == "Available 8:00 AM - 6:00 PM"

    def test_full_day_range_leaves_nothing_unavailable(self, catalog):
        draft = encode_mode(RangeMode("06:00", "21:00"), catalog)
        assert draft.unavailable_times == []

    def test_compact_catalog(self, compact_catalog):
        draft = encode_mode(RangeMode("09:00", "17:00"), compact_catalog)
        assert draft.unavailable_times == ["08:00", "17:00", "18:00"]

    def test_end_before_start_raises(self, catalog):
        with pytest.raises(ValueError, match="later than"):
            encode_mode(RangeMode("12:00", "10:00"), catalog)

    def test_slot_outside_catalog_raises(self, compact_catalog):
        with pytest.raises(ValueError, match="catalog"):
            encode_mode(RangeMode("06:00", "10:00"), compact_catalog)


class TestEncodeCustom:
    def test_single_slot_note(self, catalog):
        draft = encode_mode(CustomMode(("14:00",)), catalog)
        assert draft.notes == "Available at 2:00 PM"
        assert "14:00" not in draft.unavailable_times
        assert len(draft.unavailable_times) == len(catalog) - 1

    def test_multiple_slots_sorted_by_hour(self, catalog):
        draft = encode_mode(CustomMode(("14:00", "09:00", "11:00")), catalog)
        assert draft.notes == "Available: 9:00 AM, 11:00 AM, 2:00 PM"

    def test_duplicates_collapse(self, catalog):
        draft = encode_mode(CustomMode(("09:00", "09:00")), catalog)
        assert draft.notes == "Available at 9:00 AM"

    def test_unknown_slot_raises(self, compact_catalog):
        with pytest.raises(ValueError):
            encode_mode(CustomMode(("06:00",)), compact_catalog)


class TestDecode:
    def test_range_round_trip(self, catalog):
        mode = RangeMode("09:00", "17:00")
        assert decode_mode(record_from(mode, catalog), catalog) == mode

    def test_contiguous_custom_reloads_as_range(self, catalog):
        record = record_from(CustomMode(("08:00", "09:00", "10:00")), catalog)
        assert decode_mode(record, catalog) == RangeMode("08:00", "11:00")

    def test_gapped_custom_stays_custom(self, catalog):
        record = record_from(CustomMode(("08:00", "10:00")), catalog)
        assert decode_mode(record, catalog) == CustomMode(("08:00", "10:00"))

    def test_range_to_last_slot_uses_closing_bound(self, catalog):
        record = record_from(RangeMode("18:00", "21:00"), catalog)
        assert decode_mode(record, catalog) == RangeMode("18:00", "21:00")

    def test_unavailable_day_decodes_to_empty_custom(self, catalog):
        record = make_availability("2025-03-10", is_available=False)
        assert decode_mode(record, catalog) == CustomMode(())

    def test_is_contiguous(self):
        assert is_contiguous(["08:00", "09:00"])
        assert not is_contiguous(["08:00", "10:00"])
        assert not is_contiguous([])

    def test_available_window_label(self, catalog):
        record = record_from(RangeMode("09:00", "17:00"), catalog)
        assert available_window(record, catalog) == "9:00 AM - 5:00 PM"


class TestMarkUnavailable:
    def test_draft(self):
        draft = mark_unavailable_draft()
        assert draft.is_available is False
        assert draft.unavailable_times == []
        assert draft.notes == MARKED_UNAVAILABLE_NOTE


class TestEditorRange:
    def test_defaults_to_business_hours(self, catalog):
        editor = AvailabilityEditor("2025-03-10", catalog)
        assert editor.mode == RangeMode("08:00", "18:00")
        assert not editor.is_custom

    def test_to_options_exclude_from_and_end_at_closing_bound(self, catalog):
        editor = AvailabilityEditor("2025-03-10", catalog)
        editor.set_from("18:00")
        assert editor.to_options() == ["19:00", "20:00", "21:00"]

    def test_set_from_past_to_advances_to(self, catalog):
        editor = AvailabilityEditor("2025-03-10", catalog)
        editor.set_from("19:00")
        assert editor.to_slot == "20:00"

    def test_set_from_last_slot_uses_closing_bound(self, catalog):
        editor = AvailabilityEditor("2025-03-10", catalog)
        editor.set_from("20:00")
        assert editor.to_slot == "21:00"
        assert editor.canonicalize().notes == "Available 8:00 PM - 9:00 PM"

    def test_set_to_not_later_raises(self, catalog):
        editor = AvailabilityEditor("2025-03-10", catalog)
        with pytest.raises(ValueError):
            editor.set_to("08:00")

    def test_apply_preset(self, catalog):
        editor = AvailabilityEditor("2025-03-10", catalog)
        editor.use_custom()
        assert editor.apply_preset("9AM - 6PM") == RangeMode("09:00", "18:00")
        assert not editor.is_custom

    def test_compact_catalog_hides_out_of_range_presets(self, compact_catalog):
        editor = AvailabilityEditor("2025-03-10", compact_catalog)
        labels = [label for label, _, _ in editor.available_presets()]
        assert "6AM - 8PM" not in labels
        with pytest.raises(ValueError):
            editor.apply_preset("6AM - 8PM")


class TestEditorCustom:
    def test_toggle_keeps_selection_sorted(self, catalog):
        editor = AvailabilityEditor("2025-03-10", catalog)
        editor.use_custom()
        editor.toggle_slot("14:00")
        editor.toggle_slot("09:00")
        assert editor.selected == ["09:00", "14:00"]
        editor.toggle_slot("14:00")
        assert editor.selected == ["09:00"]

    def test_empty_selection_cannot_save(self, catalog):
        editor = AvailabilityEditor("2025-03-10", catalog)
        editor.use_custom()
        assert not editor.can_save()

    def test_switching_tabs_keeps_both_inputs(self, catalog):
        editor = AvailabilityEditor("2025-03-10", catalog)
        editor.set_from("10:00")
        editor.use_custom()
        editor.toggle_slot("12:00")
        assert editor.switch_mode() == RangeMode("10:00", "18:00")
        assert editor.switch_mode() == CustomMode(("12:00",))

    def test_reset_restores_defaults(self, catalog):
        editor = AvailabilityEditor("2025-03-10", catalog)
        editor.use_custom()
        editor.toggle_slot("12:00")
        editor.reset()
        assert editor.mode == RangeMode("08:00", "18:00")
        assert editor.selected == []


class TestForRecord:
    def test_new_day_opens_default_range(self, catalog):
        editor = AvailabilityEditor.for_record("2025-03-10", None, catalog)
        assert editor.mode == RangeMode("08:00", "18:00")

    def test_saved_custom_reopens_as_custom(self, catalog):
        record = record_from(CustomMode(("08:00", "13:00")), catalog)
        editor = AvailabilityEditor.for_record("2025-03-10", record, catalog)
        assert editor.is_custom
        assert editor.selected == ["08:00", "13:00"]

    def test_saved_range_reopens_as_range(self, catalog):
        record = record_from(RangeMode("07:00", "12:00"), catalog)
        editor = AvailabilityEditor.for_record("2025-03-10", record, catalog)
        assert editor.mode == RangeMode("07:00", "12:00")

    def test_full_day_end_can_be_picked_again(self, catalog):
        record = record_from(RangeMode("06:00", "21:00"), catalog)
        editor = AvailabilityEditor.for_record("2025-03-10", record, catalog)
        editor.set_to("12:00")
        editor.set_to("21:00")
        assert editor.mode == RangeMode("06:00", "21:00")
        assert editor.canonicalize().unavailable_times == []
