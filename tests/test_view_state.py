from shift_tracker.models.shift import RecordKind
from shift_tracker.services.view_state import (
    BackToMonth,
    CancelTransfer,
    CloseModal,
    CompleteTransfer,
    NextMonth,
    OpenDay,
    OpenModal,
    PrevMonth,
    SelectMonth,
    StartTransfer,
    View,
    ViewState,
    build_record_from_form,
    reduce,
)


def state(**kwargs):
    return ViewState(**{"year": 2025, "month": 0, **kwargs})


def test_month_navigation_rolls_over_years():
    assert (reduce(state(month=11), NextMonth()).year, reduce(state(month=11), NextMonth()).month) == (2026, 0)
    back = reduce(state(month=0), PrevMonth())
    assert (back.year, back.month) == (2024, 11)


def test_reduce_does_not_mutate():
    before = state()
    after = reduce(before, OpenDay(date="2025-01-14"))
    assert before.view == View.MONTH
    assert after.view == View.DAY
    assert after.selectedDate == "2025-01-14"


def test_day_view_round_trip():
    s = reduce(state(), OpenDay(date="2025-01-14"))
    s = reduce(s, BackToMonth())
    assert s.view == View.MONTH
    assert s.selectedDate is None


def test_select_month_returns_to_month_view():
    s = reduce(state(view=View.DAY, selectedDate="2025-01-14"), SelectMonth(year=2027, month=5))
    assert (s.view, s.year, s.month) == (View.MONTH, 2027, 5)


def test_submit_from_day_view_goes_back_to_month():
    s = reduce(state(), OpenDay(date="2025-01-14"))
    s = reduce(s, OpenModal(kind=RecordKind.LEAVE))
    assert s.modal.kind == RecordKind.LEAVE

    cancelled = reduce(s, CloseModal())
    assert cancelled.modal is None
    assert cancelled.view == View.DAY

    submitted = reduce(s, CloseModal(submitted=True))
    assert submitted.view == View.MONTH


def test_simple_transfer_flow():
    s = reduce(state(), StartTransfer(source="2025-01-03"))
    assert s.transfer_mode

    s = reduce(s, CompleteTransfer(target="2025-01-09"))
    assert not s.transfer_mode
    assert s.modal is None


def test_transfer_with_edit_opens_prefilled_form():
    record = {"type": "leave", "leaveType": "training", "eventName": "ALS"}
    s = reduce(state(), StartTransfer(source="2025-01-03"))
    s = reduce(s, CompleteTransfer(target="2025-01-09", record=record))

    assert s.modal.transferFrom == "2025-01-03"
    assert s.modal.kind == RecordKind.LEAVE
    assert s.modal.editing["date"] == "2025-01-09"
    assert s.modal.editing["eventName"] == "ALS"
    assert not s.transfer_mode


def test_complete_without_transfer_is_ignored():
    s = state()
    assert reduce(s, CompleteTransfer(target="2025-01-09")) == s


def test_transfer_onto_source_date_is_ignored():
    s = reduce(state(), StartTransfer(source="2025-01-03"))
    after = reduce(s, CompleteTransfer(target="2025-01-03", record={"type": "shift", "shiftType": "day"}))
    assert after == s
    assert after.transfer_mode
    assert after.modal is None


def test_cancel_transfer():
    s = reduce(reduce(state(), StartTransfer(source="2025-01-03")), CancelTransfer())
    assert s.transferSource is None


def test_state_serializes():
    s = reduce(state(), OpenModal(editing={"type": "shift", "shiftType": "day"}))
    assert ViewState.model_validate_json(s.model_dump_json()) == s


def test_build_shift_record_from_form():
    form = {
        "type": "shift", "shiftType": "night", "isShortShift": True,
        "leaveType": "annual", "eventName": "ignored",
        "time": "19:00 - 07:00", "location": "", "notes": "",
    }
    assert build_record_from_form(form) == {
        "type": "shift", "shiftType": "night", "isShortShift": True, "time": "19:00 - 07:00",
    }


def test_build_leave_record_from_form():
    form = {"type": "leave", "shiftType": "day", "leaveType": "preceptorship", "eventName": "", "notes": "with Jo"}
    assert build_record_from_form(form) == {"type": "leave", "leaveType": "preceptorship", "notes": "with Jo"}
