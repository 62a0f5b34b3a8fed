from shift_tracker.services.statistics import compute_month_statistics


def test_mixed_month():
    stats = compute_month_statistics({
        "2025-02-01": {"type": "shift", "shiftType": "day", "isShortShift": False},
        "2025-02-02": {"type": "shift", "shiftType": "night", "isShortShift": True},
        "2025-02-03": {"type": "leave", "leaveType": "sick"},
    })
    assert stats.total == 3
    assert stats.dayShifts == 1
    assert stats.nightShifts == 1
    assert stats.twilightShifts == 0
    assert stats.shortShifts == 1
    assert stats.leaves == 1
    assert stats.sickLeave == 1
    assert stats.annualLeave == 0


def test_every_leave_type():
    stats = compute_month_statistics({
        "2025-03-01": {"type": "leave", "leaveType": "sick"},
        "2025-03-02": {"type": "leave", "leaveType": "annual"},
        "2025-03-03": {"type": "leave", "leaveType": "annual"},
        "2025-03-04": {"type": "leave", "leaveType": "training", "eventName": "ILS"},
        "2025-03-05": {"type": "leave", "leaveType": "preceptorship"},
    })
    assert stats.leaves == 5
    assert (stats.sickLeave, stats.annualLeave, stats.training, stats.preceptorship) == (1, 2, 1, 1)
    assert stats.dayShifts + stats.nightShifts + stats.twilightShifts == 0


def test_leave_never_counts_as_shift():
    # stray shift fields on a leave must not leak into the shift tallies
    stats = compute_month_statistics({
        "2025-04-01": {"type": "leave", "leaveType": "annual", "shiftType": "day", "isShortShift": True},
    })
    assert stats.leaves == 1
    assert stats.dayShifts == 0
    assert stats.shortShifts == 0


def test_empty_month():
    stats = compute_month_statistics({})
    assert stats.model_dump() == {
        "total": 0, "dayShifts": 0, "nightShifts": 0, "twilightShifts": 0, "shortShifts": 0,
        "leaves": 0, "sickLeave": 0, "annualLeave": 0, "training": 0, "preceptorship": 0,
    }
