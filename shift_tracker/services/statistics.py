from typing import Any, Dict, Mapping

from shift_tracker.models.shift import LeaveType, RecordKind, ShiftType
from shift_tracker.schemas.shift import MonthStatistics

_SHIFT_TALLIES = {
    ShiftType.DAY.value: "dayShifts",
    ShiftType.NIGHT.value: "nightShifts",
    ShiftType.TWILIGHT.value: "twilightShifts",
}

_LEAVE_TALLIES = {
    LeaveType.SICK.value: "sickLeave",
    LeaveType.ANNUAL.value: "annualLeave",
    LeaveType.TRAINING.value: "training",
    LeaveType.PRECEPTORSHIP.value: "preceptorship",
}


def compute_month_statistics(records: Mapping[str, Mapping[str, Any]]) -> MonthStatistics:
    """
    Tally a record set that is already restricted to one month.

    Every record counts towards either the leave side or the shift side,
    never both. Anything that is not a leave is counted as a shift.
    ``shortShifts`` is tallied on top of the shift type.
    """
    counts: Dict[str, int] = dict.fromkeys(MonthStatistics.model_fields, 0)
    counts["total"] = len(records)

    for record in records.values():
        if record.get("type") == RecordKind.LEAVE.value:
            counts["leaves"] += 1
            tally = _LEAVE_TALLIES.get(record.get("leaveType"))
        else:
            tally = _SHIFT_TALLIES.get(record.get("shiftType"))
            if record.get("isShortShift"):
                counts["shortShifts"] += 1
        if tally:
            counts[tally] += 1

    return MonthStatistics(**counts)
