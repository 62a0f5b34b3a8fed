"""
Shift and leave records, keyed by calendar date.

Stored shape, one document per date (the date is the document ``_id``):

    type: 'shift' | 'leave'
    shiftType: 'day' | 'night' | 'twilight'          (shift only)
    isShortShift: bool                                (shift only)
    leaveType: 'sick' | 'annual' | 'training' | 'preceptorship'   (leave only)
    eventName: str                                    (leave only)
    time, location, notes: str
    createdAt, updatedAt: ISO-8601 str
"""

import re
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, model_validator


class RecordKind(str, Enum):
    SHIFT = "shift"
    LEAVE = "leave"


class ShiftType(str, Enum):
    DAY = "day"
    NIGHT = "night"
    TWILIGHT = "twilight"


class LeaveType(str, Enum):
    SICK = "sick"
    ANNUAL = "annual"
    TRAINING = "training"
    PRECEPTORSHIP = "preceptorship"


SHIFT_FIELDS = ("shiftType", "isShortShift")
LEAVE_FIELDS = ("leaveType", "eventName")
COMMON_FIELDS = ("type", "time", "location", "notes")

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidDateKey(ValueError):
    pass


def validate_date_key(date_key: str) -> str:
    """Return ``date_key`` unchanged if it is a real zero-padded YYYY-MM-DD date."""
    if not isinstance(date_key, str) or not _DATE_KEY_RE.match(date_key):
        raise InvalidDateKey(f"Invalid date key: {date_key!r}")
    try:
        date.fromisoformat(date_key)
    except ValueError:
        raise InvalidDateKey(f"Invalid date key: {date_key!r}")
    return date_key


def format_date_key(year: int, month: int, day: int) -> str:
    # month is 0-based, like every month argument in this package
    return f"{year:04d}-{month + 1:02d}-{day:02d}"


def fields_for_kind(kind: Optional[str]) -> tuple:
    if kind == RecordKind.SHIFT.value:
        return COMMON_FIELDS + SHIFT_FIELDS
    if kind == RecordKind.LEAVE.value:
        return COMMON_FIELDS + LEAVE_FIELDS
    return COMMON_FIELDS


def fields_excluded_by_kind(kind: Optional[str]) -> tuple:
    if kind == RecordKind.SHIFT.value:
        return LEAVE_FIELDS
    if kind == RecordKind.LEAVE.value:
        return SHIFT_FIELDS
    return ()


def sanitize(record: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Strip a record down to what may be written to the store.

    Keeps only the fields that belong to the record's ``type``, drops
    anything set to None, and drops system fields (the gateway owns the
    timestamps). Enum members are flattened to their values. Idempotent.
    """
    kind = record.get("type")
    if isinstance(kind, Enum):
        kind = kind.value

    cleaned = {}
    for key in fields_for_kind(kind):
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        cleaned[key] = value
    return cleaned


class ShiftRecord(BaseModel):
    type: RecordKind
    shiftType: Optional[ShiftType] = None
    isShortShift: Optional[bool] = None
    leaveType: Optional[LeaveType] = None
    eventName: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_kind_fields(self):
        if self.type == RecordKind.SHIFT:
            if self.shiftType is None:
                raise ValueError("shiftType is required for a shift")
        elif self.leaveType is None:
            raise ValueError("leaveType is required for a leave")
        return self

    def to_document(self) -> Dict[str, Any]:
        # isShortShift is only defaulted when a new document is inserted
        return sanitize(self.model_dump(mode="json", exclude_unset=True))


_LEAVE_LABELS = {
    LeaveType.SICK.value: "Sick",
    LeaveType.ANNUAL.value: "Annual",
    LeaveType.TRAINING.value: "Training",
    LeaveType.PRECEPTORSHIP.value: "Precept",
}


def shift_label(record: Optional[Mapping[str, Any]]) -> str:
    """Short calendar-cell label, e.g. ``Short Night`` or ``Precept``."""
    if not record:
        return ""
    if record.get("type") == RecordKind.LEAVE.value:
        return _LEAVE_LABELS.get(record.get("leaveType"), "Leave")
    label = (record.get("shiftType") or "").capitalize()
    if record.get("isShortShift"):
        return f"Short {label}"
    return label
