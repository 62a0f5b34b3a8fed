"""
Calendar view state for clients of the shift API.

The whole UI state is one serializable ``ViewState``; the only way to change
it is ``reduce(state, event)``, which returns a new state and never mutates
the old one.
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

from shift_tracker.models.shift import RecordKind


class View(str, Enum):
    MONTH = "month"
    DAY = "day"


class ModalState(BaseModel):
    kind: RecordKind = RecordKind.SHIFT
    editing: Optional[Dict[str, Any]] = None
    transferFrom: Optional[str] = None


class ViewState(BaseModel):
    view: View = View.MONTH
    year: int
    month: int  # 0-11
    selectedDate: Optional[str] = None
    modal: Optional[ModalState] = None
    transferSource: Optional[str] = None

    @property
    def transfer_mode(self) -> bool:
        return self.transferSource is not None


class NextMonth(BaseModel):
    pass

class PrevMonth(BaseModel):
    pass

class SelectMonth(BaseModel):
    year: int
    month: int

class OpenDay(BaseModel):
    date: str

class BackToMonth(BaseModel):
    pass

class OpenModal(BaseModel):
    kind: RecordKind = RecordKind.SHIFT
    editing: Optional[Dict[str, Any]] = None

class CloseModal(BaseModel):
    submitted: bool = False

class StartTransfer(BaseModel):
    source: str

class CancelTransfer(BaseModel):
    pass

class CompleteTransfer(BaseModel):
    target: str
    record: Optional[Dict[str, Any]] = None  # opens the edit form pre-filled when given


ViewEvent = Union[
    NextMonth, PrevMonth, SelectMonth, OpenDay, BackToMonth,
    OpenModal, CloseModal, StartTransfer, CancelTransfer, CompleteTransfer,
]


def _shift_month(state: ViewState, step: int) -> ViewState:
    index = state.year * 12 + state.month + step
    return state.model_copy(update={"year": index // 12, "month": index % 12})


def reduce(state: ViewState, event: ViewEvent) -> ViewState:
    if isinstance(event, NextMonth):
        return _shift_month(state, 1)
    if isinstance(event, PrevMonth):
        return _shift_month(state, -1)
    if isinstance(event, SelectMonth):
        return state.model_copy(update={"year": event.year, "month": event.month, "view": View.MONTH})
    if isinstance(event, OpenDay):
        return state.model_copy(update={"view": View.DAY, "selectedDate": event.date})
    if isinstance(event, BackToMonth):
        return state.model_copy(update={"view": View.MONTH, "selectedDate": None})
    if isinstance(event, OpenModal):
        return state.model_copy(update={"modal": ModalState(kind=event.kind, editing=event.editing)})
    if isinstance(event, CloseModal):
        update: Dict[str, Any] = {"modal": None}
        if event.submitted and state.view == View.DAY:
            update["view"] = View.MONTH
        return state.model_copy(update=update)
    if isinstance(event, StartTransfer):
        return state.model_copy(update={"transferSource": event.source, "modal": None})
    if isinstance(event, CancelTransfer):
        return state.model_copy(update={"transferSource": None})
    if isinstance(event, CompleteTransfer):
        if state.transferSource is None or event.target == state.transferSource:
            return state
        if event.record is None:
            return state.model_copy(update={"transferSource": None})
        editing = {**event.record, "date": event.target}
        kind = RecordKind(event.record.get("type", RecordKind.SHIFT.value))
        modal = ModalState(kind=kind, editing=editing, transferFrom=state.transferSource)
        return state.model_copy(update={"transferSource": None, "modal": modal})
    return state


def build_record_from_form(form: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn add/edit form values into a record payload: only the chosen kind's
    fields, with blank text fields left out.
    """
    record: Dict[str, Any] = {"type": form.get("type", RecordKind.SHIFT.value)}
    if record["type"] == RecordKind.SHIFT.value:
        record["shiftType"] = form.get("shiftType", "day")
        record["isShortShift"] = bool(form.get("isShortShift", False))
    else:
        record["leaveType"] = form.get("leaveType", "annual")
        if form.get("eventName"):
            record["eventName"] = form["eventName"]
    for key in ("time", "location", "notes"):
        if form.get(key):
            record[key] = form[key]
    return record
