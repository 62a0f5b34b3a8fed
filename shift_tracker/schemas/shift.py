from pydantic import BaseModel
from typing import Optional
from shift_tracker.models.shift import ShiftRecord

class ShiftIn(ShiftRecord):
    pass

class TransferRequest(BaseModel):
    toDate: str  # YYYY-MM-DD format
    shift: Optional[ShiftIn] = None  # replaces the source record when given

class MonthStatistics(BaseModel):
    total: int = 0
    dayShifts: int = 0
    nightShifts: int = 0
    twilightShifts: int = 0
    shortShifts: int = 0
    leaves: int = 0
    sickLeave: int = 0
    annualLeave: int = 0
    training: int = 0
    preceptorship: int = 0
