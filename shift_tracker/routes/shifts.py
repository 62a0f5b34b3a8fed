from fastapi import APIRouter, Depends, HTTPException, Path, Response
from typing import Optional
from shift_tracker.schemas.result import ErrorCode, ServiceResult
from shift_tracker.schemas.shift import ShiftIn, TransferRequest
from shift_tracker.services.shift_service import ShiftService

router = APIRouter()

STATUS_BY_CODE = {
    ErrorCode.INVALID_KEY: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.SOURCE_NOT_FOUND: 404,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.STORE_UNAVAILABLE: 503,
}

def get_shift_service() -> ShiftService:
    return ShiftService()

def unwrap(result: ServiceResult, not_found: str = "Shift not found"):
    if result.success:
        return result.data
    status_code = STATUS_BY_CODE.get(result.code, 500)
    raise HTTPException(status_code, {"code": result.code.value, "message": result.error or not_found})

def record_set(records: dict) -> dict:
    return {"items": records, "total": len(records)}

@router.get("/", response_model=dict)
async def get_all_shifts(
    userId: Optional[str] = None,
    service: ShiftService = Depends(get_shift_service)
):
    return record_set(unwrap(await service.get_all_shifts(userId)))

@router.get("/month/{year}/{month}", response_model=dict)
async def get_shifts_by_month(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=0, le=11),
    userId: Optional[str] = None,
    service: ShiftService = Depends(get_shift_service)
):
    return record_set(unwrap(await service.get_shifts_by_month(year, month, userId)))

@router.get("/year/{year}", response_model=dict)
async def get_shifts_by_year(
    year: int = Path(..., ge=1, le=9999),
    userId: Optional[str] = None,
    service: ShiftService = Depends(get_shift_service)
):
    return record_set(unwrap(await service.get_shifts_by_year(year, userId)))

@router.get("/statistics/{year}/{month}", response_model=dict)
async def get_month_statistics(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=0, le=11),
    userId: Optional[str] = None,
    service: ShiftService = Depends(get_shift_service)
):
    stats = unwrap(await service.get_month_statistics(year, month, userId))
    return stats.model_dump()

@router.get("/{date}", response_model=dict)
async def get_shift(
    date: str,
    userId: Optional[str] = None,
    service: ShiftService = Depends(get_shift_service)
):
    shift = unwrap(await service.get_shift(date, userId))
    return {"date": date, **shift}

@router.put("/{date}", response_model=dict)
async def save_shift(
    date: str,
    shift: ShiftIn,
    userId: Optional[str] = None,
    service: ShiftService = Depends(get_shift_service)
):
    stored = unwrap(await service.save_shift(date, shift, userId))
    return {"date": date, **stored}

@router.delete("/{date}", status_code=204)
async def delete_shift(
    date: str,
    userId: Optional[str] = None,
    service: ShiftService = Depends(get_shift_service)
):
    unwrap(await service.delete_shift(date, userId))
    return Response(status_code=204)

@router.post("/{date}/transfer", response_model=dict)
async def transfer_shift(
    date: str,
    transfer: TransferRequest,
    userId: Optional[str] = None,
    service: ShiftService = Depends(get_shift_service)
):
    unwrap(await service.transfer_shift(date, transfer.toDate, transfer.shift, userId))
    return {"success": True, "from": date, "to": transfer.toDate}
