"""
Shift storage service.

Records live one document per date in a MongoDB collection; the date key
(YYYY-MM-DD) is the document ``_id``. Without a user id everything goes to
the shared ``shifts`` collection, with one it goes to ``users/{id}/shifts``.

Every public coroutine returns a ``ServiceResult`` and never raises, so
callers must check ``success`` on each call.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import ValidationError
from pymongo import ReturnDocument

from shift_tracker.db import get_db, collection_path
from shift_tracker.models.shift import (
    InvalidDateKey,
    RecordKind,
    ShiftRecord,
    fields_excluded_by_kind,
    sanitize,
    validate_date_key,
)
from shift_tracker.schemas.result import ErrorCode, ServiceResult
from shift_tracker.services.statistics import compute_month_statistics
from shift_tracker.services.subscription import ShiftSubscription, read_record_set
from shift_tracker.utils.logger import log_event, log_error, EventTypes

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with fixed-width microseconds, e.g. 2025-02-01T07:00:00.000000Z"""
    return datetime.utcnow().strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _month_bounds(year: int, month: int):
    # Loose upper bound on purpose: "-31" for every month. Keys are fixed
    # width so plain string comparison is enough.
    prefix = f"{year:04d}-{month + 1:02d}"
    return f"{prefix}-01", f"{prefix}-31"


def _filter_range(records: Dict[str, Any], start: str, end: str) -> Dict[str, Any]:
    return {key: value for key, value in records.items() if start <= key <= end}


class ShiftService:
    def __init__(self, db=None, clock: Callable[[], str] = utc_timestamp):
        self.db = db
        self.clock = clock

    def _collection(self, user_id: Optional[str] = None):
        if self.db is None:
            self.db = get_db()
        return self.db[collection_path(user_id)]

    async def save_shift(
        self,
        date_str: str,
        shift_data: Union[Mapping[str, Any], ShiftRecord],
        user_id: Optional[str] = None,
    ) -> ServiceResult:
        """
        Create or update the record for a date.

        Fields missing from ``shift_data`` are left as stored. ``createdAt``
        is only ever written when the document is inserted; ``updatedAt`` is
        refreshed on every save. Returns the stored document.
        """
        try:
            validate_date_key(date_str)
        except InvalidDateKey as e:
            return ServiceResult.fail(ErrorCode.INVALID_KEY, str(e))

        try:
            if not isinstance(shift_data, ShiftRecord):
                shift_data = ShiftRecord.model_validate(sanitize(shift_data))
        except ValidationError as e:
            return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, str(e))
        # coerced values only; fields the caller left out stay as stored
        cleaned = shift_data.to_document()

        now = self.clock()
        update: Dict[str, Any] = {
            "$set": {**cleaned, "updatedAt": now},
            "$setOnInsert": {"createdAt": now},
        }
        if cleaned["type"] == RecordKind.SHIFT.value and "isShortShift" not in cleaned:
            update["$setOnInsert"]["isShortShift"] = False
        stale_fields = fields_excluded_by_kind(cleaned["type"])
        if stale_fields:
            update["$unset"] = {field: "" for field in stale_fields}

        try:
            stored = await self._collection(user_id).find_one_and_update(
                {"_id": date_str},
                update,
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except Exception as e:
            log_error(f"Error saving shift {date_str}", e, user_id)
            return ServiceResult.fail(ErrorCode.STORE_UNAVAILABLE, str(e))

        stored.pop("_id", None)
        log_event(EventTypes.SHIFT_SAVED, {"date": date_str, "type": cleaned["type"]}, user_id)
        return ServiceResult.ok(stored)

    async def get_shift(self, date_str: str, user_id: Optional[str] = None) -> ServiceResult:
        try:
            validate_date_key(date_str)
        except InvalidDateKey as e:
            return ServiceResult.fail(ErrorCode.INVALID_KEY, str(e))

        try:
            document = await self._collection(user_id).find_one({"_id": date_str})
        except Exception as e:
            log_error(f"Error getting shift {date_str}", e, user_id)
            return ServiceResult.fail(ErrorCode.STORE_UNAVAILABLE, str(e))

        if document is None:
            return ServiceResult.fail(ErrorCode.NOT_FOUND)
        document.pop("_id", None)
        return ServiceResult.ok(document)

    async def get_all_shifts(self, user_id: Optional[str] = None) -> ServiceResult:
        try:
            records = await read_record_set(self._collection(user_id))
        except Exception as e:
            log_error("Error getting all shifts", e, user_id)
            return ServiceResult.fail(ErrorCode.STORE_UNAVAILABLE, str(e))
        return ServiceResult.ok(records)

    async def get_shifts_by_month(self, year: int, month: int, user_id: Optional[str] = None) -> ServiceResult:
        """``month`` is 0-based: 0 is January, 11 is December."""
        result = await self.get_all_shifts(user_id)
        if not result.success:
            return result
        start, end = _month_bounds(year, month)
        return ServiceResult.ok(_filter_range(result.data, start, end))

    async def get_shifts_by_year(self, year: int, user_id: Optional[str] = None) -> ServiceResult:
        result = await self.get_all_shifts(user_id)
        if not result.success:
            return result
        return ServiceResult.ok(_filter_range(result.data, f"{year:04d}-01-01", f"{year:04d}-12-31"))

    async def delete_shift(self, date_str: str, user_id: Optional[str] = None) -> ServiceResult:
        """Deleting a date with nothing on it still succeeds."""
        try:
            validate_date_key(date_str)
        except InvalidDateKey as e:
            return ServiceResult.fail(ErrorCode.INVALID_KEY, str(e))

        try:
            res = await self._collection(user_id).delete_one({"_id": date_str})
        except Exception as e:
            log_error(f"Error deleting shift {date_str}", e, user_id)
            return ServiceResult.fail(ErrorCode.STORE_UNAVAILABLE, str(e))

        log_event(EventTypes.SHIFT_DELETED, {"date": date_str, "deleted": res.deleted_count}, user_id)
        return ServiceResult.ok()

    async def transfer_shift(
        self,
        from_date: str,
        to_date: str,
        shift_data: Union[Mapping[str, Any], ShiftRecord, None] = None,
        user_id: Optional[str] = None,
    ) -> ServiceResult:
        """
        Move a record to another date.

        Without ``shift_data`` the source record is copied as is; with it,
        ``shift_data`` replaces the source content. The destination is
        always written before the source is deleted, so a failure part way
        leaves the record on both dates, never on neither. A failed delete
        is reported but the destination write stays.
        """
        for key in (from_date, to_date):
            try:
                validate_date_key(key)
            except InvalidDateKey as e:
                return ServiceResult.fail(ErrorCode.INVALID_KEY, str(e))

        if shift_data is None:
            source = await self.get_shift(from_date, user_id)
            if source.code == ErrorCode.NOT_FOUND:
                return ServiceResult.fail(ErrorCode.SOURCE_NOT_FOUND, f"Source shift not found: {from_date}")
            if not source.success:
                return source
            if from_date == to_date:
                return ServiceResult.ok()
            shift_data = source.data

        saved = await self.save_shift(to_date, shift_data, user_id)
        if not saved.success:
            return saved
        if from_date == to_date:
            return ServiceResult.ok()

        deleted = await self.delete_shift(from_date, user_id)
        if not deleted.success:
            return ServiceResult.fail(
                deleted.code,
                f"Shift copied to {to_date} but {from_date} could not be removed: {deleted.error}",
            )

        log_event(EventTypes.SHIFT_TRANSFERRED, {"from": from_date, "to": to_date}, user_id)
        return ServiceResult.ok()

    async def get_month_statistics(self, year: int, month: int, user_id: Optional[str] = None) -> ServiceResult:
        result = await self.get_shifts_by_month(year, month, user_id)
        if not result.success:
            return result
        return ServiceResult.ok(compute_month_statistics(result.data))

    def subscribe_to_shifts(
        self,
        on_update: Callable[[Dict[str, Any]], Any],
        on_error: Optional[Callable[[Exception], Any]] = None,
        user_id: Optional[str] = None,
        retry_delay: Optional[float] = None,
    ) -> Callable[[], None]:
        """
        Push a full snapshot of the namespace to ``on_update`` now and after
        every change. Must be called with an event loop running. Returns
        the unsubscribe callable.
        """
        subscription = ShiftSubscription(
            self._collection(user_id),
            on_update,
            on_error=on_error,
            retry_delay=retry_delay,
            user_id=user_id,
        )
        subscription.start()
        return subscription.unsubscribe
