from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class ErrorCode(str, Enum):
    STORE_UNAVAILABLE = "store-unavailable"
    NOT_FOUND = "not-found"
    SOURCE_NOT_FOUND = "source-not-found"
    INVALID_KEY = "invalid-key"
    VALIDATION_ERROR = "validation-error"


class ServiceResult(BaseModel):
    """Outcome of a shift service call. Service methods return one of these instead of raising."""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    code: Optional[ErrorCode] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ServiceResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, code: ErrorCode, message: Optional[str] = None) -> "ServiceResult":
        return cls(success=False, code=code, error=message)
