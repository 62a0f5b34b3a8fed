import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import ValidationError

logger = logging.getLogger(__name__)

ERROR_CODES = {
    400: "invalid-key",
    404: "not-found",
    422: "validation-error",
    503: "store-unavailable",
}

def error_response(status_code: int, code: str, message, details=None) -> JSONResponse:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # routes raise detail={"code", "message"} for service failures
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        return error_response(exc.status_code, exc.detail["code"], exc.detail.get("message"))
    code = ERROR_CODES.get(exc.status_code, "http-exception")
    return error_response(exc.status_code, code, exc.detail)

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(422, "validation-error", "Invalid request", jsonable_errors(exc.errors()))

def jsonable_errors(errors):
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in errors
    ]

class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)

        except ValidationError as ve:
            return error_response(422, "validation-error", str(ve), jsonable_errors(ve.errors()))

        except Exception:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return error_response(500, "internal-error", "An internal error occurred.")

def register_error_handlers(app):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_middleware(ErrorHandlerMiddleware)
