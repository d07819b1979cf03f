from __future__ import annotations

from http import HTTPStatus

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ewm.core.timeutil import format_datetime, utcnow
from ewm.services.error_codes import ErrorCode
from ewm.services.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    ServiceError,
)

logger = structlog.get_logger()

REASONS = {
    400: "Incorrectly made request.",
    404: "The required object was not found.",
    409: "Integrity constraint has been violated.",
    500: "An unexpected error occurred.",
}


def status_for_service_error(err: ServiceError) -> int:
    if isinstance(err, NotFoundError):
        return 404
    if isinstance(err, ConflictError):
        return 409
    if isinstance(err, BadRequestError):
        return 400
    return 500


def api_error(status_code: int, message: str, code: str) -> JSONResponse:
    status = HTTPStatus(status_code)
    reason = REASONS.get(status_code, status.phrase)
    return JSONResponse(
        status_code=status_code,
        content={
            "status": status.name,
            "reason": reason,
            "message": message or reason,
            "code": code,
            "timestamp": format_datetime(utcnow()),
        },
    )


async def _service_error(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = status_for_service_error(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log("service_error", status=status_code, code=exc.code, message=exc.message, path=request.url.path)
    return api_error(status_code, exc.message, exc.code)


async def _validation_error(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if hasattr(exc, "errors") else []
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in errors]
    message = "invalid request"
    if fields:
        message = f"invalid request: {', '.join(fields)}"
    logger.warning("validation_error", path=request.url.path, fields=fields)
    return api_error(400, message, ErrorCode.VALIDATION_ERROR.value)


async def _integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("integrity_error", path=request.url.path, error=str(exc.orig))
    return api_error(409, "data integrity violation", ErrorCode.INTEGRITY_VIOLATION.value)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return api_error(exc.status_code, str(exc.detail), HTTPStatus(exc.status_code).name)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    return api_error(500, REASONS[500], ErrorCode.INTERNAL_ERROR.value)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, _service_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(PydanticValidationError, _validation_error)
    app.add_exception_handler(IntegrityError, _integrity_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)
