"""Error taxonomy and the JSON envelope every failure is rendered into.

Services raise the ``AppError`` subclasses below. The handlers registered by
``register_exception_handlers`` turn them, request validation failures and
database errors into ``{"success": false, "message": ...}`` responses.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = 401
    default_message = "Please login"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Already exists"


class PayloadTooLargeError(AppError):
    status_code = 413
    default_message = "File too large"


class QuotaError(AppError):
    status_code = 400
    default_message = "Leave exceeds the allowed number of days"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal server error"


class UpstreamError(AppError):
    status_code = 502
    default_message = "Upstream service unavailable"


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def validation_message(errors: list[dict]) -> str:
    if not errors:
        return ValidationError.default_message
    err = errors[0]
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
    # skip list indexes so "subjects.0" reports as "subjects"
    names = [p for p in loc if not p.isdigit()]
    field = names[-1] if names else "body"
    if err.get("type") == "missing":
        return f"{field} is required"
    msg = str(err.get("msg") or ValidationError.default_message)
    return msg.removeprefix("Value error, ")


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, validation_message(list(exc.errors())))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return error_response(ConflictError.status_code, "Resource already exists")


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return error_response(InternalError.status_code, InternalError.default_message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(InternalError.status_code, InternalError.default_message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
