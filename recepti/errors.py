"""API errors and the `{error: {code, message, details?}}` envelope.

Route handlers raise `ApiError` subclasses; the handlers registered by
`install_error_handlers` render them (and FastAPI/Starlette's own errors)
with one JSON shape.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("recepti.errors")


class Messages:
    INVALID_SLUG = "Invalid slug"
    MISSING_FILE = "Missing file"
    EMPTY_FILE = "Empty file"
    UNSUPPORTED_IMAGE_TYPE = "Unsupported image type"
    INVALID_PATH = "Invalid path"
    INVALID_PAYLOAD = "Invalid payload"
    RECIPE_NOT_FOUND = "Recipe not found"
    UNEXPECTED_ERROR = "Unexpected error"
    RATE_LIMITED = "Rate limit exceeded"
    SLUG_NOT_GENERATED = "Slug could not be generated"
    SLUG_MUST_BE_UNIQUE = "Recipe slug must be unique"


class ApiError(Exception):
    status_code = 500
    code = "INTERNAL"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> dict:
        return error_body(self.code, self.message, self.details)


class ValidationFailed(ApiError):
    status_code = 400
    code = "VALIDATION_ERROR"


class BadRequest(ApiError):
    status_code = 400
    code = "BAD_REQUEST"


class NotFound(ApiError):
    status_code = 404
    code = "NOT_FOUND"


class Conflict(ApiError):
    status_code = 409
    code = "CONFLICT"


class InternalError(ApiError):
    status_code = 500
    code = "INTERNAL"


_CODE_BY_STATUS = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "BAD_REQUEST",
    409: "CONFLICT",
    413: "BAD_REQUEST",
    422: "VALIDATION_ERROR",
}


def error_body(code: str, message: str, details: Optional[Any] = None) -> dict:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = jsonable_encoder(details)
    return {"error": error}


async def _api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    # pydantic error contexts may hold exception instances; keep them printable
    details = [
        {**err, "ctx": {k: str(v) for k, v in err["ctx"].items()}} if "ctx" in err else err
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_body("VALIDATION_ERROR", Messages.INVALID_PAYLOAD, details),
    )


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    code = _CODE_BY_STATUS.get(exc.status_code, "INTERNAL" if exc.status_code >= 500 else "BAD_REQUEST")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, message),
        headers=getattr(exc, "headers", None),
    )


async def _rate_limit_error_handler(request: Request, exc: RateLimitExceeded):
    response = JSONResponse(
        status_code=429,
        content=error_body("BAD_REQUEST", f"{Messages.RATE_LIMITED}: {exc.detail}"),
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=error_body("INTERNAL", Messages.UNEXPECTED_ERROR),
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
