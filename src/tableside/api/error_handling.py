from __future__ import annotations

from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tableside.api.authorization import PermissionDeniedError
from tableside.api.middleware.request_id import get_request_id
from tableside.domain.common.errors import (
    AlreadyInactiveError,
    DomainError,
    DuplicateRequestError,
    InvalidStatusError,
    InvalidTableError,
    NotFoundError,
    OrderRejectedError,
    ValidationError,
)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
    )


def _exception_handler(status_code: int, code: str | None = None):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=status_code,
            code=code or getattr(exc, "code", "ERROR"),
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 405:
        code = "METHOD_NOT_ALLOWED"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": jsonable_encoder(validation_exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    # Starlette picks the most specific registered class along the MRO.
    mappings: list[tuple[type[Exception], int, str | None]] = [
        (DomainError, 400, None),
        (NotFoundError, 404, None),
        (InvalidTableError, 404, None),
        (ValidationError, 400, None),
        (InvalidStatusError, 400, None),
        (OrderRejectedError, 409, None),
        (DuplicateRequestError, 409, None),
        (AlreadyInactiveError, 409, None),
        (PermissionDeniedError, 403, "PERMISSION_DENIED"),
    ]

    for exc_cls, status_code, code in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
