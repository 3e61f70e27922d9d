"""Exception handlers that map domain and framework errors to the ErrorResponse envelope."""

import logging
from datetime import UTC, datetime
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppError, UnauthorizedError, ValidationFailedError
from app.schemas.errors import ErrorResponse

logger = logging.getLogger(__name__)


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_response(
    request: Request,
    status_code: int,
    message: str,
    details: list[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the JSON error envelope for a request."""
    body = ErrorResponse(
        timestamp=datetime.now(UTC),
        status=status_code,
        error=_reason(status_code),
        message=message,
        path=request.url.path,
        details=details or None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.message)
    else:
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    details = exc.details if isinstance(exc, ValidationFailedError) else None
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return error_response(request, exc.status_code, exc.message, details, headers)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        details.append(f"{field}: {err.get('msg', 'invalid value')}")
    logger.info("Validation failed on %s: %s", request.url.path, details)
    return error_response(
        request, status.HTTP_400_BAD_REQUEST, "Validation failed", details
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else _reason(exc.status_code)
    return error_response(request, exc.status_code, message, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error handlers to the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
