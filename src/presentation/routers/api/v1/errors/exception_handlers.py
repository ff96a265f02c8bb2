"""Global exception handlers for FastAPI application.

Every error leaving the API is an RFC 9457 Problem Details body.

Handlers:
    http_exception_handler: HTTPException (auth dependencies, 404 routes)
    validation_exception_handler: RequestValidationError (malformed bodies)
    store_unavailable_handler: StoreUnavailableError after retries -> 503
    store_conflict_handler: StoreConflictError not handled upstream -> 409
    generic_exception_handler: Anything else -> 500

Exports:
    register_exception_handlers: Register all exception handlers with FastAPI app
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.container import get_logger
from src.core.enums import ErrorCode
from src.domain.errors import StoreConflictError, StoreUnavailableError
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

# HTTP status code to (title, slug) mapping for RFC 9457
_HTTP_STATUS_INFO: dict[int, tuple[str, str]] = {
    400: ("Bad Request", "bad-request"),
    401: ("Authentication Required", "unauthorized"),
    403: ("Access Denied", "forbidden"),
    404: ("Resource Not Found", "not-found"),
    405: ("Method Not Allowed", "method-not-allowed"),
    409: ("Resource Conflict", "conflict"),
    415: ("Unsupported Media Type", "unsupported-media-type"),
    422: ("Validation Failed", "validation-failed"),
    429: ("Too Many Requests", "rate-limit-exceeded"),
    500: ("Internal Server Error", "internal-server-error"),
    503: ("Service Unavailable", "service-unavailable"),
}


def _get_status_title(status_code: int) -> str:
    return _HTTP_STATUS_INFO.get(status_code, ("Error", "error"))[0]


def _get_error_slug(status_code: int) -> str:
    return _HTTP_STATUS_INFO.get(status_code, ("Error", "error"))[1]


def _problem_response(
    request: Request,
    *,
    status_code: int,
    type_slug: str,
    detail: str,
    errors: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    problem = ProblemDetails(
        type=f"{settings.api_base_url}/errors/{type_slug}",
        title=_get_status_title(status_code),
        status=status_code,
        detail=detail,
        instance=str(request.url.path),
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert HTTPException to RFC 9457 Problem Details response.

    Headers on the exception (``WWW-Authenticate``) are preserved.
    """
    assert isinstance(exc, HTTPException)

    return _problem_response(
        request,
        status_code=exc.status_code,
        type_slug=_get_error_slug(exc.status_code),
        detail=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Convert RequestValidationError to RFC 9457 with field errors.

    Example:
        POST /api/v1/auth/login with no password returns 422 and
        ``errors=[{"field": "password", "code": "missing", ...}]``.
    """
    assert isinstance(exc, RequestValidationError)

    field_errors: list[ErrorDetail] = []
    for error in exc.errors():
        # ["body", "email"] -> "email"
        loc = error.get("loc", [])
        field_parts = [str(p) for p in loc if p != "body"]
        field_errors.append(
            ErrorDetail(
                field=".".join(field_parts) if field_parts else "unknown",
                code=error.get("type", "validation_error"),
                message=error.get("msg", "Validation failed"),
            )
        )

    return _problem_response(
        request,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        type_slug="validation-failed",
        detail="Request validation failed. Check 'errors' for details.",
        errors=field_errors or None,
    )


async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """Durable store still failing after the retry budget: 503."""
    assert isinstance(exc, StoreUnavailableError)

    get_logger().error(
        "Store unavailable",
        operation=(exc.error.details or {}).get("operation"),
        attempts=exc.error.attempts,
        path=request.url.path,
    )
    return _problem_response(
        request,
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        type_slug=ErrorCode.TRANSIENT_STORE_ERROR.value,
        detail="Service temporarily unavailable. Please retry.",
        headers={"Retry-After": "1"},
    )


async def store_conflict_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unique constraint violation that no handler translated: 409."""
    assert isinstance(exc, StoreConflictError)

    return _problem_response(
        request,
        status_code=status.HTTP_409_CONFLICT,
        type_slug=_get_error_slug(status.HTTP_409_CONFLICT),
        detail="Resource already exists",
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected exception: 500 without internals, logged with trace id."""
    get_logger().error(
        "Unhandled exception",
        error=exc,
        path=request.url.path,
        method=request.method,
    )
    return _problem_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        type_slug="internal-server-error",
        detail="An unexpected error occurred. Please contact support with the trace ID.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI application."""
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    app.add_exception_handler(StoreConflictError, store_conflict_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
