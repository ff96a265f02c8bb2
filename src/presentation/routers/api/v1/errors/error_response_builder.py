"""Error response builder for RFC 9457 Problem Details.

Maps domain errors returned by command handlers to HTTP responses.

Status mapping:
    ValidationError      -> 400
    AuthenticationError  -> 401
    AuthorizationError   -> 403 (locked and unverified alike)
    NotFoundError        -> 404
    ConflictError        -> 409
    RateLimitExceeded    -> 429 (+ Retry-After)
    EncryptionIntegrity  -> 500
    TransientStoreError  -> 503
    anything else        -> 500

Exports:
    ErrorResponseBuilder: Utility class for building RFC 9457 responses
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from src.domain.errors import RateLimitExceededError, TransientStoreError
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

_STATUS_BY_TYPE: tuple[tuple[type[DomainError], int, str], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST, "Validation Failed"),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED, "Authentication Required"),
    (AuthorizationError, status.HTTP_403_FORBIDDEN, "Access Denied"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "Resource Not Found"),
    (ConflictError, status.HTTP_409_CONFLICT, "Resource Conflict"),
    (RateLimitExceededError, status.HTTP_429_TOO_MANY_REQUESTS, "Too Many Requests"),
    (TransientStoreError, status.HTTP_503_SERVICE_UNAVAILABLE, "Service Unavailable"),
)

# Messages of these errors may carry internals; clients get a generic detail
_GENERIC_DETAIL = "An unexpected error occurred. Please contact support with the trace ID."


class ErrorResponseBuilder:
    """Build RFC 9457 Problem Details error responses.

    Example:
        >>> result = await handler.handle(command)
        >>> if isinstance(result, Failure):
        ...     return ErrorResponseBuilder.from_domain_error(
        ...         result.error, request, trace_id
        ...     )
    """

    @staticmethod
    def from_domain_error(
        error: DomainError,
        request: Request,
        trace_id: str | None,
    ) -> JSONResponse:
        """Convert a DomainError to an RFC 9457 JSON response.

        Args:
            error: Failure value returned by a handler.
            request: Current request (for ``instance``).
            trace_id: Request trace ID.
        """
        status_code, title = ErrorResponseBuilder.status_for(error)
        detail = error.message if status_code < 500 else _GENERIC_DETAIL
        if isinstance(error, TransientStoreError):
            detail = "Service temporarily unavailable. Please retry."

        problem = ProblemDetails(
            type=f"{settings.api_base_url}/errors/{error.code.value}",
            title=title,
            status=status_code,
            detail=detail,
            instance=str(request.url.path),
            errors=ErrorResponseBuilder._field_errors(error),
            trace_id=trace_id,
        )

        headers = None
        if isinstance(error, RateLimitExceededError):
            headers = {"Retry-After": str(error.retry_after)}

        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(exclude_none=True),
            headers=headers,
        )

    @staticmethod
    def status_for(error: DomainError) -> tuple[int, str]:
        """HTTP status code and title for a domain error.

        Example:
            >>> ErrorResponseBuilder.status_for(not_found)
            (404, 'Resource Not Found')
        """
        for error_type, status_code, title in _STATUS_BY_TYPE:
            if isinstance(error, error_type):
                return status_code, title
        return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"

    @staticmethod
    def _field_errors(error: DomainError) -> list[ErrorDetail] | None:
        if not isinstance(error, ValidationError):
            return None
        field = error.field or "unknown"
        messages = error.errors or (error.message,)
        return [
            ErrorDetail(field=field, code=error.code.value, message=message)
            for message in messages
        ]
