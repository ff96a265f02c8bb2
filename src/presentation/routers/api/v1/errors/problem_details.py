"""RFC 9457 Problem Details for HTTP APIs.

RFC 9457: https://www.rfc-editor.org/rfc/rfc9457

Exports:
    ErrorDetail: One violated rule or field error
    ProblemDetails: RFC 9457 response body
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Single field-level error.

    Password policy failures produce one entry per violated rule, all on
    the same field.

    Examples:
        >>> ErrorDetail(
        ...     field="password",
        ...     code="password_too_weak",
        ...     message="Password must contain at least one digit",
        ... )
    """

    field: str = Field(..., description="Field name")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 9457 problem details body.

    Attributes:
        type: URI identifying the problem type (``{api_base_url}/errors/{code}``)
        title: Short summary of the problem type
        status: HTTP status code
        detail: Explanation specific to this occurrence
        instance: Request path
        errors: Field-level errors, when there are any
        trace_id: Request trace id (``X-Trace-ID``)

    Examples:
        >>> ProblemDetails(
        ...     type="https://api.tasklane.app/errors/account_locked",
        ...     title="Access Denied",
        ...     status=403,
        ...     detail="Account locked due to multiple failed login attempts. "
        ...     "Please try again later or reset your password.",
        ...     instance="/api/v1/auth/login",
        ...     trace_id="01890a5d-ac96-774b-bcce-b302099a8057",
        ... )
    """

    type: str = Field(
        ...,
        description="URI reference identifying the problem type",
        examples=["https://api.tasklane.app/errors/code_expired"],
    )
    title: str = Field(..., description="Short, human-readable summary")
    status: int = Field(..., description="HTTP status code", examples=[400])
    detail: str = Field(
        ...,
        description="Human-readable explanation",
        examples=["Verification code expired"],
    )
    instance: str = Field(
        ...,
        description="URI reference identifying this occurrence",
        examples=["/api/v1/auth/verify"],
    )
    errors: list[ErrorDetail] | None = Field(
        None,
        description="List of field-specific errors",
    )
    trace_id: str | None = Field(
        None,
        description="Request trace ID for debugging",
    )
