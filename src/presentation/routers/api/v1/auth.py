"""Authentication router.

Endpoints:
    POST /api/v1/auth/register               - Create unverified account
    POST /api/v1/auth/verify                 - Verify email, start session
    POST /api/v1/auth/resend-verification    - Reissue verification code
    POST /api/v1/auth/login                  - Start session
    POST /api/v1/auth/logout                 - End session
    POST /api/v1/auth/password-reset-request - Email a reset code
    POST /api/v1/auth/password-reset         - Replace password with a code

Failures are RFC 9457 problem details built from the handler's domain
error by ErrorResponseBuilder.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from src.application.commands.auth_commands import (
    LoginUser,
    LogoutUser,
    RegisterUser,
    RequestPasswordReset,
    ResendVerification,
    ResetPassword,
    VerifyEmail,
)
from src.application.commands.handlers.login_user_handler import LoginUserHandler
from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
from src.application.commands.handlers.register_user_handler import (
    RegisterUserHandler,
)
from src.application.commands.handlers.request_password_reset_handler import (
    RequestPasswordResetHandler,
)
from src.application.commands.handlers.resend_verification_handler import (
    ResendVerificationHandler,
)
from src.application.commands.handlers.reset_password_handler import (
    ResetPasswordHandler,
)
from src.application.commands.handlers.verify_email_handler import (
    VerifyEmailHandler,
)
from src.application.dtos import IssuedSession
from src.core.container import (
    get_login_user_handler,
    get_logout_user_handler,
    get_register_user_handler,
    get_request_password_reset_handler,
    get_resend_verification_handler,
    get_reset_password_handler,
    get_verify_email_handler,
)
from src.core.errors import DomainError
from src.core.result import Failure, Success
from src.presentation.routers.api.middleware.rate_limit_middleware import (
    get_bearer_token,
    get_client_ip,
)
from src.presentation.routers.api.middleware.trace_middleware import get_trace_id
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder, ProblemDetails
from src.schemas.auth_schemas import (
    LoginRequest,
    LogoutRequest,
    OkResponse,
    PasswordResetRequest,
    PasswordResetRequestRequest,
    RegisterRequest,
    RegisterResponse,
    ResendVerificationRequest,
    SessionResponse,
    VerifyEmailRequest,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

_PROBLEM = {"model": ProblemDetails}

PASSWORD_RESET_REQUESTED_MESSAGE = (
    "If an account with that email exists, a password reset code has been sent."
)


def _error_response(request: Request, error: DomainError) -> JSONResponse:
    return ErrorResponseBuilder.from_domain_error(error, request, get_trace_id())


def _session_response(issued: IssuedSession) -> SessionResponse:
    return SessionResponse(
        session_token=issued.session_token,
        expires_at=issued.expires_at,
        user_id=issued.user_id,
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    responses={400: _PROBLEM, 409: _PROBLEM},
    summary="Register",
    description="Create an unverified account and email a verification code.",
)
async def register(
    request: Request,
    data: RegisterRequest,
    handler: RegisterUserHandler = Depends(get_register_user_handler),
) -> RegisterResponse | JSONResponse:
    command = RegisterUser(
        email=data.email,
        password=data.password,
        captcha_token=data.captcha_token,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    result = await handler.handle(command)

    match result:
        case Success(value=user_id):
            return RegisterResponse(user_id=user_id)
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/verify",
    response_model=SessionResponse,
    responses={400: _PROBLEM, 404: _PROBLEM},
    summary="Verify email",
    description="Consume the verification code and start a session.",
)
async def verify_email(
    request: Request,
    data: VerifyEmailRequest,
    handler: VerifyEmailHandler = Depends(get_verify_email_handler),
) -> SessionResponse | JSONResponse:
    command = VerifyEmail(
        email=data.email,
        code=data.code,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    result = await handler.handle(command)

    match result:
        case Success(value=issued):
            return _session_response(issued)
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/resend-verification",
    response_model=OkResponse,
    responses={404: _PROBLEM, 409: _PROBLEM},
    summary="Resend verification code",
)
async def resend_verification(
    request: Request,
    data: ResendVerificationRequest,
    handler: ResendVerificationHandler = Depends(get_resend_verification_handler),
) -> OkResponse | JSONResponse:
    command = ResendVerification(
        email=data.email,
        ip_address=get_client_ip(request),
    )
    result = await handler.handle(command)

    match result:
        case Success():
            return OkResponse(message="Verification code sent.")
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/login",
    response_model=SessionResponse,
    responses={401: _PROBLEM, 403: _PROBLEM},
    summary="Login",
)
async def login(
    request: Request,
    data: LoginRequest,
    handler: LoginUserHandler = Depends(get_login_user_handler),
) -> SessionResponse | JSONResponse:
    command = LoginUser(
        email=data.email,
        password=data.password,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    result = await handler.handle(command)

    match result:
        case Success(value=issued):
            return _session_response(issued)
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/logout",
    response_model=OkResponse,
    summary="Logout",
    description="End the session given as bearer token or in the body. "
    "Always succeeds.",
)
async def logout(
    request: Request,
    data: LogoutRequest | None = None,
    handler: LogoutUserHandler = Depends(get_logout_user_handler),
) -> OkResponse:
    token = get_bearer_token(request) or (data.session_token if data else None)
    await handler.handle(
        LogoutUser(session_token=token or "", ip_address=get_client_ip(request))
    )
    return OkResponse()


@router.post(
    "/password-reset-request",
    response_model=OkResponse,
    summary="Request password reset",
    description="Always returns the same body whether or not the email exists.",
)
async def request_password_reset(
    request: Request,
    data: PasswordResetRequestRequest,
    handler: RequestPasswordResetHandler = Depends(get_request_password_reset_handler),
) -> OkResponse:
    await handler.handle(
        RequestPasswordReset(email=data.email, ip_address=get_client_ip(request))
    )
    return OkResponse(message=PASSWORD_RESET_REQUESTED_MESSAGE)


@router.post(
    "/password-reset",
    response_model=OkResponse,
    responses={400: _PROBLEM, 404: _PROBLEM},
    summary="Reset password",
    description="Replace the password using a reset code. Ends every session.",
)
async def reset_password(
    request: Request,
    data: PasswordResetRequest,
    handler: ResetPasswordHandler = Depends(get_reset_password_handler),
) -> OkResponse | JSONResponse:
    command = ResetPassword(
        email=data.email,
        code=data.code,
        new_password=data.new_password,
        ip_address=get_client_ip(request),
    )
    result = await handler.handle(command)

    match result:
        case Success():
            return OkResponse(message="Password reset successful. Please log in.")
        case Failure(error=error):
            return _error_response(request, error)
