"""Global exception handlers for standardized error responses.

Implements RFC 7807 Problem Details for HTTP APIs and maps the flow's
error taxonomy to status codes.
"""

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pkceflow.core.logging import logger
from pkceflow.domain.errors import (
    AuthorizationDeniedError,
    ConfigurationError,
    InvalidFlowStateError,
    NetworkError,
    OAuthFlowError,
    ProviderError,
    ResponseFormatError,
    StoreError,
    UnknownStateError,
)
from pkceflow.models.errors import ProblemDetail, ValidationErrorDetail

# (status, title) per error type, most specific first
OAUTH_ERROR_STATUS: list[tuple[type[OAuthFlowError], int, str]] = [
    (ConfigurationError, 500, "Provider misconfigured"),
    (UnknownStateError, 400, "Unknown authorization state"),
    (AuthorizationDeniedError, 400, "Authorization denied"),
    (InvalidFlowStateError, 409, "Invalid flow state"),
    (StoreError, 503, "Pending authorization store unavailable"),
    (NetworkError, 504, "Token endpoint unreachable"),
    (ProviderError, 502, "Token endpoint rejected the exchange"),
    (ResponseFormatError, 502, "Malformed token response"),
]


def _problem_response(problem: ProblemDetail) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(mode="json", exclude_none=True),
        media_type="application/problem+json",
    )


async def oauth_flow_exception_handler(
    request: Request, exc: OAuthFlowError
) -> JSONResponse:  # noqa: ASYNC100
    """Handle pkceflow errors with an RFC 7807 ProblemDetail response.

    Args:
        request: The FastAPI request object.
        exc: The OAuthFlowError that was raised.

    Returns:
        JSONResponse with ProblemDetail body.
    """
    status, title = 500, "OAuth flow error"
    for error_type, error_status, error_title in OAUTH_ERROR_STATUS:
        if isinstance(exc, error_type):
            status, title = error_status, error_title
            break

    oauth_error = None
    if isinstance(exc, (ProviderError, AuthorizationDeniedError)):
        oauth_error = exc.error

    if status >= 500:
        logger.error(
            f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}"
        )
    else:
        logger.warning(
            f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}"
        )

    return _problem_response(
        ProblemDetail(
            title=title,
            status=status,
            detail=str(exc),
            instance=str(request.url.path),
            oauth_error=oauth_error,
        )
    )


async def http_exception_handler(
    request: Request, exc: HTTPException
) -> JSONResponse:  # noqa: ASYNC100
    """Handle HTTPException with RFC 7807 ProblemDetail response.

    Args:
        request: The FastAPI request object.
        exc: The HTTPException that was raised.

    Returns:
        JSONResponse with ProblemDetail body.
    """
    logger.warning(f"HTTPException: {exc.status_code} - {exc.detail}")

    return _problem_response(
        ProblemDetail(
            title="An error occurred",
            status=exc.status_code,
            detail=str(exc.detail),
            instance=str(request.url.path),
        )
    )


async def general_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:  # noqa: ASYNC100
    """Handle unexpected exceptions with 500 Internal Server Error.

    Args:
        request: The FastAPI request object.
        exc: The exception that was raised.

    Returns:
        JSONResponse with ProblemDetail body.
    """
    logger.exception(f"Unexpected error: {type(exc).__name__}")

    return _problem_response(
        ProblemDetail(
            title="Internal Server Error",
            status=500,
            detail="An unexpected error occurred. Please try again later.",
            instance=str(request.url.path),
        )
    )


async def validation_exception_handler(  # noqa: ASYNC100
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle validation errors with detailed field-level information.

    Args:
        request: The FastAPI request object.
        exc: The RequestValidationError from Pydantic validation.

    Returns:
        JSONResponse with ProblemDetail body including validation errors.
    """
    logger.warning(f"Validation error: {len(exc.errors())} errors")

    errors = [
        ValidationErrorDetail(
            type=error["type"],
            loc=tuple(str(loc) for loc in error["loc"]),
            msg=error["msg"],
            input=error.get("input"),
        )
        for error in exc.errors()
    ]

    return _problem_response(
        ProblemDetail(
            title="Validation Error",
            status=422,
            detail="Request validation failed",
            instance=str(request.url.path),
            errors=errors,
        )
    )
