"""Global error handling.

All exceptions are converted to one JSON shape built from the error catalog:
error_code, message, user_message, suggestion, retry_allowed.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from merchant_rules.core.errors import get_error, is_retryable
from merchant_rules.core.exceptions import RulesEngineError

logger = logging.getLogger(__name__)


def _catalog_body(error_code: str, message: str | None = None) -> dict:
    error_info = get_error(error_code)
    return {
        "error_code": error_code,
        "message": message or error_info["message"],
        "user_message": error_info["user_message"],
        "suggestion": error_info["suggestion"],
        "retry_allowed": is_retryable(error_code),
    }


async def handle_rules_engine_error(request: Request, exc: RulesEngineError) -> JSONResponse:
    """Handle engine exceptions (storage failures, missing rules).

    Args:
        request: The incoming request
        exc: The engine exception

    Returns:
        JSONResponse with error details from catalog
    """
    # Details can include raw transaction text; only log them in debug.
    extra = {"error_code": exc.error_code, "path": request.url.path, "method": request.method}
    if request.app.debug:
        extra["details"] = exc.details

    logger.error(f"Merchant rules error: {exc.error_code}", extra=extra)

    return JSONResponse(status_code=exc.http_status, content=_catalog_body(exc.error_code))


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Args:
        request: The incoming request
        exc: The validation error

    Returns:
        JSONResponse with field-level messages joined into ``message``
    """
    errors = exc.errors()
    error_messages = []

    for error in errors:
        field = ".".join(str(x) for x in error.get("loc", []))
        msg = error.get("msg", "Invalid value")
        error_messages.append(f"{field}: {msg}")

    logger.warning(
        f"Validation error on {request.url.path}",
        extra={"path": request.url.path, "method": request.method},
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_catalog_body("VAL_001", " | ".join(error_messages)),
    )



async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internal details."""
    extra = {
        "error_type": type(exc).__name__,
        "path": request.url.path,
        "method": request.method,
    }
    if request.app.debug:
        logger.exception(f"Unexpected error on {request.url.path}", extra=extra)
    else:
        logger.error(f"Unexpected error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_catalog_body("SYS_001"),
    )
