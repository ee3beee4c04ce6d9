"""Global exception handlers.

Every error leaves the service as the generic reply envelope:

    {"success": false, "error": "<message>"}
"""

from http import HTTPStatus

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from courier.core.logging import logger
from courier.core.responses import CourierJSONResponse
from courier.models import Reply

# Replaces Starlette's default routing details
DEFAULT_MESSAGES: dict[int, str] = {
    404: "resource not found",
    405: "method not allowed",
}


def error_response(status_code: int, message: str | None) -> CourierJSONResponse:
    """Build a JSON response carrying the generic error reply."""
    return CourierJSONResponse(
        status_code=status_code,
        content=Reply(success=False, error=message).model_dump(exclude_none=True),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> CourierJSONResponse:  # noqa: ASYNC100
    """Handle HTTPException raised by handlers and by the router.

    Args:
        request: The FastAPI request object.
        exc: The HTTPException that was raised.

    Returns:
        JSONResponse with the error reply.
    """
    detail = str(exc.detail) if exc.detail is not None else None
    if detail is None or detail == HTTPStatus(exc.status_code).phrase:
        detail = DEFAULT_MESSAGES.get(exc.status_code, detail)

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {exc.status_code}: {detail}")
    else:
        logger.warning(f"{request.method} {request.url.path} - {exc.status_code}: {detail}")

    response = error_response(exc.status_code, detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(  # noqa: ASYNC100
    request: Request, exc: RequestValidationError
) -> CourierJSONResponse:
    """Handle request bodies that cannot be parsed into the request model.

    Malformed JSON and wrongly typed fields are client errors, so these are
    reported as 400 Bad Request rather than 422.

    Args:
        request: The FastAPI request object.
        exc: The RequestValidationError from Pydantic validation.

    Returns:
        JSONResponse with the error reply.
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(loc) for loc in first.get("loc", ()))
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "could not parse request"

    logger.warning(
        f"Validation error on {request.method} {request.url.path}: {message}",
        extra={"error_count": len(errors)},
    )
    return error_response(400, message)


async def general_exception_handler(
    request: Request, exc: Exception
) -> CourierJSONResponse:  # noqa: ASYNC100
    """Handle unexpected exceptions with 500 Internal Server Error.

    Args:
        request: The FastAPI request object.
        exc: The exception that was raised.

    Returns:
        JSONResponse with the error reply.
    """
    logger.exception(
        f"Unexpected error: {type(exc).__name__} on {request.method} {request.url.path}"
    )
    return error_response(500, "an internal error occurred")
