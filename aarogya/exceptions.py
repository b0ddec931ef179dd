"""
Global exception handlers.

Every failure leaves the API as ``{"status": "error", "error": <kind>, "message": <text>}``.
"""
import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth.exceptions import AuthException

# Set up logging
logger = logging.getLogger(__name__)


def error_body(error: str, message: str, **extra) -> dict:
    body = {"status": "error", "error": error, "message": message}
    body.update(extra)
    return body


async def auth_exception_handler(request: Request, exc: AuthException):
    """
    Handler for account and access-control exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Standardized error response carrying the error kind
    """
    logger.warning(f"{exc.error} on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error, exc.detail),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handler for framework HTTP errors such as unknown routes."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("http_error", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Args:
        request: The request that caused the exception
        exc: The validation exception instance

    Returns:
        JSONResponse: Standardized error response with validation details
    """
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body("validation_error", "Validation error", errors=jsonable_encoder(exc.errors())),
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handler for store failures that escaped a service; details stay in the log."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("server_error", "Something went wrong!"),
    )


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AuthException, auth_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
