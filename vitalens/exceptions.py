"""
Application exception base class and the handlers that render errors as JSON.

Every error body has a "detail" string; validation errors add "errors".
"""
from typing import Dict, Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

# Set up logging
logger = logging.getLogger(__name__)

class AppException(Exception):
    """
    Base exception class for application-specific exceptions.

    Args:
        status_code: HTTP status returned to the client
        detail: Human-readable message returned to the client
        headers: Extra response headers
    """
    def __init__(self, status_code: int, detail: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.headers = headers


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


async def app_exception_handler(request: Request, exc: AppException):
    """
    Handler for application-specific exceptions.

    Server-side failures (5xx) are logged as errors, client errors as warnings.

    Returns:
        JSONResponse: {"detail": ...} with the exception's status code
    """
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        f"[{_request_id(request)}] {type(exc).__name__} on {request.method} {request.url.path}: {exc.detail}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Returns:
        JSONResponse: 422 with the list of field errors
    """
    errors = jsonable_errors(exc.errors())
    fields = ", ".join(".".join(str(part) for part in error.get("loc", ())) for error in errors)
    logger.warning(f"[{_request_id(request)}] Validation error on {request.url.path}: {fields}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "errors": errors,
        }
    )


def jsonable_errors(errors):
    """
    Drop submitted values and stringify error context.

    Inputs may hold whole base64 images, and context may hold exception
    instances, neither of which belongs in a response.
    """
    cleaned = []
    for error in errors:
        error = {key: value for key, value in error.items() if key not in ("input", "url")}
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        cleaned.append(error)
    return cleaned


def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
