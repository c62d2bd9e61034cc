"""
Error Handling for the Form Builder API

This module converts application exceptions into JSON error responses:
1. Status code mapping for the exception hierarchy
2. Standardized error response bodies
3. Structured error logging
4. FastAPI exception handler registration
"""

import logging
import traceback
from typing import Any, Dict, Optional, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from formbuilder.common.exceptions import (
    BaseError,
    DuplicateError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from formbuilder.common.logger import app_logger

logger = app_logger.getChild("error_handling")

# Most specific classes first
STATUS_CODES: Dict[Type[BaseError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(error: Exception) -> int:
    """
    Get the HTTP status code for an exception.

    Args:
        error: The exception to map

    Returns:
        HTTP status code, 500 for anything not in the taxonomy
    """
    for error_type, code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    error: Exception,
    include_details: bool = True
) -> Dict[str, Any]:
    """
    Generate a standardized API error response.

    Args:
        error: The error to generate a response for
        include_details: Whether to include validation details

    Returns:
        Standardized error response dictionary
    """
    if isinstance(error, BaseError):
        response = {
            "status": "error",
            "code": error.code,
            "message": error.message
        }
        if include_details and isinstance(error, ValidationError) and error.errors:
            response["details"] = error.errors
        return response

    return {
        "status": "error",
        "code": "internal_error",
        "message": str(error) or type(error).__name__
    }


def log_error(
    error: Exception,
    level: int = logging.ERROR,
    include_stack_trace: bool = True,
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log an error with standardized format.

    Args:
        error: The error to log
        level: Logging level
        include_stack_trace: Whether to include stack trace
        context: Additional context to include
    """
    code = error.code if isinstance(error, BaseError) else "internal_error"
    message = f"ERROR [{code}]: {error}"

    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        message += f" (context: {context_str})"

    cause = getattr(error, "original_exception", None)
    if cause is not None:
        message += f" caused by {type(cause).__name__}: {str(cause)}"

    if include_stack_trace:
        message += "\n" + "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )

    logger.log(level, message)


async def application_error_handler(request: Request, exc: BaseError) -> JSONResponse:
    """
    Handle application errors raised by repositories and services.
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        log_error(exc, context={"method": request.method, "path": request.url.path})
    else:
        log_error(exc, level=logging.INFO, include_stack_trace=False,
                  context={"method": request.method, "path": request.url.path})

    return JSONResponse(status_code=status_code, content=error_response(exc))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request body validation errors and return a standardized response.
    """
    error_details = []
    for error in exc.errors():
        error_details.append({
            "location": list(error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "")
        })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "status": "error",
            "code": "request_validation_error",
            "message": "Validation error",
            "details": error_details
        }
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler: log with traceback and surface the message as a 500.
    """
    log_error(exc, context={"method": request.method, "path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(exc)
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the application's exception handlers on a FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(BaseError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
