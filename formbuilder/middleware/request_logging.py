"""
Request Logging Middleware

This module provides middleware that logs one line per API request with its
status code and duration, tagged with a request id.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from formbuilder.common.logger import get_logger

# Setup module logger
logger = get_logger("middleware.request_logging")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log API requests."""

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and log its outcome.

        Args:
            request: The incoming request
            call_next: The next middleware/route handler

        Returns:
            The response from the next handler
        """
        path = request.url.path
        if path == "/health":
            return await call_next(request)

        start_time = time.time()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(
            f"API_REQUEST: rid={request_id}, method={request.method}, path={path}, "
            f"status={response.status_code}, duration={duration:.3f}s"
        )
        response.headers["X-Request-ID"] = request_id
        return response
