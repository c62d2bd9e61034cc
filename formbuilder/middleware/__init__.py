"""
Middleware Package

This package contains middleware components for the form builder API.
"""

from formbuilder.middleware.request_logging import RequestLoggingMiddleware

__all__ = ['RequestLoggingMiddleware']
