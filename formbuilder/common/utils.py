"""
Common utility functions for the form builder backend.

This module provides helpers for identifiers, timestamps, number handling
and duration formatting used across the application.
"""

import datetime
import math
import re
import uuid
from typing import Any, Union

_SYSTEM_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def new_system_id() -> str:
    """
    Generate a system-assigned identifier.

    Returns:
        32 lowercase hex characters
    """
    return uuid.uuid4().hex


def is_system_id(value: Any) -> bool:
    """
    Check whether a value has the shape of a system-assigned identifier.

    Args:
        value: Candidate identifier

    Returns:
        True if the value could have been produced by new_system_id()
    """
    return isinstance(value, str) and bool(_SYSTEM_ID_PATTERN.match(value))


def utcnow() -> datetime.datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def js_round(value: float) -> int:
    """
    Round to the nearest integer with halves rounded up.

    Python's round() uses banker's rounding; scores are rounded the way the
    browser client always rounded them.
    """
    return math.floor(value + 0.5)


def safe_divide(numerator: Union[int, float], denominator: Union[int, float], default: Union[int, float] = 0) -> float:
    """
    Safely divide two numbers, returning a default value if denominator is zero.

    Args:
        numerator: Number to divide
        denominator: Number to divide by
        default: Value to return if denominator is zero

    Returns:
        Result of division or default value
    """
    try:
        if denominator == 0:
            return default
        return numerator / denominator
    except (TypeError, ValueError):
        return default


def format_duration(seconds: Union[int, float]) -> str:
    """
    Format a duration in seconds as minutes and seconds.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "2m 30s", "0m 45s")
    """
    seconds = int(seconds)
    minutes = seconds // 60
    return f"{minutes}m {seconds % 60}s"
