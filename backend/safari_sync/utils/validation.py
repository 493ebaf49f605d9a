"""
Input Validation Utilities
===========================

Common validation functions for sync requests.

Author: Safari Tracker Team
"""

from typing import Any

from pydantic import ValidationError


def validate_device_id(device_id: Any) -> bool:
    """
    Validate a device ID (present and not blank).

    Devices send either a string or a number.

    Args:
        device_id: Device ID from the request body

    Returns:
        True if valid, False otherwise
    """
    if isinstance(device_id, bool):
        return False
    if isinstance(device_id, (int, float)):
        return device_id != 0
    return isinstance(device_id, str) and bool(device_id.strip())


def describe_validation_error(error: ValidationError) -> str:
    """
    Turn a pydantic error into a short human readable message.

    Example:
        "id: Field required; timestamp: Input should be a valid datetime"
    """
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "record"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)
