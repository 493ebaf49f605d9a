"""
Utility modules for the safari sync backend.
"""

from safari_sync.utils.validation import (
    validate_device_id,
    describe_validation_error,
)

__all__ = [
    "validate_device_id",
    "describe_validation_error",
]
