"""
Models Package
==============

This is where all our data models live.
Import from here instead of the individual files.

Example:
    from safari_sync.models import Sighting, SyncRequest
"""

from .sighting import (
    # The record itself
    Sighting,

    # What devices send us
    SyncRequest,

    # What we send back
    SyncResponse,
    SightingStats,
    HealthResponse,
)

__all__ = [
    "Sighting",
    "SyncRequest",
    "SyncResponse",
    "SightingStats",
    "HealthResponse",
]
