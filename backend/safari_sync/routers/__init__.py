"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.
"""

from .sightings import router as sightings_router, set_sync_service

__all__ = [
    "sightings_router",
    "set_sync_service",
]
