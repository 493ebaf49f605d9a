"""Builders for test data."""

from datetime import datetime, timezone

from safari_sync.models import Sighting


def make_sighting(sighting_id="1", minute=0, **fields) -> Sighting:
    """Build a sighting timestamped 2025-01-15 10:<minute> UTC."""
    data = {
        "id": sighting_id,
        "timestamp": datetime(2025, 1, 15, 10, minute, tzinfo=timezone.utc),
        "animal": "lion",
        "count": 1,
        "user": "Sam",
    }
    data.update(fields)
    return Sighting(**data)


def sighting_payload(sighting_id="1", minute=0, **fields) -> dict:
    """Same as make_sighting, as the JSON a device would send."""
    return make_sighting(sighting_id, minute, **fields).to_json()
