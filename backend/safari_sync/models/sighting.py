"""
Sighting Models
===============
Pydantic models for sighting records and the sync API payloads.

This module defines all data structures used throughout the application:
- Record model: a single sighting as stored on disk and sent to devices
- Request models: what a device sends to the backend
- Response models: what the backend returns to a device

WIRE FORMAT:
    Devices speak camelCase JSON (deviceId, newSightings, ...). Python code
    uses snake_case; the mapping is done with field aliases.

Author: Safari Tracker Team
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# RECORD MODEL
# =============================================================================

class Sighting(BaseModel):
    """
    A single logged observation.

    Sightings are created on a device and are never edited in place on the
    server. A newer copy with the same ``id`` replaces the older one, and a
    deletion is just a newer copy with ``deleted`` set to True (a tombstone).

    Fields the server does not know about are kept and written back out
    unchanged, so newer clients can add data without a server upgrade.

    Fields:
        id: Client-generated identifier, the reconciliation key
        timestamp: When the record was created or last modified
        animal: Category label (e.g., "lion")
        count: How many were seen (positive)
        user: Who logged it
        notes: Free text
        deleted: Tombstone flag

    Example:
        {
            "id": "1736937000000-abc",
            "timestamp": "2025-01-15T10:30:00Z",
            "animal": "lion",
            "count": 2,
            "user": "Sam",
            "notes": "near the river",
            "deleted": false
        }
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(..., min_length=1, description="Client-generated unique identifier")
    timestamp: datetime = Field(..., description="Creation or last modification time")
    animal: str = Field(default="", description="Animal name")
    count: int = Field(default=1, ge=1, description="Number of animals seen")
    user: str = Field(default="", description="Who logged the sighting")
    notes: Optional[str] = Field(default=None, description="Free text notes")
    deleted: bool = Field(default=False, description="Tombstone flag")

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        # Some clients use Date.now() style numeric ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str) and value and not value.strip():
            raise ValueError("id must not be blank")
        return value

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive and aware datetimes cannot be compared
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_json(self) -> dict:
        """Convert to a JSON-serializable dict, extra client fields included."""
        return self.model_dump(mode="json")


# =============================================================================
# REQUEST MODELS - What devices send to the backend
# =============================================================================

class SyncRequest(BaseModel):
    """
    Request body for POST /sync.

    Both fields are optional at the schema level so that a missing field
    produces our own "Missing deviceId or sightings" error instead of a
    generic validation error. Individual sightings are validated by the
    sync service so that one bad record rejects the whole batch.

    Example Request:
        POST /sync
        {
            "deviceId": "tablet-7",
            "sightings": [{"id": "1", "animal": "lion", "count": 2, ...}]
        }
    """
    model_config = ConfigDict(populate_by_name=True)

    device_id: Optional[Any] = Field(None, alias="deviceId", description="Submitting device (string or number)")
    sightings: Optional[Any] = Field(None, description="Sightings recorded on the device")


# =============================================================================
# RESPONSE MODELS - What the backend returns
# =============================================================================

class SyncResponse(BaseModel):
    """Result of a sync round trip."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(True)
    new_sightings: int = Field(..., alias="newSightings", description="Records new to the server")
    total_sightings: int = Field(..., alias="totalSightings", description="Records now stored, tombstones included")


class SightingStats(BaseModel):
    """
    Aggregate numbers over active (non-deleted) sightings.

    Note that ``totalSightings`` here is the sum of counts (animals seen),
    while ``totalRecords`` is the number of sighting records.
    """
    model_config = ConfigDict(populate_by_name=True)

    total_sightings: int = Field(0, alias="totalSightings")
    unique_animals: int = Field(0, alias="uniqueAnimals")
    total_records: int = Field(0, alias="totalRecords")
    users: list[str] = Field(default_factory=list)
    animal_counts: dict[str, int] = Field(default_factory=dict, alias="animalCounts")


class HealthResponse(BaseModel):
    """Liveness check payload."""
    status: str = Field("ok")
    time: datetime = Field(..., description="Current server time (UTC)")
