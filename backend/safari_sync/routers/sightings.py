"""
Sightings API Router
====================

All the endpoints devices and the dashboard talk to.

ALL ENDPOINTS:
-------------
GET    /sightings  - Every sighting, deleted ones included (for device sync)
POST   /sync       - Send a batch of sightings from a device
GET    /export     - Active sightings as a CSV download
GET    /stats      - Totals per animal, users, record count

Every endpoint here needs the shared password in the `X-Password` header.
/health lives in main.py and is open.

Author: Safari Tracker Team
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response
from pydantic import ValidationError

from safari_sync.config import Config, export_timezone
from safari_sync.models import SightingStats, SyncRequest, SyncResponse
from safari_sync.services import (
    SyncService,
    SyncValidationError,
    compute_stats,
    export_filename,
    render_csv,
)

logger = logging.getLogger(__name__)


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================

_sync_service: Optional[SyncService] = None  # This gets set when the app starts


def set_sync_service(service: Optional[SyncService]):
    """Called when the app starts (and stops) to hand us the sync service."""
    global _sync_service
    _sync_service = service


def get_sync_service() -> SyncService:
    """Get the sync service for use in endpoints."""
    if _sync_service is None:
        raise HTTPException(status_code=500, detail="Server not fully started yet")
    return _sync_service


def verify_password(x_password: Optional[str] = Header(None, alias="X-Password")) -> None:
    """
    Check the shared password from the X-Password header.

    Raises:
        HTTPException: 401 if the header is missing or wrong
    """
    if not x_password or not secrets.compare_digest(
        x_password.encode("utf-8"), Config.PASSWORD.encode("utf-8")
    ):
        raise HTTPException(status_code=401, detail="Unauthorized")


# Every route in this router is password protected
router = APIRouter(tags=["sightings"], dependencies=[Depends(verify_password)])


# =============================================================================
# SYNC ENDPOINTS
# =============================================================================

@router.get("/sightings")
async def get_all_sightings(service: SyncService = Depends(get_sync_service)):
    """
    Get every sighting the server knows about.

    Deleted sightings are included, so a device can learn about deletions
    made on other devices.
    """
    return [sighting.to_json() for sighting in service.store.all()]


async def read_sync_request(request: Request) -> SyncRequest:
    """
    Parse the /sync body.

    The body is read here, not declared as a parameter, so the password
    check on the router runs before anything in the body is looked at.

    Raises:
        HTTPException: 400 if the body is not JSON or not a JSON object
    """
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Malformed request body")

    try:
        return SyncRequest.model_validate(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Malformed request body")


@router.post(
    "/sync",
    response_model=SyncResponse,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SyncRequest.model_json_schema()}},
        }
    },
)
async def sync_sightings(
    request: SyncRequest = Depends(read_sync_request),
    service: SyncService = Depends(get_sync_service),
):
    """
    Merge a device's sightings into the server.

    Send us:
    - deviceId: Which device this is
    - sightings: Everything recorded on the device (sending old ones again is fine)

    For each sighting the newest copy wins, by `timestamp`. To delete one,
    send it again with `deleted: true` and a newer timestamp.

    We send back how many sightings were new to the server and the new total.
    If any sighting is broken, nothing is saved and you get a 400.
    """
    try:
        result = service.sync(request.device_id, request.sightings)
    except SyncValidationError as e:
        logger.warning(f"Rejected sync from device {request.device_id!r}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return SyncResponse(
        success=True,
        new_sightings=result.new_sightings,
        total_sightings=result.total_sightings,
    )


# =============================================================================
# REPORTS
# =============================================================================

@router.get("/export")
async def export_csv(service: SyncService = Depends(get_sync_service)):
    """Download active sightings as a CSV file."""
    csv_text = render_csv(service.store.active(), tz=export_timezone())
    filename = export_filename(datetime.now(timezone.utc).date())
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/stats", response_model=SightingStats)
async def get_stats(service: SyncService = Depends(get_sync_service)):
    """Totals over active sightings."""
    return compute_stats(service.store.active())
