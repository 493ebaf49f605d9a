"""
Sync Service
============

This is the BRAIN of the whole operation!

WHAT IT DOES:
------------
1. Checks a device's sync request (device id present, every sighting valid)
2. Merges the batch into the store (last write wins, see merge_engine)
3. Saves the store to disk after every sync
4. Saves the store on a timer too (every 5 minutes by default)
5. Saves one last time on shutdown

ALL OR NOTHING:
--------------
A batch is validated completely before anything is merged. One bad sighting
(no id, broken timestamp, ...) rejects the whole request and the store is
left exactly as it was.

SAVING IS BEST EFFORT:
---------------------
If the disk write fails we log it and the sync still succeeds. The sightings
are safe in memory and the next sync or timer tick writes them again.

Author: Safari Tracker Team
"""

import logging
import sys
from dataclasses import dataclass
from typing import Any, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from pydantic import ValidationError

from safari_sync.models import Sighting
from safari_sync.services.merge_engine import reconcile
from safari_sync.services.record_store import RecordStore, SaveResult
from safari_sync.utils.validation import validate_device_id, describe_validation_error

# Configure logging for the sync service
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(message)s',
    datefmt='%H:%M:%S',
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger(__name__)


class SyncValidationError(ValueError):
    """A sync request that cannot be applied. Nothing was changed."""


@dataclass(frozen=True)
class SyncResult:
    """What a sync round trip reports back to the device."""
    new_sightings: int
    total_sightings: int
    persisted: bool


class SyncService:
    """
    Owns the record store and every write to it.

    Routers never touch the store directly for writes, they go through
    ``sync()`` so the lock discipline lives in one place.
    """

    AUTOSAVE_JOB_ID = "autosave"

    def __init__(self, store: RecordStore, autosave_interval: int = 300):
        """
        Set up the service.

        Args:
            store: The loaded record store
            autosave_interval: Seconds between background saves. Default is 300.
        """
        self.store = store
        self.autosave_interval = autosave_interval
        self.scheduler: Optional[AsyncIOScheduler] = None

    # =========================================================================
    # SYNC
    # =========================================================================

    def parse_batch(self, sightings: Any) -> list[Sighting]:
        """
        Validate a raw batch from a device.

        Raises:
            SyncValidationError: If any sighting is malformed. The message
                names the first bad one.
        """
        if not isinstance(sightings, list):
            raise SyncValidationError("sightings must be a list")

        batch = []
        for index, raw in enumerate(sightings):
            try:
                batch.append(Sighting.model_validate(raw))
            except ValidationError as e:
                raise SyncValidationError(
                    f"Invalid sighting at index {index}: {describe_validation_error(e)}"
                ) from e
        return batch

    def sync(self, device_id: Any, sightings: Any) -> SyncResult:
        """
        Merge one device's batch into the store and save.

        Args:
            device_id: Who is syncing (only used for logging)
            sightings: Raw sighting dicts from the request body

        Returns:
            SyncResult with how many sightings were new and the new total

        Raises:
            SyncValidationError: Missing device id or sightings, or a bad
                sighting anywhere in the batch
        """
        if not validate_device_id(device_id) or sightings is None:
            raise SyncValidationError("Missing deviceId or sightings")

        batch = self.parse_batch(sightings)

        with self.store.lock:
            merged = reconcile(self.store.snapshot(), batch)
            self.store.commit(merged.records)
            total = len(merged.records)
            save_result = self.store.save()

        if not save_result.ok:
            logger.warning(f"Sync from device {device_id} kept in memory only: {save_result.error}")

        logger.info(f"Synced {merged.admitted} new sightings from device {device_id}")
        return SyncResult(
            new_sightings=merged.admitted,
            total_sightings=total,
            persisted=save_result.ok,
        )

    # =========================================================================
    # BACKGROUND SAVING
    # =========================================================================

    def start(self):
        """Start the autosave timer. Needs a running event loop."""
        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self._autosave,
            trigger=IntervalTrigger(seconds=self.autosave_interval),
            id=self.AUTOSAVE_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info(f"Autosave scheduled every {self.autosave_interval} seconds")

    async def _autosave(self) -> SaveResult:
        return self.store.save()

    # =========================================================================
    # CLEANUP
    # =========================================================================

    async def shutdown(self):
        """Clean up when the server is shutting down."""
        # Save one last time
        result = self.store.save()
        if not result.ok:
            logger.error(f"Final save failed during shutdown: {result.error}")

        if self.scheduler is not None:
            try:
                self.scheduler.shutdown(wait=False)
            except Exception as e:
                logger.error(f"Error shutting down scheduler: {e}", exc_info=True)
            self.scheduler = None
