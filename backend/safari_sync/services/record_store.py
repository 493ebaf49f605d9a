"""
Record Store
============

Keeps every sighting in memory and mirrors it to a JSON file.

WHAT IT DOES:
------------
1. Loads sightings from the data file at startup (empty if there is none)
2. Hands out snapshots for the merge engine and the reporting views
3. Takes the merged result back (commit)
4. Writes everything to disk (save), atomically

THE FILE:
--------
One JSON array, one object per sighting, tombstones included:

    [
      {"id": "1", "timestamp": "2025-01-15T10:30:00Z", "animal": "lion", ...},
      ...
    ]

It is rewritten completely on every save (temp file + rename), never appended.

LOCKING:
-------
Sync requests and the background flush both write the same file, so anyone
who reads-then-writes must hold ``store.lock``. The lock is re-entrant so a
sync can save while it still holds it.

Author: Safari Tracker Team
"""

import json
import logging
import shutil
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from pydantic import ValidationError

from safari_sync.models import Sighting
from safari_sync.services.merge_engine import reconcile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a save. Failures are reported here, never raised."""
    ok: bool
    count: int = 0
    error: Optional[str] = None


class RecordStore:
    """
    The server's copy of all sightings.

    HOW TO USE:
    ----------
    store = RecordStore(Path("safari-data.json"))
    store.load()

    with store.lock:
        result = reconcile(store.snapshot(), incoming)
        store.commit(result.records)
        store.save()
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._records: dict[str, Sighting] = {}
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    # =========================================================================
    # DATABASE PERSISTENCE
    # =========================================================================

    def load(self) -> int:
        """
        Load sightings from the JSON file.

        A missing or corrupt file means "no prior data". This never raises,
        the server must come up either way.

        Returns:
            Number of sightings loaded
        """
        with self._lock:
            self._records = {}

            if not self.path.exists():
                logger.info(f"No existing data file at {self.path}, starting fresh")
                return 0

            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except ValueError as e:
                # JSONDecodeError and UnicodeDecodeError are both ValueErrors
                logger.error(f"Error parsing data file JSON: {e}")
                self._backup_corrupt_file()
                return 0
            except OSError as e:
                logger.error(f"Error reading data file {self.path}: {e}")
                return 0
            except Exception as e:
                logger.error(f"Error loading data file {self.path}: {e}", exc_info=True)
                self._backup_corrupt_file()
                return 0

            if not isinstance(data, list):
                logger.error(f"Data file {self.path} does not hold a JSON array, ignoring it")
                self._backup_corrupt_file()
                return 0

            sightings = []
            skipped = 0
            for index, raw in enumerate(data):
                try:
                    sightings.append(Sighting.model_validate(raw))
                except ValidationError as e:
                    logger.error(f"Error loading sighting #{index}: {e.errors()[0]['msg']}, skipping")
                    skipped += 1
                    continue

            # Skipped entries would be lost on the next save
            if skipped:
                self._backup_corrupt_file()

            # Duplicate ids in the file resolve like any other merge
            self._records = reconcile({}, sightings).records
            logger.info(f"Loaded {len(self._records)} sightings from disk")
            return len(self._records)

    def _backup_corrupt_file(self):
        backup_path = self.path.with_suffix('.json.backup')
        try:
            shutil.copy2(self.path, backup_path)
            logger.warning(f"Corrupted data file backed up to {backup_path}")
        except OSError as backup_err:
            logger.error(f"Failed to backup corrupted data file: {backup_err}")

    def save(self) -> SaveResult:
        """
        Save all sightings to the JSON file (atomic write).

        Errors are logged and returned, not raised. The in-memory copy stays
        the source of truth and the next flush or sync will try again.
        """
        temp_file = self.path.with_suffix('.json.tmp')
        with self._lock:
            try:
                data = [sighting.to_json() for sighting in self._records.values()]

                # Atomic write: write to temp file first, then rename
                with open(temp_file, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                temp_file.replace(self.path)

                logger.info(f"Saved {len(data)} sightings to disk")
                return SaveResult(ok=True, count=len(data))

            except PermissionError as e:
                logger.error(f"Permission denied saving data file: {e}")
                return SaveResult(ok=False, error=str(e))
            except OSError as e:
                logger.error(f"OS error saving data file: {e}")
                return SaveResult(ok=False, error=str(e))
            except (TypeError, ValueError) as e:
                logger.error(f"Error serializing sightings: {e}", exc_info=True)
                return SaveResult(ok=False, error=str(e))

    # =========================================================================
    # READING
    # =========================================================================

    def all(self) -> list[Sighting]:
        """Every sighting, tombstones included (what sync clients need)."""
        with self._lock:
            return list(self._records.values())

    def active(self) -> list[Sighting]:
        """Sightings that have not been deleted (what reports show)."""
        return [s for s in self.all() if not s.deleted]

    def snapshot(self) -> dict[str, Sighting]:
        """Copy of the id -> sighting mapping, safe to hand to the merge engine."""
        with self._lock:
            return dict(self._records)

    # =========================================================================
    # WRITING
    # =========================================================================

    def commit(self, records: Mapping[str, Sighting]):
        """Replace the current collection with a merged one."""
        with self._lock:
            self._records = dict(records)
