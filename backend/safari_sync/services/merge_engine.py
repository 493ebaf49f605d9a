"""
Merge Engine
============

Reconciles a batch of sightings from one device with the server's copy.

THE RULE (last write wins):
--------------------------
For every incoming sighting:
    - Never seen this id?         -> keep it, count it as new
    - Seen it, incoming is newer? -> replace the stored copy
    - Seen it, incoming is older
      or exactly as old?          -> ignore it, the stored copy wins

Deletions use the same rule: a deleted sighting is a newer copy with
``deleted=True``, so it wins over older copies and keeps winning if an
old device re-sends the record later.

Duplicate ids inside one batch go through the same rule, so the order of the
batch does not matter (apart from exact timestamp ties, where the first copy
seen is kept).

Nothing here touches disk or locks. The caller owns the store.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping

from safari_sync.models import Sighting


@dataclass(frozen=True)
class MergeResult:
    """Outcome of one reconcile call."""
    records: dict[str, Sighting]
    admitted: int


def reconcile(current: Mapping[str, Sighting], batch: Iterable[Sighting]) -> MergeResult:
    """
    Merge ``batch`` into a copy of ``current``.

    Args:
        current: Stored sightings keyed by id (left untouched)
        batch: Incoming sightings, already validated

    Returns:
        MergeResult with the new id -> sighting mapping and how many ids
        were new to the store
    """
    records = dict(current)
    admitted = 0

    for sighting in batch:
        existing = records.get(sighting.id)
        if existing is None:
            records[sighting.id] = sighting
            admitted += 1
        elif sighting.timestamp > existing.timestamp:
            # Replacing a key keeps its position in the dict
            records[sighting.id] = sighting

    return MergeResult(records=records, admitted=admitted)
