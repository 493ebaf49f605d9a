"""
Services Package
================

These are the "workers" that do the actual work.

- RecordStore: Keeps the sightings and the JSON file in step
- reconcile: The last-write-wins merge
- SyncService: The boss that runs a sync and the autosave timer
- render_csv / compute_stats: Read-only reports
"""

from .merge_engine import MergeResult, reconcile
from .record_store import RecordStore, SaveResult
from .sync_service import SyncService, SyncResult, SyncValidationError
from .reporting import render_csv, export_filename, compute_stats

__all__ = [
    "MergeResult",
    "reconcile",
    "RecordStore",
    "SaveResult",
    "SyncService",
    "SyncResult",
    "SyncValidationError",
    "render_csv",
    "export_filename",
    "compute_stats",
]
