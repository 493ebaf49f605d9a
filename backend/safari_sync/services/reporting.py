"""
Reporting Views
===============

Read-only projections over the sightings: the CSV export and the stats.

Both only look at active sightings. Deleted ones (tombstones) are kept in the
store for sync but never show up here.

CSV COLUMNS (in order):
    Animal, Count, Date, Time, User, Notes
"""

import csv
import io
from datetime import date, tzinfo
from typing import Iterable, Optional

from safari_sync.models import Sighting, SightingStats


CSV_HEADER = ["Animal", "Count", "Date", "Time", "User", "Notes"]


def _local_date_time(sighting: Sighting, tz: Optional[tzinfo]) -> tuple[str, str]:
    # tz=None means the server's local timezone
    moment = sighting.timestamp.astimezone(tz)
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}",
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {suffix}",
    )


def render_csv(sightings: Iterable[Sighting], tz: Optional[tzinfo] = None) -> str:
    """
    Render sightings as CSV text, header first.

    Deleted sightings are skipped. Rows keep the order they are given in.

    Args:
        sightings: Sightings to export
        tz: Timezone for the Date/Time columns (server local time if None)
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for sighting in sightings:
        if sighting.deleted:
            continue
        day, time_of_day = _local_date_time(sighting, tz)
        writer.writerow([
            sighting.animal,
            sighting.count,
            day,
            time_of_day,
            sighting.user,
            sighting.notes or "",
        ])

    return buffer.getvalue().rstrip("\n")


def export_filename(today: date) -> str:
    """Suggested download name, e.g. safari-export-2025-01-15.csv"""
    return f"safari-export-{today.isoformat()}.csv"


def compute_stats(sightings: Iterable[Sighting]) -> SightingStats:
    """Aggregate counts over active sightings."""
    active = [s for s in sightings if not s.deleted]

    animal_counts: dict[str, int] = {}
    users: list[str] = []
    for sighting in active:
        animal_counts[sighting.animal] = animal_counts.get(sighting.animal, 0) + sighting.count
        if sighting.user not in users:
            users.append(sighting.user)

    return SightingStats(
        total_sightings=sum(s.count for s in active),
        unique_animals=len(animal_counts),
        total_records=len(active),
        users=users,
        animal_counts=animal_counts,
    )
