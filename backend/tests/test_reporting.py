"""
Tests for the CSV export and stats.
"""

from datetime import date, timezone

from safari_sync.services import compute_stats, export_filename, render_csv

from tests.factories import make_sighting


class TestRenderCsv:
    """Tests for render_csv()."""

    def test_header_only_when_empty(self):
        assert render_csv([], tz=timezone.utc) == "Animal,Count,Date,Time,User,Notes"

    def test_row_columns_in_order(self):
        sightings = [make_sighting("1", minute=30, animal="lion", count=2, user="Sam", notes="by the river")]

        lines = render_csv(sightings, tz=timezone.utc).split("\n")

        assert lines[1] == "lion,2,1/15/2025,10:30:00 AM,Sam,by the river"

    def test_afternoon_time_and_missing_notes(self):
        sighting = make_sighting("1", timestamp="2025-03-02T15:04:05Z", animal="zebra")

        row = render_csv([sighting], tz=timezone.utc).split("\n")[1]

        assert row == "zebra,1,3/2/2025,3:04:05 PM,Sam,"

    def test_tombstones_are_skipped(self):
        sightings = [make_sighting("1", animal="lion"), make_sighting("2", animal="hyena", deleted=True)]

        lines = render_csv(sightings, tz=timezone.utc).split("\n")

        assert len(lines) == 2
        assert lines[1].startswith("lion,")

    def test_commas_in_notes_are_quoted(self):
        sighting = make_sighting("1", notes="two adults, one cub")

        row = render_csv([sighting], tz=timezone.utc).split("\n")[1]

        assert row.endswith(',"two adults, one cub"')


def test_export_filename():
    assert export_filename(date(2025, 1, 15)) == "safari-export-2025-01-15.csv"


class TestComputeStats:
    """Tests for compute_stats()."""

    def test_lion_example(self):
        stats = compute_stats([make_sighting("1", count=2), make_sighting("2", count=1)])

        assert stats.animal_counts == {"lion": 3}
        assert stats.unique_animals == 1
        assert stats.total_sightings == 3
        assert stats.total_records == 2

    def test_users_distinct_in_first_seen_order(self):
        stats = compute_stats([
            make_sighting("1", user="Sam"),
            make_sighting("2", user="Ada"),
            make_sighting("3", user="Sam"),
        ])

        assert stats.users == ["Sam", "Ada"]

    def test_tombstones_are_excluded(self):
        stats = compute_stats([
            make_sighting("1", animal="lion", count=2),
            make_sighting("2", animal="zebra", count=9, deleted=True),
        ])

        assert stats.animal_counts == {"lion": 2}
        assert stats.total_records == 1

    def test_serializes_with_camel_case(self):
        stats = compute_stats([make_sighting("1", count=2)])

        assert stats.model_dump(by_alias=True) == {
            "totalSightings": 2,
            "uniqueAnimals": 1,
            "totalRecords": 1,
            "users": ["Sam"],
            "animalCounts": {"lion": 2},
        }
