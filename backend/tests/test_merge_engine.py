"""
Tests for the last-write-wins merge.

Tests validate:
- New ids are admitted and counted
- Newer copies replace, older or equally old copies are ignored
- Tombstones win like any other newer edit
- Same result whatever order the batches arrive in
"""

from safari_sync.services.merge_engine import reconcile

from tests.factories import make_sighting


class TestReconcile:
    """Tests for reconcile()."""

    def test_new_id_is_admitted(self):
        result = reconcile({}, [make_sighting("1", minute=5, count=2)])

        assert result.admitted == 1
        assert result.records["1"].count == 2

    def test_older_copy_is_discarded(self):
        stored = {"1": make_sighting("1", minute=5, count=2)}

        result = reconcile(stored, [make_sighting("1", minute=0, count=5)])

        assert result.admitted == 0
        assert result.records["1"].count == 2

    def test_newer_copy_replaces_but_is_not_counted(self):
        stored = {"1": make_sighting("1", minute=0, count=2)}

        result = reconcile(stored, [make_sighting("1", minute=5, count=7)])

        assert result.admitted == 0
        assert result.records["1"].count == 7

    def test_equal_timestamp_keeps_stored_copy(self):
        stored = {"1": make_sighting("1", minute=5, count=2)}

        result = reconcile(stored, [make_sighting("1", minute=5, count=9)])

        assert result.records["1"].count == 2

    def test_tombstone_with_newer_timestamp_wins(self):
        stored = {"1": make_sighting("1", minute=0)}

        result = reconcile(stored, [make_sighting("1", minute=5, deleted=True)])

        assert result.records["1"].deleted is True

    def test_old_copy_cannot_resurrect_tombstone(self):
        stored = {"1": make_sighting("1", minute=5, deleted=True)}

        result = reconcile(stored, [make_sighting("1", minute=0)])

        assert result.records["1"].deleted is True

    def test_current_mapping_is_not_mutated(self):
        original = make_sighting("1", minute=0)
        stored = {"1": original}

        reconcile(stored, [make_sighting("1", minute=5), make_sighting("2")])

        assert stored == {"1": original}

    def test_replacement_keeps_position(self):
        stored = {"a": make_sighting("a"), "b": make_sighting("b")}

        result = reconcile(stored, [make_sighting("a", minute=9)])

        assert list(result.records) == ["a", "b"]

    def test_idempotent(self):
        batch = [make_sighting("1", minute=1), make_sighting("2", minute=2)]

        first = reconcile({}, batch)
        second = reconcile(first.records, batch)

        assert first.admitted == 2
        assert second.admitted == 0
        assert second.records == first.records


class TestBatchDuplicates:
    """Duplicate ids inside one batch."""

    def test_newest_duplicate_wins_in_either_order(self):
        old = make_sighting("1", minute=1, count=1)
        new = make_sighting("1", minute=2, count=3)

        forward = reconcile({}, [old, new])
        backward = reconcile({}, [new, old])

        assert forward.records["1"].count == 3
        assert backward.records["1"].count == 3

    def test_duplicate_counts_as_one_admission(self):
        batch = [make_sighting("1", minute=1), make_sighting("1", minute=2)]

        assert reconcile({}, batch).admitted == 1


class TestCommutativity:
    """Batches applied in different orders end up in the same place."""

    def test_disjoint_batches(self):
        ab = [make_sighting("a"), make_sighting("b")]
        c = [make_sighting("c")]

        one = reconcile(reconcile({}, ab).records, c).records
        two = reconcile(reconcile({}, c).records, ab).records

        assert one == two

    def test_colliding_batches_resolve_by_timestamp(self):
        ab = [make_sighting("a", minute=1, count=1), make_sighting("b", minute=9, count=1)]
        c = [make_sighting("a", minute=8, count=2), make_sighting("b", minute=2, count=2)]

        one = reconcile(reconcile({}, ab).records, c).records
        two = reconcile(reconcile({}, c).records, ab).records

        assert one == two
        assert one["a"].count == 2
        assert one["b"].count == 1
