"""Tests for export/replace/merge and the two merge strategies."""

from memkit.core import keep_existing_wins, overlay_wins
from memkit.types import Canon, CurrentState, MemoryData


class TestStrategies:
    def test_overlay_wins_incoming_fields(self):
        merged = overlay_wins({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert merged == {"a": 1, "b": 3, "c": 4}

    def test_overlay_ignores_none(self):
        assert overlay_wins({"a": 1}, {"a": None}) == {"a": 1}

    def test_keep_existing_wins_drops_colliding_incoming(self, make_delta):
        existing = [make_delta(id="x", summary="local")]
        incoming = [make_delta(id="x", summary="remote"), make_delta(id="y")]
        merged = keep_existing_wins(existing, incoming)
        assert [d.id for d in merged] == ["x", "y"]
        assert merged[0].summary == "local"

    def test_keep_existing_wins_first_incoming_duplicate_wins(self, make_delta):
        incoming = [make_delta(id="z", summary="first"), make_delta(id="z", summary="second")]
        merged = keep_existing_wins([], incoming)
        assert len(merged) == 1
        assert merged[0].summary == "first"


class TestExportAll:
    def test_empty_store(self, kit):
        data = kit.export_all()
        assert data.canon == Canon()
        assert data.current == CurrentState()
        assert data.deltas == []

    def test_snapshot(self, kit, make_canon, make_delta):
        kit.save_canon(make_canon(rules="R"))
        kit.save_delta(make_delta())
        data = kit.export_all()
        assert data.canon.rules == "R"
        assert [d.id for d in data.deltas] == ["delta-1"]


class TestReplaceAll:
    def test_replace_totality(self, kit, sample_data, make_delta):
        kit.save_delta(make_delta(id="stale"))
        kit.replace_all(sample_data)

        data = kit.export_all()
        assert data.canon == sample_data.canon
        assert data.current == sample_data.current
        assert sorted(d.id for d in data.deltas) == ["a", "b", "c"]

    def test_replace_keeps_given_timestamps(self, kit, sample_data):
        kit.replace_all(sample_data)
        assert kit.get_canon().updated_at == sample_data.canon.updated_at


class TestMergeAll:
    def test_merge_asymmetry(self, kit, make_canon, make_current, make_delta):
        kit.save_canon(make_canon(rules="local rules", glossary="local glossary"))
        kit.save_delta(make_delta(id="shared", summary="local copy"))
        kit.save_delta(make_delta(id="local-only"))

        incoming = MemoryData(
            canon=make_canon(rules="remote rules", glossary="remote glossary"),
            current=make_current(now="remote now"),
            deltas=[
                make_delta(id="shared", summary="remote copy"),
                make_delta(id="remote-only"),
            ],
        )
        kit.merge_all(incoming)

        # Singletons: incoming wins
        assert kit.get_canon().rules == "remote rules"
        assert kit.get_current().now == "remote now"
        # Deltas: existing wins on collision, union otherwise
        ids = sorted(d.id for d in kit.list_deltas())
        assert ids == ["local-only", "remote-only", "shared"]
        assert kit.get_delta("shared").summary == "local copy"

    def test_merge_restamps_singletons(self, kit, make_canon, make_current):
        incoming = MemoryData(canon=make_canon(updated_at=1), current=make_current(updated_at=1))
        merged = kit.merge_all(incoming)
        assert merged.canon.updated_at > 1
        assert merged.current.updated_at == merged.canon.updated_at
        assert kit.get_canon().updated_at == merged.canon.updated_at

    def test_merge_returns_what_was_written(self, kit, sample_data):
        merged = kit.merge_all(sample_data)
        assert sorted(d.id for d in merged.deltas) == sorted(
            d.id for d in kit.list_deltas()
        )
