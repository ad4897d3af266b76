"""Tests for the MemoryKit facade."""

import json

import pytest

from memkit import MemoryKit
from memkit.core import DeltaFilter


class TestConstruction:
    def test_opens_storage_from_env(self, memkit_env):
        kit = MemoryKit()
        assert kit.backend_name == "sqlite"
        assert (memkit_env / "memkit.db").exists()

    def test_backend_argument(self, tmp_path):
        kit = MemoryKit(data_dir=tmp_path, backend="flat")
        assert kit.backend_name == "flat"

    def test_injected_storage(self, storage):
        assert MemoryKit(storage=storage).storage is storage


class TestProfileEditing:
    def test_update_canon_partial(self, kit):
        kit.update_canon(rules="R1", glossary="G1")
        kit.update_canon(rules="R2")
        canon = kit.get_canon()
        assert (canon.rules, canon.glossary) == ("R2", "G1")
        assert canon.updated_at > 0

    def test_update_canon_unknown_field(self, kit):
        with pytest.raises(ValueError, match="Unknown canon field"):
            kit.update_canon(mood="happy")

    def test_update_current(self, kit):
        current = kit.update_current(now="Now", today="Today")
        assert kit.get_current() == current


class TestDeltaEditing:
    def test_add_delta(self, kit):
        delta = kit.add_delta(" Shipped ", area="Learning", type="Milestone",
                              tags=["a", "a", " b "], date_iso="2024-02-02")
        stored = kit.get_delta(delta.id)
        assert stored.summary == "Shipped"
        assert stored.tags == ["a", "b"]
        assert stored.area == "Learning"

    def test_blank_summary_rejected(self, kit):
        with pytest.raises(ValueError, match="summary cannot be empty"):
            kit.add_delta("   ")
        assert kit.list_deltas() == []

    def test_invalid_area_rejected(self, kit):
        with pytest.raises(ValueError, match="area must be one of"):
            kit.add_delta("x", area="Space")

    def test_update_delta(self, kit):
        delta = kit.add_delta("Before", tags=["keep"])
        updated = kit.update_delta(delta.id, summary="After", type="Decision")
        assert updated.id == delta.id
        assert updated.summary == "After"
        assert updated.type == "Decision"
        assert updated.tags == ["keep"]

    def test_update_delta_blank_summary(self, kit):
        delta = kit.add_delta("Before")
        with pytest.raises(ValueError):
            kit.update_delta(delta.id, summary="")
        assert kit.get_delta(delta.id).summary == "Before"

    def test_update_missing_delta(self, kit):
        with pytest.raises(KeyError):
            kit.update_delta("missing", summary="x")

    @pytest.mark.parametrize("date_iso", ["", "2024-06-02T09:30:00Z"])
    def test_update_keeps_imported_date(self, kit, tmp_path, make_payload, date_iso):
        payload = make_payload()
        payload["deltas"][0]["dateISO"] = date_iso
        path = tmp_path / "in.json"
        path.write_text(json.dumps(payload))
        assert kit.import_file(path)["applied"] is True

        updated = kit.update_delta("imp-1", summary="Fixed typo")
        assert updated.summary == "Fixed typo"
        assert kit.get_delta("imp-1").date_iso == date_iso

    def test_update_checks_changed_date(self, kit):
        delta = kit.add_delta("Dated", date_iso="2024-01-01")
        with pytest.raises(ValueError, match="date cannot be empty"):
            kit.update_delta(delta.id, date_iso="")

    def test_filter_deltas(self, kit):
        kit.add_delta("Work item", area="Work", date_iso="2024-01-01")
        kit.add_delta("Health item", area="Health", date_iso="2024-01-02")
        assert [d.summary for d in kit.filter_deltas(DeltaFilter(area="Health"))] == ["Health item"]


class TestContextPack:
    @pytest.fixture
    def populated(self, kit, sample_data):
        kit.replace_all(sample_data)
        return kit

    def test_default_pack_uses_recent_deltas(self, populated):
        pack = populated.context_pack(last_n=2)
        assert "Third" in pack and "Second" in pack
        assert "First" not in pack
        assert pack.index("Third") < pack.index("Second")

    def test_preset_quick_has_no_deltas(self, populated):
        assert "- (none)" in populated.context_pack(preset="quick")

    def test_selected_ids(self, populated):
        pack = populated.context_pack(selected_ids=["a"])
        assert "First" in pack and "Third" not in pack

    def test_exclusions(self, populated):
        pack = populated.context_pack(include_canon=False, include_deltas=False)
        assert "- Rules: " in pack.splitlines()
        assert "- Now: Writing tests" in pack.splitlines()
        assert "- (none)" in pack

    def test_wrap(self, populated):
        assert populated.context_pack(wrap="gemini").startswith("GEMINI INSTRUCTIONS:")

    def test_markdown(self, populated):
        assert populated.context_pack(format="markdown").startswith("# CONTEXT PACK")


class TestFiles:
    def test_export_json(self, kit, tmp_path, sample_data):
        kit.replace_all(sample_data)
        path = kit.export_json(tmp_path / "out.json")
        raw = path.read_text()
        assert raw.startswith('{\n  "canon"')
        assert len(json.loads(raw)["deltas"]) == 3

    def test_export_default_name(self, kit, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert kit.export_json().name == "portable-ai-memory-kit.json"
        assert kit.export_markdown().name == "portable-ai-memory-kit.md"

    def test_export_markdown(self, kit, tmp_path, sample_data):
        kit.replace_all(sample_data)
        text = kit.export_markdown(tmp_path / "out.md").read_text()
        assert text.startswith("# CONTEXT PACK")

    def test_load_sample_overwrites(self, kit):
        kit.add_delta("Mine")
        kit.load_sample()
        ids = {d.id for d in kit.list_deltas()}
        assert len(ids) == 6
        assert all(i.startswith("sample-delta-") for i in ids)

    def test_onboarding(self, kit):
        assert kit.get_onboarding_seen() is False
        kit.set_onboarding_seen()
        assert kit.get_onboarding_seen() is True
