"""Tests for memkit record types and their wire format."""

import re

from memkit.types import (
    CANON_ID,
    CURRENT_ID,
    Canon,
    CurrentState,
    Delta,
    MemoryData,
    clean_tags,
    new_delta_id,
    today_iso,
)


class TestCanon:
    def test_defaults_are_empty(self):
        canon = Canon()
        assert canon.id == CANON_ID
        assert canon.identity_goals == ""
        assert canon.updated_at == 0

    def test_to_dict_uses_camel_case(self, make_canon):
        d = make_canon().to_dict()
        assert d["identityGoals"] == "Build calm software"
        assert d["updatedAt"] == 1000
        assert d["id"] == "canon"

    def test_from_dict_forces_id_and_tolerates_bad_types(self):
        canon = Canon.from_dict({"id": "other", "rules": 42, "updatedAt": "soon"})
        assert canon.id == CANON_ID
        assert canon.rules == ""
        assert canon.updated_at == 0

    def test_from_none(self):
        assert Canon.from_dict(None) == Canon()


class TestCurrentState:
    def test_from_dict_forces_id(self):
        current = CurrentState.from_dict({"id": "x", "now": "n", "today": "t", "updatedAt": 7})
        assert current.id == CURRENT_ID
        assert (current.now, current.today, current.updated_at) == ("n", "t", 7)

    def test_boolean_timestamp_is_ignored(self):
        assert CurrentState.from_dict({"updatedAt": True}).updated_at == 0


class TestDelta:
    def test_new_assigns_unique_id_and_today(self):
        a = Delta.new(summary="one")
        b = Delta.new(summary="two")
        assert a.id != b.id
        assert a.date_iso == today_iso()

    def test_new_keeps_explicit_date(self):
        assert Delta.new(date_iso="2024-01-02").date_iso == "2024-01-02"

    def test_wire_keys(self, make_delta):
        d = make_delta(tags=["x"]).to_dict()
        assert set(d) == {"id", "dateISO", "area", "type", "summary", "details", "tags"}
        assert d["dateISO"] == "2024-06-01"

    def test_from_dict_drops_non_string_tags(self):
        delta = Delta.from_dict({"id": "d", "dateISO": "2024-01-01", "tags": ["a", 3, None]})
        assert delta.tags == ["a"]

    def test_from_dict_defaults_area_and_type(self):
        delta = Delta.from_dict({"id": "d"})
        assert delta.area == "Work"
        assert delta.type == "Update"


class TestMemoryData:
    def test_from_dict_inverts_to_dict(self, sample_data):
        assert MemoryData.from_dict(sample_data.to_dict()) == sample_data


class TestHelpers:
    def test_new_delta_id_is_uuid(self):
        assert re.fullmatch(r"[0-9a-f-]{36}", new_delta_id())

    def test_clean_tags(self):
        assert clean_tags([" a ", "", "b", "a", 5]) == ["a", "b"]
        assert clean_tags(None) == []
