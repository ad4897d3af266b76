"""Tests for import validation, normalization and editing sanitizers."""

import pytest

from memkit.core import normalize_data, validate_data
from memkit.core.validation import sanitize_string, sanitize_tags, validate_enum


class TestValidateData:
    def test_valid_payload(self, make_payload):
        result = validate_data(make_payload())
        assert result.valid is True
        assert result.errors == []

    @pytest.mark.parametrize("payload", [None, [], "text", 3])
    def test_not_an_object(self, payload):
        result = validate_data(payload)
        assert result.valid is False
        assert result.errors == ["Payload is not an object"]

    def test_missing_everything_collects_all_errors(self):
        result = validate_data({})
        assert result.errors == ["Missing canon", "Missing current", "Deltas must be an array"]

    def test_canon_field_type(self, make_payload):
        payload = make_payload()
        payload["canon"]["identityGoals"] = 5
        result = validate_data(payload)
        assert "Canon.identityGoals must be a string" in result.errors

    def test_current_field_type(self, make_payload):
        payload = make_payload()
        del payload["current"]["now"]
        assert validate_data(payload).errors == ["Current.now must be a string"]

    def test_errors_are_not_short_circuited(self, make_payload):
        payload = make_payload(deltas={"not": "a list"})
        payload["canon"]["rules"] = None
        payload["current"]["today"] = []
        result = validate_data(payload)
        assert result.errors == [
            "Canon.rules must be a string",
            "Current.today must be a string",
            "Deltas must be an array",
        ]

    def test_delta_errors_are_indexed(self, make_payload):
        payload = make_payload()
        payload["deltas"].append("junk")
        payload["deltas"].append(
            {
                "id": "x",
                "dateISO": "2024-01-01",
                "area": "Space",
                "type": "Update",
                "summary": "s",
                "details": "",
                "tags": [1],
            }
        )
        errors = validate_data(payload).errors
        assert "Deltas[1] must be an object" in errors
        assert any(e.startswith("Deltas[2].area must be one of") for e in errors)
        assert "Deltas[2].tags must be an array of strings" in errors

    def test_empty_canon_object_checks_each_field(self, make_payload):
        errors = validate_data(make_payload(canon={})).errors
        assert "Missing canon" not in errors
        assert errors == [
            "Canon.identityGoals must be a string",
            "Canon.rules must be a string",
            "Canon.preferences must be a string",
            "Canon.glossary must be a string",
        ]

    @pytest.mark.parametrize("value", [None, "", 0, False])
    def test_null_or_falsy_current_is_missing(self, make_payload, value):
        assert validate_data(make_payload(current=value)).errors == ["Missing current"]


class TestNormalizeData:
    def test_forces_ids_and_backfills_timestamps(self, make_payload):
        payload = make_payload()
        payload["canon"]["id"] = "whatever"
        payload["canon"].pop("updatedAt")
        data = normalize_data(payload)
        assert data.canon.id == "canon"
        assert data.canon.updated_at > 0
        assert data.current.updated_at == 5

    def test_missing_tags_default_to_empty(self, make_payload):
        payload = make_payload()
        payload["deltas"][0]["tags"] = None
        data = normalize_data(payload)
        assert data.deltas[0].tags == []

    def test_does_not_mutate_input(self, make_payload):
        payload = make_payload()
        normalize_data(payload)
        assert "id" not in payload["canon"]


class TestSanitizers:
    def test_sanitize_string_strips_control_chars(self):
        assert sanitize_string("a\x00b\nc", "field") == "ab\nc"

    def test_sanitize_string_rejects_blank_when_required(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            sanitize_string("   ", "summary")

    def test_sanitize_string_optional_none(self):
        assert sanitize_string(None, "details", required=False) == ""

    def test_sanitize_string_too_long(self):
        with pytest.raises(ValueError, match="too long"):
            sanitize_string("x" * 11, "field", max_length=10)

    def test_sanitize_string_rejects_non_string(self):
        with pytest.raises(ValueError, match="must be a string"):
            sanitize_string(5, "field")

    def test_validate_enum(self):
        assert validate_enum("Work", "area", ["Work"]) == "Work"
        assert validate_enum(None, "area", ["Work"], "Work") == "Work"
        with pytest.raises(ValueError, match="must be one of"):
            validate_enum("Play", "area", ["Work"])

    def test_sanitize_tags(self):
        assert sanitize_tags([" a", "a", "", "b"]) == ["a", "b"]
        assert sanitize_tags(None) == []
        with pytest.raises(ValueError, match="must be an array"):
            sanitize_tags("a,b")
