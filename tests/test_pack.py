"""Tests for context pack rendering and delta selection."""

import pytest

from memkit.pack import (
    ELLIPSIS,
    MODEL_WRAPPERS,
    build_context_pack,
    build_markdown_bundle,
    format_delta_line,
    preset_deltas,
    select_deltas,
    sort_deltas,
    truncate,
    wrap_for_model,
)
from memkit.types import MemoryData


class TestBuildContextPack:
    def test_plaintext_layout(self, make_canon, make_current, make_delta):
        pack = build_context_pack(
            make_canon(),
            make_current(),
            [make_delta(summary="Did a thing", details="More", tags=["t"])],
        )
        assert pack == "\n".join(
            [
                "CONTEXT PACK",
                "Canon:",
                "- Identity & Goals: Build calm software",
                "- Rules: Be concise",
                "- Preferences: Bullets",
                "- Glossary: P0 = urgent",
                "",
                "Current State:",
                "- Now: Writing tests",
                "- Today: Finish storage",
                "",
                "Deltas (selected):",
                "- 2024-06-01 Work Update Did a thing — More",
                "",
                "REQUEST:",
                "- [Paste what you want help with here]",
            ]
        )

    def test_format_switch_only_changes_headings(self, make_canon, make_current, make_delta):
        args = (make_canon(), make_current(), [make_delta()])
        plain = build_context_pack(*args, format="plaintext").splitlines()
        markdown = build_context_pack(*args, format="markdown").splitlines()
        assert len(plain) == len(markdown)
        assert markdown[0] == "# CONTEXT PACK"
        for p, m in zip(plain[1:], markdown[1:]):
            assert m == p or m == f"## {p}"

    def test_deterministic(self, make_canon, make_current, make_delta):
        args = (make_canon(), make_current(), [make_delta(id="a"), make_delta(id="b")])
        assert build_context_pack(*args) == build_context_pack(*args)

    def test_preserves_given_order(self, make_delta):
        older = make_delta(id="o", date_iso="2024-01-01", summary="older")
        newer = make_delta(id="n", date_iso="2024-02-01", summary="newer")
        pack = build_context_pack(None, None, [older, newer])
        assert pack.index("older") < pack.index("newer")

    def test_no_deltas(self):
        pack = build_context_pack(None, None, [])
        assert "- (none)" in pack
        assert "- Rules: " in pack.splitlines()

    def test_values_are_trimmed(self, make_canon):
        pack = build_context_pack(make_canon(rules="  spaced  "), None, [])
        assert "- Rules: spaced" in pack.splitlines()

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="format must be one of"):
            build_context_pack(None, None, [], format="html")


class TestTruncation:
    def test_boundary(self):
        assert truncate("x" * 240) == "x" * 240
        assert truncate("x" * 241) == "x" * 240 + ELLIPSIS

    def test_long_details_in_pack(self, make_delta):
        line = format_delta_line(make_delta(details="y" * 300))
        assert line.endswith(" — " + "y" * 240 + ELLIPSIS)

    def test_blank_details_have_no_separator(self, make_delta):
        line = format_delta_line(make_delta(details="   "))
        assert "—" not in line


class TestWrapForModel:
    @pytest.mark.parametrize("target", ["chatgpt", "claude", "gemini"])
    def test_prefixes_instructions(self, target):
        wrapped = wrap_for_model(target, "BODY")
        assert wrapped.startswith(MODEL_WRAPPERS[target].strip().splitlines()[0])
        assert wrapped.endswith("BODY")

    def test_claude_text_is_exact(self):
        assert "optional “Deeper” section" in MODEL_WRAPPERS["claude"]

    def test_unknown_target(self):
        with pytest.raises(ValueError):
            wrap_for_model("other", "BODY")


class TestSelection:
    @pytest.fixture
    def deltas(self, make_delta):
        return [make_delta(id=f"d{i:02d}", date_iso=f"2024-01-{i:02d}") for i in range(1, 13)]

    def test_sort_newest_first(self, deltas):
        assert sort_deltas(deltas)[0].id == "d12"

    def test_last_n(self, deltas):
        assert [d.id for d in select_deltas(deltas, last_n=3)] == ["d12", "d11", "d10"]

    def test_selected_ids_win(self, deltas):
        picked = select_deltas(deltas, last_n=1, selected_ids=["d01", "d05"])
        assert [d.id for d in picked] == ["d05", "d01"]

    def test_exclude(self, deltas):
        assert select_deltas(deltas, include=False) == []

    @pytest.mark.parametrize("preset,count", [("quick", 0), ("normal", 5), ("deep", 10)])
    def test_presets(self, deltas, preset, count):
        assert len(preset_deltas(deltas, preset)) == count

    def test_unknown_preset(self, deltas):
        with pytest.raises(ValueError):
            preset_deltas(deltas, "huge")


class TestMarkdownBundle:
    def test_uses_five_most_recent(self, make_canon, make_current, make_delta):
        deltas = [make_delta(id=f"d{i}", date_iso=f"2024-03-0{i}", summary=f"S{i}") for i in range(1, 8)]
        bundle = build_markdown_bundle(MemoryData(make_canon(), make_current(), deltas))
        assert bundle.startswith("# CONTEXT PACK")
        assert "S7" in bundle and "S3" in bundle
        assert "S2" not in bundle
