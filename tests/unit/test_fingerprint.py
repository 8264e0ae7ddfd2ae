"""Tests for embedded-fingerprint change detection."""

from __future__ import annotations

import json

import pytest

from gqlforge.core.fingerprint import needs_regeneration, serialize_source


class TestSerializeSource:
    def test_matches_json_string_literal(self):
        assert serialize_source('query { a(x: "y") }\n') == json.dumps('query { a(x: "y") }\n')

    def test_non_ascii_kept_verbatim(self):
        assert serialize_source("# héllo ✓") == '"# héllo ✓"'


class TestNeedsRegeneration:
    def test_no_existing_output(self):
        assert needs_regeneration("query { id }", "") is True

    def test_output_embeds_source(self):
        existing = 'doc.loc.source = {"body":' + serialize_source("query { id }") + "};"
        assert needs_regeneration("query { id }", existing) is False

    def test_changed_source(self):
        existing = 'doc.loc.source = {"body":' + serialize_source("query { id }") + "};"
        assert needs_regeneration("query { id name }", existing) is True

    def test_unescaped_text_is_not_a_match(self):
        # The raw text appears, but not its serialized literal.
        source = 'query { a(x: "y") }'
        assert needs_regeneration(source, f"// {source}") is True

    def test_whitespace_change_is_detected(self):
        existing = serialize_source("query { id }\n")
        assert needs_regeneration("query { id }\r\n", existing) is True

    @pytest.mark.parametrize(
        "source",
        [
            "",
            "query { id }",
            'query { a(x: "quoted \\"inner\\"") }',
            "line one\nline two\r\n\ttabbed",
            "emoji 🚀 and ünïcödé",
            "\x00\x1f control",
            "back\\slash",
        ],
    )
    def test_round_trip_detection(self, source: str):
        existing = "var doc = {};\n" + serialize_source(source) + "\nmodule.exports = doc;\n"
        assert needs_regeneration(source, existing) is False
