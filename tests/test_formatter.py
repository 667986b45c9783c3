"""Tests for rendering field maps back into stamp blocks."""

import pytest

from zerogravity.formatter import (
    format_stamp,
    format_stamp_with_header,
    stamp_fields_from_record,
)
from zerogravity.stamp_parser import BEGIN_MARKER, END_MARKER, extract_block, parse_block


def reparse(text: str) -> dict:
    block = extract_block(text)
    assert block is not None
    return parse_block(block.body)


class TestFormatStamp:
    """Tests for the data block renderer."""

    def test_renders_expected_lines(self):
        text = format_stamp({
            "encoding": "zero-gravity",
            "version": "0.1",
            "title": "Test",
            "intent": "proposal",
            "indexes": ["alpha", "beta"],
        })

        assert text.split("\n") == [
            BEGIN_MARKER,
            'encoding: "zero-gravity"',
            'version: "0.1"',
            'title: "Test"',
            'intent: "proposal"',
            "indexes:",
            '  - "alpha"',
            '  - "beta"',
            END_MARKER,
        ]

    def test_fixed_order_regardless_of_map_order(self):
        text = format_stamp({"indexes": ["a"], "intent": "report", "version": "0.1", "title": "T"})
        lines = text.split("\n")

        assert lines.index('version: "0.1"') < lines.index('title: "T"')
        assert lines.index('title: "T"') < lines.index('intent: "report"') < lines.index("indexes:")

    def test_encoding_and_version_only_written_when_present(self):
        text = format_stamp({"title": "T"})

        assert "encoding:" not in text
        assert "version:" not in text

    def test_version_argument_is_written(self):
        assert 'version: "0.2"' in format_stamp({"title": "T"}, version="0.2")

    def test_version_argument_replaces_map_version(self):
        text = format_stamp({"version": "0.1", "title": "T"}, version="0.2")

        assert 'version: "0.2"' in text
        assert 'version: "0.1"' not in text

    def test_empty_indexes_omitted(self):
        text = format_stamp({"title": "T", "indexes": []})
        assert "indexes:" not in text

    def test_absent_title_and_intent_omitted(self):
        text = format_stamp({"title": None, "indexes": ["x"]})

        assert "title:" not in text
        assert "intent:" not in text

    def test_scalars_written_before_lists(self):
        text = format_stamp({"tags": ["x"], "author": "Ada", "indexes": ["i"], "title": "T"})
        lines = text.split("\n")

        assert lines.index('author: "Ada"') < lines.index("indexes:") < lines.index("tags:")

    def test_end_to_end_example_round_trips(self, sample_body):
        fields = parse_block(sample_body)
        assert reparse(format_stamp(fields)) == fields

    @pytest.mark.parametrize("body", [
        'encoding: "zero-gravity"\nversion: "0.3"\ntitle: "Part 1: \\"quoted\\""\nintent: critique\nindexes:\n  - one',
        "version: '0.1'\nencoding: zero-gravity\ntitle: \"\"\nintent: design\nindexes:\n  - \"\"\n  - b",
        'encoding: "zero-gravity"\nversion: "0.1"\ntitle: "  padded  "\nauthor: "Ada"\ntags:\n  - x\n  - y\nintent: report',
        'title: "x"',
        'intent: design\nindexes:\n  - a',
        '- note: keep\nindexes:\n  - a',
        'tags:\n  - x\n- note: keep\nauthor: Ada',
        'title: T\n- extra:\n  - one\n  - two\nindexes:\n  - a',
        'a: 1\n- x:\n  - p\nb: 2\n- y:\n  - q',
    ])
    def test_parsed_stamps_round_trip(self, body):
        fields = parse_block(body)

        reparsed = reparse(format_stamp(fields))

        assert reparsed == fields
        for key, value in fields.items():
            assert reparsed[key] == value

    def test_dash_prefixed_scalar_is_not_read_as_list_item(self):
        fields = parse_block('- note: keep\nindexes:\n  - a')

        reparsed = reparse(format_stamp(fields))

        assert reparsed["- note"] == "keep"
        assert reparsed["indexes"] == ["a"]

    def test_extra_keys_keep_their_order(self):
        fields = parse_block('encoding: zero-gravity\nversion: "0.1"\nzeta: 1\nalpha: 2')
        assert list(reparse(format_stamp(fields))) == ["encoding", "version", "zeta", "alpha"]


class TestFormatStampWithHeader:
    """Tests for the human-readable header wrapper."""

    def test_header_without_link(self):
        text = format_stamp_with_header({"title": "T"})
        lines = text.split("\n")

        assert lines[0] == "\U0001FA90 Zero Gravity"
        assert lines[1] == "Semantic encoding for AI agents"
        assert lines[2] == ""
        assert lines[3] == BEGIN_MARKER

    def test_header_with_link(self):
        text = format_stamp_with_header({"title": "T"}, info_url="https://example.com/zg")
        assert text.split("\n")[1] == "Semantic encoding for AI agents | [learn more](https://example.com/zg)"

    def test_block_still_extractable(self):
        text = format_stamp_with_header({"title": "T", "intent": "design", "indexes": ["i"]})
        assert reparse(text)["indexes"] == ["i"]


class TestStampFieldsFromRecord:
    """Tests for choosing the stamp subset of a record."""

    def test_selects_envelope_title_intent_indexes(self, full_record_fields):
        assert stamp_fields_from_record(full_record_fields) == {
            "encoding": "zero-gravity",
            "version": "0.1",
            "title": "Zero Gravity",
            "intent": "proposal",
            "indexes": ["semantic bootstrap", "token gravity"],
        }

    def test_version_argument_used(self, full_record_fields):
        assert stamp_fields_from_record(full_record_fields, version="0.2")["version"] == "0.2"

    def test_missing_indexes_become_empty_list(self):
        assert stamp_fields_from_record({"title": "T"})["indexes"] == []

    def test_missing_title_left_out(self):
        assert "title" not in stamp_fields_from_record({"intent": "design"})

    def test_renders_complete_stamp(self, full_record_fields):
        reparsed = reparse(format_stamp(stamp_fields_from_record(full_record_fields)))

        assert reparsed["encoding"] == "zero-gravity"
        assert reparsed["version"] == "0.1"
        assert list(reparsed) == ["encoding", "version", "title", "intent", "indexes"]
