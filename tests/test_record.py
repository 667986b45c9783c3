"""Tests for full record assembly."""

import re

import pytest

from zerogravity.record import (
    EmbeddingDescriptor,
    build_full_json,
    strip_envelope,
    utc_timestamp,
)


HASH = "a" * 64


class TestBuildFullJSON:
    """Tests for merging fields into the envelope."""

    def test_envelope_defaults(self, full_record_fields):
        record = build_full_json(full_record_fields)

        assert record["encoding"] == "zero-gravity"
        assert record["version"] == "0.1"
        assert record["id"] == "zero-gravity-v01"
        assert "embedding" not in record
        assert list(record)[:2] == ["encoding", "version"]

    def test_caller_fields_override_envelope(self):
        record = build_full_json({"encoding": "custom", "version": "9.9"})

        assert record["encoding"] == "custom"
        assert record["version"] == "9.9"

    def test_created_at_is_always_fresh(self):
        record = build_full_json({"created_at": "1999-01-01T00:00:00.000Z"})

        assert record["created_at"] != "1999-01-01T00:00:00.000Z"
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", record["created_at"])

    def test_embedding_descriptor_attached_as_dict(self):
        descriptor = EmbeddingDescriptor(model="m", dimensions=3, input_hash=HASH, vector=[1.0, 2.0, 3.0])

        record = build_full_json({"id": "x"}, embedding=descriptor)

        assert record["embedding"] == {
            "model": "m",
            "dimensions": 3,
            "input_hash": HASH,
            "vector": [1.0, 2.0, 3.0],
        }

    def test_embedding_dict_attached(self):
        record = build_full_json({}, embedding={"model": "m"})
        assert record["embedding"] == {"model": "m"}

    def test_input_fields_not_mutated(self, full_record_fields):
        snapshot = dict(full_record_fields)
        build_full_json(full_record_fields)
        assert full_record_fields == snapshot


class TestStripEnvelope:
    """Tests for recovering semantic fields from a stored record."""

    def test_removes_envelope_and_embedding(self, full_record_fields):
        record = build_full_json(full_record_fields, embedding={"model": "m"})
        assert strip_envelope(record) == full_record_fields


class TestEmbeddingDescriptor:
    """Tests for the descriptor shape."""

    def test_from_dict_round_trip(self):
        data = {"model": "m", "dimensions": 2, "input_hash": HASH, "vector": [0.5, 0.25]}
        assert EmbeddingDescriptor.from_dict(data).to_dict() == data

    def test_from_dict_rejects_missing_keys(self):
        with pytest.raises(ValueError, match="vector"):
            EmbeddingDescriptor.from_dict({"model": "m", "dimensions": 2, "input_hash": HASH})

    def test_from_dict_rejects_bad_hash(self):
        with pytest.raises(ValueError):
            EmbeddingDescriptor.from_dict({"model": "m", "dimensions": 2, "input_hash": "ABC", "vector": []})


def test_utc_timestamp_format():
    assert utc_timestamp().endswith("Z")
