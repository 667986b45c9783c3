"""
Zero Gravity Full Record - Assemble the canonical JSON record

A full record is the JSON superset of a stamp: the fixed envelope
(encoding, version), every generated field, a creation timestamp and an
optional embedding descriptor.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union
from dataclasses import dataclass, field, asdict

from zerogravity.validation import ZG_ENCODING


ZG_VERSION = "0.1"

ENVELOPE_KEYS = ["embedding", "encoding", "version", "created_at"]

INPUT_HASH_PATTERN = re.compile(r"[0-9a-f]{64}")


@dataclass
class EmbeddingDescriptor:
    """Embedding of a record's canonical text, as returned by the embedder."""
    model: str
    dimensions: int
    input_hash: str
    vector: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmbeddingDescriptor":
        """Build a descriptor from JSON data, checking its shape."""
        missing = [k for k in ("model", "dimensions", "input_hash", "vector") if k not in data]
        if missing:
            raise ValueError(f"Embedding descriptor missing keys: {', '.join(missing)}")

        input_hash = data["input_hash"]
        if not isinstance(input_hash, str) or not INPUT_HASH_PATTERN.fullmatch(input_hash):
            raise ValueError(f"Embedding input_hash must be 64 lowercase hex characters: {input_hash!r}")

        return cls(
            model=str(data["model"]),
            dimensions=int(data["dimensions"]),
            input_hash=input_hash,
            vector=data["vector"],
        )


def utc_timestamp() -> str:
    """Current UTC instant as ISO-8601 with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_full_json(
    fields: Mapping[str, Any],
    embedding: Optional[Union[EmbeddingDescriptor, Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Build the full output record.

    Caller fields override the envelope defaults; `created_at` is always
    set to the current instant.

    Args:
        fields: Generated or loaded record fields
        embedding: Optional embedding descriptor (dataclass or dict)

    Returns:
        The record as a plain dict, ready for json.dumps
    """
    result: Dict[str, Any] = {
        "encoding": ZG_ENCODING,
        "version": ZG_VERSION,
    }
    result.update(fields)
    result["created_at"] = utc_timestamp()

    if embedding:
        if isinstance(embedding, EmbeddingDescriptor):
            embedding = embedding.to_dict()
        result["embedding"] = dict(embedding)

    return result


def strip_envelope(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a record's semantic fields without envelope or embedding."""
    return {k: v for k, v in record.items() if k not in ENVELOPE_KEYS}
