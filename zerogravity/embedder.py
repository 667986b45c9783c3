"""
Zero Gravity Embedder - Canonical text, content hash and embedding requests

The embedding input is the semantic skeleton of a record (its field
values), not the article prose. The canonical text is built from a fixed
field order so the same content always hashes the same; the hash is what
callers use to decide whether a stored vector is still current.

Usage:
    from zerogravity.embedder import create_openai_client, embed

    client = create_openai_client(api_key)
    descriptor = embed(client, fields)
"""

import hashlib
from typing import Any, List, Mapping, Tuple

from openai import OpenAI

from zerogravity.record import EmbeddingDescriptor
from zerogravity.logging_setup import get_logger, LogCategory, log_api_call, log_performance


DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_DIMENSIONS = 1536

# (field, label) for single-line scalars, then (field, label, separator) for lists
SCALAR_FIELDS: List[Tuple[str, str]] = [
    ("title", "Title"),
    ("intent", "Intent"),
    ("relevance", "Relevance"),
]
LIST_FIELDS: List[Tuple[str, str, str]] = [
    ("indexes", "Indexes", "; "),
    ("claims", "Claims", "; "),
    ("tags", "Tags", ", "),
    ("relations", "Relations", ", "),
]


def hash_text(text: str) -> str:
    """SHA-256 hex digest of UTF-8 text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def fields_to_embedding_text(fields: Mapping[str, Any]) -> str:
    """
    Build the canonical text used as embedding input and hash source.

    Output order is fixed by SCALAR_FIELDS and LIST_FIELDS, never by the
    order of keys in `fields`.
    """
    parts = []
    for key, label in SCALAR_FIELDS:
        value = fields.get(key)
        if value:
            parts.append(f"{label}: {value}")
    for key, label, separator in LIST_FIELDS:
        value = fields.get(key)
        if isinstance(value, list):
            parts.append(f"{label}: {separator.join(str(item) for item in value)}")
    return "\n".join(parts)


def create_openai_client(api_key: str) -> OpenAI:
    """Create the OpenAI client used for embedding requests."""
    return OpenAI(api_key=api_key)


@log_performance("Embedding request")
def embed(
    client: OpenAI,
    fields: Mapping[str, Any],
    model: str = DEFAULT_EMBEDDING_MODEL,
    dimensions: int = DEFAULT_DIMENSIONS,
) -> EmbeddingDescriptor:
    """
    Embed the canonical text of a record.

    Args:
        client: OpenAI SDK client
        fields: Full record fields
        model: Embedding model
        dimensions: Requested vector dimensions

    Returns:
        EmbeddingDescriptor with the vector and the hash of its input text
    """
    logger = get_logger()
    input_text = fields_to_embedding_text(fields)
    input_hash = hash_text(input_text)

    logger.info(f"{LogCategory.EMBEDDING} Embedding {len(input_text)} chars (hash {input_hash[:12]})")

    response = client.embeddings.create(
        model=model,
        input=input_text,
        dimensions=dimensions,
    )

    usage = getattr(response, "usage", None)
    log_api_call(
        "embeddings.create",
        model=model,
        input_tokens=getattr(usage, "prompt_tokens", None),
    )

    return EmbeddingDescriptor(
        model=model,
        dimensions=dimensions,
        input_hash=input_hash,
        vector=list(response.data[0].embedding),
    )
