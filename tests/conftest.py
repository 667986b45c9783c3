"""
Pytest configuration and fixtures for Zero Gravity tests.

Provides:
- A logger reset between tests so handlers never point at a stale stream
- Sample stamp documents and full records
- Fake Anthropic and OpenAI clients
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from zerogravity import logging_setup


SAMPLE_BODY = """encoding: "zero-gravity"
version: "0.1"
title: "Test"
intent: "proposal"
indexes:
  - "alpha"
  - "beta\""""


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the cached logger so each test gets handlers on its own stderr."""
    logging_setup._logger = None
    logging_setup._logging_config = None
    yield
    logging_setup._logger = None
    logging_setup._logging_config = None


@pytest.fixture
def sample_body() -> str:
    return SAMPLE_BODY


@pytest.fixture
def sample_document() -> str:
    return (
        "# My Article\n\n"
        "Some prose before the stamp.\n\n"
        "---BEGIN ZERO GRAVITY---\n"
        f"{SAMPLE_BODY}\n"
        "---END ZERO GRAVITY---\n\n"
        "More prose after.\n"
    )


@pytest.fixture
def full_record_fields() -> dict:
    return {
        "id": "zero-gravity-v01",
        "title": "Zero Gravity",
        "intent": "proposal",
        "relevance": "Semantic abstracts make retrieval clearer",
        "claims": [
            "agents waste tokens on rhetorical glue",
            "meaning can be represented as claims",
            "stamps are a publishable semantic layer",
        ],
        "indexes": ["semantic bootstrap", "token gravity"],
        "stance": "exploratory",
        "tags": ["semantic-compression", "agent-abstracts"],
        "relations": ["RAG", "argument-mapping"],
    }


def _anthropic_response(text: str, stop_reason: str = "end_turn"):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        usage=SimpleNamespace(input_tokens=120, output_tokens=80),
        stop_reason=stop_reason,
    )


@pytest.fixture
def make_anthropic_response():
    """Factory for Anthropic message responses carrying one text block."""
    return _anthropic_response


@pytest.fixture
def fake_anthropic_client():
    """Anthropic client double; set .messages.create.return_value per test."""
    return MagicMock()


@pytest.fixture
def fake_openai_client():
    """OpenAI client double returning a three-dimensional vector."""
    client = MagicMock()
    client.embeddings.create.return_value = SimpleNamespace(
        data=[SimpleNamespace(embedding=[0.1, 0.2, 0.3])],
        usage=SimpleNamespace(prompt_tokens=42),
    )
    return client
