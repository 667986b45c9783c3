"""
Zero Gravity Generator - Distill an article into full record fields

Sends the article to Claude with a fixed system prompt and parses the JSON
reply. The reply is model output, so it may be empty, fenced in markdown
or not JSON at all; in those cases the result carries fields=None and the
raw text for inspection instead of raising.

Usage:
    from zerogravity.generator import StampGenerator

    generator = StampGenerator(api_key=api_key)
    result = generator.generate(article_text)
    if result.fields is not None:
        ...
"""

import json
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

import anthropic

from zerogravity.validation import VALID_INTENTS, VALID_STANCES, MIN_CLAIMS, MAX_CLAIMS
from zerogravity.logging_setup import get_logger, LogCategory, log_api_call, log_performance


DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MAX_TOKENS = 2048

EXAMPLE_OUTPUT = {
    "id": "zero-gravity-v01",
    "title": "Zero Gravity - A Semantic Bootstrap for the Agentic Web",
    "intent": "proposal",
    "relevance": "A semantic abstract makes indexing cheaper and retrieval clearer",
    "indexes": [
        "semantic bootstrap for agents",
        "token gravity",
        "agents need structure not prose",
        "meaning has bones",
    ],
    "claims": [
        "agents waste tokens on rhetorical glue",
        "meaning can be represented as claims and relations",
        "ZG blocks are a publishable semantic layer",
        "embedding a semantic skeleton produces cleaner vectors than embedding full prose",
    ],
    "stance": "exploratory",
    "novelty": ["Zero Gravity microformat", "distill-then-embed pipeline"],
    "tags": ["semantic-compression", "agent-abstracts", "meaning-skeleton"],
    "relations": ["RAG", "argument-mapping", "structured-data"],
    "audience": ["AI agents", "developers"],
    "actions": ["parse stamp for free", "read prose only when relevant"],
}


def build_system_prompt() -> str:
    """Build the generator system prompt from the validation vocabularies."""
    return f"""You are a Zero Gravity generator. Your job is to distill an article into a structured semantic abstract.

OUTPUT ONLY VALID JSON. No explanations, no commentary, no markdown fences.

## Required Fields

- id: A URL-safe slug for this article (lowercase, hyphens, alphanumeric only)
- title: Short article title
- intent: What the article does. MUST be one of: {' / '.join(VALID_INTENTS)}
- relevance: One sentence: why this matters
- claims: Array of {MIN_CLAIMS}-{MAX_CLAIMS} explicit propositions the article makes
- indexes: Array of 4-8 semantic fragments for the stamp. Each entry should capture unique key phrases, core claims as indexable propositions, or notable snippets worth preserving. Include the author name as an entry if identifiable.

## Optional Fields (include when meaningful)

- stance: Epistemic posture. MUST be one of: {' / '.join(VALID_STANCES)}
- novelty: Array of 1-3 items describing what is new here
- tags: Array of semantic anchors for clustering/retrieval
- relations: Array of adjacent ideas, frameworks, schools of thought
- audience: Array describing who this is for
- actions: Array of suggested agent actions or processing hints

## Example Output

{json.dumps(EXAMPLE_OUTPUT, indent=2, ensure_ascii=False)}

Now distill the provided article."""


SYSTEM_PROMPT = build_system_prompt()


@dataclass
class GenerationResult:
    """Outcome of one generation call."""
    fields: Optional[Dict[str, Any]]
    raw: str
    usage: Dict[str, Any] = field(default_factory=dict)


def strip_code_fences(text: str) -> str:
    """Return the content of the first ``` fenced block, or the text unchanged."""
    if not text.startswith("```"):
        return text

    json_lines: List[str] = []
    in_block = False
    for line in text.split("\n"):
        if line.startswith("```") and not in_block:
            in_block = True
            continue
        elif line.startswith("```") and in_block:
            break
        elif in_block:
            json_lines.append(line)
    return "\n".join(json_lines)


def parse_generated_fields(raw: str) -> Optional[Dict[str, Any]]:
    """Parse a model reply into a field dict, or None if it is not a JSON object."""
    logger = get_logger()

    try:
        fields = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError as e:
        logger.warning(f"{LogCategory.GENERATION} Response is not valid JSON: {e}")
        return None

    if not isinstance(fields, dict):
        logger.warning(f"{LogCategory.GENERATION} Response JSON is not an object: {type(fields).__name__}")
        return None

    return fields


class StampGenerator:
    """Generates Zero Gravity fields from article text using Claude."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        client: Optional[anthropic.Anthropic] = None,
    ):
        self.client = client or anthropic.Anthropic(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens
        self.logger = get_logger()

    @log_performance("Field generation")
    def generate(self, text: str) -> GenerationResult:
        """
        Distill an article into full record fields.

        Args:
            text: Article text

        Returns:
            GenerationResult; fields is None when the reply was unusable
        """
        self.logger.info(f"{LogCategory.GENERATION} Generating fields for {len(text)} chars of text")

        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": text}],
        )

        usage = {
            "input_tokens": getattr(response.usage, "input_tokens", None),
            "output_tokens": getattr(response.usage, "output_tokens", None),
        }
        log_api_call(
            "messages.create",
            model=self.model,
            input_tokens=usage["input_tokens"],
            output_tokens=usage["output_tokens"],
        )

        raw = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        ).strip()

        if not raw:
            self.logger.warning(
                f"{LogCategory.GENERATION} Empty response. Stop reason: {response.stop_reason}"
            )
            return GenerationResult(fields=None, raw="", usage=usage)

        return GenerationResult(fields=parse_generated_fields(raw), raw=raw, usage=usage)
