"""
Zero Gravity Stamp Parser - Extract and tokenize stamp blocks from documents

A stamp is a delimited block embedded in prose:

    ---BEGIN ZERO GRAVITY---
    encoding: "zero-gravity"
    version: "0.1"
    title: "Test"
    intent: "proposal"
    indexes:
      - "alpha"
      - "beta"
    ---END ZERO GRAVITY---

The body grammar is flat: `key: value` scalars and `key:` list headers
followed by `- item` lines. No nested or typed values are produced.

Usage:
    from zerogravity.stamp_parser import parse_zg

    stamp = parse_zg(document_text)
    if stamp is not None:
        print(stamp.fields["title"], stamp.validation.valid)
"""

import re
from typing import Dict, List, Optional, Union
from dataclasses import dataclass, field

from zerogravity.validation import ValidationResult, validate_stamp
from zerogravity.logging_setup import get_logger, LogCategory


BEGIN_MARKER = "---BEGIN ZERO GRAVITY---"
END_MARKER = "---END ZERO GRAVITY---"

# First block only, non-greedy; a BEGIN with no END does not match
ZG_BLOCK_PATTERN = re.compile(
    re.escape(BEGIN_MARKER) + r"\n([\s\S]*?)\n" + re.escape(END_MARKER)
)

DEFAULT_STAMP_VERSION = "0.1"

LIST_ITEM_PREFIX = "- "

FieldValue = Union[str, List[str]]
FieldMap = Dict[str, FieldValue]


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Block:
    """A delimited region found in document text."""
    raw: str
    body: str


@dataclass
class ParsedStamp:
    """Result of extracting, parsing and validating a stamp in one step."""
    version: str
    fields: FieldMap
    raw: str
    validation: ValidationResult = field(default_factory=ValidationResult)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "fields": self.fields,
            "validation": self.validation.to_dict(),
        }


# =============================================================================
# Block Extraction
# =============================================================================

def extract_block(text: str) -> Optional[Block]:
    """
    Find the first Zero Gravity block in a document.

    Args:
        text: Full document text

    Returns:
        Block with the matched text and its body, or None if no complete
        block is present
    """
    match = ZG_BLOCK_PATTERN.search(text)
    if not match:
        return None
    return Block(raw=match.group(0), body=match.group(1))


# =============================================================================
# Field Parsing
# =============================================================================

def strip_quotes(value: str) -> str:
    """Trim a value and remove one pair of matching surrounding quotes."""
    trimmed = value.strip()
    if len(trimmed) >= 2 and trimmed[0] == trimmed[-1] and trimmed[0] in ('"', "'"):
        return trimmed[1:-1]
    if trimmed in ('"', "'"):
        return ""
    return trimmed


def parse_block(body: str) -> FieldMap:
    """
    Parse a block body into an ordered field map.

    Scalars come from `key: value` lines. A `key:` line with nothing after
    the colon collects the `- item` lines that follow it; if none follow,
    the key is dropped. A repeated key overwrites the earlier value in place.
    Blank lines and lines without a colon are ignored.

    Args:
        body: Text between the BEGIN and END markers

    Returns:
        Dict of key -> str or list of str, in first-seen key order
    """
    fields: FieldMap = {}
    lines = body.split('\n')
    i = 0

    while i < len(lines):
        trimmed = lines[i].strip()
        if not trimmed:
            i += 1
            continue

        key, sep, after_colon = trimmed.partition(':')
        key = key.strip()
        after_colon = after_colon.strip()
        if not sep or not key:
            i += 1
            continue

        if after_colon:
            fields[key] = strip_quotes(after_colon)
            i += 1
            continue

        # List header: gather `- item` lines until the first non-item line
        items: List[str] = []
        i += 1
        while i < len(lines):
            item_line = lines[i].strip()
            if not item_line.startswith(LIST_ITEM_PREFIX):
                break
            items.append(strip_quotes(item_line[len(LIST_ITEM_PREFIX):]))
            i += 1

        if items:
            fields[key] = items

    return fields


def parse_zg(text: str) -> Optional[ParsedStamp]:
    """
    Extract, parse and validate a stamp from document text in one step.

    Returns:
        ParsedStamp, or None when the document carries no stamp
    """
    logger = get_logger()

    block = extract_block(text)
    if block is None:
        logger.debug(f"{LogCategory.PARSER} No Zero Gravity block found")
        return None

    fields = parse_block(block.body)
    validation = validate_stamp(fields)
    logger.debug(f"{LogCategory.PARSER} Parsed {len(fields)} fields from stamp")

    version = fields.get("version")
    return ParsedStamp(
        version=version if isinstance(version, str) and version else DEFAULT_STAMP_VERSION,
        fields=fields,
        raw=block.raw,
        validation=validation,
    )
