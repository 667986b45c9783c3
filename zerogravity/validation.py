"""
Zero Gravity Validation - Advisory checks for stamps and full records

Two independent rule sets:
- validate_stamp: the five-field stamp embedded in documents
- validate_full_json: the full record produced by the generator

Neither raises for bad content. Problems are collected into a
ValidationResult and the caller decides what to do with them.
"""

import re
from typing import Any, List, Mapping
from dataclasses import dataclass, field


ZG_ENCODING = "zero-gravity"

STAMP_REQUIRED_FIELDS = ["encoding", "version", "title", "intent", "indexes"]

JSON_REQUIRED_FIELDS = ["id", "intent", "relevance", "claims"]

# Controlled vocabularies
VALID_INTENTS = ["proposal", "critique", "synthesis", "report", "design"]
VALID_STANCES = ["speculative", "empirical", "prescriptive", "exploratory"]

MIN_CLAIMS = 3
MAX_CLAIMS = 7

ID_PATTERN = re.compile(r"[a-z0-9-]+")


@dataclass
class ValidationResult:
    """Ordered list of advisory errors; valid when there are none."""
    errors: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


def _is_empty(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _check_required(
    fields: Mapping[str, Any],
    required: List[str],
    missing_template: str,
    empty_template: str,
    blank_is_missing: bool = False,
) -> List[str]:
    errors = []
    for name in required:
        value = fields.get(name)
        if value is None or (blank_is_missing and value == ""):
            errors.append(missing_template.format(name))
        elif _is_empty(value):
            errors.append(empty_template.format(name))
    return errors


def _check_vocabulary(name: str, value: Any, allowed: List[str]) -> List[str]:
    if not value or value in allowed:
        return []
    return [f'Invalid {name} value: "{value}". Must be one of: {", ".join(allowed)}']


def validate_stamp(fields: Mapping[str, Any]) -> ValidationResult:
    """
    Validate a parsed stamp.

    Every field in STAMP_REQUIRED_FIELDS must be present and non-empty.
    A field holding "" is reported as missing, whitespace-only text or an
    empty list as empty. `encoding`, when set, must be exactly "zero-gravity".
    """
    errors = _check_required(
        fields,
        STAMP_REQUIRED_FIELDS,
        "Missing required stamp field: {}",
        "Required stamp field is empty: {}",
        blank_is_missing=True,
    )

    encoding = fields.get("encoding")
    if encoding and encoding != ZG_ENCODING:
        errors.append(f'Unexpected encoding: "{encoding}" (expected "{ZG_ENCODING}")')

    return ValidationResult(errors=errors)


def validate_full_json(fields: Mapping[str, Any]) -> ValidationResult:
    """
    Validate a full record (generator output or a loaded .zg.json).

    Checks required fields, the intent and stance vocabularies, the
    number of claims, and the id slug format.
    """
    errors = _check_required(
        fields,
        JSON_REQUIRED_FIELDS,
        "Missing required field: {}",
        "Required field is empty: {}",
    )

    errors.extend(_check_vocabulary("intent", fields.get("intent"), VALID_INTENTS))
    errors.extend(_check_vocabulary("stance", fields.get("stance"), VALID_STANCES))

    claims = fields.get("claims")
    if isinstance(claims, list):
        if len(claims) < MIN_CLAIMS:
            errors.append(f"claims should have at least {MIN_CLAIMS} items (found {len(claims)})")
        elif len(claims) > MAX_CLAIMS:
            errors.append(f"claims should have at most {MAX_CLAIMS} items (found {len(claims)})")

    record_id = fields.get("id")
    if record_id and not ID_PATTERN.fullmatch(str(record_id)):
        errors.append(f'id must be lowercase alphanumeric with hyphens: "{record_id}"')

    return ValidationResult(errors=errors)
