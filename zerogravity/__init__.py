"""Zero Gravity stamp parsing, validation and full record tools."""

__version__ = "0.1.0"

from .stamp_parser import Block, ParsedStamp, extract_block, parse_block, parse_zg, strip_quotes
from .validation import ValidationResult, validate_full_json, validate_stamp
from .formatter import format_stamp, format_stamp_with_header
from .record import EmbeddingDescriptor, build_full_json

__all__ = [
    "Block",
    "ParsedStamp",
    "extract_block",
    "parse_block",
    "parse_zg",
    "strip_quotes",
    "ValidationResult",
    "validate_stamp",
    "validate_full_json",
    "format_stamp",
    "format_stamp_with_header",
    "EmbeddingDescriptor",
    "build_full_json",
]
