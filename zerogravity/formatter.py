"""
Zero Gravity Stamp Formatter - Render field maps back into stamp blocks

format_stamp is the inverse of extract_block + parse_block: parsing its
output yields the same keys, scalar values and list items in the same
order. Byte-for-byte equality with a hand-written stamp is not a goal.
"""

from typing import Any, List, Mapping, Optional

from zerogravity.stamp_parser import BEGIN_MARKER, END_MARKER, DEFAULT_STAMP_VERSION, LIST_ITEM_PREFIX
from zerogravity.validation import ZG_ENCODING


STAMP_HEADER = "\U0001FA90 Zero Gravity"
STAMP_TAGLINE = "Semantic encoding for AI agents"

# Fixed order for the known keys; remaining keys follow in map order
LEADING_KEYS = ["encoding", "version", "title", "intent", "indexes"]

STAMP_RECORD_FIELDS = ["title", "intent", "indexes"]


def _scalar_line(key: str, value: Any) -> str:
    return f'{key}: "{value}"'


def _list_lines(key: str, items: List[Any]) -> List[str]:
    lines = [f"{key}:"]
    for item in items:
        lines.append(f'  - "{item}"')
    return lines


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _field_lines(key: str, value: Any) -> List[str]:
    if _is_list(value):
        return _list_lines(key, list(value)) if value else []
    return [_scalar_line(key, value)]


def format_stamp(fields: Mapping[str, Any], version: Optional[str] = None) -> str:
    """
    Format fields into a Zero Gravity data block.

    Only keys present in the map are written. Scalars come first: `encoding`,
    `version`, `title`, `intent`, then any other scalar keys in their original
    order. Lists follow: `indexes`, then any other list keys. A scalar written
    after a list item would be read back as one more item when its key starts
    with "- ", so scalars only follow lists as separators between list keys
    that themselves start with "- ". Empty lists are skipped, matching the
    parser, which never produces them.

    Args:
        fields: Field map (a parsed stamp or a generated record subset)
        version: Written as `version` in place of the map's own value when given

    Returns:
        The block text, BEGIN marker through END marker
    """
    if version is not None:
        fields = {**fields, "version": version}

    ordered = [key for key in LEADING_KEYS if key in fields]
    ordered += [key for key in fields if key not in LEADING_KEYS]
    present = [key for key in ordered if fields[key] is not None]

    scalars = [key for key in present if not _is_list(fields[key])]
    lists = [key for key in present if _is_list(fields[key]) and fields[key]]

    # A list key starting with "- " only reads back as a header right after a scalar line
    separators = [key for key in scalars if not key.startswith(LIST_ITEM_PREFIX)]
    dashed = []
    for key in lists:
        if not key.startswith(LIST_ITEM_PREFIX):
            continue
        if dashed and separators:
            separator = separators.pop()
            scalars.remove(separator)
            dashed.append(separator)
        dashed.append(key)
    lists = [key for key in lists if not key.startswith(LIST_ITEM_PREFIX)]

    lines = [BEGIN_MARKER]
    for key in scalars + dashed + lists:
        lines.extend(_field_lines(key, fields[key]))
    lines.append(END_MARKER)
    return "\n".join(lines)


def format_stamp_with_header(
    fields: Mapping[str, Any],
    info_url: Optional[str] = None,
    version: Optional[str] = None,
) -> str:
    """Format a stamp with the two-line human-readable header above it."""
    tagline = STAMP_TAGLINE
    if info_url:
        tagline = f"{STAMP_TAGLINE} | [learn more]({info_url})"

    return f"{STAMP_HEADER}\n{tagline}\n\n{format_stamp(fields, version)}"


def stamp_fields_from_record(record: Mapping[str, Any], version: str = DEFAULT_STAMP_VERSION) -> dict:
    """Build a complete stamp map (envelope plus title, intent, indexes) from a full record."""
    fields = {"encoding": ZG_ENCODING, "version": version}
    for key in STAMP_RECORD_FIELDS:
        if record.get(key) is not None:
            fields[key] = record[key]
    fields.setdefault("indexes", [])
    return fields
