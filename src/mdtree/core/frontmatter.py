"""Front matter splitting and normalization into DocMeta"""

import datetime
import re
from typing import Any, Optional

import yaml

from mdtree.core.errors import ParseError
from mdtree.core.models import DocMeta


# Opening '---' line, optional YAML block, closing '---' at the start of a line.
FRONTMATTER_RE = re.compile(r'^---[ \t]*\n(?:(.*?)\n)?---[ \t]*(?:\n|$)', re.DOTALL)


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def match_frontmatter(text: str) -> tuple[Optional[str], str]:
    """Return (yaml_block, body). yaml_block is None when there is no leading '---' block.

    The body starts right after the closing delimiter line.
    """
    m = FRONTMATTER_RE.match(text)
    if not m:
        return None, text
    return m.group(1) or "", text[m.end():]


def load_frontmatter(block: Optional[str]) -> dict[str, Any]:
    """Parse a YAML block into a mapping. Raises ParseError on malformed YAML."""
    if not block or not block.strip():
        return {}
    try:
        fm = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML frontmatter: {e}") from e
    if fm is None:
        return {}
    if not isinstance(fm, dict):
        raise ParseError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with the YAML header removed."""
    block, body = match_frontmatter(text)
    return load_frontmatter(block), body


def to_text(value: Any) -> str:
    """str() with YAML spellings for booleans (true/false) and ISO-8601 for dates."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def _text(value: Any) -> Optional[str]:
    if not value:
        return None
    return to_text(value) or None


def normalize_date(value: Any) -> Optional[str]:
    """ISO-8601 for date/datetime values, text for other truthy values."""
    return _text(value)


def normalize_tags(value: Any) -> Optional[list[str]]:
    """List -> stringified non-empty items; 'a, b' -> ['a', 'b']; scalar -> [scalar].

    Null list items are dropped rather than kept as the string 'None'.
    """
    if not value:
        return None
    if isinstance(value, (list, tuple)):
        tags = [to_text(v) for v in value if v is not None and to_text(v)]
    elif isinstance(value, str):
        tags = [t.strip() for t in value.split(",") if t.strip()]
    else:
        tags = [to_text(value)]
    return tags or None


def normalize(data: Optional[dict[str, Any]]) -> DocMeta:
    """Map arbitrary front matter onto the fixed DocMeta shape."""
    data = data or {}
    return DocMeta(
        title=_text(data.get("title")),
        date=normalize_date(data.get("date")),
        description=_text(data.get("description")),
        tags=normalize_tags(data.get("tags")),
        cover=_text(data.get("cover")),
    )
