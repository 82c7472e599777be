"""Front matter extraction and metadata validation"""

import re
from typing import Any

import yaml
from pydantic import ValidationError

from mdpost.core.errors import FrontmatterError, MetadataError
from mdpost.core.models import PostMeta


FRONTMATTER_RE = re.compile(r'\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE)
OPENER_RE = re.compile(r'\A---[ \t]*\r?\n')
META_FIELDS = ('title', 'date', 'tags', 'draft', 'author')


def find_frontmatter(text: str) -> re.Match | None:
    """Match the leading front matter block. Raises FrontmatterError if it is opened but never closed."""
    m = FRONTMATTER_RE.match(text)
    if m is None and OPENER_RE.match(text):
        raise FrontmatterError("front matter block is not closed with '---'")
    return m


def split_frontmatter(text: str) -> tuple[dict[str, Any], str, int]:
    """Return (frontmatter_dict, body, body_offset) with the YAML header removed.

    body_offset is the number of file lines that precede the body.
    """
    m = find_frontmatter(text)
    if m is None:
        return {}, text, 0
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML front matter: {e}") from e
    if not isinstance(fm, dict):
        raise FrontmatterError(f"Invalid YAML front matter: expected a mapping, got {type(fm).__name__}")
    return fm, text[m.end():], m.group(0).count('\n')


def parse_meta(frontmatter: dict[str, Any]) -> PostMeta:
    """Validate front matter into PostMeta. Raises MetadataError listing every bad field."""
    known = {k: frontmatter[k] for k in META_FIELDS if k in frontmatter}
    extra = {k: v for k, v in frontmatter.items() if k not in META_FIELDS}
    try:
        return PostMeta(**known, extra=extra)
    except ValidationError as e:
        raise MetadataError([
            f"{'.'.join(str(p) for p in err['loc']) or 'front matter'}: {err['msg']}"
            for err in e.errors()
        ]) from e
