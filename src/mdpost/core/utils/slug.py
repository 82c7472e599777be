"""Slug generation for post identifiers and heading anchors"""

import re


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def anchor(text: str) -> str:
    """Heading anchor as generators emit it: same rules as slugify, so `size_t` becomes `size-t`."""
    return slugify(text)


def unique_anchors(anchors: list[str]) -> list[str]:
    """Suffix repeats with -1, -2, ... in document order, the way generators disambiguate ids."""
    counts: dict[str, int] = {}
    result = []
    for a in anchors:
        n = counts.get(a, 0)
        counts[a] = n + 1
        result.append(f"{a}-{n}" if n else a)
    return result
