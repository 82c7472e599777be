"""Near-duplicate detection between posts and revision diffs"""

import logging
from itertools import combinations
from typing import NamedTuple

from mdpost.core.models import ParsedPost
from mdpost.core.utils.text import similarity, unified_diff


logger = logging.getLogger(__name__)


class DuplicatePair(NamedTuple):
    older: ParsedPost
    newer: ParsedPost
    ratio: float


def _age_key(post: ParsedPost) -> tuple:
    """Sort key: date, then drafts after published posts, then path."""
    if post.meta is None:
        return (float('-inf'), False, str(post.path))
    return (post.meta.timestamp, post.meta.draft, str(post.path))


def order_pair(a: ParsedPost, b: ParsedPost) -> tuple[ParsedPost, ParsedPost]:
    """Return (older, newer) for two revisions of the same post."""
    return (a, b) if _age_key(a) <= _age_key(b) else (b, a)


def find_near_duplicates(posts: list[ParsedPost], threshold: float = 0.8) -> list[DuplicatePair]:
    """Return every pair of posts whose bodies are at least `threshold` similar, most similar first."""
    pairs = []
    for a, b in combinations(posts, 2):
        ratio = similarity(a.markdown, b.markdown)
        logger.debug("similarity %s <-> %s = %.3f", a.path, b.path, ratio)
        if ratio >= threshold:
            older, newer = order_pair(a, b)
            pairs.append(DuplicatePair(older, newer, ratio))
    return sorted(pairs, key=lambda p: (-p.ratio, str(p.older.path), str(p.newer.path)))


def pair_diff(pair: DuplicatePair, context: int = 3) -> str:
    """Unified diff of the older revision's body against the newer one."""
    return unified_diff(
        pair.older.markdown, pair.newer.markdown,
        f"a/{pair.older.path}", f"b/{pair.newer.path}", context,
    )
