"""Export: normalized post markdown and a JSON index of published posts"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from mdpost.core.models import ParsedPost, PostMeta


logger = logging.getLogger(__name__)

INDEX_FILE = "index.json"


def canonical_frontmatter(meta: PostMeta) -> dict[str, Any]:
    """Front matter in canonical key order; draft appears only when set."""
    fm: dict[str, Any] = {"title": meta.title, "date": meta.date, "tags": list(meta.tags)}
    if meta.draft:
        fm["draft"] = True
    fm["author"] = meta.author
    fm.update(meta.extra)
    return fm


def build_markdown(post: ParsedPost) -> str:
    """Return the body with a normalized YAML front matter block prepended.

    Only blank lines are dropped from the top of the body; an indented first
    line is a code block and keeps its indentation.
    """
    fm = canonical_frontmatter(post.require_meta())
    if "slug" in fm:
        fm["slug"] = post.slug
    header = yaml.safe_dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)
    body = post.markdown.lstrip('\r\n')
    return f"---\n{header}---\n\n{body}"


def index_entry(post: ParsedPost) -> dict[str, Any]:
    meta = post.require_meta()
    return {
        "slug": post.slug,
        "title": meta.title,
        "date": meta.date.isoformat(),
        "tags": list(meta.tags),
        "author": meta.author,
        "draft": meta.draft,
        "path": str(post.path),
    }


def select_posts(posts: list[ParsedPost], include_drafts: bool = False) -> list[ParsedPost]:
    """Filter out drafts unless asked, newest first. Raises ValueError on a slug used twice."""
    chosen = [p for p in posts if include_drafts or not p.require_meta().draft]
    seen: dict[str, Path] = {}
    for p in chosen:
        if p.slug in seen:
            raise ValueError(f"slug '{p.slug}' is used by both {seen[p.slug]} and {p.path}")
        seen[p.slug] = p.path
    return sorted(chosen, key=lambda p: (p.require_meta().timestamp, p.slug), reverse=True)


def build_index(posts: list[ParsedPost], include_drafts: bool = False) -> list[dict[str, Any]]:
    """JSON-serializable listing of the posts to publish."""
    return [index_entry(p) for p in select_posts(posts, include_drafts)]


def write_post(post: ParsedPost, output_dir: Path) -> Path:
    """Write one normalized post as output_dir/<slug>.md and return its path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    out = output_dir / f"{post.slug}.md"
    if not post.slug or out.resolve().parent != output_dir.resolve():
        raise ValueError(f"slug '{post.slug}' of {post.path} is not a plain file name")
    out.write_text(build_markdown(post), encoding='utf-8')
    logger.debug("wrote %s", out)
    return out
