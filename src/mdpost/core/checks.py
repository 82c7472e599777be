"""Content integrity checks: front matter, fenced code, internal links, repeated headings"""

import re
from collections.abc import Iterator
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

from mdpost.core.blocks import headings
from mdpost.core.models import Issue, ParsedPost, Severity
from mdpost.core.utils.slug import unique_anchors
from mdpost.core.utils.text import split_lines


SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')


def _issue(post: ParsedPost, line: int, code: str, severity: Severity, message: str) -> Issue:
    return Issue(str(post.path), line, code, severity, message)


def _key_line(post: ParsedPost, key: str) -> int:
    """1-based line of `key:` inside the front matter block, else 1."""
    pattern = re.compile(rf'^{re.escape(key)}\s*:')
    for i, line in enumerate(split_lines(post.raw_markdown)[:post.body_offset]):
        if pattern.match(line):
            return i + 1
    return 1


def check_frontmatter(post: ParsedPost) -> Iterator[Issue]:
    """Missing block, missing or mistyped fields, and dates without a timezone offset."""
    if post.meta_error is not None:
        for msg in post.meta_error.errors:
            field = msg.split(':', 1)[0].split('.')[0]
            yield _issue(post, _key_line(post, field), 'frontmatter', Severity.error, msg)
        return
    if post.meta is not None and not post.meta.has_timezone:
        yield _issue(post, _key_line(post, 'date'), 'frontmatter', Severity.warning,
                     "date has no timezone offset")


def _fence_closed(token, source_lines: list[str]) -> bool:
    """True if the last line of the fence's range is a closer of the same char, at least as long."""
    start, end = token.map
    if end - start < 2 or end > len(source_lines):
        return False
    last = source_lines[end - 1].lstrip(' \t>').rstrip()
    char, width = token.markup[0], len(token.markup)
    return len(last) >= width and set(last) == {char}


def check_fences(post: ParsedPost) -> Iterator[Issue]:
    """Every fenced block needs a matching closing delimiter; a language label is expected."""
    source_lines = split_lines(post.markdown)
    for tok in post.tokens:
        if tok.type != 'fence' or tok.map is None:
            continue
        line = post.body_offset + tok.map[0] + 1
        if not _fence_closed(tok, source_lines):
            yield _issue(post, line, 'fences', Severity.error,
                         f"code block opened with {tok.markup!r} is never closed")
        if not (tok.info or '').strip():
            yield _issue(post, line, 'fences', Severity.warning, "code block has no language label")


def _targets(post: ParsedPost) -> Iterator[tuple[int, str, str]]:
    """Yield (line, kind, target) for every link href and image src in the body."""
    for tok in post.tokens:
        if tok.type != 'inline' or not tok.children:
            continue
        line = post.body_offset + (tok.map[0] + 1 if tok.map else 1)
        for child in tok.children:
            if child.type == 'link_open':
                yield line, 'link', child.attrGet('href') or ''
            elif child.type == 'image':
                yield line, 'image', child.attrGet('src') or ''


def check_links(post: ParsedPost, static_dir: Optional[Path] = None) -> Iterator[Issue]:
    """Anchor links must match a heading; relative and site-absolute paths must exist on disk."""
    anchors = set(unique_anchors([h.anchor for h in headings(post.tokens)]))
    for line, kind, target in _targets(post):
        if not target or target.startswith('//') or SCHEME_RE.match(target):
            continue
        parts = urlsplit(target)
        if not parts.path:
            fragment = unquote(parts.fragment)
            if fragment and fragment not in anchors:
                yield _issue(post, line, 'links', Severity.error,
                             f"{kind} target '#{fragment}' matches no heading")
            continue

        rel = unquote(parts.path)
        if rel.startswith('/'):
            if static_dir is None:
                continue
            resolved = static_dir / rel.lstrip('/')
        else:
            resolved = post.path.parent / rel
        if not resolved.exists():
            yield _issue(post, line, 'links', Severity.error, f"{kind} target '{target}' does not exist")


def check_duplicates(post: ParsedPost) -> Iterator[Issue]:
    """Flag headings repeated at the same level, the mark of a revision pasted below the original."""
    seen: dict[tuple[int, str], int] = {}
    for h in headings(post.tokens, post.body_offset):
        key = (h.level, h.text.casefold())
        if key in seen:
            yield _issue(post, h.line, 'duplicates', Severity.warning,
                         f"heading '{h.text}' already used on line {seen[key]}")
        else:
            seen[key] = h.line


def check_post(post: ParsedPost, static_dir: Optional[Path] = None) -> list[Issue]:
    """Run every check on a parsed post; issues come back sorted by line."""
    issues = [
        *check_frontmatter(post),
        *check_fences(post),
        *check_links(post, static_dir),
        *check_duplicates(post),
    ]
    return sorted(issues, key=lambda i: i.line)
