"""Post persistence: upsert from parsed files, path/slug/tag lookup"""

import json
import logging
from datetime import datetime, timezone

from sqlmodel import Session, select

from mdpost.core.models import ParsedPost
from mdpost.crud.models import Post
from mdpost.crud.versioning import save_version


logger = logging.getLogger(__name__)


def _jsonable(frontmatter: dict) -> dict:
    """Round-trip through JSON so YAML timestamps become ISO strings."""
    return json.loads(json.dumps(frontmatter, default=lambda v: v.isoformat() if hasattr(v, "isoformat") else str(v)))


def _utc_naive(d: datetime) -> datetime:
    if d.tzinfo is None or d.utcoffset() is None:
        return d
    return d.astimezone(timezone.utc).replace(tzinfo=None)


def get_by_path(session: Session, path: str) -> Post | None:
    """Return the Post with the given source path, or None if not found."""
    return session.exec(select(Post).where(Post.path == path)).one_or_none()


def get_by_slug(session: Session, slug: str) -> Post | None:
    """Return the first Post with the given slug, or None if not found."""
    return session.exec(select(Post).where(Post.slug == slug)).first()


def get_all_posts(session: Session) -> list[Post]:
    """Return all posts, newest first."""
    return list(session.exec(select(Post).order_by(Post.date.desc(), Post.slug)).all())


def get_published(session: Session) -> list[Post]:
    """Return non-draft posts, newest first."""
    return list(session.exec(
        select(Post).where(Post.draft == False).order_by(Post.date.desc(), Post.slug)  # noqa: E712
    ).all())


def get_by_tag(session: Session, tag: str) -> list[Post]:
    """Return posts carrying tag (exact match), newest first."""
    return [p for p in get_all_posts(session) if tag in (p.tags or [])]


def _apply(post: Post, parsed: ParsedPost) -> None:
    meta = parsed.require_meta()
    post.slug = parsed.slug
    post.title = meta.title
    post.author = meta.author
    post.date = _utc_naive(meta.date)
    post.draft = meta.draft
    post.tags = list(meta.tags)
    post.frontmatter = _jsonable(parsed.frontmatter) or None
    post.source = parsed.raw_markdown
    post.hash = parsed.hash


def commit_post(
    session: Session,
    parsed: ParsedPost,
    max_versions: int = 10,
    committed_at: datetime | None = None,
    ) -> tuple[Post, str]:
    """Upsert a parsed post by path.

    Returns (post, status) where status is 'created', 'updated', or 'unchanged'.
    An update snapshots the prior state first. Raises MetadataError when the
    post's front matter is invalid. Flushes but does not commit; the caller
    controls the transaction.
    """
    path = str(parsed.path)
    post = get_by_path(session, path)

    if post:
        if post.hash == parsed.hash:
            return post, 'unchanged'
        save_version(session, post, max_versions)
        _apply(post, parsed)
        post.updated_at = datetime.now()
        post.committed_at = committed_at
        session.add(post)
        session.flush()
        logger.info("updated %s", path)
        return post, 'updated'

    meta = parsed.require_meta()
    post = Post(
        path=path, slug=parsed.slug, title=meta.title, author=meta.author,
        date=_utc_naive(meta.date), source=parsed.raw_markdown, hash=parsed.hash,
        committed_at=committed_at,
    )
    _apply(post, parsed)
    session.add(post)
    session.flush()
    logger.info("created %s", path)
    return post, 'created'
