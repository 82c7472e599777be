"""Post version persistence: save, prune, list, and diff operations"""

import json
import logging
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from mdpost.core.utils.text import unified_diff
from mdpost.crud.models import Post, PostVersion


logger = logging.getLogger(__name__)


def get_version(session: Session, post_id: UUID, version_num: int) -> PostVersion:
    """Return one stored version. Raises ValueError if it does not exist."""
    v = session.exec(
        select(PostVersion)
        .where(PostVersion.post_id == post_id)
        .where(PostVersion.version_num == version_num)
    ).one_or_none()
    if v is None:
        raise ValueError(f"Version {version_num} not found for post {post_id}")
    return v


def diff_versions(session: Session, post_id: UUID, from_num: int, to_num: int, context: int = 3) -> str:
    """Unified diff between two stored versions. Raises ValueError if either is missing."""
    v_from, v_to = get_version(session, post_id, from_num), get_version(session, post_id, to_num)
    return unified_diff(v_from.source, v_to.source, f"v{from_num}", f"v{to_num}", context)


def diff_current(session: Session, post: Post, from_num: int, context: int = 3) -> str:
    """Unified diff from a stored version to the post's current cataloged state."""
    v_from = get_version(session, post.id, from_num)
    return unified_diff(v_from.source, post.source, f"v{from_num}", "current", context)


def list_versions(session: Session, post_id: UUID) -> list[PostVersion]:
    """Return all versions for a post ordered by version_num ascending."""
    return list(
        session.exec(
            select(PostVersion)
            .where(PostVersion.post_id == post_id)
            .order_by(PostVersion.version_num.asc())
        ).all()
    )


def prune_versions(session: Session, post_id: UUID, max_versions: int) -> int:
    """Delete oldest versions beyond max_versions. Returns count deleted. No-op if max_versions=0."""
    if max_versions == 0:
        return 0

    versions = list_versions(session, post_id)
    excess = len(versions) - max_versions
    if excess <= 0:
        return 0

    for v in versions[:excess]:
        session.delete(v)
    session.flush()
    logger.debug("pruned %d version(s) of post %s", excess, post_id)
    return excess


def save_version(session: Session, post: Post, max_versions: int = 10) -> PostVersion:
    """Snapshot current Post state as a new immutable version.

    Computes next version_num as MAX(version_num)+1 for this post, so numbers
    keep increasing after pruning. Prunes afterwards if max_versions > 0.
    """
    result = session.exec(
        select(func.max(PostVersion.version_num))
        .where(PostVersion.post_id == post.id)
    ).one()

    version = PostVersion(
        post_id=post.id,
        version_num=(result or 0) + 1,
        source=post.source,
        hash=post.hash,
        frontmatter=json.dumps(post.frontmatter) if post.frontmatter is not None else None,
    )
    session.add(version)
    session.flush()

    if max_versions > 0:
        prune_versions(session, post.id, max_versions)

    return version
