"""Pipeline step functions: check, commit, and export orchestration"""

import json
import logging
from datetime import datetime
from pathlib import Path

from sqlmodel import Session

from mdpost.config import Settings
from mdpost.core.checks import check_post
from mdpost.core.errors import FrontmatterError
from mdpost.core.export import INDEX_FILE, build_index, select_posts, write_post
from mdpost.core.models import Issue, Severity
from mdpost.core.parse import discover_files, parse_file, parse_paths
from mdpost.crud.posts import commit_post


logger = logging.getLogger(__name__)


def run_check(path: str, settings: Settings) -> tuple[list[Issue], int]:
    """Check every post under path. Returns (issues sorted by path and line, files checked).

    A file whose front matter cannot be read is reported as an issue, not raised.
    """
    static_dir = Path(settings.static_dir) if settings.static_dir else None
    files = discover_files(Path(path))
    issues: list[Issue] = []
    for p in files:
        try:
            parsed = parse_file(p, settings.parser_config)
        except FrontmatterError as e:
            issues.append(Issue(str(p), 1, 'frontmatter', Severity.error, str(e)))
            continue
        except (OSError, UnicodeDecodeError) as e:
            issues.append(Issue(str(p), 1, 'read', Severity.error, str(e)))
            continue
        issues.extend(check_post(parsed, static_dir))
    logger.debug("checked %d file(s), %d issue(s)", len(files), len(issues))
    return sorted(issues, key=lambda i: (i.path, i.line)), len(files)


def run_commit(engine, path: str, settings: Settings) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Parse posts under path and upsert them into the catalog in one transaction.

    Returns (counts, changes) where changes is a list of (status, slug) for
    created/updated posts. Returns ({}, []) when no files are found.
    """
    files = discover_files(Path(path))
    if not files:
        return {}, []

    committed_at = datetime.now()
    counts = {"created": 0, "updated": 0, "unchanged": 0}
    changes = []
    with Session(engine) as session:
        for f in files:
            try:
                post, status = commit_post(session, parse_file(f, settings.parser_config),
                                           settings.max_versions, committed_at)
            except ValueError as e:
                raise RuntimeError(f"Failed to commit {f}: {e}") from e
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, post.slug))
        session.commit()
    return counts, changes


def run_export(path: str, settings: Settings) -> list[tuple[str, Path]]:
    """Write normalized posts plus index.json to settings.output_dir. Returns (slug, path) pairs."""
    output_dir = Path(settings.output_dir)
    try:
        posts = select_posts(parse_paths(Path(path), settings.parser_config), settings.include_drafts)
        results = [(p.slug, write_post(p, output_dir)) for p in posts]
    except ValueError as e:
        raise RuntimeError(f"Failed to export {path}: {e}") from e

    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / INDEX_FILE).write_text(
        json.dumps(build_index(posts, include_drafts=True), indent=2, ensure_ascii=False),
        encoding='utf-8',
    )
    return results
