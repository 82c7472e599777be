"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from mdpost.config import Settings, load_config
from mdpost.core.drafts import set_draft
from mdpost.core.errors import FrontmatterError
from mdpost.core.models import ParsedPost, Severity
from mdpost.core.parse import parse_paths
from mdpost.core.pipeline import run_check, run_commit, run_export
from mdpost.core.revisions import find_near_duplicates, pair_diff
from mdpost.core.utils.text import diff_summary
from mdpost.crud.database import init_db, make_engine, reset_db
from mdpost.crud.posts import get_by_slug
from mdpost.crud.versioning import diff_current, diff_versions, list_versions


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _engine(settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    return engine


def _posts(path: str, settings: Settings) -> list[ParsedPost]:
    """Parse posts under path; posts with invalid metadata are reported and skipped."""
    try:
        parsed = parse_paths(Path(path), settings.parser_config)
    except RuntimeError as e:
        _fail(str(e))
    valid = []
    for p in parsed:
        if p.meta is None:
            typer.echo(f"  skipped {p.path}: {p.meta_error}", err=True)
        else:
            valid.append(p)
    return valid


def check_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to check")],
    static: Annotated[Optional[str], typer.Option("--static-dir", help="Root for site-absolute links")] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Fail on warnings as well as errors")] = False,
    ):
    """Check front matter, code fences, internal links, and repeated headings."""
    settings = _settings(overrides={"static_dir": static})
    issues, n_files = run_check(path, settings)
    for issue in issues:
        typer.echo(str(issue))

    errors = sum(1 for i in issues if i.severity == Severity.error)
    warnings = len(issues) - errors
    typer.echo(f"Checked {n_files} file(s): {errors} error(s), {warnings} warning(s)")
    if errors or (strict and warnings):
        raise typer.Exit(1)


def list_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to list")],
    drafts: Annotated[Optional[bool], typer.Option("--drafts/--no-drafts", help="Only drafts / only published")] = None,
    tag: Annotated[Optional[str], typer.Option("--tag", help="Only posts carrying this tag")] = None,
    ):
    """List posts newest first: date, draft marker, slug, title."""
    settings = _settings()
    posts = _posts(path, settings)
    if drafts is not None:
        posts = [p for p in posts if p.meta.draft == drafts]
    if tag:
        posts = [p for p in posts if tag in p.meta.tags]
    if not posts:
        typer.echo("No posts found.")
        raise typer.Exit(1)
    for p in sorted(posts, key=lambda p: (p.meta.timestamp, p.slug), reverse=True):
        marker = "D" if p.meta.draft else " "
        typer.echo(f"{p.meta.date:%Y-%m-%d} {marker} {p.slug}  {p.meta.title}")


def draft_cmd(
    path: Annotated[Path, typer.Argument(help="Post file to edit")],
    on: Annotated[bool, typer.Option("--on/--off", help="Mark as draft / publish")] = True,
    ):
    """Flip a post's draft flag in place, leaving the rest of the file untouched."""
    try:
        changed = set_draft(path, on)
    except (FrontmatterError, OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot edit {path}", e)
    state = "draft" if on else "published"
    typer.echo(f"{path}: {state}" if changed else f"{path}: already {state}")


def dupes_cmd(
    path: Annotated[str, typer.Argument(help="Directory of posts to compare")],
    threshold: Annotated[Optional[float], typer.Option("--threshold", help="Similarity ratio 0..1")] = None,
    show_diff: Annotated[bool, typer.Option("--diff", help="Print a unified diff for each pair")] = False,
    ):
    """Find near-duplicate posts, e.g. a draft revision kept next to the published article."""
    settings = _settings(overrides={"duplicate_threshold": threshold})
    pairs = find_near_duplicates(_posts(path, settings), settings.duplicate_threshold)
    if not pairs:
        typer.echo("No near-duplicates found.")
        return
    for pair in pairs:
        stats = diff_summary(pair.older.markdown, pair.newer.markdown)
        typer.echo(
            f"{pair.ratio:.2f}  {pair.older.path} -> {pair.newer.path}  "
            f"(+{stats['added']} -{stats['deleted']})"
        )
        if show_diff:
            typer.echo(pair_diff(pair), nl=False)


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the catalog schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def commit_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to record")],
    versions: Annotated[Optional[int], typer.Option("--max-versions", help="Max stored versions per post")] = None,
    ):
    """Record the current state of posts in the catalog, snapshotting changed ones."""
    settings = _settings(overrides={"max_versions": versions})
    engine = _engine(settings)
    try:
        counts, changes = run_commit(engine, path, settings)
    except RuntimeError as e:
        _fail("Commit failed", e)
    if not counts:
        typer.echo(f"No .md/.mdx files found under {path}.")
        raise typer.Exit(1)

    for status, slug in changes:
        typer.echo(f"  {status}: {slug}")
    typer.echo(
        f"Commit complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged"
    )


def history_cmd(
    slug: Annotated[str, typer.Argument(help="Post slug")],
    ):
    """List stored versions of a post."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        post = get_by_slug(session, slug)
        if post is None:
            _fail(f"No post with slug '{slug}' in catalog")
        versions = list_versions(session, post.id)
        typer.echo(f"{post.slug}: {post.title} ({post.path})")
        for v in versions:
            typer.echo(f"  v{v.version_num}  {v.created_at:%Y-%m-%d %H:%M}  {v.hash[:12]}")
        typer.echo(f"  current  {post.updated_at:%Y-%m-%d %H:%M}  {post.hash[:12]}")


def diff_cmd(
    slug: Annotated[str, typer.Argument(help="Post slug")],
    from_num: Annotated[int, typer.Argument(help="Version to diff from")],
    to_num: Annotated[Optional[int], typer.Argument(help="Version to diff to; omit for current")] = None,
    ):
    """Show a unified diff between two stored versions of a post."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        post = get_by_slug(session, slug)
        if post is None:
            _fail(f"No post with slug '{slug}' in catalog")
        try:
            if to_num is None:
                text = diff_current(session, post, from_num)
            else:
                text = diff_versions(session, post.id, from_num, to_num)
        except ValueError as e:
            _fail(str(e))
    typer.echo(text or "No differences.", nl=not text)


def export_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to export")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    include_drafts: Annotated[Optional[bool], typer.Option("--include-drafts/--skip-drafts", help="Export drafts too")] = None,
    ):
    """Write normalized posts and index.json for the site generator."""
    settings = _settings(overrides={"output_dir": out, "include_drafts": include_drafts})
    try:
        results = run_export(path, settings)
    except RuntimeError as e:
        _fail("Export failed", e)
    for slug, out_path in results:
        typer.echo(f"  {slug} -> {out_path}")
    typer.echo(f"Exported {len(results)} post(s) to {settings.output_dir}/")
