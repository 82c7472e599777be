"""File discovery, front matter extraction, and markdown-it tokenization"""

import logging
from pathlib import Path

from markdown_it import MarkdownIt

from mdpost.core.blocks import tokens_to_blocks
from mdpost.core.errors import MetadataError
from mdpost.core.frontmatter import parse_meta, split_frontmatter
from mdpost.core.models import ParsedPost
from mdpost.core.utils.text import sha256, split_lines
from mdpost.core.utils.slug import slugify


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md', '.mdx'}


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS and p.is_file())


def parse_text(raw: str, path: Path, parser_config: str = 'gfm-like') -> ParsedPost:
    """Parse already-read file content. Raises FrontmatterError on a broken YAML header.

    Metadata problems do not raise here; they are kept on ParsedPost.meta_error.
    """
    frontmatter, body, offset = split_frontmatter(raw)
    tokens = make_parser(parser_config).parse(body)
    slug = slugify(str(frontmatter.get('slug') or '')) or slugify(path.stem)

    meta, meta_error = None, None
    if frontmatter:
        try:
            meta = parse_meta(frontmatter)
        except MetadataError as e:
            meta_error = e
    else:
        meta_error = MetadataError(["front matter is missing"])

    return ParsedPost(
        path=path,
        slug=slug,
        raw_markdown=raw,
        markdown=body,
        hash=sha256(raw),
        frontmatter=frontmatter,
        body_offset=offset,
        tokens=tokens,
        blocks=tokens_to_blocks(tokens, split_lines(body, keepends=True), offset),
        meta=meta,
        meta_error=meta_error,
    )


def parse_file(path: Path, parser_config: str = 'gfm-like') -> ParsedPost:
    """Parse a single markdown file into a ParsedPost with token stream and blocks."""
    logger.debug("parsing %s", path)
    return parse_text(path.read_text(encoding='utf-8'), path, parser_config)


def parse_paths(path: Path, parser_config: str = 'gfm-like') -> list[ParsedPost]:
    """Parse all .md/.mdx files under path (file or directory).

    Any per-file failure is wrapped in RuntimeError naming the file.
    """
    posts = []
    for p in discover_files(path):
        try:
            posts.append(parse_file(p, parser_config))
        except (OSError, ValueError) as e:
            raise RuntimeError(f"Failed to parse {p}: {e}") from e
    return posts
