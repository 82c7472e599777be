"""Token-to-Block conversion using source line positions"""

from typing import NamedTuple

from mdpost.core.models import Block, BlockKind
from mdpost.core.utils.slug import anchor
from mdpost.core.utils.tokens import fence_language, heading_level


CODE_TOKENS = {'fence', 'code_block'}
SKIP_TOKENS = {'hr'}


class Heading(NamedTuple):
    level:  int
    text:   str
    anchor: str
    line:   int     # 1-based line in the full file


def _source_slice(token, source_lines: list[str]) -> str:
    """Extract raw source for a block via token.map; fallback to token.content."""
    if token.map:
        start, end = token.map
        return ''.join(source_lines[start:end]).rstrip()
    return token.content.rstrip()


def tokens_to_blocks(tokens: list, source_lines: list[str], offset: int = 0) -> list[Block]:
    """Convert top-level tokens to ordered prose/code Blocks.

    source_lines are the body lines; offset is the number of file lines before the body.
    """
    blocks: list[Block] = []
    for tok in tokens:
        if tok.level != 0 or tok.nesting == -1 or tok.map is None or tok.type in SKIP_TOKENS:
            continue
        is_code = tok.type in CODE_TOKENS
        blocks.append(Block(
            kind=BlockKind.code if is_code else BlockKind.prose,
            content=_source_slice(tok, source_lines),
            language=fence_language(tok) if tok.type == 'fence' else None,
            line=offset + tok.map[0] + 1,
        ))
    return blocks


def headings(tokens: list, offset: int = 0) -> list[Heading]:
    """Return every heading in order with its plain text and generated anchor."""
    found = []
    for i, tok in enumerate(tokens):
        level = heading_level(tok)
        if level is None:
            continue
        inline = tokens[i + 1] if i + 1 < len(tokens) else None
        text = inline.content.strip() if inline is not None and inline.type == 'inline' else ''
        line = offset + tok.map[0] + 1 if tok.map else offset + 1
        found.append(Heading(level, text, anchor(text), line))
    return found
