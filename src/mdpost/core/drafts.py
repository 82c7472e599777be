"""In-place editing of the draft flag inside a post's front matter"""

import logging
import re
from pathlib import Path

import yaml

from mdpost.core.errors import FrontmatterError
from mdpost.core.frontmatter import find_frontmatter


logger = logging.getLogger(__name__)

DRAFT_LINE_RE = re.compile(r'^(?P<comment>#[ \t]*)?draft[ \t]*:[^\r\n]*', re.MULTILINE)


def _is_true(line: str) -> bool:
    try:
        value = yaml.safe_load(line)
    except yaml.YAMLError:
        return False
    return isinstance(value, dict) and bool(value.get('draft'))


def set_draft_text(text: str, draft: bool) -> str:
    """Return text with the front matter draft flag set; every other byte is kept.

    A commented-out `draft:` line counts as absent. Turning the flag on
    un-comments it (or inserts one before the closing `---`); turning it off
    comments the active line out.
    """
    m = find_frontmatter(text)
    if m is None:
        raise FrontmatterError("post has no front matter block")
    start, end = m.span(1)
    block = text[start:end]

    lines = list(DRAFT_LINE_RE.finditer(block))
    active = next((dm for dm in lines if not dm.group('comment')), None)
    commented = next((dm for dm in lines if dm.group('comment')), None)

    if draft:
        target = active or commented
        if target is None:
            newline = '\r\n' if '\r\n' in text[:m.end()] else '\n'
            if block and not block.endswith('\n'):
                block += newline
            block += f"draft: true{newline}"
        elif target is active and _is_true(target.group(0)):
            return text
        else:
            block = block[:target.start()] + "draft: true" + block[target.end():]
    else:
        if active is None or not _is_true(active.group(0)):
            return text
        block = block[:active.start()] + "# " + active.group(0) + block[active.end():]

    return text[:start] + block + text[end:]


def set_draft(path: Path, draft: bool) -> bool:
    """Set the draft flag of the post at path in place. Returns True if the file changed."""
    text = path.read_text(encoding='utf-8')
    updated = set_draft_text(text, draft)
    if updated == text:
        return False
    path.write_text(updated, encoding='utf-8')
    logger.info("%s: draft=%s", path, draft)
    return True
