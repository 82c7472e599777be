"""Text fingerprints and line-based comparison: hashes, similarity, change stats, unified diffs"""

import difflib
import hashlib
import re


LINE_RE = re.compile(r"[^\r\n]*(?:\r\n?|\n)|[^\r\n]+\Z")


def sha256(content: str) -> str:
    """Return hex-encoded SHA-256 hash of content (64 chars, matches String(64) column)."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def split_lines(text: str, keepends: bool = False) -> list[str]:
    """Split into lines the way markdown-it counts them.

    Only LF, CRLF and CR end a line. str.splitlines also breaks on form feed,
    vertical tab and Unicode separators, which would shift token.map indexes.
    """
    lines = LINE_RE.findall(text)
    return lines if keepends else [line.rstrip("\r\n") for line in lines]


def similarity(old: str, new: str) -> float:
    """Return the SequenceMatcher ratio (0.0-1.0) between the line sequences of old and new."""
    old_lines, new_lines = old.splitlines(), new.splitlines()
    if not old_lines and not new_lines:
        return 1.0
    return difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False).ratio()


def diff_summary(old: str, new: str) -> dict[str, int]:
    """Return added/deleted/unchanged line counts."""
    matcher = difflib.SequenceMatcher(None, old.splitlines(), new.splitlines(), autojunk=False)
    counts = {"added": 0, "deleted": 0, "unchanged": 0}

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            counts["unchanged"] += i2 - i1
            continue
        if tag in ("replace", "delete"):
            counts["deleted"] += i2 - i1
        if tag in ("replace", "insert"):
            counts["added"] += j2 - j1

    return counts


def unified_diff(
    old: str,
    new: str,
    from_label: str = "a",
    to_label: str = "b",
    context: int = 3,
    ) -> str:
    """Return a unified diff of old -> new as one string; empty string if identical."""
    lines = difflib.unified_diff(
        old.splitlines(keepends=True),
        new.splitlines(keepends=True),
        fromfile=from_label,
        tofile=to_label,
        n=context,
    )
    # Keep the output well-formed when the last line has no trailing newline.
    return "".join(line if line.endswith("\n") else line + "\n" for line in lines)
