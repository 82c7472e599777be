"""Unit tests for core/frontmatter.py"""

from datetime import datetime, timedelta

import pytest

from mdpost.core.errors import FrontmatterError, MetadataError
from mdpost.core.frontmatter import parse_meta, split_frontmatter


def test_split_frontmatter_with_yaml():
    """split_frontmatter extracts the YAML header, body, and body line offset."""
    fm, body, offset = split_frontmatter("---\ntitle: Hello\n---\n# Body\n")
    assert fm == {"title": "Hello"}
    assert body == "# Body\n"
    assert offset == 3


def test_split_frontmatter_no_frontmatter():
    """split_frontmatter returns empty dict and full text when no header."""
    text = "# No frontmatter\n"
    assert split_frontmatter(text) == ({}, text, 0)


def test_split_frontmatter_empty_block():
    """An empty header parses to an empty mapping."""
    fm, body, offset = split_frontmatter("---\n---\nBody\n")
    assert fm == {}
    assert body == "Body\n"
    assert offset == 2


def test_split_frontmatter_unclosed():
    """An opening --- with no closing delimiter is an error."""
    with pytest.raises(FrontmatterError, match="not closed"):
        split_frontmatter("---\ntitle: Hello\n\n# Body\n")


def test_split_frontmatter_invalid_yaml():
    with pytest.raises(FrontmatterError, match="Invalid YAML"):
        split_frontmatter("---\ntitle: [unclosed\n---\nBody\n")


def test_split_frontmatter_not_a_mapping():
    with pytest.raises(FrontmatterError, match="expected a mapping"):
        split_frontmatter("---\n- a\n- b\n---\nBody\n")


def test_commented_draft_is_absent(post_md):
    """A `# draft: true` line is a YAML comment, so the post is not a draft."""
    fm, _, _ = split_frontmatter(post_md)
    assert "draft" not in fm
    assert parse_meta(fm).draft is False


def test_parse_meta_full(post_md):
    fm, _, _ = split_frontmatter(post_md)
    meta = parse_meta(fm)
    assert meta.title == "Pointers in C"
    assert meta.author == "Jane"
    assert meta.tags == ["c", "pointers"]
    assert meta.date.utcoffset() == timedelta(hours=2)
    assert meta.has_timezone


def test_parse_meta_keeps_unknown_keys():
    meta = parse_meta({"title": "T", "date": "2023-04-01T10:00:00Z", "author": "A", "slug": "x", "series": 2})
    assert meta.extra == {"slug": "x", "series": 2}


@pytest.mark.parametrize("tags,expected", [
    ("c", ["c"]),
    (["c", "pointers", "c"], ["c", "pointers"]),
    (None, []),
    (["c", 99], ["c", "99"]),
])
def test_parse_meta_tags(tags, expected):
    """Tags form an ordered set; a bare string or scalar items are accepted."""
    meta = parse_meta({"title": "T", "date": "2023-04-01T10:00:00Z", "author": "A", "tags": tags})
    assert meta.tags == expected


def test_parse_meta_date_only():
    """A YAML date without time becomes midnight with no offset."""
    from datetime import date
    meta = parse_meta({"title": "T", "date": date(2023, 4, 1), "author": "A"})
    assert meta.date == datetime(2023, 4, 1)
    assert not meta.has_timezone


def test_parse_meta_missing_fields():
    """Every missing required field is reported."""
    with pytest.raises(MetadataError) as exc:
        parse_meta({"title": "T"})
    fields = {e.split(":")[0] for e in exc.value.errors}
    assert fields == {"date", "author"}


def test_parse_meta_wrong_type():
    with pytest.raises(MetadataError, match="title"):
        parse_meta({"title": ["a", "b"], "date": "2023-04-01T10:00:00Z", "author": "A"})


def test_parse_meta_blank_title():
    with pytest.raises(MetadataError, match="title"):
        parse_meta({"title": "   ", "date": "2023-04-01T10:00:00Z", "author": "A"})
