"""Unit tests for core/blocks.py"""

import pytest

from mdpost.core.blocks import headings, tokens_to_blocks
from mdpost.core.models import BlockKind


def _blocks(parser, md: str, offset: int = 0):
    return tokens_to_blocks(parser.parse(md), md.splitlines(keepends=True), offset)


def test_fence_is_code_with_language(parser):
    blocks = _blocks(parser, "```c\nint *p;\n```\n")
    assert len(blocks) == 1
    assert blocks[0].kind == BlockKind.code
    assert blocks[0].language == "c"
    assert blocks[0].content == "```c\nint *p;\n```"


def test_fence_info_first_word(parser):
    """Only the first word of the info string is the language label."""
    blocks = _blocks(parser, "```python {linenos=true}\nx = 1\n```\n")
    assert blocks[0].language == "python"


def test_indented_code_has_no_language(parser):
    blocks = _blocks(parser, "Para.\n\n    int x;\n")
    assert blocks[-1].kind == BlockKind.code
    assert blocks[-1].language is None


@pytest.mark.parametrize("md", [
    "A paragraph.\n",
    "## Heading\n",
    "- one\n- two\n",
    "> quoted\n",
])
def test_other_blocks_are_prose(parser, md):
    blocks = _blocks(parser, md)
    assert len(blocks) == 1
    assert blocks[0].kind == BlockKind.prose
    assert blocks[0].language is None


def test_list_with_nested_fence_is_one_block(parser):
    """Nested tokens do not produce blocks of their own."""
    md = "- item\n\n  ```c\n  int x;\n  ```\n"
    blocks = _blocks(parser, md)
    assert [b.kind for b in blocks] == [BlockKind.prose]


def test_hr_skipped(parser):
    blocks = _blocks(parser, "Para.\n\n---\n\nMore.\n")
    assert [b.content for b in blocks] == ["Para.", "More."]


def test_line_numbers_include_offset(parser):
    blocks = _blocks(parser, "First.\n\nSecond.\n", offset=5)
    assert [b.line for b in blocks] == [6, 8]


def test_headings(parser):
    tokens = parser.parse("# What is a pointer?\n\ntext\n\n## The `&` operator\n")
    found = headings(tokens, offset=2)
    assert [(h.level, h.text, h.anchor, h.line) for h in found] == [
        (1, "What is a pointer?", "what-is-a-pointer", 3),
        (2, "The `&` operator", "the-operator", 7),
    ]
