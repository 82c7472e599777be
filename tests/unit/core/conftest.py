"""Shared fixtures for core unit tests"""

import pytest
from markdown_it import MarkdownIt


POST_MD = """\
---
title: "Pointers in C"
date: 2023-04-01T10:00:00+02:00
tags: ["c", "pointers"]
# draft: true
author: "Jane"
---

## What is a pointer?

A pointer holds the address of another variable.

```c
int x = 5;
int *p = &x;
```

## Null pointers

Dereferencing `NULL` is undefined behavior.

```c
int *p = NULL;
*p = 1;
```
"""


@pytest.fixture(name="parser")
def parser_fixture():
    return MarkdownIt("gfm-like", options_update={"linkify": False})


@pytest.fixture(name="write_post")
def write_post_fixture(tmp_path):
    """Write text to tmp_path/<name> and return the path."""
    def _write(text: str = POST_MD, name: str = "pointers.md"):
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p
    return _write


@pytest.fixture(name="post_md")
def post_md_fixture():
    return POST_MD


FRONTMATTER = """\
---
title: T
date: 2023-04-01T10:00:00+02:00
author: A
---
"""


@pytest.fixture(name="with_fm")
def with_fm_fixture():
    """Prefix a body with a valid five-line front matter block."""
    def _wrap(body: str) -> str:
        return FRONTMATTER + body
    return _wrap
