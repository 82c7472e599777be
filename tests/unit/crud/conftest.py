"""Shared fixtures for crud unit tests"""

from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

import mdpost.crud.models  # noqa: F401
from mdpost.core.parse import parse_text


POST_MD = """\
---
title: Pointers in C
date: 2023-04-01T10:00:00+02:00
tags: [c, pointers]
author: Jane
---

A pointer holds an address.
"""


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="make_parsed")
def make_parsed_fixture():
    """Build a ParsedPost without touching the filesystem."""
    def _make(text: str = POST_MD, path: str = "posts/pointers.md"):
        return parse_text(text, Path(path))
    return _make


@pytest.fixture(name="post")
def post_fixture(session, make_parsed):
    """A cataloged Post."""
    from mdpost.crud.posts import commit_post
    p, _ = commit_post(session, make_parsed())
    return p
