"""Data models for parsed posts, body blocks, and check results"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mdpost.core.errors import MetadataError


class PostMeta(BaseModel):
    """Validated front matter of a post; unknown keys are kept in `extra`."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title:  str = Field(..., min_length=1)
    date:   datetime
    tags:   list[str] = []
    draft:  bool = False
    author: str = Field(..., min_length=1)
    extra:  dict[str, Any] = {}

    @field_validator("date", mode="before")
    @classmethod
    def _date_only(cls, v):
        # YAML turns `2023-04-01` into a date, not a datetime.
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime(v.year, v.month, v.day)
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_set(cls, v):
        """Accept a bare string; stringify scalars; drop repeats keeping first-seen order."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple)):
            return v
        tags = [str(t).strip() if isinstance(t, (str, int, float)) else t for t in v]
        return list(dict.fromkeys(t for t in tags if t != ""))

    @field_validator("draft", mode="before")
    @classmethod
    def _null_draft(cls, v):
        return False if v is None else v

    @property
    def timestamp(self) -> float:
        """POSIX time of `date`; a date without an offset is read as UTC."""
        d = self.date if self.has_timezone else self.date.replace(tzinfo=timezone.utc)
        return d.timestamp()

    @property
    def has_timezone(self) -> bool:
        return self.date.tzinfo is not None and self.date.utcoffset() is not None


class BlockKind(str, Enum):
    """A body element is either prose or a code sample."""
    prose = "prose"
    code  = "code"


class Block(BaseModel):
    """A single ordered body element, sliced from the source file."""
    kind:     BlockKind
    content:  str
    language: Optional[str] = None  # highlighting label only; None for prose
    line:     int                   # 1-based line in the full file


class Severity(str, Enum):
    error   = "error"
    warning = "warning"


@dataclass(frozen=True)
class Issue:
    """One integrity problem found in a post."""
    path:     str
    line:     int
    code:     str
    severity: Severity
    message:  str

    def __str__(self) -> str:
        return f"{self.path}:{self.line}: {self.severity.value} [{self.code}] {self.message}"


@dataclass
class ParsedPost:
    """Internal parse result carrying markdown-it tokens; not persisted."""
    path:         Path
    slug:         str
    raw_markdown: str               # full file content (includes front matter)
    markdown:     str               # body only (front matter stripped)
    hash:         str
    frontmatter:  dict[str, Any]
    body_offset:  int               # number of file lines before the body
    tokens:       list              # markdown-it Token objects
    blocks:       list[Block] = field(default_factory=list)
    meta:         Optional[PostMeta] = None
    meta_error:   Optional[MetadataError] = None

    def require_meta(self) -> PostMeta:
        """Return validated metadata, re-raising the stored MetadataError if there is none."""
        if self.meta is None:
            raise self.meta_error or MetadataError(["front matter is missing"])
        return self.meta
