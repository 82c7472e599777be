"""Database table definitions for cataloged posts and their revision snapshots"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, JSON, String, Text, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel


class Post(SQLModel, table=True):
    """Latest known state of a post file; the file on disk remains the source of truth"""
    __tablename__ = "posts"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    slug: str = Field(..., index=True, nullable=False)
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    author: str = Field(..., sa_column=Column(Text, nullable=False))
    date: datetime = Field(..., sa_column=Column(DateTime(timezone=False), nullable=False), description="Publication date, normalized to UTC")
    draft: bool = Field(default=False, nullable=False)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    frontmatter: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    source: str = Field(..., sa_column=Column(Text, nullable=False), description="Full file text, front matter included")
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    committed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))
    versions: List["PostVersion"] = Relationship(back_populates="post")


class PostVersion(SQLModel, table=True):
    """Immutable snapshot of a Post at a prior state."""
    __tablename__ = "post_versions"
    __table_args__ = (UniqueConstraint("post_id", "version_num", name="uq_postver_post_num"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    post_id: UUID = Field(..., foreign_key="posts.id", index=True, nullable=False)
    version_num: int = Field(..., nullable=False, description="Monotonically increasing per-post version number")
    source: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    frontmatter: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    post: Optional[Post] = Relationship(back_populates="versions")
