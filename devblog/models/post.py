from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, field_validator
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from devblog.clock import utcnow
from devblog.models.snippet import CodeSnippetRead, SnippetDraft


class PostBase(SQLModel):
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1, unique=True, index=True)
    excerpt: Optional[str] = None
    content: str
    published: bool = False
    tags: List[str] = Field(default_factory=list)
    reading_time_minutes: Optional[int] = Field(default=None, gt=0)


class Post(PostBase, table=True):
    __tablename__ = "posts"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    published_at: Optional[datetime] = None


class PostCreate(PostBase):
    model_config = ConfigDict(extra="forbid")


class PostUpdate(SQLModel):
    """Patch for a post. Only fields the caller actually set are applied."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = None
    content: Optional[str] = None
    published: Optional[bool] = None
    tags: Optional[List[str]] = None
    reading_time_minutes: Optional[int] = Field(default=None, gt=0)

    @field_validator("title", "slug", "content", "published", "tags")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class PostFilter(SQLModel):
    model_config = ConfigDict(extra="forbid")

    published: Optional[bool] = None
    tag: Optional[str] = None
    limit: Optional[int] = Field(default=None, gt=0)
    offset: Optional[int] = Field(default=None, ge=0)


class PostRead(PostBase):
    id: int
    created_at: datetime
    updated_at: datetime
    published_at: Optional[datetime] = None


class PostWithSnippets(PostRead):
    code_snippets: List[CodeSnippetRead] = Field(default_factory=list)


class PostDraft(SQLModel):
    """Everything the admin editor submits when saving a post."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1)
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    content: str = ""
    published: bool = False
    tags: List[str] = Field(default_factory=list)
    reading_time_minutes: Optional[int] = Field(default=None, gt=0)
    code_snippets: List[SnippetDraft] = Field(default_factory=list)
