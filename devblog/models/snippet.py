from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, field_validator
from sqlalchemy import Column, ForeignKey, Integer
from sqlmodel import Field, SQLModel

from devblog.clock import utcnow


class SnippetBase(SQLModel):
    title: Optional[str] = None
    language: str
    code: str
    description: Optional[str] = None
    order_index: int = Field(default=0, ge=0)


class CodeSnippet(SnippetBase, table=True):
    __tablename__ = "code_snippets"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    post_id: int = Field(
        sa_column=Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    created_at: datetime = Field(default_factory=utcnow)


class SnippetCreate(SnippetBase):
    model_config = ConfigDict(extra="forbid")

    post_id: int
    order_index: int = Field(ge=0)


class SnippetUpdate(SQLModel):
    """Patch for a snippet; ``post_id`` is fixed for the snippet's lifetime."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    language: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    order_index: Optional[int] = Field(default=None, ge=0)

    @field_validator("language", "code", "order_index")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CodeSnippetRead(SnippetBase):
    id: int
    post_id: int
    created_at: datetime


class SnippetDraft(SQLModel):
    """One entry of the snippet list as edited in the admin form.

    Entries without an ``id`` (or flagged ``is_new``) are authored in the
    form and do not exist in the store yet.
    """

    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = None
    is_new: bool = False
    title: Optional[str] = None
    language: str
    code: str
    description: Optional[str] = None
    order_index: int = Field(ge=0)

    @property
    def creates(self) -> bool:
        return self.is_new or self.id is None
