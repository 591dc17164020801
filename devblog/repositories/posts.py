from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import cast, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Session, select

from devblog.clock import Clock, utcnow
from devblog.errors import NotFoundError
from devblog.models.post import Post, PostCreate, PostFilter, PostUpdate
from devblog.repositories.store import store_errors


logger = logging.getLogger(__name__)

# Exact membership of a string in the JSON tags array.
_SQLITE_TAG_MATCH = text("EXISTS (SELECT 1 FROM json_each(posts.tags) WHERE json_each.value = :tag)")


class PostRepository:
    def __init__(self, session: Session, clock: Clock = utcnow) -> None:
        self._session = session
        self._clock = clock

    def create(self, data: PostCreate) -> Post:
        now = self._clock()
        post = Post(
            **data.model_dump(),
            created_at=now,
            updated_at=now,
            published_at=now if data.published else None,
        )
        with store_errors(self._session, f"create post {data.slug!r}"):
            self._session.add(post)
            self._session.commit()
            self._session.refresh(post)
        logger.info("Post created: id=%s slug=%s", post.id, post.slug)
        return post

    def get_by_id(self, post_id: int) -> Optional[Post]:
        with store_errors(self._session, f"load post {post_id}"):
            return self._session.get(Post, post_id)

    def get_by_slug(self, slug: str) -> Optional[Post]:
        statement = select(Post).where(Post.slug == slug)
        with store_errors(self._session, f"load post {slug!r}"):
            return self._session.exec(statement).first()

    def list(self, filters: Optional[PostFilter] = None) -> List[Post]:
        """Posts matching every given filter, newest first."""
        filters = filters or PostFilter()
        statement = select(Post)
        if filters.published is not None:
            statement = statement.where(Post.published == filters.published)
        if filters.tag:
            statement = statement.where(self._tag_condition(filters.tag))
        statement = statement.order_by(Post.created_at.desc(), Post.id.desc())
        if filters.offset:
            statement = statement.offset(filters.offset)
        if filters.limit:
            statement = statement.limit(filters.limit)
        with store_errors(self._session, "list posts"):
            return list(self._session.exec(statement))

    def list_published(self) -> List[Post]:
        statement = (
            select(Post)
            .where(Post.published == True)  # noqa: E712
            .order_by(Post.published_at.desc(), Post.id.desc())
        )
        with store_errors(self._session, "list published posts"):
            return list(self._session.exec(statement))

    def update(self, post_id: int, patch: PostUpdate) -> Post:
        post = self.get_by_id(post_id)
        if post is None:
            logger.warning("Post not found for update: post_id=%s", post_id)
            raise NotFoundError(f"Post with id {post_id} not found")

        changes = patch.changes()
        now = self._clock()
        post.sqlmodel_update(changes)
        post.updated_at = now
        # Re-stamped on every update that sends published=True; never cleared.
        if changes.get("published"):
            post.published_at = now

        with store_errors(self._session, f"update post {post_id}"):
            self._session.add(post)
            self._session.commit()
            self._session.refresh(post)
        logger.info("Post updated: id=%s fields=%s", post_id, sorted(changes))
        return post

    def delete(self, post_id: int) -> bool:
        """Delete a post; the store cascades the delete to its snippets."""
        post = self.get_by_id(post_id)
        if post is None:
            return False
        with store_errors(self._session, f"delete post {post_id}"):
            self._session.delete(post)
            self._session.commit()
        logger.info("Post deleted: id=%s", post_id)
        return True

    def _tag_condition(self, tag: str):
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            return cast(Post.tags, JSONB).contains([tag])
        return _SQLITE_TAG_MATCH.bindparams(tag=tag)
