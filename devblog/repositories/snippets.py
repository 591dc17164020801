from __future__ import annotations

import logging
from typing import List, Optional

from sqlmodel import Session, select

from devblog.clock import Clock, utcnow
from devblog.errors import NotFoundError
from devblog.models.snippet import CodeSnippet, SnippetCreate, SnippetUpdate
from devblog.repositories.store import store_errors


logger = logging.getLogger(__name__)


class SnippetRepository:
    def __init__(self, session: Session, clock: Clock = utcnow) -> None:
        self._session = session
        self._clock = clock

    def create(self, data: SnippetCreate) -> CodeSnippet:
        snippet = CodeSnippet(**data.model_dump(), created_at=self._clock())
        with store_errors(self._session, f"create snippet for post {data.post_id}"):
            self._session.add(snippet)
            self._session.commit()
            self._session.refresh(snippet)
        logger.info("Snippet created: id=%s post_id=%s", snippet.id, snippet.post_id)
        return snippet

    def get_by_id(self, snippet_id: int) -> Optional[CodeSnippet]:
        with store_errors(self._session, f"load snippet {snippet_id}"):
            return self._session.get(CodeSnippet, snippet_id)

    def list_by_post(self, post_id: int) -> List[CodeSnippet]:
        statement = (
            select(CodeSnippet)
            .where(CodeSnippet.post_id == post_id)
            .order_by(CodeSnippet.order_index.asc(), CodeSnippet.id.asc())
        )
        with store_errors(self._session, f"list snippets of post {post_id}"):
            return list(self._session.exec(statement))

    def update(self, snippet_id: int, patch: SnippetUpdate) -> CodeSnippet:
        snippet = self.get_by_id(snippet_id)
        if snippet is None:
            logger.warning("Snippet not found for update: snippet_id=%s", snippet_id)
            raise NotFoundError(f"Code snippet with id {snippet_id} not found")

        changes = patch.changes()
        snippet.sqlmodel_update(changes)
        with store_errors(self._session, f"update snippet {snippet_id}"):
            self._session.add(snippet)
            self._session.commit()
            self._session.refresh(snippet)
        logger.info("Snippet updated: id=%s fields=%s", snippet_id, sorted(changes))
        return snippet

    def delete(self, snippet_id: int) -> bool:
        snippet = self.get_by_id(snippet_id)
        if snippet is None:
            return False
        with store_errors(self._session, f"delete snippet {snippet_id}"):
            self._session.delete(snippet)
            self._session.commit()
        logger.info("Snippet deleted: id=%s", snippet_id)
        return True
