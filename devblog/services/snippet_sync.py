from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from devblog.errors import DevblogError, NotFoundError, SnippetSyncError
from devblog.models.snippet import CodeSnippet, SnippetCreate, SnippetDraft, SnippetUpdate
from devblog.repositories.snippets import SnippetRepository


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SyncResult:
    created: List[CodeSnippet] = field(default_factory=list)
    updated: List[CodeSnippet] = field(default_factory=list)
    deleted: List[int] = field(default_factory=list)

    @property
    def applied(self) -> int:
        return len(self.created) + len(self.updated) + len(self.deleted)

    def counts(self) -> dict:
        return {"created": len(self.created), "updated": len(self.updated), "deleted": len(self.deleted)}


def _editable_fields(draft: SnippetDraft) -> dict:
    return {
        "title": draft.title or None,
        "language": draft.language,
        "code": draft.code,
        "description": draft.description or None,
        "order_index": draft.order_index,
    }


def sync_snippets(repo: SnippetRepository, post_id: int, drafts: Sequence[SnippetDraft]) -> SyncResult:
    """Make the stored snippets of ``post_id`` match ``drafts``.

    New drafts are created, drafts carrying an existing id are updated and
    stored snippets no draft refers to are deleted. The set to delete is
    computed from the snippets stored before anything is written.

    Steps are applied one statement at a time. If one fails the remaining
    steps are skipped and ``SnippetSyncError`` reports what was already
    applied; nothing is rolled back.
    """
    existing = repo.list_by_post(post_id)
    existing_ids = {snippet.id for snippet in existing}

    to_create = [draft for draft in drafts if draft.creates]
    to_update = [draft for draft in drafts if not draft.creates]

    foreign = sorted({draft.id for draft in to_update if draft.id not in existing_ids})
    if foreign:
        logger.warning("Snippet ids %s are not attached to post %s", foreign, post_id)
        raise NotFoundError(f"Code snippets {foreign} not found on post {post_id}")

    keep = {draft.id for draft in to_update}
    to_delete = [snippet.id for snippet in existing if snippet.id not in keep]

    result = SyncResult()
    try:
        for draft in to_create:
            result.created.append(repo.create(SnippetCreate(post_id=post_id, **_editable_fields(draft))))
        for draft in to_update:
            result.updated.append(repo.update(draft.id, SnippetUpdate(**_editable_fields(draft))))
        for snippet_id in to_delete:
            if repo.delete(snippet_id):
                result.deleted.append(snippet_id)
    except DevblogError as exc:
        logger.warning("Snippet sync for post %s stopped after %s operations: %s", post_id, result.applied, exc)
        raise SnippetSyncError(result, exc, post_id=post_id) from exc

    logger.info("Snippets synced for post %s: %s", post_id, result.counts())
    return result
