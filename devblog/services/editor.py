from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from slugify import slugify

from devblog.errors import NotFoundError, SnippetSyncError
from devblog.models.post import PostCreate, PostDraft, PostUpdate, PostWithSnippets
from devblog.repositories.posts import PostRepository
from devblog.repositories.snippets import SnippetRepository
from devblog.services.post_queries import get_post_with_snippets
from devblog.services.snippet_sync import SyncResult, sync_snippets


logger = logging.getLogger(__name__)


def generate_slug(title: str) -> str:
    return slugify(title)


def normalize_tags(tags: Iterable[str]) -> List[str]:
    """Trim tags, drop blanks and repeats, keep first-seen order."""
    normalized: List[str] = []
    for raw_tag in tags:
        tag = raw_tag.strip()
        if tag and tag not in normalized:
            normalized.append(tag)
    return normalized


def save_post(
    posts: PostRepository,
    snippets: SnippetRepository,
    draft: PostDraft,
    post_id: Optional[int] = None,
) -> PostWithSnippets:
    """Save the editor form: the post itself, then its snippet list.

    Creates the post when ``post_id`` is None, otherwise updates every form
    field of that post. A new post owns no snippets yet, so in create mode
    every draft must be new. Once the post is written, a failing snippet
    step raises ``SnippetSyncError`` naming the saved post.
    """
    slug = (draft.slug or "").strip() or generate_slug(draft.title)
    if not slug:
        raise ValueError("Cannot derive a slug from this title; provide one explicitly.")

    fields = draft.model_dump(exclude={"code_snippets", "slug", "tags"})
    fields["slug"] = slug
    fields["tags"] = normalize_tags(draft.tags)

    if post_id is None:
        claimed = sorted(snippet.id for snippet in draft.code_snippets if not snippet.creates)
        if claimed:
            raise ValueError(f"A new post cannot keep existing code snippets {claimed}.")
        post = posts.create(PostCreate(**fields))
    else:
        post = posts.update(post_id, PostUpdate(**fields))

    try:
        sync_snippets(snippets, post.id, draft.code_snippets)
    except NotFoundError as exc:
        raise SnippetSyncError(SyncResult(), exc, post_id=post.id) from exc
    logger.info("Editor saved post %s with %s snippets", post.id, len(draft.code_snippets))
    return get_post_with_snippets(posts, snippets, post.id)
