from __future__ import annotations

import logging
from typing import Optional, Union

from devblog.models.post import PostRead, PostWithSnippets
from devblog.models.snippet import CodeSnippetRead
from devblog.repositories.posts import PostRepository
from devblog.repositories.snippets import SnippetRepository


logger = logging.getLogger(__name__)


def get_post_with_snippets(
    posts: PostRepository, snippets: SnippetRepository, key: Union[int, str]
) -> Optional[PostWithSnippets]:
    """Load a post by id (int) or slug (str) together with its ordered snippets.

    Two separate reads, no transaction around them.
    """
    post = posts.get_by_id(key) if isinstance(key, int) else posts.get_by_slug(key)
    if post is None:
        logger.warning("Post not found: key=%r", key)
        return None

    records = snippets.list_by_post(post.id)
    return PostWithSnippets(
        **PostRead.model_validate(post).model_dump(),
        code_snippets=[CodeSnippetRead.model_validate(record) for record in records],
    )
