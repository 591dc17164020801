from __future__ import annotations

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict

from devblog.deps import post_repository, snippet_repository
from devblog.models.post import PostCreate, PostFilter, PostRead, PostUpdate, PostWithSnippets
from devblog.models.response import DeleteResult
from devblog.models.snippet import CodeSnippetRead, SnippetDraft
from devblog.repositories.posts import PostRepository
from devblog.repositories.snippets import SnippetRepository
from devblog.services.post_queries import get_post_with_snippets
from devblog.services.snippet_sync import sync_snippets


router = APIRouter(prefix="/api/posts", tags=["posts"])


class SnippetSyncRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    snippets: List[SnippetDraft]


class SnippetSyncResponse(BaseModel):
    created: List[CodeSnippetRead]
    updated: List[CodeSnippetRead]
    deleted: List[int]
    post: PostWithSnippets


def _post_or_404(post: Optional[PostWithSnippets]) -> PostWithSnippets:
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED, name="create_post")
def create_post(data: PostCreate, posts: PostRepository = Depends(post_repository)):
    return posts.create(data)


@router.get("", response_model=List[PostRead], name="get_posts")
def get_posts(filters: Annotated[PostFilter, Query()], posts: PostRepository = Depends(post_repository)):
    return posts.list(filters)


@router.get("/published", response_model=List[PostRead], name="get_published_posts")
def get_published_posts(posts: PostRepository = Depends(post_repository)):
    return posts.list_published()


@router.get("/slug/{slug}", response_model=PostWithSnippets, name="get_post_by_slug")
def get_post_by_slug(
    slug: str,
    posts: PostRepository = Depends(post_repository),
    snippets: SnippetRepository = Depends(snippet_repository),
):
    return _post_or_404(get_post_with_snippets(posts, snippets, slug))


@router.get("/{post_id}", response_model=PostWithSnippets, name="get_post_by_id")
def get_post_by_id(
    post_id: int,
    posts: PostRepository = Depends(post_repository),
    snippets: SnippetRepository = Depends(snippet_repository),
):
    return _post_or_404(get_post_with_snippets(posts, snippets, post_id))


@router.patch("/{post_id}", response_model=PostRead, name="update_post")
def update_post(post_id: int, patch: PostUpdate, posts: PostRepository = Depends(post_repository)):
    return posts.update(post_id, patch)


@router.delete("/{post_id}", response_model=DeleteResult, name="delete_post")
def delete_post(post_id: int, posts: PostRepository = Depends(post_repository)):
    return DeleteResult(success=posts.delete(post_id))


@router.put("/{post_id}/snippets", response_model=SnippetSyncResponse, name="sync_post_snippets")
def sync_post_snippets(
    post_id: int,
    body: SnippetSyncRequest,
    posts: PostRepository = Depends(post_repository),
    snippets: SnippetRepository = Depends(snippet_repository),
):
    if posts.get_by_id(post_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    result = sync_snippets(snippets, post_id, body.snippets)
    return SnippetSyncResponse(
        created=[CodeSnippetRead.model_validate(snippet) for snippet in result.created],
        updated=[CodeSnippetRead.model_validate(snippet) for snippet in result.updated],
        deleted=result.deleted,
        post=_post_or_404(get_post_with_snippets(posts, snippets, post_id)),
    )
