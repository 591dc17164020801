from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from devblog.deps import post_repository, snippet_repository
from devblog.models.post import PostDraft, PostWithSnippets
from devblog.repositories.posts import PostRepository
from devblog.repositories.snippets import SnippetRepository
from devblog.services import editor


router = APIRouter(prefix="/api/editor", tags=["editor"])


def _save(posts: PostRepository, snippets: SnippetRepository, draft: PostDraft, post_id=None) -> PostWithSnippets:
    try:
        return editor.save_post(posts, snippets, draft, post_id=post_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post(
    "/posts", response_model=PostWithSnippets, status_code=status.HTTP_201_CREATED, name="editor_create_post"
)
def create_post(
    draft: PostDraft,
    posts: PostRepository = Depends(post_repository),
    snippets: SnippetRepository = Depends(snippet_repository),
):
    return _save(posts, snippets, draft)


@router.put("/posts/{post_id}", response_model=PostWithSnippets, name="editor_update_post")
def update_post(
    post_id: int,
    draft: PostDraft,
    posts: PostRepository = Depends(post_repository),
    snippets: SnippetRepository = Depends(snippet_repository),
):
    return _save(posts, snippets, draft, post_id=post_id)
