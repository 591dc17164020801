from __future__ import annotations

from fastapi import APIRouter, Depends, status

from devblog.deps import snippet_repository
from devblog.models.response import DeleteResult
from devblog.models.snippet import CodeSnippetRead, SnippetCreate, SnippetUpdate
from devblog.repositories.snippets import SnippetRepository


router = APIRouter(prefix="/api/snippets", tags=["snippets"])


@router.post("", response_model=CodeSnippetRead, status_code=status.HTTP_201_CREATED, name="create_code_snippet")
def create_code_snippet(data: SnippetCreate, snippets: SnippetRepository = Depends(snippet_repository)):
    return snippets.create(data)


@router.patch("/{snippet_id}", response_model=CodeSnippetRead, name="update_code_snippet")
def update_code_snippet(
    snippet_id: int, patch: SnippetUpdate, snippets: SnippetRepository = Depends(snippet_repository)
):
    return snippets.update(snippet_id, patch)


@router.delete("/{snippet_id}", response_model=DeleteResult, name="delete_code_snippet")
def delete_code_snippet(snippet_id: int, snippets: SnippetRepository = Depends(snippet_repository)):
    return DeleteResult(success=snippets.delete(snippet_id))
