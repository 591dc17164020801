from fastapi import Depends
from sqlmodel import Session

from devblog.database import get_session
from devblog.repositories.posts import PostRepository
from devblog.repositories.snippets import SnippetRepository


def post_repository(session: Session = Depends(get_session)) -> PostRepository:
    return PostRepository(session)


def snippet_repository(session: Session = Depends(get_session)) -> SnippetRepository:
    return SnippetRepository(session)
