from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from devblog.database import build_engine
from devblog.main import create_app
from devblog.repositories.posts import PostRepository
from devblog.repositories.snippets import SnippetRepository


class TickingClock:
    """Returns a later timestamp on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def session():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture
def posts(session, clock) -> PostRepository:
    return PostRepository(session, clock=clock)


@pytest.fixture
def snippets(session, clock) -> SnippetRepository:
    return SnippetRepository(session, clock=clock)


@pytest.fixture
def client():
    with TestClient(create_app("sqlite://")) as test_client:
        yield test_client
