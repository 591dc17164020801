import pytest
from pydantic import ValidationError

from devblog.errors import ConstraintViolationError, NotFoundError
from devblog.models.post import PostCreate
from devblog.models.snippet import SnippetCreate, SnippetUpdate


@pytest.fixture
def post_id(posts) -> int:
    return posts.create(PostCreate(title="Closures", slug="closures", content="")).id


def test_create_snippet_persists_fields(snippets, post_id):
    snippet = snippets.create(
        SnippetCreate(
            post_id=post_id,
            title="Counter",
            language="python",
            code="def counter(): ...",
            description="A closure",
            order_index=2,
        )
    )

    assert snippet.id is not None
    assert snippet.post_id == post_id
    assert snippet.title == "Counter"
    assert snippet.description == "A closure"
    assert snippet.order_index == 2
    assert snippet.created_at is not None


def test_create_for_missing_post_is_a_constraint_violation(snippets):
    with pytest.raises(ConstraintViolationError):
        snippets.create(SnippetCreate(post_id=12345, language="go", code="package main", order_index=0))


def test_order_index_must_not_be_negative(post_id):
    with pytest.raises(ValidationError):
        SnippetCreate(post_id=post_id, language="go", code="x", order_index=-1)


def test_order_index_is_required_on_create(post_id):
    with pytest.raises(ValidationError):
        SnippetCreate(post_id=post_id, language="go", code="x")


def test_list_by_post_sorts_by_order_index(snippets, post_id):
    for order in (3, 0, 2, 1):
        snippets.create(SnippetCreate(post_id=post_id, language="rust", code=f"// {order}", order_index=order))

    assert [snippet.order_index for snippet in snippets.list_by_post(post_id)] == [0, 1, 2, 3]


def test_list_by_post_keeps_insertion_order_for_ties(snippets, post_id):
    first = snippets.create(SnippetCreate(post_id=post_id, language="c", code="a", order_index=1)).id
    second = snippets.create(SnippetCreate(post_id=post_id, language="c", code="b", order_index=1)).id

    assert [snippet.id for snippet in snippets.list_by_post(post_id)] == [first, second]


def test_list_by_post_only_returns_that_posts_snippets(posts, snippets, post_id):
    other = posts.create(PostCreate(title="Other", slug="other", content="")).id
    snippets.create(SnippetCreate(post_id=post_id, language="js", code="1", order_index=0))
    snippets.create(SnippetCreate(post_id=other, language="js", code="2", order_index=0))

    assert [snippet.code for snippet in snippets.list_by_post(post_id)] == ["1"]


def test_update_changes_only_supplied_fields(snippets, post_id):
    snippet = snippets.create(
        SnippetCreate(post_id=post_id, title="Old", language="python", code="pass", order_index=0)
    )

    updated = snippets.update(snippet.id, SnippetUpdate(code="return 1", title=None))

    assert updated.code == "return 1"
    assert updated.title is None
    assert updated.language == "python"
    assert updated.order_index == 0


def test_update_missing_snippet_raises_not_found(snippets):
    with pytest.raises(NotFoundError):
        snippets.update(999, SnippetUpdate(code="x"))


def test_update_patch_rejects_null_code():
    with pytest.raises(ValidationError):
        SnippetUpdate(code=None)


def test_delete_missing_snippet_returns_false(snippets, post_id):
    snippet_id = snippets.create(SnippetCreate(post_id=post_id, language="sql", code="select 1", order_index=0)).id

    assert snippets.delete(snippet_id) is True
    assert snippets.delete(snippet_id) is False
    assert snippets.delete(424242) is False


def test_created_at_is_stored_as_naive_utc(session, snippets, post_id, clock):
    snippet = snippets.create(SnippetCreate(post_id=post_id, language="go", code="x", order_index=0))
    session.expire_all()

    stored = snippets.get_by_id(snippet.id)
    assert stored.created_at == clock.current
    assert stored.created_at.tzinfo is None
