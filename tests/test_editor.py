import pytest

from devblog.errors import ConstraintViolationError, NotFoundError, SnippetSyncError
from devblog.models.post import PostCreate, PostDraft
from devblog.models.snippet import SnippetDraft
from devblog.services import editor


def test_generate_slug():
    assert editor.generate_slug("Hello, World!") == "hello-world"
    assert editor.generate_slug("  Rust   --  ownership ") == "rust-ownership"


def test_normalize_tags_trims_and_deduplicates():
    assert editor.normalize_tags([" go ", "", "rust", "go", "  "]) == ["go", "rust"]


def test_create_mode_saves_post_and_snippets(posts, snippets):
    saved = editor.save_post(
        posts,
        snippets,
        PostDraft(
            title="Pattern Matching",
            content="match x:",
            published=True,
            tags=["python", " python "],
            code_snippets=[
                SnippetDraft(is_new=True, language="python", code="match point:", order_index=1),
                SnippetDraft(is_new=True, title="", language="python", code="case _:", order_index=2),
            ],
        ),
    )

    assert saved.slug == "pattern-matching"
    assert saved.tags == ["python"]
    assert saved.published_at is not None
    assert [snippet.code for snippet in saved.code_snippets] == ["match point:", "case _:"]
    assert saved.code_snippets[1].title is None


def test_edit_mode_updates_post_and_reconciles_snippets(posts, snippets):
    created = editor.save_post(
        posts,
        snippets,
        PostDraft(
            title="Draft",
            slug="draft",
            content="v1",
            code_snippets=[
                SnippetDraft(language="sql", code="select 1", order_index=1),
                SnippetDraft(language="sql", code="select 2", order_index=2),
            ],
        ),
    )
    keep, drop = created.code_snippets

    saved = editor.save_post(
        posts,
        snippets,
        PostDraft(
            title="Final",
            slug="draft",
            content="v2",
            code_snippets=[
                SnippetDraft(id=keep.id, language="sql", code="select 10", order_index=2),
                SnippetDraft(is_new=True, language="sql", code="select 0", order_index=1),
            ],
        ),
        post_id=created.id,
    )

    assert saved.id == created.id
    assert saved.title == "Final"
    assert saved.content == "v2"
    assert [snippet.code for snippet in saved.code_snippets] == ["select 0", "select 10"]
    assert drop.id not in {snippet.id for snippet in saved.code_snippets}


def test_failed_post_write_skips_snippets(posts, snippets):
    posts.create(PostCreate(title="Taken", slug="taken", content=""))

    with pytest.raises(ConstraintViolationError):
        editor.save_post(
            posts,
            snippets,
            PostDraft(
                title="Taken",
                content="",
                code_snippets=[SnippetDraft(language="go", code="x", order_index=0)],
            ),
        )

    assert len(posts.list()) == 1


def test_title_without_slug_characters_is_rejected(posts, snippets):
    with pytest.raises(ValueError):
        editor.save_post(posts, snippets, PostDraft(title="!!!", content=""))


def test_create_mode_rejects_existing_snippet_ids_before_writing(posts, snippets):
    with pytest.raises(ValueError):
        editor.save_post(
            posts,
            snippets,
            PostDraft(
                title="Hello",
                content="",
                code_snippets=[SnippetDraft(id=999, language="go", code="x", order_index=0)],
            ),
        )

    assert posts.list() == []


def test_edit_mode_failure_names_the_saved_post(posts, snippets):
    created = editor.save_post(posts, snippets, PostDraft(title="Channels", content="v1"))

    with pytest.raises(SnippetSyncError) as excinfo:
        editor.save_post(
            posts,
            snippets,
            PostDraft(
                title="Channels",
                content="v2",
                code_snippets=[SnippetDraft(id=999, language="go", code="x", order_index=0)],
            ),
            post_id=created.id,
        )

    assert excinfo.value.post_id == created.id
    assert isinstance(excinfo.value.cause, NotFoundError)
    assert excinfo.value.result.applied == 0
    assert posts.get_by_id(created.id).content == "v2"
