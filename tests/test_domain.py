from datetime import UTC, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from newsdesk.domain.constants import MAX_TITLE_LENGTH
from newsdesk.domain.entities import (
    Active,
    Article,
    ArticleChanges,
    Deleted,
    Event,
    NewArticle,
    NewEvent,
    as_utc,
)
from newsdesk.domain.exceptions import PersistenceError, ValidationError


def _article(**overrides) -> Article:
    fields = {
        "id": uuid4(),
        "title": "Title",
        "content": "Body",
        "published_at": datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
        "is_published": True,
    }
    fields.update(overrides)
    return Article(**fields)


def test_new_article_requires_title_and_content():
    with pytest.raises(ValidationError) as exc_info:
        NewArticle(title="   ", content="Body")
    assert exc_info.value.field == "title"

    with pytest.raises(ValidationError) as exc_info:
        NewArticle(title="Title", content="")
    assert exc_info.value.field == "content"


def test_title_length_and_control_characters():
    NewArticle(title="x" * MAX_TITLE_LENGTH, content="Body")

    with pytest.raises(ValidationError, match="longer than"):
        NewArticle(title="x" * (MAX_TITLE_LENGTH + 1), content="Body")

    with pytest.raises(ValidationError, match="control characters"):
        NewArticle(title="two\nlines", content="Body")


def test_content_may_span_lines():
    article = NewArticle(title="Title", content="line one\nline two\tindented")
    assert "\n" in article.content


def test_new_article_is_unpublished_by_default():
    assert NewArticle(title="Title", content="Body").is_published is False


def test_article_starts_active():
    article = _article()
    assert article.deletion == Active()
    assert article.is_deleted is False
    assert article.deleted_at is None
    assert article.is_visible_published is True


def test_soft_delete_sets_flag_and_stamp_together():
    article = _article()
    stamp = datetime(2024, 6, 1, 8, 30, tzinfo=UTC)
    article.soft_delete(stamp)

    assert article.deletion == Deleted(stamp)
    assert article.is_deleted is True
    assert article.deleted_at == stamp
    assert article.is_visible_published is False


def test_soft_delete_twice_keeps_first_stamp():
    article = _article()
    first = datetime(2024, 6, 1, tzinfo=UTC)
    article.soft_delete(first)
    article.soft_delete(first + timedelta(days=1))
    assert article.deleted_at == first


def test_restore_clears_both_flags():
    article = _article()
    article.soft_delete()
    article.restore()
    assert article.is_deleted is False
    assert article.deleted_at is None


@pytest.mark.parametrize("is_deleted", [True, False])
def test_flat_projection_keeps_invariant(is_deleted: bool):
    """deleted_at is set exactly when is_deleted is true."""
    stamp = datetime(2024, 1, 1, tzinfo=UTC) if is_deleted else None
    article = Article.from_columns(
        id=uuid4(),
        title="Title",
        content="Body",
        published_at=datetime(2024, 1, 1),
        is_published=False,
        is_deleted=is_deleted,
        deleted_at=stamp,
    )
    assert article.is_deleted is is_deleted
    assert (article.deleted_at is not None) is is_deleted


def test_deleted_row_without_stamp_is_rejected():
    with pytest.raises(PersistenceError, match="no deleted_at"):
        Article.from_columns(
            id=uuid4(),
            title="Title",
            content="Body",
            published_at=datetime(2024, 1, 1),
            is_published=False,
            is_deleted=True,
            deleted_at=None,
        )


def test_as_utc_handles_naive_and_offset_values():
    naive = datetime(2024, 1, 1, 10, 0)
    assert as_utc(naive) == datetime(2024, 1, 1, 10, 0, tzinfo=UTC)

    plus_two = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    converted = as_utc(plus_two)
    assert converted.tzinfo == UTC
    assert converted.hour == 10


def test_article_changes_only_carry_supplied_fields():
    changes = ArticleChanges(title="New", is_published=False)
    assert changes.as_values() == {"title": "New", "is_published": False}
    assert not changes.is_empty()
    assert ArticleChanges().is_empty()


def test_article_changes_normalise_timestamps():
    changes = ArticleChanges(published_at=datetime(2024, 2, 3, 4, 5))
    assert changes.as_values()["published_at"].tzinfo == UTC


def test_article_changes_validate_supplied_text():
    with pytest.raises(ValidationError):
        ArticleChanges(title="")
    with pytest.raises(ValidationError):
        ArticleChanges(content="  ")


def test_event_validation():
    assert NewEvent(name="Meetup").location == ""

    with pytest.raises(ValidationError) as exc_info:
        NewEvent(name="")
    assert exc_info.value.field == "name"

    with pytest.raises(ValidationError) as exc_info:
        Event(id=1, name="Meetup", location="x" * 300)
    assert exc_info.value.field == "location"
