from uuid import uuid4

import pytest

from newsdesk.application.article_service import ArticleService
from newsdesk.application.event_service import EventService
from newsdesk.domain.entities import ArticleChanges, Event, NewArticle, NewEvent
from newsdesk.domain.exceptions import NotFoundError
from newsdesk.infrastructure.database.repositories import (
    ArticleRepository,
    EventRepository,
)


@pytest.fixture
def article_service(article_repo: ArticleRepository) -> ArticleService:
    return ArticleService(article_repo)


@pytest.fixture
def event_service(event_repo: EventRepository) -> EventService:
    return EventService(event_repo)


def test_article_lifecycle(article_service: ArticleService, timestamp_str: str):
    article = article_service.create_article(
        NewArticle(title=f"service {timestamp_str}", content="body", is_published=True)
    )
    assert article_service.get_article(article.id) == article
    assert article.id in {a.id for a in article_service.list_published()}

    article_service.remove_article(article.id)
    assert article.id in {a.id for a in article_service.list_deleted()}
    assert article.id not in {a.id for a in article_service.list_all()}

    restored = article_service.restore_article(article.id)
    assert restored.is_deleted is False

    assert article_service.delete_article(article.id) == 1
    with pytest.raises(NotFoundError):
        article_service.get_article(article.id)


def test_missing_article_raises_not_found(article_service: ArticleService):
    missing = uuid4()
    for call in (
        lambda: article_service.get_article(missing),
        lambda: article_service.update_article(missing, ArticleChanges(title="T")),
        lambda: article_service.remove_article(missing),
        lambda: article_service.restore_article(missing),
        lambda: article_service.delete_article(missing),
    ):
        with pytest.raises(NotFoundError) as exc_info:
            call()
        assert str(missing) in str(exc_info.value)


def test_restore_of_active_article_is_not_found(article_service: ArticleService):
    article = article_service.create_article(NewArticle(title="active", content="x"))
    with pytest.raises(NotFoundError, match="Removed Article"):
        article_service.restore_article(article.id)


def test_event_service(event_service: EventService):
    event = event_service.create_event(NewEvent(name="Meetup", location="Hall"))
    assert event_service.list_events() == [event]

    updated = event_service.update_event(Event(id=event.id, name="Meetup 2"))
    assert updated.location == ""
    assert event_service.get_event(event.id) == updated

    assert event_service.delete_event(event.id) == 1
    with pytest.raises(NotFoundError, match="Event"):
        event_service.delete_event(event.id)
    with pytest.raises(NotFoundError):
        event_service.update_event(Event(id=event.id, name="gone"))
