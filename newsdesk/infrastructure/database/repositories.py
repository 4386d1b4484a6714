"""Infrastructure layer - Repository implementations.

Each operation borrows one pooled connection and issues exactly one
statement. Absence is reported as ``None``/``False``/``0``, never raised.
"""

from uuid import UUID

from sqlalchemy import delete, func, update
from sqlmodel import col, select

from ...domain.entities import Article as DomainArticle
from ...domain.entities import ArticleChanges, NewArticle, NewEvent, utc_now
from ...domain.entities import Event as DomainEvent
from .database import ConnectionPool
from .models import Article as ArticleModel
from .models import Event as EventModel


class ArticleRepository:
    """Repository for Article persistence operations."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    def create(self, new_article: NewArticle) -> DomainArticle:
        """Insert a new article; id and publish time are assigned here."""
        article_model = ArticleModel.from_new(new_article)
        with self.pool.acquire() as session:
            session.add(article_model)
        return article_model.to_domain()

    def get(self, article_id: UUID) -> DomainArticle | None:
        """Find article by ID, deleted or not."""
        with self.pool.acquire() as session:
            article_model = session.get(ArticleModel, article_id)
            return article_model.to_domain() if article_model else None

    def list_published(self) -> list[DomainArticle]:
        """Published articles that have not been removed."""
        statement = (
            select(ArticleModel)
            .where(col(ArticleModel.is_published).is_(True))
            .where(col(ArticleModel.is_deleted).is_(False))
            .order_by(col(ArticleModel.published_at), col(ArticleModel.id))
        )
        return self._fetch(statement)

    def list_all(self) -> list[DomainArticle]:
        """Every article that has not been removed, published or not."""
        statement = (
            select(ArticleModel)
            .where(col(ArticleModel.is_deleted).is_(False))
            .order_by(col(ArticleModel.published_at), col(ArticleModel.id))
        )
        return self._fetch(statement)

    def list_deleted(self) -> list[DomainArticle]:
        """Soft deleted articles."""
        statement = (
            select(ArticleModel)
            .where(col(ArticleModel.is_deleted).is_(True))
            .order_by(col(ArticleModel.deleted_at), col(ArticleModel.id))
        )
        return self._fetch(statement)

    def update(self, article_id: UUID, changes: ArticleChanges) -> DomainArticle | None:
        """Overwrite the supplied fields; the others keep their value."""
        if changes.is_empty():
            return self.get(article_id)

        statement = (
            update(ArticleModel)
            .where(col(ArticleModel.id) == article_id)
            .values(**changes.as_values())
            .returning(ArticleModel)
            .execution_options(synchronize_session=False)
        )
        with self.pool.acquire() as session:
            article_model = session.exec(statement).scalars().first()
            return article_model.to_domain() if article_model else None

    def soft_delete(self, article_id: UUID) -> bool:
        """Flag the article deleted and stamp the time of removal.

        Removing an already removed article keeps its first stamp.
        """
        statement = (
            update(ArticleModel)
            .where(col(ArticleModel.id) == article_id)
            .values(
                is_deleted=True,
                deleted_at=func.coalesce(col(ArticleModel.deleted_at), utc_now()),
            )
            .execution_options(synchronize_session=False)
        )
        with self.pool.acquire() as session:
            result = session.exec(statement)
            return result.rowcount > 0  # type: ignore[attr-defined]

    def restore(self, article_id: UUID) -> DomainArticle | None:
        """Clear the deletion flag and stamp of a removed article.

        Returns None when the article does not exist or was not removed.
        """
        statement = (
            update(ArticleModel)
            .where(col(ArticleModel.id) == article_id)
            .where(col(ArticleModel.is_deleted).is_(True))
            .values(is_deleted=False, deleted_at=None)
            .returning(ArticleModel)
            .execution_options(synchronize_session=False)
        )
        with self.pool.acquire() as session:
            article_model = session.exec(statement).scalars().first()
            return article_model.to_domain() if article_model else None

    def hard_delete(self, article_id: UUID) -> int:
        """Remove the row for good, whatever its deletion state.

        Returns:
            Number of rows removed (0 or 1)
        """
        statement = (
            delete(ArticleModel)
            .where(col(ArticleModel.id) == article_id)
            .execution_options(synchronize_session=False)
        )
        with self.pool.acquire() as session:
            result = session.exec(statement)
            return int(result.rowcount)  # type: ignore[attr-defined]

    def _fetch(self, statement) -> list[DomainArticle]:
        with self.pool.acquire() as session:
            articles = session.exec(statement).all()
            return [article.to_domain() for article in articles]


class EventRepository:
    """Repository for Event persistence operations."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    def create(self, new_event: NewEvent) -> DomainEvent:
        event_model = EventModel.from_new(new_event)
        with self.pool.acquire() as session:
            session.add(event_model)
            session.flush()
        return event_model.to_domain()

    def get(self, event_id: int) -> DomainEvent | None:
        with self.pool.acquire() as session:
            event_model = session.get(EventModel, event_id)
            return event_model.to_domain() if event_model else None

    def list_all(self) -> list[DomainEvent]:
        with self.pool.acquire() as session:
            events = session.exec(select(EventModel).order_by(col(EventModel.id))).all()
            return [event.to_domain() for event in events]

    def update(self, event: DomainEvent) -> DomainEvent | None:
        """Replace name, description and location of an existing event."""
        statement = (
            update(EventModel)
            .where(col(EventModel.id) == event.id)
            .values(
                name=event.name,
                description=event.description,
                location=event.location,
            )
            .returning(EventModel)
            .execution_options(synchronize_session=False)
        )
        with self.pool.acquire() as session:
            event_model = session.exec(statement).scalars().first()
            return event_model.to_domain() if event_model else None

    def delete(self, event_id: int) -> int:
        statement = (
            delete(EventModel)
            .where(col(EventModel.id) == event_id)
            .execution_options(synchronize_session=False)
        )
        with self.pool.acquire() as session:
            result = session.exec(statement)
            return int(result.rowcount)  # type: ignore[attr-defined]
