from typing import Final
from uuid import UUID

from ..domain.entities import Article, ArticleChanges, NewArticle
from ..domain.exceptions import NotFoundError
from ..infrastructure.database.repositories import ArticleRepository
from ..logging_config import get_logger
from ..logging_utils import log_record_change
from ..metrics import record_article_operation

logger: Final = get_logger(__name__)

_TABLE: Final = "articles"


class ArticleService:
    """Application service for Article operations.

    Turns repository absences into ``NotFoundError`` so handlers can map
    them to 404 responses.
    """

    def __init__(self, repository: ArticleRepository):
        self.repository = repository

    def create_article(self, new_article: NewArticle) -> Article:
        logger.debug("Creating article", title=new_article.title)
        article = self.repository.create(new_article)

        log_record_change("create", _TABLE, article.id)
        record_article_operation("create")
        return article

    def get_article(self, article_id: UUID) -> Article:
        article = self.repository.get(article_id)
        if article is None:
            raise NotFoundError("article", article_id)
        return article

    def list_published(self) -> list[Article]:
        return self.repository.list_published()

    def list_all(self) -> list[Article]:
        return self.repository.list_all()

    def list_deleted(self) -> list[Article]:
        return self.repository.list_deleted()

    def update_article(self, article_id: UUID, changes: ArticleChanges) -> Article:
        article = self.repository.update(article_id, changes)
        if article is None:
            logger.warning("Article update failed - not found", article_id=str(article_id))
            raise NotFoundError("article", article_id)

        log_record_change(
            "update", _TABLE, article_id, fields=sorted(changes.as_values())
        )
        record_article_operation("update")
        return article

    def remove_article(self, article_id: UUID) -> None:
        """Soft delete: the row stays, flagged and stamped."""
        if not self.repository.soft_delete(article_id):
            logger.warning("Article removal failed - not found", article_id=str(article_id))
            raise NotFoundError("article", article_id)

        log_record_change("soft_delete", _TABLE, article_id)
        record_article_operation("remove")

    def restore_article(self, article_id: UUID) -> Article:
        """Undo a soft delete and return the restored article."""
        article = self.repository.restore(article_id)
        if article is None:
            logger.warning(
                "Article restore failed - not found or not removed",
                article_id=str(article_id),
            )
            raise NotFoundError("removed article", article_id)

        log_record_change("restore", _TABLE, article_id)
        record_article_operation("restore")
        return article

    def delete_article(self, article_id: UUID) -> int:
        """Hard delete. Returns the number of rows removed (always 1)."""
        deleted = self.repository.hard_delete(article_id)
        if deleted == 0:
            logger.warning("Article deletion failed - not found", article_id=str(article_id))
            raise NotFoundError("article", article_id)

        log_record_change("delete", _TABLE, article_id)
        record_article_operation("delete")
        return deleted
