import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text, false
from sqlmodel import Field, SQLModel

from ...domain.constants import MAX_LOCATION_LENGTH, MAX_NAME_LENGTH, MAX_TITLE_LENGTH
from ...domain.entities import Article as DomainArticle
from ...domain.entities import Event as DomainEvent
from ...domain.entities import NewArticle, NewEvent, as_utc, utc_now


class Article(SQLModel, table=True):  # type: ignore[call-arg]
    """An article row. The two deletion columns are the flat projection of
    the domain deletion state."""

    __tablename__ = "articles"  # type: ignore[assignment]
    __table_args__ = (
        Index("ix_articles_is_deleted_is_published", "is_deleted", "is_published"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str = Field(sa_column=Column(String(MAX_TITLE_LENGTH), nullable=False))
    content: str = Field(sa_column=Column(Text, nullable=False))
    published_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    is_published: bool = Field(
        default=False, sa_column=Column(Boolean, nullable=False, default=False)
    )
    is_deleted: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False, server_default=false()),
    )
    deleted_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    @classmethod
    def from_new(cls, new_article: NewArticle) -> "Article":
        """Build a row for insertion; the id is assigned here, exactly once."""
        return cls(
            id=uuid.uuid4(),
            title=new_article.title,
            content=new_article.content,
            is_published=new_article.is_published,
            published_at=(
                as_utc(new_article.published_at)
                if new_article.published_at
                else utc_now()
            ),
            is_deleted=False,
            deleted_at=None,
        )

    def to_domain(self) -> DomainArticle:
        """Convert persistence model to domain entity."""
        return DomainArticle.from_columns(
            id=self.id,
            title=self.title,
            content=self.content,
            published_at=self.published_at,
            is_published=self.is_published,
            is_deleted=self.is_deleted,
            deleted_at=self.deleted_at,
        )


class Event(SQLModel, table=True):  # type: ignore[call-arg]
    """An event row."""

    __tablename__ = "events"  # type: ignore[assignment]

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(sa_column=Column(String(MAX_NAME_LENGTH), nullable=False))
    description: str = Field(
        default="", sa_column=Column(Text, nullable=False, default="")
    )
    location: str = Field(
        default="",
        sa_column=Column(String(MAX_LOCATION_LENGTH), nullable=False, default=""),
    )

    @classmethod
    def from_new(cls, new_event: NewEvent) -> "Event":
        return cls(
            name=new_event.name,
            description=new_event.description,
            location=new_event.location,
        )

    def to_domain(self) -> DomainEvent:
        """Convert persistence model to domain entity."""
        assert self.id is not None, "event must be persisted before conversion"
        return DomainEvent(
            id=self.id,
            name=self.name,
            description=self.description,
            location=self.location,
        )
