"""Request and response models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..domain.constants import (
    MAX_EVENT_ID,
    MAX_LOCATION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_TITLE_LENGTH,
)
from ..domain.entities import Article, Event


# Request Models
class ArticleCreate(BaseModel):
    """Request model for creating a new post."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TITLE_LENGTH,
        description="Title of the post",
        examples=["Release notes 1.2"],
    )
    content: str = Field(..., min_length=1, description="Body of the post")
    is_published: bool = Field(
        default=False, description="Whether the post shows up in the public listing"
    )


class ArticleUpdate(BaseModel):
    """Request model for updating a post. Omitted fields stay unchanged."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1, max_length=MAX_TITLE_LENGTH)
    content: str | None = Field(None, min_length=1)
    is_published: bool | None = None
    published_at: datetime | None = Field(
        None, description="Publication time; naive values are read as UTC"
    )


class EventCreate(BaseModel):
    """Request model for creating a new event."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: str = Field(default="")
    location: str = Field(default="", max_length=MAX_LOCATION_LENGTH)


class EventReplace(EventCreate):
    """Request model for replacing an existing event."""

    id: int = Field(
        ..., ge=1, le=MAX_EVENT_ID, description="Identifier of the event to replace"
    )


# Response Models
class ArticleResponse(BaseModel):
    """A stored post as returned by the API."""

    id: UUID = Field(description="Unique post identifier")
    title: str
    content: str
    published_at: datetime
    is_published: bool
    is_deleted: bool
    deleted_at: datetime | None = Field(
        description="Time of removal, null unless the post was removed"
    )

    @classmethod
    def from_domain(cls, article: Article) -> "ArticleResponse":
        return cls(
            id=article.id,
            title=article.title,
            content=article.content,
            published_at=article.published_at,
            is_published=article.is_published,
            is_deleted=article.is_deleted,
            deleted_at=article.deleted_at,
        )


class EventResponse(BaseModel):
    """A stored event as returned by the API."""

    id: int
    name: str
    description: str
    location: str

    @classmethod
    def from_domain(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            name=event.name,
            description=event.description,
            location=event.location,
        )


class StatusResponse(BaseModel):
    """Outcome of an action without a resource body; also the error shape."""

    status: str = Field(description="Machine readable outcome, e.g. 'ok', 'not_found'")
    message: str = Field(description="Human readable explanation")


class DeleteResponse(BaseModel):
    """Result of a hard delete."""

    deleted: int = Field(description="Number of rows removed")


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(StatusResponse):
    """Error body; ``errors`` is only present for validation failures."""

    errors: list[FieldError] | None = None


class HealthResponse(BaseModel):
    status: str
    database: str
