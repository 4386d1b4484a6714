"""Pure domain entities without infrastructure dependencies."""

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from uuid import UUID

from .constants import MAX_LOCATION_LENGTH, MAX_NAME_LENGTH, MAX_TITLE_LENGTH
from .exceptions import PersistenceError, ValidationError


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def validate_text(
    value: str,
    field_name: str,
    max_length: int | None = None,
    single_line: bool = False,
) -> None:
    """Validate a required free-text field.

    Args:
        value: The text to validate
        field_name: Name of the field (for error messages)
        max_length: Maximum allowed length, unlimited if None
        single_line: Reject newlines, tabs and other control characters

    Raises:
        ValidationError: If the text is empty, too long or has control characters
    """
    if not value or not value.strip():
        raise ValidationError(f"{field_name.title()} cannot be empty", field_name)

    if max_length is not None and len(value) > max_length:
        raise ValidationError(
            f"{field_name.title()} cannot be longer than {max_length} characters",
            field_name,
        )

    if single_line:
        for char in value:
            # Allow space (ord 32), reject control chars and DEL (ord 127)
            if ord(char) < 32 or ord(char) == 127:
                raise ValidationError(
                    f"{field_name.title()} cannot contain newlines, tabs, "
                    + "or other control characters",
                    field_name,
                )


@dataclass(frozen=True)
class Active:
    """Deletion state of a live record."""


@dataclass(frozen=True)
class Deleted:
    """Deletion state of a soft deleted record."""

    at: datetime


DeletionState = Active | Deleted


@dataclass
class NewArticle:
    """Fields supplied by a client when creating an article."""

    title: str
    content: str
    is_published: bool = False
    published_at: datetime | None = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        validate_text(self.title, "title", MAX_TITLE_LENGTH, single_line=True)
        validate_text(self.content, "content")


@dataclass
class ArticleChanges:
    """Partial update of an article; None means "leave unchanged"."""

    title: str | None = None
    content: str | None = None
    is_published: bool | None = None
    published_at: datetime | None = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.title is not None:
            validate_text(self.title, "title", MAX_TITLE_LENGTH, single_line=True)
        if self.content is not None:
            validate_text(self.content, "content")

    def as_values(self) -> dict[str, object]:
        """Column values for the supplied fields only."""
        values: dict[str, object] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            values[f.name] = as_utc(value) if isinstance(value, datetime) else value
        return values

    def is_empty(self) -> bool:
        return not self.as_values()


@dataclass
class Article:
    """Core business entity representing a stored article (post)."""

    id: UUID
    title: str
    content: str
    published_at: datetime
    is_published: bool = False
    deletion: DeletionState = field(default_factory=Active)

    @property
    def is_deleted(self) -> bool:
        """Check if article is soft deleted."""
        return isinstance(self.deletion, Deleted)

    @property
    def deleted_at(self) -> datetime | None:
        if isinstance(self.deletion, Deleted):
            return self.deletion.at
        return None

    @property
    def is_visible_published(self) -> bool:
        """Whether the article belongs in the public listing."""
        return self.is_published and not self.is_deleted

    def soft_delete(self, at: datetime | None = None) -> None:
        """Mark article as deleted; an already deleted article keeps its stamp."""
        if not self.is_deleted:
            self.deletion = Deleted(as_utc(at) if at else utc_now())

    def restore(self) -> None:
        """Restore soft deleted article."""
        self.deletion = Active()

    @classmethod
    def from_columns(
        cls,
        *,
        id: UUID,
        title: str,
        content: str,
        published_at: datetime,
        is_published: bool,
        is_deleted: bool,
        deleted_at: datetime | None,
    ) -> "Article":
        """Build an article from its flat storage projection.

        Raises:
            PersistenceError: If the row is flagged deleted without a stamp
        """
        deletion: DeletionState
        if is_deleted:
            if deleted_at is None:
                raise PersistenceError(
                    f"Article '{id}' is marked deleted but has no deleted_at"
                )
            deletion = Deleted(as_utc(deleted_at))
        else:
            deletion = Active()
        return cls(
            id=id,
            title=title,
            content=content,
            published_at=as_utc(published_at),
            is_published=is_published,
            deletion=deletion,
        )


@dataclass
class NewEvent:
    """Fields supplied by a client when creating an event."""

    name: str
    description: str = ""
    location: str = ""

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        validate_event_fields(self.name, self.location)


@dataclass
class Event:
    """Core business entity representing a stored event."""

    id: int
    name: str
    description: str = ""
    location: str = ""

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        validate_event_fields(self.name, self.location)


def validate_event_fields(name: str, location: str) -> None:
    validate_text(name, "name", MAX_NAME_LENGTH, single_line=True)
    if len(location) > MAX_LOCATION_LENGTH:
        raise ValidationError(
            f"Location cannot be longer than {MAX_LOCATION_LENGTH} characters",
            "location",
        )
