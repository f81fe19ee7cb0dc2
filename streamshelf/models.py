"""Catalog entities and their create/update/search/sort models"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Self
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from streamshelf.entities import BaseEntity, CamelModel, Column, SchemaBase, SortOrder

MAX_UPCOMING = 20
MIN_SECTION_ORDER = 1
MAX_SECTION_ORDER = 20

SectionOrder = Annotated[int, Field(ge=MIN_SECTION_ORDER, le=MAX_SECTION_ORDER)]


class UpcomingType(str, Enum):
    MOVIE = "movie"
    TV = "tv"


class ContentStatus(str, Enum):
    PUBLISHED = "Published"
    DRAFT = "Draft"


def _clean_genres(genres: list[str]) -> list[str]:
    """Strip blanks and duplicates, keeping first-seen order."""
    cleaned: list[str] = []
    for genre in genres:
        genre = genre.strip()
        if genre and genre not in cleaned:
            cleaned.append(genre)
    return cleaned


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value.strip()


def _reject_nulls(model: CamelModel, fields: tuple[str, ...]) -> None:
    """Required columns may be left out of an update but not set to null."""
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{name} cannot be null")


# Content


class ContentFields(CamelModel):
    title: str
    type: str
    genres: list[str] = Field(default_factory=list)
    duration: str
    episodes: int | None = Field(default=None, gt=0)
    rating: str
    status: ContentStatus = ContentStatus.PUBLISHED
    views: str = "0"
    description: str | None = None
    thumbnail_url: str | None = None
    video_url: str | None = None
    trailer_url: str | None = None
    release_year: int | None = None

    @field_validator("title", "type")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("genres")
    @classmethod
    def _genres(cls, value: list[str]) -> list[str]:
        return _clean_genres(value)


class ContentCreate(ContentFields):
    pass


class ContentItem(BaseEntity, ContentFields):
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContentUpdate(CamelModel):
    title: str | None = None
    type: str | None = None
    genres: list[str] | None = None
    duration: str | None = None
    episodes: int | None = Field(default=None, gt=0)
    rating: str | None = None
    status: ContentStatus | None = None
    views: str | None = None
    description: str | None = None
    thumbnail_url: str | None = None
    video_url: str | None = None
    trailer_url: str | None = None
    release_year: int | None = None

    @field_validator("title", "type")
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        return None if value is None else _require_text(value)

    @field_validator("genres")
    @classmethod
    def _genres(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else _clean_genres(value)

    @model_validator(mode="after")
    def _required_not_null(self) -> Self:
        _reject_nulls(
            self, ("title", "type", "genres", "duration", "rating", "status", "views")
        )
        return self


class ContentSearch(CamelModel):
    id: UUID | None = None
    title: str | None = None
    type: str | None = None
    status: ContentStatus | None = None
    release_year: int | None = None


class ContentSort(CamelModel):
    release_year: SortOrder | None = None
    title: SortOrder | None = None
    created_at: SortOrder | None = None


# Upcoming content


class UpcomingSchema(SchemaBase):
    id = Column[UUID]("id")
    section_order = Column[int]("section_order")
    release_date = Column[date]("release_date")


class UpcomingFields(CamelModel):
    title: str
    type: UpcomingType
    genres: list[str]
    episodes: int | None = Field(default=None, gt=0)
    release_date: date
    description: str
    thumbnail_url: str | None = None
    trailer_url: str | None = None
    section_order: SectionOrder

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("genres")
    @classmethod
    def _genres(cls, value: list[str]) -> list[str]:
        cleaned = _clean_genres(value)
        if not cleaned:
            raise ValueError("at least one genre is required")
        return cleaned

    @field_validator("thumbnail_url", "trailer_url")
    @classmethod
    def _blank_url_is_none(cls, value: str | None) -> str | None:
        return value or None

    @model_validator(mode="after")
    def _episodes_only_for_tv(self) -> Self:
        if self.episodes is not None and self.type != UpcomingType.TV.value:
            raise ValueError("episodes can only be set for tv entries")
        return self


class UpcomingCreate(UpcomingFields):
    pass


class UpcomingEntry(BaseEntity):
    """A stored upcoming entry.

    Unlike UpcomingCreate, section_order is not capped at 20 here: shifting
    existing entries down can push them past the last selectable slot.
    """

    title: str
    type: UpcomingType
    genres: list[str]
    episodes: int | None = None
    release_date: date
    description: str
    thumbnail_url: str | None = None
    trailer_url: str | None = None
    section_order: int = Field(ge=1)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UpcomingUpdate(CamelModel):
    title: str | None = None
    type: UpcomingType | None = None
    genres: list[str] | None = None
    episodes: int | None = Field(default=None, gt=0)
    release_date: date | None = None
    description: str | None = None
    thumbnail_url: str | None = None
    trailer_url: str | None = None
    section_order: SectionOrder | None = None

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        return None if value is None else _require_text(value)

    @field_validator("thumbnail_url", "trailer_url")
    @classmethod
    def _blank_url_is_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("genres")
    @classmethod
    def _genres(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        cleaned = _clean_genres(value)
        if not cleaned:
            raise ValueError("at least one genre is required")
        return cleaned

    @model_validator(mode="after")
    def _required_not_null(self) -> Self:
        _reject_nulls(
            self,
            ("title", "type", "genres", "release_date", "description", "section_order"),
        )
        return self


class UpcomingSort(CamelModel):
    section_order: SortOrder | None = None
    release_date: SortOrder | None = None
