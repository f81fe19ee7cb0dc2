"""Immutable editing model for the content upload form.

A ContentDraft is a tree (draft -> seasons -> episodes). Every operation
returns a new tree; nothing is modified in place. Paths address nodes by
attribute name and list index, e.g. ("seasons", 0, "episodes", 2, "duration").
"""

from typing import Any, ClassVar, Literal, Self

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from streamshelf.errors import ValidationFailed
from streamshelf.models import ContentCreate, ContentStatus

Path = tuple[str | int, ...]


class FrozenModel(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )


class Episode(FrozenModel):
    episode_number: int
    video_url: str = ""
    duration: str = ""


class Season(FrozenModel):
    season_number: int
    name: str
    description: str = ""
    year: str = ""
    imdb_rating: str = ""
    genres: tuple[str, ...] = ("",)
    tags: tuple[str, ...] = ("",)
    cast: tuple[str, ...] = ("",)
    directors: tuple[str, ...] = ("",)
    writers: tuple[str, ...] = ("",)
    thumbnail_url: str = ""
    trailer_url: str = ""
    episodes: tuple[Episode, ...] = ()
    featured_sections: tuple[str, ...] = ()

    @classmethod
    def numbered(cls, number: int) -> "Season":
        return cls(season_number=number, name=f"Season {number}")


def _replace(node: Any, path: Path, value: Any) -> Any:
    if not path:
        return value
    head, rest = path[0], path[1:]

    if isinstance(node, tuple):
        if not isinstance(head, int) or not 0 <= head < len(node):
            raise ValidationFailed(f"No item at index {head!r}")
        return node[:head] + (_replace(node[head], rest, value),) + node[head + 1 :]

    if isinstance(node, BaseModel):
        if not isinstance(head, str) or head not in type(node).model_fields:
            raise ValidationFailed(f"Unknown field {head!r}")
        child = _replace(getattr(node, head), rest, value)
        if isinstance(child, list):
            child = tuple(child)
        return node.model_copy(update={head: child})

    raise ValidationFailed(f"Cannot descend into {type(node).__name__} at {head!r}")


def _get(node: Any, path: Path) -> Any:
    for step in path:
        try:
            node = node[step] if isinstance(step, int) else getattr(node, step)
        except (IndexError, AttributeError, TypeError) as exc:
            raise ValidationFailed(f"Nothing at {path!r}") from exc
    return node


def _non_blank(values: tuple[str, ...]) -> list[str]:
    return [value.strip() for value in values if value.strip()]


class ContentDraft(FrozenModel):
    content_type: Literal["movie", "tv-show"] = "movie"
    title: str = ""
    description: str = ""
    genres: tuple[str, ...] = ("",)
    year: str = ""
    rating: str = ""
    imdb_rating: str = ""
    duration: str = ""
    directors: tuple[str, ...] = ("",)
    writers: tuple[str, ...] = ("",)
    cast: tuple[str, ...] = ("",)
    thumbnail_url: str = ""
    video_url: str = ""
    trailer_url: str = ""
    tags: tuple[str, ...] = ("",)
    box_office: str = ""
    status: str = "ongoing"
    featured_sections: tuple[str, ...] = ()
    seasons: tuple[Season, ...] = ()

    def replace_at(self, path: Path, value: Any) -> Self:
        return _replace(self, path, value)

    def set(self, **fields: Any) -> Self:
        draft = self
        for name, value in fields.items():
            draft = draft.replace_at((name,), value)
        return draft

    # list-of-text fields, on the draft or on a season

    def add_item(self, path: Path) -> Self:
        return self.replace_at(path, (*_get(self, path), ""))

    def remove_item(self, path: Path, index: int) -> Self:
        """Drop one entry; the last remaining entry is kept."""
        items = _get(self, path)
        if len(items) <= 1:
            return self
        if not 0 <= index < len(items):
            raise ValidationFailed(f"No item at index {index!r}")
        return self.replace_at(path, items[:index] + items[index + 1 :])

    def toggle_section(self, section: str, path: Path = ()) -> Self:
        target = (*path, "featured_sections")
        sections = _get(self, target)
        if section in sections:
            updated = tuple(s for s in sections if s != section)
        else:
            updated = (*sections, section)
        return self.replace_at(target, updated)

    # seasons

    def add_season(self) -> Self:
        season = Season.numbered(len(self.seasons) + 1)
        return self.replace_at(("seasons",), (*self.seasons, season))

    def update_season(self, index: int, **fields: Any) -> Self:
        draft = self
        for name, value in fields.items():
            draft = draft.replace_at(("seasons", index, name), value)
        return draft

    def remove_season(self, index: int) -> Self:
        """Remove a season and renumber the rest 1..n."""
        if not 0 <= index < len(self.seasons):
            raise ValidationFailed(f"No season at index {index!r}")
        remaining = self.seasons[:index] + self.seasons[index + 1 :]
        renumbered = tuple(
            season.model_copy(
                update={"season_number": number, "name": f"Season {number}"}
            )
            for number, season in enumerate(remaining, start=1)
        )
        return self.replace_at(("seasons",), renumbered)

    # episodes

    def add_episode(self, season_index: int) -> Self:
        episodes = _get(self, ("seasons", season_index, "episodes"))
        episode = Episode(episode_number=len(episodes) + 1)
        return self.replace_at(
            ("seasons", season_index, "episodes"), (*episodes, episode)
        )

    def update_episode(self, season_index: int, episode_index: int, **fields: Any) -> Self:
        draft = self
        for name, value in fields.items():
            draft = draft.replace_at(
                ("seasons", season_index, "episodes", episode_index, name), value
            )
        return draft

    def remove_episode(self, season_index: int, episode_index: int) -> Self:
        """Remove an episode and renumber the season's episodes 1..n."""
        episodes = _get(self, ("seasons", season_index, "episodes"))
        if not 0 <= episode_index < len(episodes):
            raise ValidationFailed(f"No episode at index {episode_index!r}")
        remaining = episodes[:episode_index] + episodes[episode_index + 1 :]
        renumbered = tuple(
            episode.model_copy(update={"episode_number": number})
            for number, episode in enumerate(remaining, start=1)
        )
        return self.replace_at(("seasons", season_index, "episodes"), renumbered)

    def to_content(self) -> ContentCreate:
        """Validate the draft and convert it into a ContentCreate."""
        if not self.title.strip() or not self.thumbnail_url.strip():
            raise ValidationFailed("Please fill in all required fields")
        if self.content_type == "movie" and not self.video_url.strip():
            raise ValidationFailed("Please provide a video URL for the movie")
        if self.content_type == "tv-show" and not self.seasons:
            raise ValidationFailed("Please add at least one season for the TV show")

        is_movie = self.content_type == "movie"
        episode_count = sum(len(season.episodes) for season in self.seasons)
        year = self.year.strip()
        try:
            return ContentCreate(
                title=self.title,
                type="movie" if is_movie else "tv",
                genres=_non_blank(self.genres),
                duration=self.duration,
                episodes=None if is_movie or not episode_count else episode_count,
                rating=self.rating,
                status=ContentStatus.PUBLISHED,
                description=self.description or None,
                thumbnail_url=self.thumbnail_url,
                video_url=self.video_url or None,
                trailer_url=self.trailer_url or None,
                release_year=int(year) if year.isdigit() else None,
            )
        except ValidationError as exc:
            raise ValidationFailed.from_pydantic(exc, "Invalid content data") from exc
