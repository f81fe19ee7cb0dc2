"""Home page shelves: named, capped, newest-first views over the catalog"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from streamshelf.entities import CamelModel
from streamshelf.models import ContentItem

SHELF_SIZE = 11
GENRE_SEPARATOR = " • "


def genre_label(item: ContentItem) -> str:
    return GENRE_SEPARATOR.join(item.genres)


def release_year(item: ContentItem) -> int | None:
    """Release year, falling back to the year the item was added."""
    if item.release_year is not None:
        return item.release_year
    if item.created_at is not None:
        return item.created_at.year
    return None


def _newest_first(item: ContentItem) -> tuple[bool, int]:
    year = release_year(item)
    return (year is None, -(year or 0))


@dataclass(frozen=True)
class ShelfDefinition:
    """A shelf title and the genre keywords that admit an item to it.

    No keywords means every item qualifies.
    """

    title: str
    keywords: tuple[str, ...] = field(default_factory=tuple)

    def matches(self, item: ContentItem) -> bool:
        if not self.keywords:
            return True
        label = genre_label(item).lower()
        return any(keyword.lower() in label for keyword in self.keywords)


class Shelf(CamelModel):
    title: str
    items: list[ContentItem]


# TODO: give New Releases and Popular real rules once view counts and
# publish dates are tracked; both currently admit every item.
DEFAULT_SHELVES: tuple[ShelfDefinition, ...] = (
    ShelfDefinition("New Releases"),
    ShelfDefinition("Popular"),
    ShelfDefinition("Action & Adventure", ("action", "adventure")),
    ShelfDefinition("Comedy", ("comedy",)),
    ShelfDefinition("Crime", ("crime",)),
    ShelfDefinition("Drama", ("drama",)),
    ShelfDefinition("Horror", ("horror",)),
    ShelfDefinition("Mystery & Thriller", ("mystery", "thriller")),
    ShelfDefinition("Sci-Fi", ("sci-fi",)),
)


def latest(
    catalog: Iterable[ContentItem],
    predicate: Callable[[ContentItem], bool],
    size: int = SHELF_SIZE,
) -> list[ContentItem]:
    """Filter, sort newest first (stable for equal years) and cap."""
    return sorted(filter(predicate, catalog), key=_newest_first)[:size]


def build_shelf(
    catalog: Iterable[ContentItem], definition: ShelfDefinition, size: int = SHELF_SIZE
) -> Shelf:
    return Shelf(title=definition.title, items=latest(catalog, definition.matches, size))


def build_shelves(
    catalog: Sequence[ContentItem],
    definitions: Sequence[ShelfDefinition] = DEFAULT_SHELVES,
    size: int = SHELF_SIZE,
) -> list[Shelf]:
    return [build_shelf(catalog, definition, size) for definition in definitions]
