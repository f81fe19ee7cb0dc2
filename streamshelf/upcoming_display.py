from collections.abc import Iterable
from datetime import UTC, date, datetime

from streamshelf.models import MAX_UPCOMING, UpcomingEntry


def utc_today() -> date:
    return datetime.now(UTC).date()


def display_upcoming(
    entries: Iterable[UpcomingEntry],
    today: date | None = None,
    limit: int = MAX_UPCOMING,
) -> list[UpcomingEntry]:
    """Entries releasing today or later, by ascending section order, capped.

    `today` defaults to the current UTC date. An entry dated before it is
    dropped whatever its section order.
    """
    today = today or utc_today()
    upcoming = [entry for entry in entries if entry.release_date >= today]
    upcoming.sort(key=lambda entry: entry.section_order)
    return upcoming[:limit]
