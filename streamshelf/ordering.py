"""Slot arithmetic for upcoming-content section orders.

The service applies the shift as one UPDATE; these helpers describe the same
move on plain integers so callers can preview it and so it can be checked
without a database.
"""

from collections.abc import Iterable

from streamshelf.errors import CapacityExceeded, ValidationFailed
from streamshelf.models import MAX_SECTION_ORDER, MAX_UPCOMING, MIN_SECTION_ORDER


def validate_position(position: object) -> int:
    """Return `position` as an int in [1, 20] or raise ValidationFailed."""
    if isinstance(position, bool):
        raise ValidationFailed("Section order must be a number")
    if isinstance(position, str):
        position = position.strip()
        if not position.removeprefix("-").isdecimal():
            raise ValidationFailed("Section order must be a number")
        position = int(position)
    if not isinstance(position, int):
        raise ValidationFailed("Section order must be a number")
    if not MIN_SECTION_ORDER <= position <= MAX_SECTION_ORDER:
        raise ValidationFailed(
            f"Section order must be between {MIN_SECTION_ORDER} and {MAX_SECTION_ORDER}"
        )
    return position


def check_capacity(count: int, limit: int = MAX_UPCOMING) -> None:
    if count >= limit:
        raise CapacityExceeded(
            f"Maximum of {limit} upcoming content items allowed. "
            "Please delete some items first."
        )


def shift_orders(existing: Iterable[int], position: int) -> list[int]:
    """Orders of the existing entries after opening a gap at `position`.

    Entries at or after the position move down by one, the rest keep their
    slot. Result is in the same order as the input.
    """
    return [order + 1 if order >= position else order for order in existing]


def orders_after_insert(existing: Iterable[int], position: int) -> list[int]:
    """Sorted order set after inserting a new entry at `position`."""
    return sorted([*shift_orders(existing, position), position])
