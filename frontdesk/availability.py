from typing import Iterator, Tuple, Optional
from datetime import date

from .domain import Room, Stay, CATEGORIES
from .errors import DeskError, INVALID_CATEGORY, INVALID_GUEST_COUNT
from .filters import by_capacity, by_category, by_free_interval, compose_filters
from .ftypes import Either, validate_dates


def room_sort_key(room: Room) -> Tuple[int, int, str]:
    """Numeric room numbers first in numeric order, then the rest alphabetically."""
    if room.number.isdigit():
        return (0, int(room.number), room.number)
    return (1, 0, room.number)


def iter_available_rooms(
    rooms: Tuple[Room, ...],
    stays: Tuple[Stay, ...],
    check_in: date,
    check_out: date,
    guest_count: int,
    category: Optional[str] = None
) -> Iterator[Room]:
    """Lazily yield rooms that fit the party, the category and the dates.

    Filters run in order: capacity, category, then overlap against active stays.
    """
    accept = compose_filters(
        by_capacity(guest_count),
        by_category(category),
        by_free_interval(stays, check_in, check_out),
    )
    for room in rooms:
        if accept(room):
            yield room


def find_available(
    rooms: Tuple[Room, ...],
    stays: Tuple[Stay, ...],
    check_in: date,
    check_out: date,
    guest_count: int,
    category: Optional[str] = None
) -> Either[DeskError, Tuple[Room, ...]]:
    """Rooms bookable over [check_in, check_out), sorted by room number."""
    if guest_count < 1:
        return Either.left(DeskError(INVALID_GUEST_COUNT, "Number of guests must be positive"))
    if category and category not in CATEGORIES:
        return Either.left(DeskError(INVALID_CATEGORY, f"Unknown room category {category!r}"))

    return validate_dates(check_in, check_out).map(
        lambda _: tuple(sorted(
            iter_available_rooms(rooms, stays, check_in, check_out, guest_count, category),
            key=room_sort_key
        ))
    )
