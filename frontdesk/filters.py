from typing import Tuple, Callable, Iterator, Optional
from datetime import date, timedelta

from .domain import Room, Stay


def overlaps(start: date, end: date, other_start: date, other_end: date) -> bool:
    """Half-open interval overlap: [start, end) against [other_start, other_end).

    A checkout and a check-in on the same day do not overlap.
    """
    return start < other_end and end > other_start


# Filter functions (Higher Order Functions)
def by_capacity(guests: int) -> Callable[[Room], bool]:
    """Create capacity filter function."""
    return lambda room: room.capacity >= guests


def by_category(category: Optional[str]) -> Callable[[Room], bool]:
    """Create category filter function; ``None`` accepts any category."""
    if not category:
        return lambda room: True
    return lambda room: room.category == category


def by_free_interval(stays: Tuple[Stay, ...], check_in: date, check_out: date) -> Callable[[Room], bool]:
    """Reject rooms holding an active stay that overlaps the requested interval."""
    booked = {}
    for stay in stays:
        if stay.is_active:
            booked.setdefault(stay.room_number, []).append(stay)

    def _filter(room: Room) -> bool:
        return not any(
            overlaps(check_in, check_out, stay.check_in, stay.check_out)
            for stay in booked.get(room.number, ())
        )
    return _filter


def compose_filters(*filters: Callable) -> Callable:
    """Compose multiple filters into one."""
    def composed(item) -> bool:
        return all(f(item) for f in filters)
    return composed


def split_date_range(start: date, end: date) -> Iterator[date]:
    """Yield every night in [start, end)."""
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)
