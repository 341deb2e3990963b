"""Stay ledger: day counting, stay creation and incidental charges.

Every function here is pure. It receives a HotelState and returns an Either
holding the new state together with the created record.
"""
import math
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Tuple, Any

from .domain import Stay, Charge, Room, ROOM_OCCUPIED, CHARGE_CATEGORIES
from .errors import (
    DeskError, INVALID_DATE_RANGE, INVALID_CHARGE, INVALID_GUEST_COUNT, STAY_NOT_ACTIVE,
)
from .ftypes import Either, safe_room_lookup, safe_stay_lookup, safe_client_lookup
from .store import HotelState, new_id, now_iso

# Lower bound applied to every day count. 0 keeps same-day bookings free of
# charge and points; raise to 1 to bill a same-day stay as one night.
MIN_STAY_DAYS = 0

SECONDS_PER_DAY = 86400


def total_days(check_in: date, check_out: date, minimum: int = MIN_STAY_DAYS) -> int:
    """Whole days between the dates, rounded up.

    The difference is taken in absolute value, so reversed dates still count.
    """
    seconds = abs((check_out - check_in).total_seconds())
    return max(minimum, math.ceil(seconds / SECONDS_PER_DAY))


def quote_cost(room: Room, days: int) -> Decimal:
    return room.daily_rate * days


def running_cost(stay: Stay, room: Room) -> Decimal:
    """Current bill for a stay: nights at the room's present rate plus extras."""
    return quote_cost(room, stay.total_days) + stay.extras_total


def to_amount(value: Any, allow_zero: bool = False) -> Either[DeskError, Decimal]:
    """Parse a positive currency amount (or non-negative with ``allow_zero``)."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Either.left(DeskError(INVALID_CHARGE, f"Invalid amount {value!r}"))
    if not amount.is_finite() or amount < 0 or (amount == 0 and not allow_zero):
        return Either.left(DeskError(INVALID_CHARGE, "Charge amount must be positive"))
    return Either.right(amount)


def create_stay(
    state: HotelState,
    client_id: str,
    room_number: str,
    check_in: date,
    check_out: date,
    guest_count: int,
    min_days: int = MIN_STAY_DAYS
) -> Either[DeskError, Tuple[HotelState, Stay]]:
    """Book a room for a client.

    Availability is not re-checked: callers pick the room from an availability
    search. The room is flipped to occupied unconditionally.
    """
    if check_out < check_in:
        return Either.left(DeskError(INVALID_DATE_RANGE, "Check-out cannot precede check-in"))
    if guest_count < 1:
        return Either.left(DeskError(INVALID_GUEST_COUNT, "Number of guests must be positive"))

    def book(room: Room) -> Either[DeskError, Tuple[HotelState, Stay]]:
        days = total_days(check_in, check_out, min_days)
        stay = Stay(
            id=new_id('stay'),
            client_id=client_id,
            room_number=room.number,
            check_in=check_in,
            check_out=check_out,
            total_days=days,
            quoted_cost=quote_cost(room, days),
            guest_count=guest_count,
            created_at=now_iso(),
        )
        new_state = replace(state, stays=state.stays + (stay,)).with_room(
            replace(room, status=ROOM_OCCUPIED)
        )
        return Either.right((new_state, stay))

    return (
        safe_room_lookup(state.rooms, room_number)
        .bind(lambda room: safe_client_lookup(state.clients, client_id).map(lambda _: room))
        .bind(book)
    )


def add_charge(
    state: HotelState,
    stay_id: str,
    description: str,
    amount: Any,
    category: str
) -> Either[DeskError, Tuple[HotelState, Charge]]:
    """Append an incidental charge to an active stay."""

    def ensure_active(stay: Stay) -> Either[DeskError, Stay]:
        if not stay.is_active:
            return Either.left(DeskError(STAY_NOT_ACTIVE, f"Stay {stay.id} is already checked out"))
        return Either.right(stay)

    def append(stay: Stay) -> Either[DeskError, Tuple[HotelState, Charge]]:
        if category not in CHARGE_CATEGORIES:
            return Either.left(DeskError(INVALID_CHARGE, f"Unknown charge category {category!r}"))
        if not description or not description.strip():
            return Either.left(DeskError(INVALID_CHARGE, "Charge description is required"))

        def build(value: Decimal) -> Tuple[HotelState, Charge]:
            charge = Charge(
                id=new_id('charge'),
                description=description.strip(),
                amount=value,
                category=category,
                created_at=now_iso(),
            )
            return state.with_stay(replace(stay, charges=stay.charges + (charge,))), charge

        return to_amount(amount).map(build)

    return safe_stay_lookup(state.stays, stay_id).bind(ensure_active).bind(append)
