from typing import TypeVar, Generic, Callable, Any, Tuple, Optional
from datetime import date

from .domain import Room, Stay, Client, MenuItem, ServiceRequest
from .errors import (
    DeskError, INVALID_DATE_RANGE, room_not_found, stay_not_found, client_not_found,
    MENU_ITEM_NOT_FOUND, SERVICE_REQUEST_NOT_FOUND,
)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T]):
    """Result of a lookup: either a found item or nothing."""

    def __init__(self, value: Optional[T], found: bool):
        self._value = value
        self._found = found

    @classmethod
    def just(cls, value: T) -> 'Maybe[T]':
        return cls(value, True)

    @classmethod
    def nothing(cls) -> 'Maybe[T]':
        return cls(None, False)

    def get_or_else(self, default: T) -> T:
        return self._value if self._found else default

    def to_either(self, error: E) -> 'Either[E, T]':
        """Found item on the right, ``error`` on the left."""
        return Either.right(self._value) if self._found else Either.left(error)

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Maybe) and (self._found, self._value) == (other._found, other._value)

    def __repr__(self) -> str:
        return f"Just({self._value!r})" if self._found else "Nothing"


class Either(Generic[E, T]):
    """Either monad for commands that may be rejected.

    Left carries a DeskError, Right carries the command result.
    """

    @classmethod
    def right(cls, value: T) -> 'Either[E, T]':
        return _Right(value)

    @classmethod
    def left(cls, error: E) -> 'Either[E, T]':
        return _Left(error)

    def map(self, func: Callable[[T], U]) -> 'Either[E, U]':
        raise NotImplementedError

    def bind(self, func: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        raise NotImplementedError

    def get_or_else(self, default: T) -> T:
        raise NotImplementedError

    def get_error(self, default: Any = None) -> Any:
        """Return the left value, or ``default`` for a Right."""
        raise NotImplementedError

    def is_right(self) -> bool:
        raise NotImplementedError

    def is_left(self) -> bool:
        return not self.is_right()


class _Right(Either[Any, T]):
    def __init__(self, value: T):
        self._value = value

    def map(self, func: Callable[[T], U]) -> 'Either[Any, U]':
        return Either.right(func(self._value))

    def bind(self, func: Callable[[T], Either[Any, U]]) -> 'Either[Any, U]':
        return func(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def get_error(self, default: Any = None) -> Any:
        return default

    def is_right(self) -> bool:
        return True

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Right) and self._value == other._value

    def __repr__(self) -> str:
        return f"Right({self._value!r})"


class _Left(Either[E, Any]):
    def __init__(self, error: E):
        self._error = error

    def map(self, func: Callable[[Any], Any]) -> 'Either[E, Any]':
        return self

    def bind(self, func: Callable[[Any], Either[E, Any]]) -> 'Either[E, Any]':
        return self

    def get_or_else(self, default: Any) -> Any:
        return default

    def get_error(self, default: Any = None) -> Any:
        return self._error

    def is_right(self) -> bool:
        return False

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Left) and self._error == other._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"


# Lookups over the state tuples
def _find(items: tuple, predicate: Callable[[Any], bool]) -> Maybe:
    for item in items:
        if predicate(item):
            return Maybe.just(item)
    return Maybe.nothing()


def safe_room_lookup(rooms: Tuple[Room, ...], number: str) -> Either[DeskError, Room]:
    """Find a room by number."""
    return _find(rooms, lambda room: room.number == number).to_either(room_not_found(number))


def safe_stay_lookup(stays: Tuple[Stay, ...], stay_id: str) -> Either[DeskError, Stay]:
    """Find a stay by id."""
    return _find(stays, lambda stay: stay.id == stay_id).to_either(stay_not_found(stay_id))


def safe_client_lookup(clients: Tuple[Client, ...], client_id: str) -> Either[DeskError, Client]:
    """Find a client by id."""
    return _find(clients, lambda client: client.id == client_id).to_either(
        client_not_found(client_id)
    )


def safe_menu_item_lookup(items: Tuple[MenuItem, ...], item_id: str) -> Either[DeskError, MenuItem]:
    return _find(items, lambda item: item.id == item_id).to_either(
        DeskError(MENU_ITEM_NOT_FOUND, f"Menu item {item_id} not found")
    )


def safe_request_lookup(requests: Tuple[ServiceRequest, ...],
                        request_id: str) -> Either[DeskError, ServiceRequest]:
    return _find(requests, lambda req: req.id == request_id).to_either(
        DeskError(SERVICE_REQUEST_NOT_FOUND, f"Service request {request_id} not found")
    )


def validate_dates(check_in: date, check_out: date) -> Either[DeskError, Tuple[date, date]]:
    """Check-out must be strictly after check-in."""
    if check_out <= check_in:
        return Either.left(DeskError(
            INVALID_DATE_RANGE,
            f"Check-out {check_out.isoformat()} must be after check-in {check_in.isoformat()}"
        ))
    return Either.right((check_in, check_out))


def parse_date(value: str) -> Either[DeskError, date]:
    """Parse an ISO ``YYYY-MM-DD`` date."""
    try:
        return Either.right(date.fromisoformat(value))
    except (TypeError, ValueError):
        return Either.left(DeskError(INVALID_DATE_RANGE, f"Invalid date {value!r}. Use YYYY-MM-DD"))
