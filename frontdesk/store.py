from dataclasses import dataclass, replace
from datetime import datetime
from typing import Tuple, Dict, Any
from uuid import uuid4

from .domain import Client, Employee, Room, Stay, ServiceRequest, MenuItem

DEFAULT_POINTS_PER_DISCOUNT = 10


def new_id(prefix: str) -> str:
    """Short unique identifier, e.g. ``stay_1a2b3c4d``."""
    return f"{prefix}_{uuid4().hex[:8]}"


def now_iso() -> str:
    return datetime.now().isoformat(timespec='seconds')


@dataclass(frozen=True)
class HotelState:
    """Immutable snapshot of everything the front desk knows.

    Commands never mutate a state in place; they build a new one which the
    FrontDesk facade commits in a single assignment.
    """

    clients: Tuple[Client, ...] = ()
    employees: Tuple[Employee, ...] = ()
    rooms: Tuple[Room, ...] = ()
    stays: Tuple[Stay, ...] = ()
    service_requests: Tuple[ServiceRequest, ...] = ()
    menu_items: Tuple[MenuItem, ...] = ()
    points_per_discount: int = DEFAULT_POINTS_PER_DISCOUNT

    def with_room(self, room: Room) -> 'HotelState':
        return replace(self, rooms=tuple(
            room if r.number == room.number else r for r in self.rooms
        ))

    def with_stay(self, stay: Stay) -> 'HotelState':
        return replace(self, stays=tuple(
            stay if s.id == stay.id else s for s in self.stays
        ))

    def with_client(self, client: Client) -> 'HotelState':
        return replace(self, clients=tuple(
            client if c.id == client.id else c for c in self.clients
        ))

    def with_request(self, request: ServiceRequest) -> 'HotelState':
        return replace(self, service_requests=tuple(
            request if r.id == request.id else r for r in self.service_requests
        ))

    def active_stays(self) -> Tuple[Stay, ...]:
        return tuple(s for s in self.stays if s.is_active)

    def counts(self) -> Dict[str, Any]:
        return {
            'clients': len(self.clients),
            'employees': len(self.employees),
            'rooms': len(self.rooms),
            'stays': len(self.stays),
            'service_requests': len(self.service_requests),
            'menu_items': len(self.menu_items),
        }
