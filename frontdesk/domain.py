from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Tuple, Optional, Dict, Any


STANDARD = 'Standard'
LUXURY = 'Luxury'
PRESIDENTIAL = 'Presidential'
CATEGORIES = (STANDARD, LUXURY, PRESIDENTIAL)

# Nightly rate assigned when a room is created; fixed for the room afterwards.
CATEGORY_RATES: Dict[str, Decimal] = {
    STANDARD: Decimal('150'),
    LUXURY: Decimal('300'),
    PRESIDENTIAL: Decimal('600'),
}

ROOM_AVAILABLE = 'available'
ROOM_OCCUPIED = 'occupied'

STAY_ACTIVE = 'active'
STAY_COMPLETED = 'completed'

CHARGE_CATEGORIES = ('restaurant', 'service', 'other')
MENU_CATEGORIES = ('food', 'drink', 'dessert')
REQUEST_TYPES = ('cleaning', 'maintenance')
SHIFTS = ('morning', 'afternoon', 'night')

REQUEST_PENDING = 'pending'
REQUEST_COMPLETED = 'completed'

MANAGER_ROLE = 'Manager'


@dataclass(frozen=True)
class Room:
    number: str
    category: str
    capacity: int
    daily_rate: Decimal
    status: str = ROOM_AVAILABLE


@dataclass(frozen=True)
class Charge:
    id: str
    description: str
    amount: Decimal
    category: str
    created_at: str


@dataclass(frozen=True)
class Stay:
    id: str
    client_id: str
    room_number: str
    check_in: date
    check_out: date
    total_days: int
    quoted_cost: Decimal
    guest_count: int
    status: str = STAY_ACTIVE
    charges: Tuple[Charge, ...] = ()
    final_cost: Optional[Decimal] = None
    discount: Decimal = Decimal('0')
    points_earned: int = 0
    points_redeemed: int = 0
    payment_method: str = ''
    created_at: str = ''
    completed_at: str = ''

    @property
    def is_active(self) -> bool:
        return self.status == STAY_ACTIVE

    @property
    def extras_total(self) -> Decimal:
        """Sum of incidental charges posted to the stay."""
        return sum((charge.amount for charge in self.charges), Decimal('0'))


@dataclass(frozen=True)
class Client:
    id: str
    name: str
    address: str = ''
    phone: str = ''
    document: str = ''
    points: int = 0


@dataclass(frozen=True)
class Employee:
    id: str
    name: str
    email: str
    role: str
    phone: str = ''
    salary: Decimal = Decimal('0')
    document: str = ''
    shift: str = 'morning'


@dataclass(frozen=True)
class ServiceRequest:
    id: str
    room_number: str
    type: str
    employee_id: str = ''
    status: str = REQUEST_PENDING
    created_at: str = ''


@dataclass(frozen=True)
class MenuItem:
    id: str
    name: str
    price: Decimal
    category: str
    description: str = ''
    image_url: str = ''


@dataclass(frozen=True)
class CheckoutReceipt:
    stay_id: str
    subtotal: Decimal
    discount: Decimal
    final_cost: Decimal
    points_earned: int
    points_redeemed: int
    payment_method: str = ''


@dataclass(frozen=True)
class Event:
    id: str
    ts: str
    name: str
    payload: Dict[str, Any]
