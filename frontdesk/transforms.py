import json
import os
import tempfile
from datetime import date
from decimal import Decimal
from typing import Dict, Tuple, Any

from .domain import (
    Client, Employee, Room, Stay, Charge, ServiceRequest, MenuItem,
    CATEGORY_RATES, MANAGER_ROLE,
)
from .store import HotelState, DEFAULT_POINTS_PER_DISCOUNT


INITIAL_ROOMS: Tuple[Room, ...] = (
    Room('101', 'Standard', 2, CATEGORY_RATES['Standard']),
    Room('102', 'Standard', 2, CATEGORY_RATES['Standard']),
    Room('201', 'Luxury', 3, CATEGORY_RATES['Luxury']),
    Room('202', 'Luxury', 4, CATEGORY_RATES['Luxury']),
    Room('301', 'Presidential', 2, CATEGORY_RATES['Presidential']),
)

INITIAL_MENU: Tuple[MenuItem, ...] = (
    MenuItem('1', 'Bacon Burger', Decimal('35.00'), 'food',
             'Brioche bun, 180g patty, crispy bacon, cheddar.'),
    MenuItem('2', 'Chicken Parmigiana', Decimal('89.90'), 'food',
             'Served with rice and fries. Serves 2.'),
    MenuItem('3', 'Lime Caipirinha', Decimal('22.00'), 'drink',
             'Craft cachaça, lime and sugar.'),
    MenuItem('4', 'Canned Soda', Decimal('8.00'), 'drink'),
)

DEFAULT_ADMIN = Employee(
    id='ADM001',
    name='Default Administrator',
    email='admin@hotel.com',
    role=MANAGER_ROLE,
    phone='0000-0000',
    salary=Decimal('5000'),
    document='000.000.000-00',
    shift='morning',
)


def ensure_manager(employees: Tuple[Employee, ...]) -> Tuple[Employee, ...]:
    """Guarantee at least one manager so the roster is usable."""
    if any(e.role == MANAGER_ROLE and e.email for e in employees):
        return employees
    return employees + (DEFAULT_ADMIN,)


def default_state(points_per_discount: int = DEFAULT_POINTS_PER_DISCOUNT) -> HotelState:
    """State used on first run."""
    return HotelState(
        employees=(DEFAULT_ADMIN,),
        rooms=INITIAL_ROOMS,
        menu_items=INITIAL_MENU,
        points_per_discount=points_per_discount,
    )


# --- Document -> domain ---

def _charge(data: Dict[str, Any]) -> Charge:
    return Charge(
        id=data['id'],
        description=data['description'],
        amount=Decimal(str(data['amount'])),
        category=data['category'],
        created_at=data.get('created_at', ''),
    )


def _stay(data: Dict[str, Any]) -> Stay:
    final_cost = data.get('final_cost')
    return Stay(
        id=data['id'],
        client_id=data['client_id'],
        room_number=data['room_number'],
        check_in=date.fromisoformat(data['check_in']),
        check_out=date.fromisoformat(data['check_out']),
        total_days=int(data['total_days']),
        quoted_cost=Decimal(str(data['quoted_cost'])),
        guest_count=int(data['guest_count']),
        status=data.get('status', 'active'),
        charges=tuple(_charge(c) for c in data.get('charges', [])),
        final_cost=Decimal(str(final_cost)) if final_cost is not None else None,
        discount=Decimal(str(data.get('discount', '0'))),
        points_earned=int(data.get('points_earned', 0)),
        points_redeemed=int(data.get('points_redeemed', 0)),
        payment_method=data.get('payment_method', ''),
        created_at=data.get('created_at', ''),
        completed_at=data.get('completed_at', ''),
    )


def _with_decimal(data: Dict[str, Any], *fields: str) -> Dict[str, Any]:
    return {**data, **{f: Decimal(str(data[f])) for f in fields if f in data}}


def parse_state(document: Dict[str, Any]) -> HotelState:
    """Parse a persisted document into a HotelState."""
    rooms = tuple(Room(**_with_decimal(r, 'daily_rate')) for r in document.get('rooms', []))
    menu = tuple(MenuItem(**_with_decimal(m, 'price')) for m in document.get('menu_items', []))
    employees = tuple(Employee(**_with_decimal(e, 'salary')) for e in document.get('employees', []))
    loyalty = document.get('loyalty_config', {})

    return HotelState(
        clients=tuple(Client(**c) for c in document.get('clients', [])),
        employees=ensure_manager(employees),
        rooms=rooms or INITIAL_ROOMS,
        stays=tuple(_stay(s) for s in document.get('stays', [])),
        service_requests=tuple(ServiceRequest(**r) for r in document.get('service_requests', [])),
        menu_items=menu or INITIAL_MENU,
        points_per_discount=int(loyalty.get('points_per_discount', DEFAULT_POINTS_PER_DISCOUNT)),
    )


# --- Domain -> document ---

def to_plain(value: Any) -> Any:
    """Convert a domain record (or tuple of them) into JSON-ready data."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (tuple, list)):
        return [to_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if hasattr(value, '__dataclass_fields__'):
        return {name: to_plain(getattr(value, name)) for name in value.__dataclass_fields__}
    return value


def dump_state(state: HotelState) -> Dict[str, Any]:
    """Full snapshot of the state as a JSON-ready document."""
    return {
        'clients': to_plain(state.clients),
        'employees': to_plain(state.employees),
        'rooms': to_plain(state.rooms),
        'stays': to_plain(state.stays),
        'service_requests': to_plain(state.service_requests),
        'menu_items': to_plain(state.menu_items),
        'loyalty_config': {'points_per_discount': state.points_per_discount},
    }


def load_state(path: str, points_per_discount: int = DEFAULT_POINTS_PER_DISCOUNT) -> HotelState:
    """Load the document at ``path``; a missing file yields the first-run state."""
    if not os.path.exists(path):
        return default_state(points_per_discount)
    with open(path, 'r', encoding='utf-8') as f:
        document = json.load(f)
    if 'loyalty_config' not in document:
        document = {**document, 'loyalty_config': {'points_per_discount': points_per_discount}}
    return parse_state(document)


def save_state(path: str, state: HotelState) -> None:
    """Rewrite the whole document; the file is replaced atomically."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(dump_state(state), f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
    except BaseException:
        os.unlink(tmp_path)
        raise
