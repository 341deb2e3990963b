import logging
import threading
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Tuple, Callable, Dict, Any, Optional

from . import checkout as checkout_ops
from . import ledger
from .availability import find_available
from .config import Settings, get_settings
from .domain import (
    Client, Employee, Room, Stay, Charge, ServiceRequest, MenuItem, CheckoutReceipt,
    CATEGORIES, CATEGORY_RATES, MENU_CATEGORIES, REQUEST_TYPES, REQUEST_COMPLETED, SHIFTS,
    ROOM_OCCUPIED,
)
from .errors import (
    DeskError, DUPLICATE_ROOM, DUPLICATE_EMPLOYEE, INVALID_CATEGORY, INVALID_CONFIG,
    INVALID_REQUEST,
)
from .frp import (
    EventBus, STAY_CREATED, CHARGE_ADDED, CHECKED_OUT, ROOM_STATUS_CHANGED, POINTS_CREDITED,
    POINTS_REDEEMED, CLEANING_REQUESTED, CLIENT_ADDED, EMPLOYEE_ADDED, ROOM_ADDED,
    SERVICE_REQUEST_ADDED, SERVICE_REQUEST_COMPLETED, MENU_ITEM_ADDED, LOYALTY_CONFIG_CHANGED,
)
from .ftypes import (
    Either, safe_stay_lookup, safe_client_lookup, safe_room_lookup, safe_menu_item_lookup,
    safe_request_lookup,
)
from .ledger import to_amount
from .store import HotelState, new_id, now_iso
from .transforms import default_state, dump_state, load_state, save_state

logger = logging.getLogger(__name__)


class FrontDesk:
    """Command facade over the hotel state.

    Every command validates against the current state, builds a new state and
    commits it in one assignment. Rejections come back as ``Either.left`` with
    a DeskError; nothing is raised across this boundary. Commands are
    serialised by a lock so the checkout read-then-write cannot interleave.
    """

    def __init__(self,
                 state: Optional[HotelState] = None,
                 settings: Optional[Settings] = None,
                 bus: Optional[EventBus] = None,
                 on_commit: Optional[Callable[[HotelState], None]] = None):
        self.settings = settings or get_settings()
        self._state = state if state is not None else default_state(self.settings.points_per_discount)
        self.bus = bus or EventBus(self.settings.event_history_limit)
        self._on_commit = on_commit
        self._lock = threading.RLock()

    # --- state access ---

    @property
    def state(self) -> HotelState:
        return self._state

    def snapshot(self) -> Dict[str, Any]:
        """Full state document for the storage collaborator."""
        return dump_state(self._state)

    def _commit(self, new_state: HotelState) -> None:
        # Persist before swapping in the new state; a failed write leaves the old one.
        if self._on_commit:
            try:
                self._on_commit(new_state)
            except OSError:
                logger.exception("Failed to persist front-desk state")
                raise
        self._state = new_state

    def _reject(self, command: str, result: Either) -> Either:
        error = result.get_error()
        logger.warning("%s rejected: %s", command, error)
        return result

    # --- availability & stays ---

    def find_available(self,
                       check_in: date,
                       check_out: date,
                       guest_count: int,
                       category: Optional[str] = None) -> Either[DeskError, Tuple[Room, ...]]:
        result = find_available(
            self._state.rooms, self._state.stays, check_in, check_out, guest_count, category
        )
        if result.is_left():
            return self._reject('find_available', result)
        return result

    def create_stay(self,
                    client_id: str,
                    room_number: str,
                    check_in: date,
                    check_out: date,
                    guest_count: int) -> Either[DeskError, Stay]:
        with self._lock:
            result = ledger.create_stay(
                self._state, client_id, room_number, check_in, check_out, guest_count,
                self.settings.min_stay_days
            )
            if result.is_left():
                return self._reject('create_stay', result)

            new_state, stay = result.get_or_else(None)
            self._commit(new_state)
            logger.info("Stay %s booked: room %s, client %s, %s nights",
                        stay.id, stay.room_number, stay.client_id, stay.total_days)
            self.bus.emit(STAY_CREATED, {
                'stay_id': stay.id,
                'client_id': stay.client_id,
                'room_number': stay.room_number,
                'check_in': stay.check_in.isoformat(),
                'check_out': stay.check_out.isoformat(),
                'total_days': stay.total_days,
                'quoted_cost': str(stay.quoted_cost),
            })
            self.bus.emit(ROOM_STATUS_CHANGED, {'room_number': stay.room_number, 'status': ROOM_OCCUPIED})
            return Either.right(stay)

    def add_charge(self,
                   stay_id: str,
                   description: str,
                   amount: Any,
                   category: str) -> Either[DeskError, Charge]:
        with self._lock:
            result = ledger.add_charge(self._state, stay_id, description, amount, category)
            if result.is_left():
                return self._reject('add_charge', result)

            new_state, charge = result.get_or_else(None)
            self._commit(new_state)
            logger.info("Charge %s of %s posted to stay %s", charge.id, charge.amount, stay_id)
            self.bus.emit(CHARGE_ADDED, {
                'stay_id': stay_id,
                'charge_id': charge.id,
                'description': charge.description,
                'amount': str(charge.amount),
                'category': charge.category,
            })
            return Either.right(charge)

    def preview_checkout(self, stay_id: str, points_to_redeem: int = 0) -> Either[DeskError, CheckoutReceipt]:
        """Price a checkout without committing it."""
        return checkout_ops.plan_checkout(self._state, stay_id, points_to_redeem).map(
            lambda plan: plan.receipt
        )

    def checkout(self,
                 stay_id: str,
                 points_to_redeem: int = 0,
                 payment_method: str = 'cash') -> Either[DeskError, CheckoutReceipt]:
        with self._lock:
            result = checkout_ops.checkout(self._state, stay_id, points_to_redeem, payment_method)
            if result.is_left():
                return self._reject('checkout', result)

            new_state, plan = result.get_or_else(None)
            self._commit(new_state)
            receipt = plan.receipt
            logger.info("Stay %s checked out: final %s, discount %s, +%s/-%s points",
                        stay_id, receipt.final_cost, receipt.discount,
                        receipt.points_earned, receipt.points_redeemed)

            self.bus.emit(CHECKED_OUT, {
                'stay_id': stay_id,
                'room_number': plan.room.number,
                'client_id': plan.client.id,
                'final_cost': str(receipt.final_cost),
                'discount': str(receipt.discount),
                'payment_method': payment_method,
            })
            room = safe_room_lookup(new_state.rooms, plan.room.number).get_or_else(plan.room)
            self.bus.emit(ROOM_STATUS_CHANGED, {'room_number': room.number, 'status': room.status})
            if receipt.points_redeemed:
                self.bus.emit(POINTS_REDEEMED, {
                    'client_id': plan.client.id, 'points': receipt.points_redeemed, 'stay_id': stay_id,
                })
            self.bus.emit(POINTS_CREDITED, {
                'client_id': plan.client.id, 'points': receipt.points_earned, 'stay_id': stay_id,
            })
            self.bus.emit(CLEANING_REQUESTED, {
                'request_id': plan.cleaning.id, 'room_number': plan.cleaning.room_number,
            })
            return Either.right(receipt)

    def get_stay(self, stay_id: str) -> Either[DeskError, Stay]:
        return safe_stay_lookup(self._state.stays, stay_id)

    # --- clients ---

    def add_client(self, name: str, address: str = '', phone: str = '', document: str = '') -> Either[DeskError, Client]:
        if not name or not name.strip():
            return self._reject('add_client', Either.left(DeskError(INVALID_REQUEST, "Client name is required")))
        with self._lock:
            client = Client(
                id=new_id('client'),
                name=name.strip(),
                address=address,
                phone=phone,
                document=document,
            )
            self._commit(replace(self._state, clients=self._state.clients + (client,)))
            logger.info("Client %s registered", client.id)
            self.bus.emit(CLIENT_ADDED, {'client_id': client.id, 'name': client.name})
            return Either.right(client)

    def get_client(self, client_id: str) -> Either[DeskError, Client]:
        return safe_client_lookup(self._state.clients, client_id)

    def search_clients(self, query: str) -> Tuple[Client, ...]:
        lower = query.lower()
        return tuple(
            c for c in self._state.clients
            if lower in c.name.lower() or lower in c.id.lower()
        )

    def get_client_stays(self, client_id: str) -> Tuple[Stay, ...]:
        return tuple(s for s in self._state.stays if s.client_id == client_id)

    # --- employees ---

    def add_employee(self,
                     name: str,
                     email: str,
                     role: str,
                     phone: str = '',
                     salary: Any = 0,
                     document: str = '',
                     shift: str = 'morning') -> Either[DeskError, Employee]:
        safe_email = (email or '').strip().lower()
        safe_doc = (document or '').strip()
        if not name or not safe_email:
            return self._reject('add_employee', Either.left(
                DeskError(INVALID_REQUEST, "Employee name and email are required")))
        if (shift or 'morning') not in SHIFTS:
            return self._reject('add_employee', Either.left(
                DeskError(INVALID_REQUEST, f"Unknown shift {shift!r}")))
        salary_amount = to_amount(salary, allow_zero=True).get_or_else(None)
        if salary_amount is None:
            return self._reject('add_employee', Either.left(
                DeskError(INVALID_REQUEST, f"Invalid salary {salary!r}")))

        with self._lock:
            employees = self._state.employees
            if any(e.email.lower() == safe_email for e in employees):
                return self._reject('add_employee', Either.left(
                    DeskError(DUPLICATE_EMPLOYEE, f"Email {safe_email} already registered")))
            if safe_doc and any(e.document == safe_doc for e in employees):
                return self._reject('add_employee', Either.left(
                    DeskError(DUPLICATE_EMPLOYEE, f"Document {safe_doc} already registered")))

            employee = Employee(
                id=new_id('emp'),
                name=name.strip(),
                email=safe_email,
                role=role,
                phone=phone,
                salary=salary_amount,
                document=safe_doc,
                shift=shift or 'morning',
            )
            self._commit(replace(self._state, employees=employees + (employee,)))
            logger.info("Employee %s added as %s", employee.id, employee.role)
            self.bus.emit(EMPLOYEE_ADDED, {'employee_id': employee.id, 'role': employee.role})
            return Either.right(employee)

    def search_employees(self, query: str) -> Tuple[Employee, ...]:
        lower = query.lower()
        return tuple(
            e for e in self._state.employees
            if lower in e.name.lower() or lower in e.id.lower()
        )

    # --- rooms ---

    def add_room(self, number: str, category: str, capacity: int) -> Either[DeskError, Room]:
        """Register a room; its nightly rate is fixed by the category."""
        if category not in CATEGORIES:
            return self._reject('add_room', Either.left(
                DeskError(INVALID_CATEGORY, f"Unknown room category {category!r}")))
        if capacity < 1:
            return self._reject('add_room', Either.left(
                DeskError(INVALID_REQUEST, "Room capacity must be positive")))

        with self._lock:
            if any(r.number == number for r in self._state.rooms):
                return self._reject('add_room', Either.left(
                    DeskError(DUPLICATE_ROOM, f"Room {number} already exists")))
            room = Room(number=number, category=category, capacity=capacity,
                        daily_rate=CATEGORY_RATES[category])
            self._commit(replace(self._state, rooms=self._state.rooms + (room,)))
            logger.info("Room %s added (%s)", room.number, room.category)
            self.bus.emit(ROOM_ADDED, {'room_number': room.number, 'category': room.category})
            return Either.right(room)

    # --- service requests ---

    def add_service_request(self, room_number: str, type: str, employee_id: str = '') -> Either[DeskError, ServiceRequest]:
        if type not in REQUEST_TYPES:
            return self._reject('add_service_request', Either.left(
                DeskError(INVALID_REQUEST, f"Unknown request type {type!r}")))
        with self._lock:
            lookup = safe_room_lookup(self._state.rooms, room_number)
            if lookup.is_left():
                return self._reject('add_service_request', lookup)
            request = ServiceRequest(
                id=new_id('req'),
                room_number=room_number,
                type=type,
                employee_id=employee_id,
                created_at=now_iso(),
            )
            self._commit(replace(self._state, service_requests=self._state.service_requests + (request,)))
            self.bus.emit(SERVICE_REQUEST_ADDED, {
                'request_id': request.id, 'room_number': room_number, 'type': type,
            })
            return Either.right(request)

    def complete_service_request(self, request_id: str) -> Either[DeskError, ServiceRequest]:
        with self._lock:
            result = safe_request_lookup(self._state.service_requests, request_id).map(
                lambda req: replace(req, status=REQUEST_COMPLETED)
            )
            if result.is_left():
                return self._reject('complete_service_request', result)
            request = result.get_or_else(None)
            self._commit(self._state.with_request(request))
            self.bus.emit(SERVICE_REQUEST_COMPLETED, {'request_id': request.id})
            return Either.right(request)

    # --- restaurant ---

    def add_menu_item(self,
                      name: str,
                      price: Any,
                      category: str,
                      description: str = '',
                      image_url: str = '') -> Either[DeskError, MenuItem]:
        if category not in MENU_CATEGORIES:
            return self._reject('add_menu_item', Either.left(
                DeskError(INVALID_REQUEST, f"Unknown menu category {category!r}")))

        def build(amount: Decimal) -> MenuItem:
            return MenuItem(id=new_id('menu'), name=name, price=amount, category=category,
                            description=description, image_url=image_url)

        result = to_amount(price).map(build)
        if result.is_left():
            return self._reject('add_menu_item', result)
        with self._lock:
            item = result.get_or_else(None)
            self._commit(replace(self._state, menu_items=self._state.menu_items + (item,)))
            self.bus.emit(MENU_ITEM_ADDED, {'item_id': item.id, 'name': item.name})
            return Either.right(item)

    def order_menu_item(self, stay_id: str, item_id: str, quantity: int = 1) -> Either[DeskError, Charge]:
        """Room-service order: posts ``quantity x item`` as a restaurant charge."""
        if quantity < 1:
            return self._reject('order_menu_item', Either.left(
                DeskError(INVALID_REQUEST, "Quantity must be positive")))
        lookup = safe_menu_item_lookup(self._state.menu_items, item_id)
        if lookup.is_left():
            return self._reject('order_menu_item', lookup)
        item = lookup.get_or_else(None)
        return self.add_charge(stay_id, f"{quantity}x {item.name}", item.price * quantity, 'restaurant')

    # --- loyalty configuration ---

    def set_points_per_discount(self, points: int) -> Either[DeskError, int]:
        if points <= 0:
            return self._reject('set_points_per_discount', Either.left(
                DeskError(INVALID_CONFIG, "points_per_discount must be positive")))
        with self._lock:
            self._commit(replace(self._state, points_per_discount=points))
            self.bus.emit(LOYALTY_CONFIG_CHANGED, {'points_per_discount': points})
            return Either.right(points)


def create_front_desk(settings: Optional[Settings] = None, bus: Optional[EventBus] = None) -> FrontDesk:
    """Build a FrontDesk; with ``state_path`` set, state is loaded from and written through to disk."""
    settings = settings or get_settings()
    if not settings.state_path:
        return FrontDesk(settings=settings, bus=bus)

    path = settings.state_path
    state = load_state(path, settings.points_per_discount)
    logger.info("Loaded front-desk state from %s: %s", path, state.counts())
    return FrontDesk(
        state=state,
        settings=settings,
        bus=bus,
        on_commit=lambda new_state: save_state(path, new_state),
    )
