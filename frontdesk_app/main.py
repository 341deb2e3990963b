from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from fastapi import FastAPI, Depends, HTTPException
from pydantic import BaseModel, Field

from frontdesk.config import get_settings
from frontdesk.errors import (
    ROOM_NOT_FOUND, STAY_NOT_FOUND, CLIENT_NOT_FOUND, SERVICE_REQUEST_NOT_FOUND,
    MENU_ITEM_NOT_FOUND, ALREADY_CHECKED_OUT, STAY_NOT_ACTIVE, DUPLICATE_ROOM, DUPLICATE_EMPLOYEE,
)
from frontdesk.ftypes import Either
from frontdesk.log import setup_logging
from frontdesk.report import (
    stay_history, generate_revenue_report, generate_occupancy_report, dashboard_summary,
)
from frontdesk.service import FrontDesk, create_front_desk
from frontdesk.transforms import to_plain


settings = get_settings()
setup_logging(settings)

app = FastAPI(title=settings.app_name, version="1.0.0")

desk = create_front_desk(settings)


# Dependency to get the front desk
def get_desk() -> FrontDesk:
    return desk


STATUS_BY_KIND = {
    ROOM_NOT_FOUND: 404,
    STAY_NOT_FOUND: 404,
    CLIENT_NOT_FOUND: 404,
    SERVICE_REQUEST_NOT_FOUND: 404,
    MENU_ITEM_NOT_FOUND: 404,
    ALREADY_CHECKED_OUT: 409,
    STAY_NOT_ACTIVE: 409,
    DUPLICATE_ROOM: 409,
    DUPLICATE_EMPLOYEE: 409,
}


def unwrap(result: Either) -> Any:
    """Return the plain right value, or raise an HTTPException for the left one."""
    if result.is_left():
        error = result.get_error()
        raise HTTPException(
            status_code=STATUS_BY_KIND.get(error.kind, 422),
            detail={'kind': error.kind, 'message': error.message},
        )
    return to_plain(result.get_or_else(None))


# --- Request bodies ---

class RoomIn(BaseModel):
    number: str
    category: str
    capacity: int = Field(gt=0)


class StayIn(BaseModel):
    client_id: str
    room_number: str
    check_in: date
    check_out: date
    guest_count: int = 1


class ChargeIn(BaseModel):
    description: str
    amount: Decimal
    category: str = 'other'


class CheckoutIn(BaseModel):
    points_to_redeem: int = 0
    payment_method: str = 'cash'


class ClientIn(BaseModel):
    name: str
    address: str = ''
    phone: str = ''
    document: str = ''


class EmployeeIn(BaseModel):
    name: str
    email: str
    role: str
    phone: str = ''
    salary: Decimal = Decimal('0')
    document: str = ''
    shift: str = 'morning'


class ServiceRequestIn(BaseModel):
    room_number: str
    type: str
    employee_id: str = ''


class MenuItemIn(BaseModel):
    name: str
    price: Decimal
    category: str
    description: str = ''
    image_url: str = ''


class OrderIn(BaseModel):
    item_id: str
    quantity: int = 1


class LoyaltyConfigIn(BaseModel):
    points_per_discount: int


# --- Rooms & availability ---

@app.get("/api/rooms")
def list_rooms(desk: FrontDesk = Depends(get_desk)):
    return {"rooms": to_plain(desk.state.rooms)}


@app.post("/api/rooms", status_code=201)
def add_room(body: RoomIn, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.add_room(body.number, body.category, body.capacity))


@app.get("/api/availability")
def availability(check_in: date,
                 check_out: date,
                 guests: int = 1,
                 category: Optional[str] = None,
                 desk: FrontDesk = Depends(get_desk)):
    """Rooms free over [check_in, check_out)."""
    rooms = unwrap(desk.find_available(check_in, check_out, guests, category))
    return {"rooms": rooms, "count": len(rooms)}


# --- Stays ---

@app.get("/api/stays")
def list_stays(status: Optional[str] = None, desk: FrontDesk = Depends(get_desk)):
    stays = desk.state.stays
    if status:
        stays = tuple(s for s in stays if s.status == status)
    return {"stays": to_plain(stays)}


@app.post("/api/stays", status_code=201)
def create_stay(body: StayIn, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.create_stay(
        body.client_id, body.room_number, body.check_in, body.check_out, body.guest_count
    ))


@app.get("/api/stays/{stay_id}")
def get_stay(stay_id: str, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.get_stay(stay_id))


@app.post("/api/stays/{stay_id}/charges", status_code=201)
def add_charge(stay_id: str, body: ChargeIn, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.add_charge(stay_id, body.description, body.amount, body.category))


@app.post("/api/stays/{stay_id}/orders", status_code=201)
def order_to_room(stay_id: str, body: OrderIn, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.order_menu_item(stay_id, body.item_id, body.quantity))


@app.get("/api/stays/{stay_id}/checkout")
def checkout_preview(stay_id: str, points: int = 0, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.preview_checkout(stay_id, points))


@app.post("/api/stays/{stay_id}/checkout")
def checkout(stay_id: str, body: CheckoutIn, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.checkout(stay_id, body.points_to_redeem, body.payment_method))


# --- Clients & employees ---

@app.get("/api/clients")
def list_clients(q: str = '', desk: FrontDesk = Depends(get_desk)):
    return {"clients": to_plain(desk.search_clients(q))}


@app.post("/api/clients", status_code=201)
def add_client(body: ClientIn, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.add_client(body.name, body.address, body.phone, body.document))


@app.get("/api/clients/{client_id}")
def get_client(client_id: str, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.get_client(client_id))


@app.get("/api/clients/{client_id}/stays")
def get_client_stays(client_id: str, desk: FrontDesk = Depends(get_desk)):
    unwrap(desk.get_client(client_id))
    return {"stays": to_plain(desk.get_client_stays(client_id))}


@app.get("/api/employees")
def list_employees(q: str = '', desk: FrontDesk = Depends(get_desk)):
    return {"employees": to_plain(desk.search_employees(q))}


@app.post("/api/employees", status_code=201)
def add_employee(body: EmployeeIn, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.add_employee(
        body.name, body.email, body.role, body.phone, body.salary, body.document, body.shift
    ))


# --- Service requests & restaurant ---

@app.get("/api/service-requests")
def list_service_requests(status: Optional[str] = None, desk: FrontDesk = Depends(get_desk)):
    requests = desk.state.service_requests
    if status:
        requests = tuple(r for r in requests if r.status == status)
    return {"service_requests": to_plain(requests)}


@app.post("/api/service-requests", status_code=201)
def add_service_request(body: ServiceRequestIn, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.add_service_request(body.room_number, body.type, body.employee_id))


@app.post("/api/service-requests/{request_id}/complete")
def complete_service_request(request_id: str, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.complete_service_request(request_id))


@app.get("/api/menu")
def list_menu(desk: FrontDesk = Depends(get_desk)):
    return {"menu_items": to_plain(desk.state.menu_items)}


@app.post("/api/menu", status_code=201)
def add_menu_item(body: MenuItemIn, desk: FrontDesk = Depends(get_desk)):
    return unwrap(desk.add_menu_item(
        body.name, body.price, body.category, body.description, body.image_url
    ))


@app.put("/api/loyalty-config")
def set_loyalty_config(body: LoyaltyConfigIn, desk: FrontDesk = Depends(get_desk)):
    return {"points_per_discount": unwrap(desk.set_points_per_discount(body.points_per_discount))}


# --- Events, reports, snapshot ---

@app.get("/api/events")
def get_events(limit: int = 20, name: Optional[str] = None, desk: FrontDesk = Depends(get_desk)):
    """Recent events."""
    events = desk.bus.get_event_history(limit, name)
    return {
        "events": [
            {
                "id": event.id,
                "timestamp": event.ts,
                "name": event.name,
                "payload": event.payload
            }
            for event in events
        ]
    }


@app.get("/api/reports/history")
def history_report(q: str = '', desk: FrontDesk = Depends(get_desk)):
    return {"stays": to_plain(stay_history(desk.state, q))}


@app.get("/api/reports/revenue")
def revenue_report(start: date, end: date, desk: FrontDesk = Depends(get_desk)):
    return to_plain(generate_revenue_report(desk.state, start, end))


@app.get("/api/reports/occupancy")
def occupancy_report(start: date, end: date, desk: FrontDesk = Depends(get_desk)):
    return generate_occupancy_report(desk.state, start, end)


@app.get("/api/dashboard")
def dashboard(desk: FrontDesk = Depends(get_desk)):
    return dashboard_summary(desk.state)


@app.get("/api/snapshot")
def snapshot(desk: FrontDesk = Depends(get_desk)) -> Dict[str, Any]:
    return desk.snapshot()


# Health check endpoint
@app.get("/health")
def health_check(desk: FrontDesk = Depends(get_desk)):
    return {"status": "healthy", **desk.state.counts()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("frontdesk_app.main:app", host="0.0.0.0", port=8000)
