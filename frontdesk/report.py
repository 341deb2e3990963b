from typing import Dict, List, Tuple, Any
from datetime import date
from decimal import Decimal

from .domain import Stay, ROOM_AVAILABLE, ROOM_OCCUPIED, REQUEST_PENDING, STAY_COMPLETED
from .filters import split_date_range
from .loyalty import to_cents
from .store import HotelState


def completed_stays(stays: Tuple[Stay, ...]) -> Tuple[Stay, ...]:
    return tuple(s for s in stays if s.status == STAY_COMPLETED)


def stay_history(state: HotelState, search: str = '') -> List[Dict[str, Any]]:
    """Completed stays, filtered by guest name or room number."""
    names = {c.id: c.name for c in state.clients}
    term = search.lower()

    history = []
    for stay in completed_stays(state.stays):
        client_name = names.get(stay.client_id, '')
        if term and term not in client_name.lower() and term not in stay.room_number.lower():
            continue
        history.append({
            'stay_id': stay.id,
            'client_id': stay.client_id,
            'client_name': client_name,
            'room_number': stay.room_number,
            'check_in': stay.check_in.isoformat(),
            'check_out': stay.check_out.isoformat(),
            'total_days': stay.total_days,
            'final_cost': stay.final_cost,
            'points_earned': stay.points_earned,
        })
    return history


def generate_revenue_report(state: HotelState, start_date: date, end_date: date) -> Dict[str, Any]:
    """Revenue from stays whose check-out falls within [start_date, end_date]."""
    period_stays = [
        s for s in completed_stays(state.stays)
        if start_date <= s.check_out <= end_date
    ]
    room_revenue = sum((s.final_cost - s.extras_total + s.discount for s in period_stays), Decimal('0'))
    extras = sum((s.extras_total for s in period_stays), Decimal('0'))
    discounts = sum((s.discount for s in period_stays), Decimal('0'))
    total = sum((s.final_cost for s in period_stays), Decimal('0'))

    by_category: Dict[str, Decimal] = {}
    categories = {r.number: r.category for r in state.rooms}
    for stay in period_stays:
        category = categories.get(stay.room_number, 'unknown')
        by_category[category] = by_category.get(category, Decimal('0')) + stay.final_cost

    return {
        'period': f"{start_date.isoformat()} to {end_date.isoformat()}",
        'stay_count': len(period_stays),
        'total_revenue': to_cents(total),
        'room_revenue': to_cents(room_revenue),
        'extras_revenue': to_cents(extras),
        'discounts': to_cents(discounts),
        'revenue_by_category': {k: to_cents(v) for k, v in by_category.items()},
        'average_stay_value': to_cents(total / len(period_stays)) if period_stays else Decimal('0.00'),
    }


def generate_occupancy_report(state: HotelState, start_date: date, end_date: date) -> Dict[str, Any]:
    """Share of rooms booked for each night in [start_date, end_date)."""
    total_rooms = len(state.rooms)
    occupancy = {}
    for night in split_date_range(start_date, end_date):
        booked = {
            s.room_number for s in state.stays
            if s.check_in <= night < s.check_out
        }
        occupancy[night.isoformat()] = {
            'booked_rooms': len(booked),
            'total_rooms': total_rooms,
            'occupancy_rate': (len(booked) / total_rooms) * 100 if total_rooms else 0,
        }

    return {
        'period': f"{start_date.isoformat()} to {end_date.isoformat()}",
        'occupancy': occupancy,
        'total_rooms': total_rooms,
    }


def dashboard_summary(state: HotelState) -> Dict[str, Any]:
    """Counters shown on the front-desk dashboard."""
    return {
        'rooms_total': len(state.rooms),
        'rooms_available': sum(1 for r in state.rooms if r.status == ROOM_AVAILABLE),
        'rooms_occupied': sum(1 for r in state.rooms if r.status == ROOM_OCCUPIED),
        'active_stays': len(state.active_stays()),
        'completed_stays': len(completed_stays(state.stays)),
        'clients': len(state.clients),
        'pending_requests': sum(1 for r in state.service_requests if r.status == REQUEST_PENDING),
        'points_outstanding': sum(c.points for c in state.clients),
    }
