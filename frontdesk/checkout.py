"""Checkout orchestration.

Checkout runs in two phases. ``plan_checkout`` validates and prices the stay
without touching state; ``apply_checkout`` commits the plan in one step. A
rejected plan therefore never leaves a partial transition behind.
"""
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Dict, Any, Tuple

from .compose import either_pipe
from .domain import (
    Stay, Room, Client, ServiceRequest, CheckoutReceipt,
    ROOM_AVAILABLE, STAY_COMPLETED,
)
from .errors import DeskError, ALREADY_CHECKED_OUT
from .ftypes import Either, safe_stay_lookup, safe_room_lookup, safe_client_lookup
from .ledger import running_cost
from .loyalty import points_earned, resolve_discount, settle_points, to_cents
from .store import HotelState, new_id, now_iso


@dataclass(frozen=True)
class CheckoutPlan:
    stay: Stay
    room: Room
    client: Client
    receipt: CheckoutReceipt
    cleaning: ServiceRequest


def plan_checkout(state: HotelState,
                  stay_id: str,
                  points_to_redeem: int = 0,
                  payment_method: str = '') -> Either[DeskError, CheckoutPlan]:
    """Validate and price a checkout."""

    def resolve_stay(ctx: Dict[str, Any]) -> Either[DeskError, Dict[str, Any]]:
        def ensure_active(stay: Stay) -> Either[DeskError, Dict[str, Any]]:
            if not stay.is_active:
                return Either.left(DeskError(ALREADY_CHECKED_OUT, f"Stay {stay.id} is already checked out"))
            return Either.right({**ctx, 'stay': stay})
        return safe_stay_lookup(state.stays, stay_id).bind(ensure_active)

    def resolve_room(ctx: Dict[str, Any]) -> Either[DeskError, Dict[str, Any]]:
        return safe_room_lookup(state.rooms, ctx['stay'].room_number).map(
            lambda room: {**ctx, 'room': room}
        )

    def resolve_client(ctx: Dict[str, Any]) -> Either[DeskError, Dict[str, Any]]:
        return safe_client_lookup(state.clients, ctx['stay'].client_id).map(
            lambda client: {**ctx, 'client': client}
        )

    def price(ctx: Dict[str, Any]) -> Either[DeskError, Dict[str, Any]]:
        # Nights are billed at the room's current rate, not the booking-time quote.
        subtotal = to_cents(running_cost(ctx['stay'], ctx['room']))
        return resolve_discount(
            subtotal, points_to_redeem, ctx['client'].points, state.points_per_discount
        ).map(lambda discount: {
            **ctx,
            'subtotal': subtotal,
            'discount': discount,
            'earned': points_earned(ctx['room'].category, ctx['stay'].total_days),
        })

    def build_plan(ctx: Dict[str, Any]) -> Either[DeskError, CheckoutPlan]:
        stay, room = ctx['stay'], ctx['room']
        final_cost = max(Decimal('0.00'), ctx['subtotal'] - ctx['discount'])
        receipt = CheckoutReceipt(
            stay_id=stay.id,
            subtotal=ctx['subtotal'],
            discount=ctx['discount'],
            final_cost=final_cost,
            points_earned=ctx['earned'],
            points_redeemed=points_to_redeem,
            payment_method=payment_method,
        )
        cleaning = ServiceRequest(
            id=new_id('req'),
            room_number=room.number,
            type='cleaning',
            created_at=now_iso(),
        )
        return Either.right(CheckoutPlan(stay, room, ctx['client'], receipt, cleaning))

    return either_pipe(
        Either.right({}),
        resolve_stay,
        resolve_room,
        resolve_client,
        price,
        build_plan,
    )


def apply_checkout(state: HotelState, plan: CheckoutPlan) -> HotelState:
    """Commit a checkout plan: close the stay, free the room, settle points, queue cleaning."""
    receipt = plan.receipt
    closed = replace(
        plan.stay,
        status=STAY_COMPLETED,
        final_cost=receipt.final_cost,
        discount=receipt.discount,
        points_earned=receipt.points_earned,
        points_redeemed=receipt.points_redeemed,
        payment_method=receipt.payment_method,
        completed_at=now_iso(),
    )
    new_state = (
        state
        .with_stay(closed)
        .with_client(settle_points(plan.client, receipt.points_redeemed, receipt.points_earned))
    )
    # A double-booked room stays occupied until its last active stay leaves.
    if not any(s.room_number == plan.room.number for s in new_state.active_stays()):
        new_state = new_state.with_room(replace(plan.room, status=ROOM_AVAILABLE))
    return replace(new_state, service_requests=new_state.service_requests + (plan.cleaning,))


def checkout(state: HotelState,
             stay_id: str,
             points_to_redeem: int = 0,
             payment_method: str = '') -> Either[DeskError, Tuple[HotelState, CheckoutPlan]]:
    return plan_checkout(state, stay_id, points_to_redeem, payment_method).map(
        lambda plan: (apply_checkout(state, plan), plan)
    )
