from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from frontdesk.domain import Client, ROOM_AVAILABLE, ROOM_OCCUPIED, STAY_COMPLETED
from frontdesk.errors import ALREADY_CHECKED_OUT, CLIENT_NOT_FOUND, INSUFFICIENT_POINTS, STAY_NOT_FOUND
from frontdesk.frp import CHECKED_OUT, POINTS_CREDITED, CLEANING_REQUESTED, ROOM_STATUS_CHANGED
from frontdesk.ftypes import safe_room_lookup
from frontdesk.service import FrontDesk
from frontdesk.transforms import default_state


def room_status(desk, number):
    return safe_room_lookup(desk.state.rooms, number).get_or_else(None).status


def points_of(desk, client_id):
    return desk.get_client(client_id).get_or_else(None).points


def test_end_to_end_standard_stay(desk, client_id):
    stay = desk.create_stay(client_id, '101', date(2024, 3, 1), date(2024, 3, 4), 2).get_or_else(None)
    assert stay.quoted_cost == Decimal('450')
    desk.add_charge(stay.id, '1x Bacon Burger', Decimal('35.00'), 'restaurant')

    receipt = desk.checkout(stay.id, 0).get_or_else(None)

    assert receipt.final_cost == Decimal('485.00')
    assert receipt.discount == Decimal('0')
    assert receipt.points_earned == 3
    assert receipt.points_redeemed == 0
    assert room_status(desk, '101') == ROOM_AVAILABLE
    assert points_of(desk, client_id) == 3

    closed = desk.get_stay(stay.id).get_or_else(None)
    assert closed.status == STAY_COMPLETED
    assert closed.final_cost == Decimal('485.00')
    assert closed.quoted_cost == Decimal('450')

    cleaning = [r for r in desk.state.service_requests if r.room_number == '101']
    assert len(cleaning) == 1
    assert cleaning[0].type == 'cleaning'
    assert cleaning[0].status == 'pending'
    assert cleaning[0].employee_id == ''


def test_second_checkout_is_rejected_without_changes(desk, client_id):
    stay = desk.create_stay(client_id, '201', date(2024, 3, 1), date(2024, 3, 6), 2).get_or_else(None)
    desk.checkout(stay.id)
    after_first = desk.state

    result = desk.checkout(stay.id)

    assert result.get_error().kind == ALREADY_CHECKED_OUT
    assert desk.state is after_first
    assert points_of(desk, client_id) == 10
    assert len(desk.state.service_requests) == 1


def test_unknown_stay(desk):
    assert desk.checkout('missing').get_error().kind == STAY_NOT_FOUND


def test_redeem_points_for_discount(desk, client_id):
    first = desk.create_stay(client_id, '301', date(2024, 3, 1), date(2024, 3, 6), 2).get_or_else(None)
    desk.checkout(first.id)
    assert points_of(desk, client_id) == 20

    second = desk.create_stay(client_id, '101', date(2024, 4, 1), date(2024, 4, 4), 2).get_or_else(None)
    receipt = desk.checkout(second.id, points_to_redeem=20, payment_method='card').get_or_else(None)

    # 20 points at 10 per 1% = 2% of 450
    assert receipt.subtotal == Decimal('450.00')
    assert receipt.discount == Decimal('9.00')
    assert receipt.final_cost == Decimal('441.00')
    assert receipt.payment_method == 'card'
    assert points_of(desk, client_id) == 20 - 20 + 3


def test_insufficient_points_aborts_everything(desk, client_id):
    stay = desk.create_stay(client_id, '101', date(2024, 3, 1), date(2024, 3, 4), 1).get_or_else(None)
    before = desk.state

    result = desk.checkout(stay.id, points_to_redeem=5)

    assert result.get_error().kind == INSUFFICIENT_POINTS
    assert desk.state is before
    assert room_status(desk, '101') == ROOM_OCCUPIED
    assert desk.get_stay(stay.id).get_or_else(None).is_active


def test_discount_larger_than_bill_yields_zero(settings):
    state = replace(default_state(1), clients=(Client('c1', 'Loyal Guest', points=500),))
    desk = FrontDesk(state=state, settings=settings)
    stay = desk.create_stay('c1', '101', date(2024, 3, 1), date(2024, 3, 3), 1).get_or_else(None)

    receipt = desk.checkout(stay.id, points_to_redeem=500).get_or_else(None)

    assert receipt.final_cost == Decimal('0.00')
    assert receipt.discount == Decimal('300.00')
    assert points_of(desk, 'c1') == 500 - 500 + 2


def test_final_cost_uses_current_room_rate(desk, client_id):
    stay = desk.create_stay(client_id, '101', date(2024, 3, 1), date(2024, 3, 4), 1).get_or_else(None)
    room = safe_room_lookup(desk.state.rooms, '101').get_or_else(None)
    repriced = FrontDesk(state=desk.state.with_room(replace(room, daily_rate=Decimal('200'))),
                         settings=desk.settings)

    receipt = repriced.checkout(stay.id).get_or_else(None)

    assert receipt.final_cost == Decimal('600.00')
    assert repriced.get_stay(stay.id).get_or_else(None).quoted_cost == Decimal('450')


def test_preview_does_not_commit(desk, client_id):
    stay = desk.create_stay(client_id, '101', date(2024, 3, 1), date(2024, 3, 4), 1).get_or_else(None)
    before = desk.state

    receipt = desk.preview_checkout(stay.id).get_or_else(None)

    assert receipt.final_cost == Decimal('450.00')
    assert desk.state is before


def test_double_booked_room_stays_occupied_until_last_checkout(desk, client_id):
    first = desk.create_stay(client_id, '101', date(2024, 3, 1), date(2024, 3, 4), 1).get_or_else(None)
    second = desk.create_stay(client_id, '101', date(2024, 3, 2), date(2024, 3, 5), 1).get_or_else(None)

    desk.checkout(first.id)
    assert room_status(desk, '101') == ROOM_OCCUPIED

    desk.checkout(second.id)
    assert room_status(desk, '101') == ROOM_AVAILABLE


def test_checkout_emits_events(desk, client_id):
    seen = []
    desk.bus.subscribe(POINTS_CREDITED, lambda event: seen.append(event.payload))
    stay = desk.create_stay(client_id, '202', date(2024, 3, 1), date(2024, 3, 3), 3).get_or_else(None)

    desk.checkout(stay.id)

    names = [e.name for e in desk.bus.get_event_history(limit=10)]
    assert CHECKED_OUT in names
    assert CLEANING_REQUESTED in names
    assert names.count(ROOM_STATUS_CHANGED) == 2
    assert seen == [{'client_id': client_id, 'points': 4, 'stay_id': stay.id}]


def test_raising_event_filter_does_not_interrupt_checkout(desk, client_id):
    desk.bus.subscribe(CHECKED_OUT, lambda event: None, lambda event: event.payload['missing_key'])
    stay = desk.create_stay(client_id, '101', date(2024, 3, 1), date(2024, 3, 4), 2).get_or_else(None)

    receipt = desk.checkout(stay.id).get_or_else(None)

    assert receipt.final_cost == Decimal('450.00')
    names = [e.name for e in desk.bus.get_event_history(limit=10)]
    assert POINTS_CREDITED in names
    assert CLEANING_REQUESTED in names


def test_failed_write_keeps_state_and_checkout_can_be_retried(settings):
    writes = {'fail': False}

    def write(state):
        if writes['fail']:
            raise OSError("disk full")

    desk = FrontDesk(state=default_state(10), settings=settings, on_commit=write)
    client_id = desk.add_client('Ana Souza').get_or_else(None).id
    stay = desk.create_stay(client_id, '101', date(2024, 3, 1), date(2024, 3, 4), 2).get_or_else(None)
    before = desk.state
    events_before = len(desk.bus.get_event_history())

    writes['fail'] = True
    with pytest.raises(OSError):
        desk.checkout(stay.id)

    assert desk.state is before
    assert desk.get_stay(stay.id).get_or_else(None).is_active
    assert points_of(desk, client_id) == 0
    assert len(desk.bus.get_event_history()) == events_before

    writes['fail'] = False
    receipt = desk.checkout(stay.id).get_or_else(None)
    assert receipt.final_cost == Decimal('450.00')
    assert points_of(desk, client_id) == 3


def test_stay_of_missing_client_cannot_be_checked_out(settings):
    desk = FrontDesk(state=default_state(10), settings=settings)
    client_id = desk.add_client('Ana Souza').get_or_else(None).id
    stay = desk.create_stay(client_id, '101', date(2024, 3, 1), date(2024, 3, 4), 2).get_or_else(None)
    orphaned = FrontDesk(state=replace(desk.state, clients=()), settings=settings)
    before = orphaned.state

    result = orphaned.checkout(stay.id)

    assert result.get_error().kind == CLIENT_NOT_FOUND
    assert orphaned.state is before
    assert room_status(orphaned, '101') == ROOM_OCCUPIED
