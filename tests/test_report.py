from datetime import date
from decimal import Decimal

from frontdesk.report import (
    stay_history, generate_revenue_report, generate_occupancy_report, dashboard_summary,
)


def _book_and_checkout(desk, client_id):
    stay = desk.create_stay(client_id, '101', date(2024, 3, 1), date(2024, 3, 4), 2).get_or_else(None)
    desk.add_charge(stay.id, 'Dinner', Decimal('35.00'), 'restaurant')
    desk.checkout(stay.id)
    return stay


def test_history_lists_completed_stays(desk, client_id):
    stay = _book_and_checkout(desk, client_id)
    desk.create_stay(client_id, '102', date(2024, 3, 5), date(2024, 3, 6), 1)

    history = stay_history(desk.state)

    assert [h['stay_id'] for h in history] == [stay.id]
    assert history[0]['client_name'] == 'Ana Souza'
    assert history[0]['final_cost'] == Decimal('485.00')
    assert stay_history(desk.state, '101') == history
    assert stay_history(desk.state, 'zzz') == []


def test_revenue_report(desk, client_id):
    _book_and_checkout(desk, client_id)

    report = generate_revenue_report(desk.state, date(2024, 3, 1), date(2024, 3, 31))

    assert report['stay_count'] == 1
    assert report['total_revenue'] == Decimal('485.00')
    assert report['room_revenue'] == Decimal('450.00')
    assert report['extras_revenue'] == Decimal('35.00')
    assert report['revenue_by_category'] == {'Standard': Decimal('485.00')}


def test_occupancy_report(desk, client_id):
    desk.create_stay(client_id, '101', date(2024, 3, 1), date(2024, 3, 3), 1)

    report = generate_occupancy_report(desk.state, date(2024, 3, 1), date(2024, 3, 4))

    assert list(report['occupancy']) == ['2024-03-01', '2024-03-02', '2024-03-03']
    assert report['occupancy']['2024-03-01']['booked_rooms'] == 1
    assert report['occupancy']['2024-03-01']['occupancy_rate'] == 20.0
    assert report['occupancy']['2024-03-03']['booked_rooms'] == 0


def test_dashboard(desk, client_id):
    _book_and_checkout(desk, client_id)
    desk.create_stay(client_id, '201', date(2024, 4, 1), date(2024, 4, 2), 1)

    summary = dashboard_summary(desk.state)

    assert summary['rooms_occupied'] == 1
    assert summary['rooms_available'] == 4
    assert summary['active_stays'] == 1
    assert summary['completed_stays'] == 1
    assert summary['pending_requests'] == 1
    assert summary['points_outstanding'] == 3
