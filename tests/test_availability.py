from datetime import date

import pytest

from frontdesk.availability import find_available
from frontdesk.errors import INVALID_DATE_RANGE, INVALID_CATEGORY, INVALID_GUEST_COUNT
from frontdesk.filters import overlaps


def numbers(result):
    return [room.number for room in result.get_or_else(())]


@pytest.fixture
def booked_desk(desk, client_id):
    """Room 101 held by an active stay over [2024-03-10, 2024-03-15)."""
    desk.create_stay(client_id, '101', date(2024, 3, 10), date(2024, 3, 15), 2)
    return desk


class TestOverlap:
    @pytest.mark.parametrize("start,end,expected", [
        (date(2024, 3, 9), date(2024, 3, 11), True),
        (date(2024, 3, 12), date(2024, 3, 13), True),
        (date(2024, 3, 14), date(2024, 3, 20), True),
        (date(2024, 3, 1), date(2024, 3, 30), True),
        (date(2024, 3, 15), date(2024, 3, 18), False),
        (date(2024, 3, 5), date(2024, 3, 10), False),
    ])
    def test_half_open(self, start, end, expected):
        assert overlaps(start, end, date(2024, 3, 10), date(2024, 3, 15)) is expected


class TestFindAvailable:
    def test_all_rooms_sorted_when_free(self, desk):
        result = desk.find_available(date(2024, 3, 1), date(2024, 3, 3), 1)
        assert numbers(result) == ['101', '102', '201', '202', '301']

    def test_overlapping_stay_excludes_room(self, booked_desk):
        result = booked_desk.find_available(date(2024, 3, 12), date(2024, 3, 14), 1)
        assert '101' not in numbers(result)

    def test_checkout_day_turnover_is_available(self, booked_desk):
        result = booked_desk.find_available(date(2024, 3, 15), date(2024, 3, 17), 1)
        assert '101' in numbers(result)

    def test_checkin_day_of_existing_stay_is_available_for_earlier_stay(self, booked_desk):
        result = booked_desk.find_available(date(2024, 3, 8), date(2024, 3, 10), 1)
        assert '101' in numbers(result)

    def test_capacity_filter(self, desk):
        result = desk.find_available(date(2024, 3, 1), date(2024, 3, 3), 4)
        assert numbers(result) == ['202']

    def test_category_filter(self, desk):
        result = desk.find_available(date(2024, 3, 1), date(2024, 3, 3), 1, 'Luxury')
        assert numbers(result) == ['201', '202']

    def test_completed_stays_do_not_block(self, booked_desk):
        stay = booked_desk.state.active_stays()[0]
        booked_desk.checkout(stay.id)
        result = booked_desk.find_available(date(2024, 3, 12), date(2024, 3, 14), 1)
        assert '101' in numbers(result)

    def test_invalid_range(self, desk):
        same_day = desk.find_available(date(2024, 3, 3), date(2024, 3, 3), 1)
        reversed_range = desk.find_available(date(2024, 3, 5), date(2024, 3, 3), 1)
        assert same_day.get_error().kind == INVALID_DATE_RANGE
        assert reversed_range.get_error().kind == INVALID_DATE_RANGE

    def test_unknown_category(self, desk):
        result = find_available(desk.state.rooms, desk.state.stays,
                                date(2024, 3, 1), date(2024, 3, 3), 1, 'Penthouse')
        assert result.get_error().kind == INVALID_CATEGORY

    def test_non_positive_guest_count(self, desk):
        result = desk.find_available(date(2024, 3, 1), date(2024, 3, 3), 0)
        assert result.get_error().kind == INVALID_GUEST_COUNT

    def test_search_has_no_side_effects(self, booked_desk):
        before = booked_desk.state
        booked_desk.find_available(date(2024, 3, 1), date(2024, 3, 30), 1)
        assert booked_desk.state is before
