from decimal import Decimal

import pytest

from frontdesk.errors import INSUFFICIENT_POINTS, INVALID_CONFIG
from frontdesk.loyalty import points_earned, points_per_day, resolve_discount


@pytest.mark.parametrize("category,expected", [
    ('Standard', 5),
    ('Luxury', 10),
    ('Presidential', 20),
])
def test_five_night_points_double_per_tier(category, expected):
    assert points_earned(category, 5) == expected


def test_unknown_category_earns_as_standard():
    assert points_per_day('Cabin') == 1


def test_zero_points_no_discount():
    result = resolve_discount(Decimal('485.00'), 0, 0, 10)
    assert result.get_or_else(None) == Decimal('0.00')


def test_discount_percentage():
    # 25 points at 10 points per 1% = 2.5% of 400
    result = resolve_discount(Decimal('400.00'), 25, 100, 10)
    assert result.get_or_else(None) == Decimal('10.00')


def test_discount_rounds_to_cents():
    # 1% of 485.55 = 4.8555
    result = resolve_discount(Decimal('485.55'), 10, 10, 10)
    assert result.get_or_else(None) == Decimal('4.86')


def test_discount_never_exceeds_subtotal():
    result = resolve_discount(Decimal('100.00'), 500, 500, 1)
    assert result.get_or_else(None) == Decimal('100.00')


def test_redeeming_more_than_balance():
    result = resolve_discount(Decimal('100.00'), 11, 10, 10)
    assert result.get_error().kind == INSUFFICIENT_POINTS


def test_negative_redemption():
    result = resolve_discount(Decimal('100.00'), -1, 10, 10)
    assert result.get_error().kind == INSUFFICIENT_POINTS


def test_invalid_ratio():
    result = resolve_discount(Decimal('100.00'), 5, 10, 0)
    assert result.get_error().kind == INVALID_CONFIG
