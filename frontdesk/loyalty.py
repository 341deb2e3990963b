from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict

from .domain import Client, STANDARD, LUXURY, PRESIDENTIAL
from .errors import DeskError, INSUFFICIENT_POINTS, INVALID_CONFIG
from .ftypes import Either

# Each tier earns twice the one below it.
POINTS_PER_DAY: Dict[str, int] = {
    STANDARD: 1,
    LUXURY: 2,
    PRESIDENTIAL: 4,
}

CENT = Decimal('0.01')


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def points_per_day(category: str) -> int:
    """Points per night for a room category; unknown categories earn as Standard."""
    return POINTS_PER_DAY.get(category, POINTS_PER_DAY[STANDARD])


def points_earned(category: str, days: int) -> int:
    return points_per_day(category) * days


def discount_percentage(points: int, points_per_discount: int) -> Decimal:
    """Percentage off the bill bought by ``points`` (``points_per_discount`` points = 1%)."""
    return Decimal(points) / Decimal(points_per_discount)


def resolve_discount(subtotal: Decimal,
                     points_to_redeem: int,
                     balance: int,
                     points_per_discount: int) -> Either[DeskError, Decimal]:
    """Discount amount for redeeming points against a subtotal.

    The discount never exceeds the subtotal, so the final bill is never negative.
    """
    if points_per_discount <= 0:
        return Either.left(DeskError(INVALID_CONFIG, "points_per_discount must be positive"))
    if points_to_redeem < 0 or points_to_redeem > balance:
        return Either.left(DeskError(
            INSUFFICIENT_POINTS,
            f"Cannot redeem {points_to_redeem} points, balance is {balance}"
        ))
    if points_to_redeem == 0:
        return Either.right(Decimal('0.00'))

    discount = subtotal * discount_percentage(points_to_redeem, points_per_discount) / 100
    return Either.right(to_cents(min(discount, subtotal)))


def settle_points(client: Client, redeemed: int, earned: int) -> Client:
    return replace(client, points=client.points - redeemed + earned)
