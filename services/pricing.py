import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from errors import PriceOutOfRange
from models.constants import MONEY_PLACES, MONEY_LIMIT


def rental_days(date_from: date, date_to: date) -> int:
    """
    Number of billable rental days.

    :param date_from: rental start
    :param date_to: rental end
    :return: difference in days, rounded up, at least 1
    """
    delta = abs(date_to - date_from)
    if isinstance(date_from, datetime):
        days = math.ceil(delta.total_seconds() / 86400)
    else:
        days = delta.days
    return max(days, 1)


def daily_rate(value) -> Decimal:
    """Read a daily rate; it must be a finite, non-negative amount."""
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise PriceOutOfRange(f"Not a monetary amount: {value!r}")
    if not rate.is_finite():
        raise PriceOutOfRange("Daily rate is not a finite number")
    if rate < 0:
        raise PriceOutOfRange("Daily rate cannot be negative")
    return rate


def to_money(value: Decimal) -> Decimal:
    try:
        return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise PriceOutOfRange(f"Amount {value} cannot be represented")


def rental_price(days: int, price_per_day) -> Decimal:
    """
    Rental price: days * daily rate, rounded once to 2 decimal places.

    :raises PriceOutOfRange: if the rate is not a finite non-negative number or
        the total does not fit NUMERIC(10,2)
    """
    rate = daily_rate(price_per_day)
    try:
        total = to_money(rate * days)
    except InvalidOperation:
        raise PriceOutOfRange(f"Price for {days} days at {rate} cannot be represented")
    if total >= MONEY_LIMIT:
        raise PriceOutOfRange(f"Price {total} exceeds the storable range")
    return total


def reservation_price(date_from: date, date_to: date, price_per_day) -> Decimal:
    return rental_price(rental_days(date_from, date_to), price_per_day)
