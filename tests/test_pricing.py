from datetime import date, datetime
from decimal import Decimal

import pytest

from errors import PriceOutOfRange
from services.pricing import rental_days, rental_price, reservation_price


def test_same_day_costs_one_day():
    d = date(2025, 11, 11)
    assert rental_days(d, d) == 1


def test_days_between_dates():
    assert rental_days(date(2025, 11, 11), date(2025, 11, 12)) == 1
    assert rental_days(date(2025, 11, 11), date(2025, 11, 13)) == 2
    assert rental_days(date(2025, 11, 13), date(2025, 11, 11)) == 2


def test_partial_days_round_up():
    assert rental_days(datetime(2025, 11, 11, 10), datetime(2025, 11, 12, 11)) == 2


def test_price_is_days_times_rate():
    assert rental_price(2, 5000) == Decimal("10000.00")
    assert reservation_price(date(2025, 10, 1), date(2025, 10, 5), Decimal("5000")) == Decimal("20000.00")


def test_price_rounds_half_up_to_cents():
    assert rental_price(3, "33.335") == Decimal("100.01")
    assert rental_price(1, "0.005") == Decimal("0.01")
    assert rental_price(2, "0.0025") == Decimal("0.01")
    assert rental_price(3, Decimal("19.99")) == Decimal("59.97")


@pytest.mark.parametrize("rate", [float("nan"), float("inf"), "NaN", "abc"])
def test_non_finite_rate_is_rejected(rate):
    with pytest.raises(PriceOutOfRange):
        rental_price(2, rate)


def test_price_must_fit_numeric_10_2():
    assert rental_price(1, "99999999.99") == Decimal("99999999.99")
    with pytest.raises(PriceOutOfRange):
        rental_price(2, "50000000")


def test_negative_rate_is_rejected():
    with pytest.raises(PriceOutOfRange):
        rental_price(2, "-10.00")


def test_unrepresentable_amount_is_a_rental_error():
    with pytest.raises(PriceOutOfRange) as exc:
        rental_price(1, "1e27")
    assert exc.value.code == "PRICE_OUT_OF_RANGE"
