from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

import services.availability as availability
from errors import AvailabilityCheckFailed, InvalidDateRange
from services.unit_of_work import UnitOfWork


@pytest.fixture
def booked(service, seed):
    reservation = service.create_reservation({
        "userId": seed["renter_id"],
        "carId": seed["vehicle_id"],
        "startDate": "2025-10-01",
        "endDate": "2025-10-05",
    })
    return reservation


@pytest.mark.parametrize("start, end, expected", [
    ("2025-09-20", "2025-09-30", True),
    ("2025-10-06", "2025-10-10", True),
    ("2025-09-25", "2025-10-01", False),  # closed ranges: touching days overlap
    ("2025-10-05", "2025-10-08", False),
    ("2025-10-02", "2025-10-03", False),
    ("2025-09-01", "2025-11-01", False),
])
def test_inclusive_overlap(service, seed, booked, start, end, expected):
    assert service.check_availability(seed["vehicle_id"], start, end) is expected


def test_other_vehicles_are_not_affected(service, seed, booked):
    assert service.check_availability(seed["other_vehicle_id"], "2025-10-01", "2025-10-05") is True


def test_exclude_reservation_ignores_itself(service, seed, booked):
    assert service.check_availability(seed["vehicle_id"], "2025-10-01", "2025-10-06") is False
    assert service.check_availability(seed["vehicle_id"], "2025-10-01", "2025-10-06",
                                      exclude_reservation_id=booked.id) is True


def test_check_is_idempotent(service, seed, booked):
    results = {service.check_availability(seed["vehicle_id"], "2025-10-03", "2025-10-04") for _ in range(5)}
    assert results == {False}


def test_check_rejects_inverted_range(service, seed):
    with pytest.raises(InvalidDateRange):
        service.check_availability(seed["vehicle_id"], "2025-10-05", "2025-10-01")


def test_storage_error_is_not_reported_as_unavailable(service, seed, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection reset"))

    monkeypatch.setattr(availability, "overlapping_reservations", broken)
    with pytest.raises(AvailabilityCheckFailed) as exc:
        service.check_availability(seed["vehicle_id"], "2025-10-01", "2025-10-05")
    assert exc.value.code == "AVAILABILITY_CHECK_FAILED"
    assert "connection" not in exc.value.message


def test_is_available_on_session(session_factory, seed, booked):
    with UnitOfWork(session_factory) as uow:
        assert availability.is_available(uow.session, seed["vehicle_id"], date(2025, 10, 6), date(2025, 10, 7))
        assert not availability.is_available(uow.session, seed["vehicle_id"], date(2025, 10, 4), date(2025, 10, 7))
