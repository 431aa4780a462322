from decimal import Decimal

import pytest

from errors import PriceOutOfRange, VehicleNotFound
from models.user import UserRole
from services.unit_of_work import UnitOfWork


def test_set_available_toggles_flag(session_factory, seed):
    with UnitOfWork(session_factory) as uow:
        uow.vehicles.set_available(seed["vehicle_id"], False)
        uow.commit()

    with UnitOfWork(session_factory) as uow:
        available = [v.id for v in uow.vehicles.list(only_available=True)]
        assert seed["vehicle_id"] not in available
        assert seed["other_vehicle_id"] in available
        assert len(uow.vehicles.list()) == 2


def test_set_available_unknown_vehicle(session_factory, seed):
    with UnitOfWork(session_factory) as uow:
        with pytest.raises(VehicleNotFound):
            uow.vehicles.set_available(404, True)


def test_vehicle_serialization(session_factory, seed):
    with UnitOfWork(session_factory) as uow:
        data = uow.vehicles.find(seed["other_vehicle_id"]).to_dict()
    assert data["price"] == Decimal("35.50")
    assert data["available"] is True
    assert data["imageUrl"] is None


def test_renter_directory(session_factory, seed):
    with UnitOfWork(session_factory) as uow:
        renter = uow.users.find(seed["renter2_id"])
        assert renter.email == "bruno@example.com"
        assert renter.role == UserRole.USER
        assert uow.users.find(None) is None
        assert uow.users.find(999) is None


@pytest.mark.parametrize("rate", ["-1", "NaN"])
def test_add_rejects_bad_daily_rate(session_factory, rate):
    with UnitOfWork(session_factory) as uow:
        with pytest.raises(PriceOutOfRange):
            uow.vehicles.add("Fiat", "Uno", 2001, "Blue", rate)
