import pytest
from sqlalchemy.pool import StaticPool

from app import RentalApp
from services.unit_of_work import UnitOfWork


@pytest.fixture
def rental_app():
    app = RentalApp("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    app.start()
    yield app
    app.stop()


@pytest.fixture
def service(rental_app):
    return rental_app.bookings


@pytest.fixture
def session_factory(rental_app):
    return rental_app.session_factory


@pytest.fixture
def seed(session_factory):
    """Vehicle V (rate 5000, available), a second vehicle and renters U, U2."""
    with UnitOfWork(session_factory) as uow:
        vehicle = uow.vehicles.add("Toyota", "Corolla", 2023, "White", 5000)
        other = uow.vehicles.add("Ford", "Fiesta", 2019, "Red", "35.50")
        renter = uow.users.add("Ana", "ana@example.com")
        renter2 = uow.users.add("Bruno", "Bruno@Example.com")
        uow.commit()
        return {
            "vehicle_id": vehicle.id,
            "other_vehicle_id": other.id,
            "renter_id": renter.id,
            "renter2_id": renter2.id,
        }


@pytest.fixture
def vehicle_state(session_factory):
    def _get(vehicle_id):
        with UnitOfWork(session_factory) as uow:
            return uow.vehicles.find(vehicle_id).available
    return _get
