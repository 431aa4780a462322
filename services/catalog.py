from sqlalchemy import update
from sqlalchemy.orm import Session

from errors import VehicleNotFound
from models.user import User, UserRole
from models.vehicle import Vehicle
from services.pricing import daily_rate as parse_daily_rate


class VehicleCatalog:
    """Vehicle lookups and the availability flag, bound to one session."""

    def __init__(self, db: Session):
        self.db = db

    def find(self, vehicle_id):
        if vehicle_id is None:
            return None
        return self.db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()

    def find_for_update(self, vehicle_id):
        # Row lock held until commit/rollback, serializes bookings per vehicle
        if vehicle_id is None:
            return None
        if self.db.get_bind().dialect.name == "sqlite":
            # No row locks in SQLite: a no-op write takes the database write lock
            # now, before the overlap check, instead of at the first INSERT.
            self.db.execute(
                update(Vehicle)
                .where(Vehicle.id == vehicle_id)
                .values(available=Vehicle.available)
                .execution_options(synchronize_session=False)
            )
        return self.db.query(Vehicle).filter(Vehicle.id == vehicle_id).with_for_update().first()

    def list(self, only_available=False):
        query = self.db.query(Vehicle)
        if only_available:
            query = query.filter(Vehicle.available == True)
        return query.order_by(Vehicle.id).all()

    def add(self, brand, model, year, color, daily_rate, available=True, image_url=None):
        vehicle = Vehicle(
            brand=brand,
            model=model,
            year=year,
            color=color,
            daily_rate=parse_daily_rate(daily_rate),
            available=available,
            image_url=image_url,
        )
        self.db.add(vehicle)
        self.db.flush()
        return vehicle

    def set_available(self, vehicle_id, available: bool):
        vehicle = self.find(vehicle_id)
        if not vehicle:
            raise VehicleNotFound()
        vehicle.available = available
        return vehicle


class RenterDirectory:
    def __init__(self, db: Session):
        self.db = db

    def find(self, user_id):
        if user_id is None:
            return None
        return self.db.query(User).filter(User.id == user_id).first()

    def add(self, name, email, role=UserRole.USER):
        user = User(name=name, email=email.strip().lower(), role=role)
        self.db.add(user)
        self.db.flush()
        return user
