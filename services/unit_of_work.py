"""
Unit of Work

One session, one transaction. Reservation writes that must move together
with the vehicle's availability flag go through ``book`` and ``release`` so
that either both rows change or neither does.

Usage:
    with UnitOfWork(session_factory, timeout=5) as uow:
        vehicle = uow.vehicles.find_for_update(vehicle_id)
        ...
        uow.book(reservation)   # insert + vehicle.available = False, committed
"""

import time
from typing import Optional

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from errors import DeadlineExceeded, PersistenceFailure, ReservationNotFound
from models.reservation import Reservation
from services.catalog import RenterDirectory, VehicleCatalog


class UnitOfWork:
    def __init__(self, session_factory, timeout: Optional[float] = None):
        self.session_factory = session_factory
        self.timeout = timeout
        self.deadline = None
        self.session = None

    def __enter__(self):
        self.session = self.session_factory()
        self.vehicles = VehicleCatalog(self.session)
        self.users = RenterDirectory(self.session)
        if self.timeout is not None:
            self.deadline = time.monotonic() + self.timeout
            self._apply_statement_timeout()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Anything not committed explicitly is discarded. close() detaches
        # loaded objects without expiring them, so callers can still read them.
        try:
            if exc_type is not None:
                self.rollback()
        finally:
            self.session.close()
        if exc_type is not None and issubclass(exc_type, SQLAlchemyError):
            logger.opt(exception=(exc_type, exc_val, exc_tb)).error("Storage error inside unit of work")
            raise PersistenceFailure() from exc_val

    def _apply_statement_timeout(self):
        if self.session.get_bind().dialect.name != "postgresql":
            return
        ms = max(int(self.timeout * 1000), 1)
        try:
            self.session.execute(text(f"SET LOCAL statement_timeout = {ms}"))
        except SQLAlchemyError:
            logger.exception("Could not set statement_timeout")
            raise PersistenceFailure()

    def check_deadline(self):
        if self.deadline is not None and time.monotonic() > self.deadline:
            logger.warning("Transaction deadline exceeded, rolling back")
            self.rollback()
            raise DeadlineExceeded()

    def get_reservation(self, reservation_id, refresh=False):
        query = self.session.query(Reservation).filter(Reservation.id == reservation_id)
        if refresh:
            query = query.populate_existing()
        return query.first()

    def commit(self):
        self.check_deadline()
        try:
            self.session.commit()
        except SQLAlchemyError:
            logger.exception("Commit failed, rolling back")
            self.rollback()
            raise PersistenceFailure()

    def rollback(self):
        self.session.rollback()

    def _write(self, action, description):
        self.check_deadline()
        try:
            action()
            self.session.flush()
        except StaleDataError:
            # Row vanished between read and write
            logger.warning(f"Reservation gone while {description}")
            self.rollback()
            raise ReservationNotFound()
        except SQLAlchemyError:
            logger.exception(f"Transaction error {description}")
            self.rollback()
            raise PersistenceFailure()
        self.commit()

    def book(self, reservation: Reservation) -> Reservation:
        """Insert the reservation and mark its vehicle unavailable, atomically."""

        def action():
            self.session.add(reservation)
            self.session.flush()
            self.check_deadline()
            self.vehicles.set_available(reservation.vehicle_id, False)

        self._write(action, "adding reservation")
        return reservation

    def save(self, reservation: Reservation) -> Reservation:
        """Flush changes to an existing reservation; the vehicle flag is left alone."""
        self._write(lambda: self.session.add(reservation), "updating reservation")
        return reservation

    def release(self, reservation: Reservation) -> None:
        """Delete the reservation and mark its vehicle available, atomically."""
        vehicle_id = reservation.vehicle_id

        def action():
            self.session.delete(reservation)
            self.session.flush()
            self.check_deadline()
            self.vehicles.set_available(vehicle_id, True)

        self._write(action, "deleting reservation")
