"""Booking service: validation, pricing and atomic reservation writes coupled to the vehicle flag."""

from datetime import date
from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import joinedload

import config
from errors import (
    InvalidDateRange, RenterNotFound, ReservationNotFound,
    VehicleNotFound, VehicleUnavailable,
)
from models.reservation import Reservation
from services.availability import is_available
from services.pricing import reservation_price
from services.schemas import ReservationInput, ReservationPatch, load
from services.unit_of_work import UnitOfWork
from utils.dates import parse_date


def validate_range(start: date, end: date):
    if end <= start:
        logger.warning(f"Rejected date range {start}..{end}")
        raise InvalidDateRange()


class BookingService:
    """
    Entry point for reservation operations.

    Each call opens its own UnitOfWork. Write calls take an optional
    ``timeout`` in seconds; when it runs out the whole transaction is rolled back.
    """

    def __init__(self, session_factory, default_timeout: Optional[float] = None):
        self.session_factory = session_factory
        self.default_timeout = default_timeout if default_timeout is not None else config.TRANSACTION_TIMEOUT

    def _uow(self, timeout=None) -> UnitOfWork:
        return UnitOfWork(self.session_factory, timeout if timeout is not None else self.default_timeout)

    def _lock_vehicle(self, uow: UnitOfWork, vehicle_id):
        vehicle = uow.vehicles.find_for_update(vehicle_id)
        if not vehicle:
            raise VehicleNotFound()
        return vehicle

    def _find_renter(self, uow: UnitOfWork, renter_id):
        renter = uow.users.find(renter_id)
        if not renter:
            raise RenterNotFound()
        return renter

    def _ensure_available(self, uow: UnitOfWork, vehicle_id, start, end, exclude_reservation_id=None):
        if not is_available(uow.session, vehicle_id, start, end, exclude_reservation_id):
            logger.warning(f"Vehicle {vehicle_id} is busy for {start}..{end}")
            raise VehicleUnavailable()

    def _find_reservation(self, uow: UnitOfWork, reservation_id, refresh=False):
        reservation = uow.get_reservation(reservation_id, refresh)
        if not reservation:
            raise ReservationNotFound()
        return reservation

    # ===== Reads =====

    def get_reservation(self, reservation_id) -> Reservation:
        with self._uow() as uow:
            reservation = (
                uow.session.query(Reservation)
                .options(joinedload(Reservation.vehicle), joinedload(Reservation.renter))
                .filter(Reservation.id == reservation_id)
                .first()
            )
        if not reservation:
            raise ReservationNotFound()
        return reservation

    def list_reservations(self) -> List[Reservation]:
        with self._uow() as uow:
            return (
                uow.session.query(Reservation)
                .options(joinedload(Reservation.vehicle), joinedload(Reservation.renter))
                .order_by(Reservation.id)
                .all()
            )

    def check_availability(self, vehicle_id, start, end, exclude_reservation_id=None) -> bool:
        start, end = parse_date(start), parse_date(end)
        if end < start:
            raise InvalidDateRange()
        with self._uow() as uow:
            return is_available(uow.session, vehicle_id, start, end, exclude_reservation_id)

    # ===== Writes =====

    def create_reservation(self, data, timeout=None) -> Reservation:
        payload = load(ReservationInput, data)
        validate_range(payload.start_date, payload.end_date)

        with self._uow(timeout) as uow:
            vehicle = self._lock_vehicle(uow, payload.vehicle_id)
            renter = self._find_renter(uow, payload.renter_id)
            self._ensure_available(uow, vehicle.id, payload.start_date, payload.end_date)

            reservation = Reservation(
                renter=renter,
                vehicle=vehicle,
                start_date=payload.start_date,
                end_date=payload.end_date,
                price=reservation_price(payload.start_date, payload.end_date, vehicle.daily_rate),
            )
            uow.book(reservation)

        logger.info(f"Booking: reservation={reservation.id}, user={renter.id}, vehicle={vehicle.id}")
        return reservation

    def update_reservation(self, reservation_id, data, timeout=None) -> Reservation:
        payload = load(ReservationInput, data)
        validate_range(payload.start_date, payload.end_date)

        with self._uow(timeout) as uow:
            reservation = self._find_reservation(uow, reservation_id)
            vehicle = self._lock_vehicle(uow, payload.vehicle_id)
            reservation = self._find_reservation(uow, reservation_id, refresh=True)
            renter = self._find_renter(uow, payload.renter_id)
            self._ensure_available(uow, vehicle.id, payload.start_date, payload.end_date, reservation.id)

            reservation.renter = renter
            reservation.vehicle = vehicle
            reservation.start_date = payload.start_date
            reservation.end_date = payload.end_date
            reservation.price = reservation_price(payload.start_date, payload.end_date, vehicle.daily_rate)
            uow.save(reservation)

        logger.info(f"Reservation {reservation.id} updated")
        return reservation

    def patch_reservation(self, reservation_id, data, timeout=None) -> Reservation:
        patch = load(ReservationPatch, data)

        with self._uow(timeout) as uow:
            reservation = self._find_reservation(uow, reservation_id)

            start = patch.start_date or reservation.start_date
            end = patch.end_date or reservation.end_date
            validate_range(start, end)

            vehicle_changed = patch.vehicle_id is not None and patch.vehicle_id != reservation.vehicle_id
            vehicle = self._lock_vehicle(uow, patch.vehicle_id if vehicle_changed else reservation.vehicle_id)
            reservation = self._find_reservation(uow, reservation_id, refresh=True)
            renter = self._find_renter(uow, patch.renter_id) if patch.renter_id is not None else reservation.renter
            self._ensure_available(uow, vehicle.id, start, end, reservation.id)

            reprice = vehicle_changed or start != reservation.start_date or end != reservation.end_date
            reservation.renter = renter
            reservation.vehicle = vehicle
            reservation.start_date = start
            reservation.end_date = end
            if reprice:
                reservation.price = reservation_price(start, end, vehicle.daily_rate)
            uow.save(reservation)

        logger.info(f"Reservation {reservation.id} patched")
        return reservation

    def delete_reservation(self, reservation_id, timeout=None) -> None:
        with self._uow(timeout) as uow:
            reservation = self._find_reservation(uow, reservation_id)
            self._lock_vehicle(uow, reservation.vehicle_id)
            # Re-read under the vehicle lock, a concurrent delete may have won
            reservation = self._find_reservation(uow, reservation_id, refresh=True)
            uow.release(reservation)

        logger.info(f"Reservation {reservation_id} deleted, vehicle released")
