from datetime import date
from typing import Optional

from loguru import logger
from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import config
from errors import AvailabilityCheckFailed
from models.reservation import Reservation


def overlapping_reservations(db: Session, vehicle_id: int, start: date, end: date,
                             exclude_reservation_id: Optional[int] = None):
    """
    Query for reservations of ``vehicle_id`` whose range meets ``[start, end]``.

    Both ranges are closed: they overlap iff ``s1 <= e2 AND s2 <= e1``, so a
    booking ending on the day another one starts is a conflict.
    """
    query = db.query(Reservation).filter(
        Reservation.vehicle_id == vehicle_id,
        and_(Reservation.start_date <= end, Reservation.end_date >= start),
    )
    if exclude_reservation_id is not None:
        query = query.filter(Reservation.id != exclude_reservation_id)
    return query


def is_available(db: Session, vehicle_id: int, start: date, end: date,
                 exclude_reservation_id: Optional[int] = None) -> bool:
    """
    True if no reservation of the vehicle overlaps ``[start, end]``.

    :raises AvailabilityCheckFailed: if the query fails; a storage error is
        never reported as "unavailable"
    """
    try:
        hits = overlapping_reservations(db, vehicle_id, start, end, exclude_reservation_id).limit(1).count()
    except SQLAlchemyError:
        logger.exception(f"Availability query failed: vehicle={vehicle_id}")
        raise AvailabilityCheckFailed()

    if config.DEBUG_RENTAL_AVAIL:
        logger.debug(
            f"checkAvailability vehicle={vehicle_id} start={start} end={end} "
            f"exclude={exclude_reservation_id} hits={hits}"
        )
    return hits == 0
