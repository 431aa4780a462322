import sys

from loguru import logger

import config
from database import Base, create_db_engine, create_session_factory
from models.reservation import Reservation  # noqa: F401  (registers the mapped tables)
from models.user import User  # noqa: F401
from models.vehicle import Vehicle  # noqa: F401
from services.booking import BookingService


def configure_logging(log_path=None, level=None):
    logger.remove()
    logger.add(sys.stderr, level=level or config.LOG_LEVEL)
    logger.add(log_path or config.LOG_PATH, level=level or config.LOG_LEVEL,
               rotation=config.LOG_ROTATION, compression="zip")


class RentalApp:
    """
    Owns the storage handle for the lifetime of the service.

    The engine is created on start() and disposed on stop(); importing this
    module connects to nothing.
    """

    def __init__(self, database_url=None, create_tables=True, **engine_kwargs):
        self.database_url = database_url or config.DATABASE_URL
        self.create_tables = create_tables
        self.engine_kwargs = engine_kwargs
        self.engine = None
        self.session_factory = None
        self.bookings = None

    def start(self):
        self.engine = create_db_engine(self.database_url, **self.engine_kwargs)
        if self.create_tables:
            Base.metadata.create_all(bind=self.engine)
        self.session_factory = create_session_factory(self.engine)
        self.bookings = BookingService(self.session_factory)
        logger.info(f"Rental booking engine started ({self.engine.url.render_as_string(hide_password=True)})")
        return self

    def stop(self):
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Rental booking engine stopped")
        self.engine = None
        self.session_factory = None
        self.bookings = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()


def main():
    configure_logging()
    with RentalApp() as app:
        logger.info(f"{len(app.bookings.list_reservations())} reservations on record")


if __name__ == "__main__":
    main()
