"""
Error kinds raised by the booking engine.

Every error carries a stable machine-readable ``code`` and a human-readable
``message``. Messages never include storage details.
"""


class RentalError(Exception):
    code = "RENTAL_ERROR"
    default_message = "Rental operation failed"

    def __init__(self, message: str = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"errorCode": self.code, "errorMessage": self.message}


class InvalidDateFormat(RentalError):
    """Raised when a value cannot be read as a calendar date."""

    code = "INVALID_DATE_FORMAT"
    default_message = "Invalid date format"


class InvalidDateRange(RentalError):
    """Raised when the end date is not after the start date."""

    code = "INVALID_DATE_RANGE"
    default_message = "End date must be after start date"


class InvalidReservationInput(RentalError):
    code = "INVALID_INPUT"
    default_message = "Invalid reservation input"


class VehicleNotFound(RentalError):
    code = "CAR_NOT_FOUND"
    default_message = "Car not found"


class RenterNotFound(RentalError):
    code = "USER_NOT_FOUND"
    default_message = "User not found"


class ReservationNotFound(RentalError):
    code = "RENTAL_NOT_FOUND"
    default_message = "Rental not found"


class VehicleUnavailable(RentalError):
    """Raised when the requested dates overlap an existing reservation."""

    code = "CAR_NOT_AVAILABLE"
    default_message = "The vehicle is not available for the selected dates"


class AvailabilityCheckFailed(RentalError):
    """Raised when the overlap query itself fails. Never means "busy"."""

    code = "AVAILABILITY_CHECK_FAILED"
    default_message = "Could not check vehicle availability"


class PersistenceFailure(RentalError):
    code = "PERSISTENCE_FAILURE"
    default_message = "Could not save changes"


class DeadlineExceeded(PersistenceFailure):
    code = "DEADLINE_EXCEEDED"
    default_message = "Transaction deadline exceeded"


class PriceOutOfRange(RentalError):
    code = "PRICE_OUT_OF_RANGE"
    default_message = "Price out of range"
