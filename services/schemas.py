from datetime import date
from typing import Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from errors import InvalidReservationInput
from utils.dates import parse_date

# Never patchable: the availability flag belongs to the booking flows,
# and reservations carry no status of their own.
STRIPPED_PATCH_FIELDS = ("available", "status")


class ReservationInput(BaseModel):
    """Full reservation body, used by create and full update."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    renter_id: int = Field(alias="userId")
    vehicle_id: int = Field(alias="carId")
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return parse_date(value)


class ReservationPatch(BaseModel):
    """Partial update. Unset fields keep the reservation's current values."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    renter_id: Optional[int] = Field(default=None, alias="userId")
    vehicle_id: Optional[int] = Field(default=None, alias="carId")
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")

    @model_validator(mode="before")
    @classmethod
    def strip_protected_fields(cls, data):
        if isinstance(data, dict):
            stripped = [key for key in STRIPPED_PATCH_FIELDS if key in data]
            if stripped:
                logger.warning(f"Ignoring protected fields in reservation patch: {stripped}")
                data = {k: v for k, v in data.items() if k not in STRIPPED_PATCH_FIELDS}
        return data

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        if value is None:
            return None
        return parse_date(value)


def load(schema, data):
    """Validate ``data`` against ``schema``; pydantic errors become InvalidReservationInput."""
    if isinstance(data, schema):
        return data
    if not isinstance(data, dict):
        raise InvalidReservationInput("Reservation input must be an object")
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()
        )
        raise InvalidReservationInput(f"Invalid reservation input: {problems}")
