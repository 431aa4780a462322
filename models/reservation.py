from sqlalchemy import Column, Integer, ForeignKey, Date, Numeric, CheckConstraint
from database import Base
from sqlalchemy.orm import relationship
from models.constants import MONEY_PLACES
from utils.dates import format_date


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_reservations_date_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    renter_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    vehicle = relationship("Vehicle")
    renter = relationship("User")

    def to_dict(self):
        """Serialize with vehicle and renter snapshots embedded by value."""
        return {
            "id": self.id,
            "user": self.renter.to_dict() if self.renter else None,
            "car": self.vehicle.to_dict() if self.vehicle else None,
            "startDate": format_date(self.start_date),
            "endDate": format_date(self.end_date),
            "price": self.price.quantize(MONEY_PLACES),
        }

    def __repr__(self):
        return (f"<Reservation(id={self.id}, vehicle_id={self.vehicle_id}, "
                f"{self.start_date}..{self.end_date})>")
