from sqlalchemy import Column, Integer, String, Numeric, Boolean, CheckConstraint
from database import Base
from models.constants import MONEY_PLACES


class Vehicle(Base):
    __tablename__ = "vehicles"
    __table_args__ = (
        CheckConstraint("daily_rate >= 0", name="ck_vehicles_daily_rate_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    brand = Column(String, nullable=False)
    model = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    color = Column(String, nullable=False)
    daily_rate = Column(Numeric(10, 2), nullable=False)
    available = Column(Boolean, default=True, nullable=False)
    image_url = Column(String, nullable=True)

    def to_dict(self):
        rate = self.daily_rate
        return {
            "id": self.id,
            "brand": self.brand,
            "model": self.model,
            "year": self.year,
            "color": self.color,
            "price": rate.quantize(MONEY_PLACES) if rate is not None else None,
            "available": self.available,
            "imageUrl": self.image_url,
        }

    def __repr__(self):
        return f"<Vehicle(id={self.id}, {self.brand} {self.model}, available={self.available})>"
