from sqlalchemy import Column, Integer, String, Enum
from database import Base
import enum


class UserRole(enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "mail": self.email,
            "role": self.role.value if self.role else None,
        }
