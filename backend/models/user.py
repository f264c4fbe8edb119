"""User model definitions."""

import enum

from sqlalchemy import Column, Enum, Integer, String
from sqlalchemy.orm import relationship

from backend.database import Base


class Role(str, enum.Enum):
    AZUBI = "AZUBI"
    AUSBILDER = "AUSBILDER"
    ADMIN = "ADMIN"


class User(Base):
    """Represents an application user (trainee or instructor)."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(Role, native_enum=False, length=16), nullable=False, default=Role.AZUBI)
    name = Column(String, nullable=True)

    reports = relationship("Report", back_populates="trainee")
