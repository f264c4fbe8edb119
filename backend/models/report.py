"""Report model definitions."""

import enum

from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from backend.database import Base


class ReportType(str, enum.Enum):
    TAG = "TAG"
    WOCHE = "WOCHE"


class ReportStatus(str, enum.Enum):
    ENTWURF = "ENTWURF"
    EINGEREICHT = "EINGEREICHT"
    GEPRUEFT = "GEPRUEFT"
    AENDERUNGSBEDARF = "AENDERUNGSBEDARF"


class Report(Base):
    """Represents a daily or weekly training report owned by a trainee."""
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    trainee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    type = Column(Enum(ReportType, native_enum=False, length=16), nullable=False, default=ReportType.TAG)
    content = Column(Text, nullable=False)
    status = Column(
        Enum(ReportStatus, native_enum=False, length=32),
        nullable=False,
        default=ReportStatus.ENTWURF,
    )

    trainee = relationship("User", back_populates="reports")
    comments = relationship(
        "Comment",
        back_populates="report",
        order_by="Comment.created_at, Comment.id",
    )
