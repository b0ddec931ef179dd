"""
Lab Model - Stores diagnostic lab information.
"""
from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from ..database import Base
from ..auth.models import generate_id, utcnow


class LabProfile(Base):
    __tablename__ = "labs"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    address = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="lab_profile")

    def __repr__(self):
        return f"<LabProfile(id={self.id}, user_id={self.user_id})>"
