"""
Doctor Model - Stores doctor-specific information.

This model extends the base User model with the doctor's specialization.
"""
from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from ..database import Base
from ..auth.models import generate_id, utcnow


class DoctorProfile(Base):
    """
    Doctor Model - Stores doctor-specific information

    Fields:
    - id: Primary key for doctor profile
    - user_id: Foreign key to User model
    - specialization: Doctor's medical specialization
    """
    __tablename__ = "doctors"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    specialization = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="doctor_profile")

    def __repr__(self):
        return f"<DoctorProfile(id={self.id}, user_id={self.user_id}, specialization='{self.specialization}')>"
