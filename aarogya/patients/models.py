"""
Patient Model - Stores patient demographics.

This model extends the base User model with patient-specific fields.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..database import Base
from ..auth.models import generate_id, utcnow


class PatientProfile(Base):
    """
    Patient Model - Stores patient-specific information

    Fields:
    - id: Primary key for patient profile (the id doctors look patients up by)
    - user_id: Foreign key to User model
    - age: Patient's age in years
    - gender: Patient's gender
    """
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    age = Column(Integer, nullable=True)
    gender = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="patient_profile")

    def __repr__(self):
        return f"<PatientProfile(id={self.id}, user_id={self.user_id})>"

    @property
    def name(self) -> str:
        """Get patient's name from associated user"""
        return self.user.name if self.user else None
