"""
User Model - Stores account identity, credentials, role and approval state.

Role-specific attributes live in one-to-one extension tables (doctors, labs,
patients) keyed by ``user_id``.
"""
import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, Enum, String
from sqlalchemy.orm import relationship, validates

from ..database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    """ISO 8601 text in UTC; naive values (SQLite) are stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class UserRole(str, enum.Enum):
    """
    Enumeration for user roles in the diagnostics portal.

    Roles:
    - PATIENT: Patients who receive lab reports
    - DOCTOR: Practitioners who look up patients and their reports
    - LAB: Diagnostic labs that upload reports
    - ADMIN: Operators who approve doctor and lab accounts
    """
    PATIENT = "patient"
    DOCTOR = "doctor"
    LAB = "lab"
    ADMIN = "admin"


class ApprovalStatus(str, enum.Enum):
    """
    Enumeration for the admin approval gate.

    - PENDING: Doctor/lab account awaiting an admin decision
    - APPROVED: Account may log in
    - REJECTED: Account was turned down by an admin
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Roles that need an admin decision before they can log in
APPROVAL_REQUIRED_ROLES = (UserRole.DOCTOR, UserRole.LAB)

# Roles available through self-registration
SELF_REGISTRATION_ROLES = (UserRole.PATIENT, UserRole.DOCTOR, UserRole.LAB)


class User(Base):
    """
    User Model - Stores all account information in the system

    Fields:
    - id: Opaque unique identifier (UUID string)
    - name: Display name; admins log in with it
    - email: Unique email address
    - phone: Unique phone number, the login key together with role
    - password_hash: bcrypt digest (never exposed)
    - role: patient, doctor, lab or admin; fixed at creation
    - approval_status: pending, approved or rejected
    - created_at: Timestamp when the account was created
    - updated_at: Timestamp when the account was last updated
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(32), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False, index=True)
    approval_status = Column(Enum(ApprovalStatus), nullable=False, default=ApprovalStatus.PENDING)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    doctor_profile = relationship(
        "DoctorProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    lab_profile = relationship(
        "LabProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    patient_profile = relationship(
        "PatientProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<User(id={self.id}, role={self.role}, approval_status={self.approval_status})>"

    @validates("role")
    def _validate_role(self, key, value):
        # Role is part of the login identity and never changes once set
        if self.role is not None and UserRole(value) != self.role:
            raise ValueError("User role cannot be changed")
        return UserRole(value)

    @property
    def role_profile(self):
        """The role-specific extension row, or None for admins."""
        if self.role == UserRole.DOCTOR:
            return self.doctor_profile
        if self.role == UserRole.LAB:
            return self.lab_profile
        if self.role == UserRole.PATIENT:
            return self.patient_profile
        return None

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED
